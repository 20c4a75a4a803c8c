from pydantic import BaseModel


class ActionResult(BaseModel):
    success: bool
    message: str
    id: str | None = None
