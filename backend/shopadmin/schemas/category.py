from datetime import datetime
from pydantic import BaseModel, ConfigDict


class CategoryInput(BaseModel):
    name: str | None = None
    buyer_name: str | None = None


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    buyer_name: str | None = None
    created_at: datetime
    updated_at: datetime
