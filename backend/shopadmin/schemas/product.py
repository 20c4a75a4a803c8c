from datetime import datetime
from pydantic import BaseModel, ConfigDict

from shopadmin.schemas.category import CategoryOut


class ProductInput(BaseModel):
    sku: str | None = None
    name: str | None = None
    description: str | None = None
    regular_price: float | None = None
    sale_price: float | None = None
    category_id: str | None = None
    images: list[str] = []


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sku: str
    name: str
    description: str | None = None
    regular_price: float
    sale_price: float | None = None
    category_id: str | None = None
    images: list[str] = []
    created_at: datetime
    updated_at: datetime
    category: CategoryOut | None = None


class ImageUploadResponse(BaseModel):
    urls: list[str]
