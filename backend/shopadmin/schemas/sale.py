from datetime import datetime
from pydantic import BaseModel, ConfigDict

from shopadmin.schemas.product import ProductOut
from shopadmin.utils.sales import SaleStatus


class SaleInput(BaseModel):
    name: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class SaleProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sale_id: str
    product_id: str
    sale_price: float
    created_at: datetime
    product: ProductOut | None = None


class SaleOut(BaseModel):
    id: str
    name: str
    start_date: datetime
    end_date: datetime
    created_at: datetime
    updated_at: datetime
    status: SaleStatus
    date_range: str
    product_count: int
    sale_products: list[SaleProductOut] = []


class AssignProductsRequest(BaseModel):
    product_ids: list[str]
    sale_price: float | None = None
