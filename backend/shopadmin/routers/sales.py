from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shopadmin.db.database import get_session
from shopadmin.schemas.common import ActionResult
from shopadmin.schemas.product import ProductOut
from shopadmin.schemas.sale import SaleInput, SaleOut, SaleProductOut, AssignProductsRequest
from shopadmin.services.assignment_service import assignment_service
from shopadmin.services.sale_service import sale_service

router = APIRouter(prefix="/api/v1", tags=["sales"])


@router.get("/sales", response_model=list[SaleOut])
async def list_sales(session: AsyncSession = Depends(get_session)):
    return await sale_service.list_sales(session)


@router.post("/sales", response_model=ActionResult, status_code=201)
async def create_sale(data: SaleInput, session: AsyncSession = Depends(get_session)):
    return await sale_service.create_sale(session, data)


@router.get("/sales/available-products", response_model=list[ProductOut])
async def available_products(
    search: str | None = None,
    category_id: str | None = None,
    session: AsyncSession = Depends(get_session)
):
    return await assignment_service.get_available_products(session, search=search, category_id=category_id)


@router.get("/sales/{sale_id}", response_model=SaleOut)
async def get_sale(sale_id: str, session: AsyncSession = Depends(get_session)):
    return await sale_service.get_sale(session, sale_id)


@router.put("/sales/{sale_id}", response_model=ActionResult)
async def update_sale(sale_id: str, data: SaleInput, session: AsyncSession = Depends(get_session)):
    return await sale_service.update_sale(session, sale_id, data)


@router.delete("/sales/{sale_id}", response_model=ActionResult)
async def delete_sale(sale_id: str, session: AsyncSession = Depends(get_session)):
    return await sale_service.delete_sale(session, sale_id)


@router.get("/sales/{sale_id}/products", response_model=list[SaleProductOut])
async def products_in_sale(sale_id: str, session: AsyncSession = Depends(get_session)):
    return await assignment_service.get_products_in_sale(session, sale_id)


@router.post("/sales/{sale_id}/products", response_model=ActionResult, status_code=201)
async def assign_products(sale_id: str, request: AssignProductsRequest, session: AsyncSession = Depends(get_session)):
    return await assignment_service.assign_products_to_sale(
        session, sale_id, request.product_ids, bulk_price=request.sale_price
    )


@router.delete("/sales/{sale_id}/products/{product_id}", response_model=ActionResult)
async def remove_product(sale_id: str, product_id: str, session: AsyncSession = Depends(get_session)):
    return await assignment_service.remove_product_from_sale(session, sale_id, product_id)
