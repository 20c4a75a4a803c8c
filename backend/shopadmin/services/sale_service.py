import logging
from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shopadmin.exceptions import AppException, validation_error, not_found, store_error
from shopadmin.models import Product, Sale, SaleProduct
from shopadmin.schemas.common import ActionResult
from shopadmin.schemas.sale import SaleInput, SaleOut, SaleProductOut
from shopadmin.utils.sales import get_sale_status, format_date_range, parse_datetime

logger = logging.getLogger(__name__)


def _parse_date(value: str, label: str) -> datetime:
    try:
        return parse_datetime(value)
    except ValueError:
        raise validation_error(f"{label} is not a valid date")


def _clean(data: SaleInput) -> dict:
    if not data.name or not data.name.strip():
        raise validation_error("Sale name is required")
    if not data.start_date:
        raise validation_error("Start date is required")
    if not data.end_date:
        raise validation_error("End date is required")

    start = _parse_date(data.start_date, "Start date")
    end = _parse_date(data.end_date, "End date")
    if start >= end:
        raise validation_error("End date must be after start date")

    return {"name": data.name.strip(), "start_date": start, "end_date": end}


def with_products(query):
    """Eager-load sale_products -> product -> category."""
    return query.options(
        selectinload(Sale.sale_products)
        .selectinload(SaleProduct.product)
        .selectinload(Product.category)
    ).execution_options(populate_existing=True)


def to_sale_out(sale: Sale, now: datetime | None = None) -> SaleOut:
    """Attach the derived status, date range and product count."""
    sale_products = [SaleProductOut.model_validate(sp) for sp in sale.sale_products]
    return SaleOut(
        id=sale.id,
        name=sale.name,
        start_date=sale.start_date,
        end_date=sale.end_date,
        created_at=sale.created_at,
        updated_at=sale.updated_at,
        status=get_sale_status(sale.start_date, sale.end_date, now=now),
        date_range=format_date_range(sale.start_date, sale.end_date),
        product_count=len(sale_products),
        sale_products=sale_products,
    )


class SaleService:
    """CRUD over the sales table. Product assignment lives in assignment_service."""

    async def list_sales(self, session: AsyncSession) -> list[SaleOut]:
        try:
            result = await session.execute(
                with_products(select(Sale).order_by(Sale.start_date.desc()))
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching sales: {e}")
            raise store_error("Failed to fetch sales", e)

        return [to_sale_out(s) for s in result.scalars().all()]

    async def get_sale(self, session: AsyncSession, sale_id: str) -> SaleOut:
        try:
            result = await session.execute(
                with_products(select(Sale).where(Sale.id == sale_id))
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching sale {sale_id}: {e}")
            raise store_error("Failed to fetch sale", e)

        sale = result.scalar_one_or_none()
        if sale is None:
            raise not_found("Sale not found")
        return to_sale_out(sale)

    async def create_sale(self, session: AsyncSession, data: SaleInput) -> ActionResult:
        values = _clean(data)

        sale = Sale(**values)
        try:
            session.add(sale)
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error creating sale: {e}")
            raise store_error("Failed to create sale", e)

        logger.info(f"Created sale {sale.id} ({sale.name})")
        return ActionResult(success=True, message="Sale created successfully", id=sale.id)

    async def update_sale(self, session: AsyncSession, sale_id: str, data: SaleInput) -> ActionResult:
        values = _clean(data)

        try:
            sale = await session.get(Sale, sale_id)
            if sale is None:
                raise not_found("Sale not found")

            for key, value in values.items():
                setattr(sale, key, value)
            await session.commit()
        except AppException:
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error updating sale {sale_id}: {e}")
            raise store_error("Failed to update sale", e)

        return ActionResult(success=True, message="Sale updated successfully", id=sale_id)

    async def delete_sale(self, session: AsyncSession, sale_id: str) -> ActionResult:
        """Delete a sale. Join rows go first so none reference a missing sale."""
        try:
            result = await session.execute(delete(SaleProduct).where(SaleProduct.sale_id == sale_id))
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error deleting products of sale {sale_id}: {e}")
            raise store_error("Failed to delete sale products", e)
        removed = result.rowcount

        try:
            await session.execute(delete(Sale).where(Sale.id == sale_id))
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error deleting sale {sale_id}: {e}")
            raise store_error("Failed to delete sale", e)

        logger.info(f"Deleted sale {sale_id} and {removed} product assignments")
        return ActionResult(success=True, message="Sale deleted successfully", id=sale_id)


sale_service = SaleService()
