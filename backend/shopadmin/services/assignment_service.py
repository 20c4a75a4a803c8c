"""
Assigning products to a sale.

Products already in the sale are never re-added or re-priced: they are
skipped and reported. New rows get either the bulk price or, when none is
given, each product's own regular price.
"""
import logging
import math

from sqlalchemy import select, delete, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shopadmin.errors import ErrorType
from shopadmin.exceptions import AppException, validation_error, not_found, store_error
from shopadmin.models import Product, Sale, SaleProduct
from shopadmin.schemas.common import ActionResult
from shopadmin.schemas.product import ProductOut
from shopadmin.schemas.sale import SaleProductOut
from shopadmin.services.product_service import to_price

logger = logging.getLogger(__name__)


def duplicate_message(count: int) -> str:
    if count == 1:
        return "This product is already in the sale"
    return f"{count} products are already in the sale"


def added_message(added: int, skipped: int) -> str:
    if added == 1:
        message = "1 product added to sale successfully"
    else:
        message = f"{added} products added to sale successfully"

    if skipped == 1:
        message += ". Note: 1 product was already in the sale and was skipped"
    elif skipped > 1:
        message += f". Note: {skipped} products were already in the sale and were skipped"
    return message


class AssignmentService:
    """Manages the sale_products join table."""

    async def assign_products_to_sale(
        self,
        session: AsyncSession,
        sale_id: str,
        product_ids: list[str],
        bulk_price: float | None = None
    ) -> ActionResult:
        """Add products to a sale, skipping the ones already in it.

        Args:
            sale_id: Target sale
            product_ids: Requested products (duplicates in the list are ignored)
            bulk_price: Price for every new row; None means each product's regular price

        Raises:
            AppException: VALIDATION, NOT_FOUND, DUPLICATE_ASSIGNMENT (nothing new
                to add, nothing written) or STORE_ERROR (nothing written)
        """
        product_ids = list(dict.fromkeys(product_ids))
        if not product_ids:
            raise validation_error("At least one product must be selected")
        if bulk_price is not None and (not math.isfinite(bulk_price) or bulk_price < 0):
            raise validation_error("Sale price must be zero or a positive number")

        # 1. Which of the requested products are already in the sale
        try:
            sale = await session.get(Sale, sale_id)
            result = await session.execute(
                select(SaleProduct.product_id)
                .where(SaleProduct.sale_id == sale_id)
                .where(SaleProduct.product_id.in_(product_ids))
            )
        except SQLAlchemyError as e:
            logger.error(f"Error checking products of sale {sale_id}: {e}")
            raise store_error("Failed to check existing products", e)

        if sale is None:
            raise not_found("Sale not found")

        existing = set(result.scalars().all())
        to_add = [pid for pid in product_ids if pid not in existing]
        skipped = len(product_ids) - len(to_add)

        # 2. Nothing new: reject without writing
        if not to_add:
            logger.info(f"Sale {sale_id}: all {skipped} requested products already assigned")
            raise AppException(ErrorType.DUPLICATE_ASSIGNMENT, duplicate_message(skipped))

        # 3. Price every new row
        try:
            result = await session.execute(
                select(Product.id, Product.regular_price).where(Product.id.in_(to_add))
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching prices for sale {sale_id}: {e}")
            raise store_error("Failed to fetch product prices", e)

        regular_prices = {row.id: row.regular_price for row in result}
        missing = [pid for pid in to_add if pid not in regular_prices]
        if missing:
            if len(missing) == 1:
                raise validation_error("1 selected product does not exist")
            raise validation_error(f"{len(missing)} selected products do not exist")

        price = to_price(bulk_price)
        rows = [
            SaleProduct(
                sale_id=sale_id,
                product_id=pid,
                sale_price=price if price is not None else regular_prices[pid],
            )
            for pid in to_add
        ]

        # 4. Persist only the new rows
        try:
            session.add_all(rows)
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error adding products to sale {sale_id}: {e}")
            raise store_error("Failed to add products to sale", e)

        logger.info(f"Sale {sale_id}: added {len(rows)} products, skipped {skipped}")
        return ActionResult(success=True, message=added_message(len(rows), skipped), id=sale_id)

    async def remove_product_from_sale(self, session: AsyncSession, sale_id: str, product_id: str) -> ActionResult:
        """Remove one product from a sale. Removing an absent product is not an error."""
        try:
            await session.execute(
                delete(SaleProduct)
                .where(SaleProduct.sale_id == sale_id)
                .where(SaleProduct.product_id == product_id)
            )
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error removing product {product_id} from sale {sale_id}: {e}")
            raise store_error("Failed to remove product from sale", e)

        return ActionResult(success=True, message="Product removed from sale successfully", id=sale_id)

    async def get_products_in_sale(self, session: AsyncSession, sale_id: str) -> list[SaleProductOut]:
        try:
            result = await session.execute(
                select(SaleProduct)
                .options(selectinload(SaleProduct.product).selectinload(Product.category))
                .where(SaleProduct.sale_id == sale_id)
                .order_by(SaleProduct.created_at)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching products of sale {sale_id}: {e}")
            raise store_error("Failed to fetch products in sale", e)

        return [SaleProductOut.model_validate(sp) for sp in result.scalars().all()]

    async def get_available_products(
        self,
        session: AsyncSession,
        search: str | None = None,
        category_id: str | None = None
    ) -> list[ProductOut]:
        """Products for the sale picker, by name, optionally filtered.

        `search` matches name or SKU case-insensitively; `category_id` of
        None or "all" means every category.
        """
        query = (
            select(Product)
            .options(selectinload(Product.category))
            .order_by(Product.name)
            .execution_options(populate_existing=True)
        )
        if search and search.strip():
            term = f"%{search.strip().lower()}%"
            query = query.where(or_(
                func.lower(Product.name).like(term),
                func.lower(Product.sku).like(term),
            ))
        if category_id and category_id != "all":
            query = query.where(Product.category_id == category_id)

        try:
            result = await session.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching available products: {e}")
            raise store_error("Failed to fetch available products", e)

        return [ProductOut.model_validate(p) for p in result.scalars().all()]


assignment_service = AssignmentService()
