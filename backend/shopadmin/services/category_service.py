import logging

from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopadmin.exceptions import AppException, validation_error, not_found, store_error
from shopadmin.models import Category, Product
from shopadmin.schemas.category import CategoryInput, CategoryOut
from shopadmin.schemas.common import ActionResult

logger = logging.getLogger(__name__)


def _clean(data: CategoryInput) -> dict:
    if not data.name or not data.name.strip():
        raise validation_error("Category name is required")

    return {
        "name": data.name.strip(),
        "buyer_name": (data.buyer_name or "").strip() or None,
    }


class CategoryService:
    """CRUD over the categories table."""

    async def list_categories(self, session: AsyncSession) -> list[CategoryOut]:
        try:
            result = await session.execute(
                select(Category).order_by(Category.created_at.desc())
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching categories: {e}")
            raise store_error("Failed to fetch categories", e)

        return [CategoryOut.model_validate(c) for c in result.scalars().all()]

    async def create_category(self, session: AsyncSession, data: CategoryInput) -> ActionResult:
        values = _clean(data)

        category = Category(**values)
        try:
            session.add(category)
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error creating category: {e}")
            raise store_error("Failed to create category", e)

        logger.info(f"Created category {category.id} ({category.name})")
        return ActionResult(success=True, message="Category created successfully", id=category.id)

    async def update_category(self, session: AsyncSession, category_id: str, data: CategoryInput) -> ActionResult:
        values = _clean(data)

        try:
            category = await session.get(Category, category_id)
            if category is None:
                raise not_found("Category not found")

            for key, value in values.items():
                setattr(category, key, value)
            await session.commit()
        except AppException:
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error updating category {category_id}: {e}")
            raise store_error("Failed to update category", e)

        return ActionResult(success=True, message="Category updated successfully", id=category_id)

    async def delete_category(self, session: AsyncSession, category_id: str) -> ActionResult:
        """Delete a category; its products become uncategorized."""
        try:
            result = await session.execute(
                update(Product)
                .where(Product.category_id == category_id)
                .values(category_id=None)
            )
            if result.rowcount:
                logger.info(f"Uncategorized {result.rowcount} products of category {category_id}")

            await session.execute(delete(Category).where(Category.id == category_id))
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error deleting category {category_id}: {e}")
            raise store_error("Failed to delete category", e)

        return ActionResult(success=True, message="Category deleted successfully", id=category_id)


category_service = CategoryService()
