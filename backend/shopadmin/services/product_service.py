import asyncio
import logging
import math
import secrets
import time
from decimal import Decimal
from typing import NamedTuple

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shopadmin.config import Config
from shopadmin.errors import ErrorType
from shopadmin.exceptions import AppException, validation_error, not_found, store_error
from shopadmin.models import Product, SaleProduct
from shopadmin.schemas.common import ActionResult
from shopadmin.schemas.product import ProductInput, ProductOut
from shopadmin.storage import BaseStorage, get_storage

logger = logging.getLogger(__name__)


class ImageFile(NamedTuple):
    filename: str
    content_type: str
    data: bytes


def to_price(value: float | None) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal("0.01"))


def _clean(data: ProductInput) -> dict:
    if not data.sku or not data.sku.strip():
        raise validation_error("SKU is required")
    if not data.name or not data.name.strip():
        raise validation_error("Product name is required")
    if data.regular_price is None or not math.isfinite(data.regular_price) or data.regular_price <= 0:
        raise validation_error("Regular price must be a positive number")
    if data.sale_price is not None and (not math.isfinite(data.sale_price) or data.sale_price < 0):
        raise validation_error("Sale price must be zero or a positive number")

    return {
        "sku": data.sku.strip(),
        "name": data.name.strip(),
        "description": (data.description or "").strip() or None,
        "regular_price": to_price(data.regular_price),
        "sale_price": to_price(data.sale_price),
        "category_id": data.category_id or None,
        "images": list(data.images),
    }


class ProductService:
    """CRUD over the products table plus the product image bucket."""

    def __init__(self, storage: BaseStorage = None):
        self._storage = storage

    @property
    def storage(self) -> BaseStorage:
        if self._storage is None:
            self._storage = get_storage()
        return self._storage

    async def list_products(self, session: AsyncSession) -> list[ProductOut]:
        try:
            result = await session.execute(
                select(Product)
                .options(selectinload(Product.category))
                .order_by(Product.created_at.desc())
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching products: {e}")
            raise store_error("Failed to fetch products", e)

        return [ProductOut.model_validate(p) for p in result.scalars().all()]

    async def get_product(self, session: AsyncSession, product_id: str) -> ProductOut:
        try:
            result = await session.execute(
                select(Product)
                .options(selectinload(Product.category))
                .where(Product.id == product_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            raise store_error("Failed to fetch product", e)

        product = result.scalar_one_or_none()
        if product is None:
            raise not_found("Product not found")
        return ProductOut.model_validate(product)

    async def create_product(self, session: AsyncSession, data: ProductInput) -> ActionResult:
        values = _clean(data)

        product = Product(**values)
        try:
            session.add(product)
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error creating product: {e}")
            raise store_error("Failed to create product", e)

        logger.info(f"Created product {product.id} (sku={product.sku})")
        return ActionResult(success=True, message="Product created successfully", id=product.id)

    async def update_product(self, session: AsyncSession, product_id: str, data: ProductInput) -> ActionResult:
        values = _clean(data)

        try:
            product = await session.get(Product, product_id)
            if product is None:
                raise not_found("Product not found")

            for key, value in values.items():
                setattr(product, key, value)
            await session.commit()
        except AppException:
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error updating product {product_id}: {e}")
            raise store_error("Failed to update product", e)

        return ActionResult(success=True, message="Product updated successfully", id=product_id)

    async def delete_product(self, session: AsyncSession, product_id: str) -> ActionResult:
        """Delete a product and, best-effort, its images.

        Image removal failures are logged and never block the row deletion.
        """
        try:
            product = await session.get(Product, product_id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            raise store_error("Failed to fetch product", e)

        if product is None:
            raise not_found("Product not found")

        for url in product.images or []:
            await self._discard_image(url)

        try:
            await session.execute(delete(SaleProduct).where(SaleProduct.product_id == product_id))
            await session.execute(delete(Product).where(Product.id == product_id))
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Error deleting product {product_id}: {e}")
            raise store_error("Failed to delete product", e)

        logger.info(f"Deleted product {product_id}")
        return ActionResult(success=True, message="Product deleted successfully", id=product_id)

    async def _discard_image(self, url: str) -> None:
        path = self.storage.path_from_url(url)
        if path is None:
            logger.warning(f"Skipping image outside the {self.storage.bucket} bucket: {url}")
            return

        try:
            await self.storage.delete(path)
        except AppException as e:
            logger.warning(f"Error deleting product image {url}: {e.message}")

    def _validate_image(self, image: ImageFile) -> None:
        if image.content_type not in Config.ALLOWED_IMAGE_TYPES:
            allowed = ", ".join(sorted(Config.ALLOWED_IMAGE_TYPES.values()))
            raise AppException(
                ErrorType.INVALID_IMAGE,
                f"Unsupported image type '{image.content_type}'. Allowed: {allowed}"
            )
        if not image.data:
            raise AppException(ErrorType.INVALID_IMAGE, f"Image '{image.filename}' is empty")
        if len(image.data) > Config.MAX_IMAGE_SIZE:
            limit_mb = Config.MAX_IMAGE_SIZE // (1024 * 1024)
            raise AppException(
                ErrorType.INVALID_IMAGE,
                f"Image '{image.filename}' exceeds the {limit_mb}MB size limit"
            )

    def _object_path(self, image: ImageFile) -> str:
        ext = Config.ALLOWED_IMAGE_TYPES[image.content_type]
        name = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.{ext}"
        return f"products/{name}"

    async def upload_product_image(self, image: ImageFile) -> str:
        """Upload one image and return its public URL."""
        self._validate_image(image)
        return await self.storage.upload(self._object_path(image), image.data, image.content_type)

    async def upload_product_images(self, images: list[ImageFile]) -> list[str]:
        """Upload several images concurrently; any failure fails the batch."""
        for image in images:
            self._validate_image(image)

        try:
            return list(await asyncio.gather(*(self.upload_product_image(i) for i in images)))
        except AppException as e:
            logger.error(f"Error uploading images: {e.message}")
            raise

    async def delete_product_image(self, url: str) -> ActionResult:
        path = self.storage.path_from_url(url)
        if path is None:
            raise validation_error("Invalid image path")

        await self.storage.delete(path)
        return ActionResult(success=True, message="Image deleted successfully")


product_service = ProductService()
