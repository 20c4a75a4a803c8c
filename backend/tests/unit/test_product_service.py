import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from sqlalchemy import select

from shopadmin.config import Config
from shopadmin.errors import ErrorType
from shopadmin.exceptions import AppException
from shopadmin.models import Product, SaleProduct
from shopadmin.schemas.product import ProductInput
from shopadmin.services.product_service import ImageFile, to_price


def product_input(**overrides) -> ProductInput:
    data = {"sku": "SKU-1", "name": "Widget", "regular_price": 19.99}
    data.update(overrides)
    return ProductInput(**data)


class TestProductValidation:
    """Validation happens before anything reaches the store."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides,message", [
        ({"sku": ""}, "SKU is required"),
        ({"sku": "  "}, "SKU is required"),
        ({"name": None}, "Product name is required"),
        ({"name": " "}, "Product name is required"),
        ({"regular_price": None}, "Regular price must be a positive number"),
        ({"regular_price": 0}, "Regular price must be a positive number"),
        ({"regular_price": -5}, "Regular price must be a positive number"),
        ({"regular_price": float("nan")}, "Regular price must be a positive number"),
        ({"regular_price": float("inf")}, "Regular price must be a positive number"),
        ({"regular_price": float("-inf")}, "Regular price must be a positive number"),
        ({"sale_price": float("inf")}, "Sale price must be zero or a positive number"),
        ({"sale_price": float("nan")}, "Sale price must be zero or a positive number"),
        ({"sale_price": -1}, "Sale price must be zero or a positive number"),
    ])
    async def test_create_rejects(self, product_service, mock_session, overrides, message):
        with pytest.raises(AppException) as exc_info:
            await product_service.create_product(mock_session, product_input(**overrides))

        assert exc_info.value.error_type == ErrorType.VALIDATION
        assert exc_info.value.message == message
        mock_session.add.assert_not_called()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sku_checked_before_name(self, product_service, mock_session):
        with pytest.raises(AppException) as exc_info:
            await product_service.create_product(mock_session, ProductInput())

        assert exc_info.value.message == "SKU is required"

    def test_to_price(self):
        assert to_price(None) is None
        assert to_price(19.999) == Decimal("20.00")
        assert to_price(25) == Decimal("25.00")


class TestProductCrud:
    """Tests against a real (SQLite) store."""

    @pytest.mark.asyncio
    async def test_create_and_list_with_category(self, session, product_service, add_category):
        category = await add_category("Electronics")

        result = await product_service.create_product(session, product_input(
            sku="EL-1", name="Earbuds", description="", category_id=category.id,
            sale_price=99.5, images=["http://test/media/products/products/a.png"]
        ))
        await product_service.create_product(session, product_input(sku="EL-2", name="Speaker"))

        assert result.success is True
        assert result.message == "Product created successfully"

        products = await product_service.list_products(session)
        assert [p.name for p in products] == ["Speaker", "Earbuds"]

        earbuds = products[1]
        assert earbuds.description is None
        assert earbuds.regular_price == 19.99
        assert earbuds.sale_price == 99.5
        assert earbuds.category.name == "Electronics"
        assert earbuds.images == ["http://test/media/products/products/a.png"]
        assert products[0].category is None

    @pytest.mark.asyncio
    async def test_get_missing(self, session, product_service):
        with pytest.raises(AppException) as exc_info:
            await product_service.get_product(session, "missing")

        assert exc_info.value.error_type == ErrorType.NOT_FOUND

    @pytest.mark.asyncio
    async def test_update(self, session, product_service, add_product):
        product = await add_product()

        result = await product_service.update_product(
            session, product.id, product_input(name="Gadget", regular_price=42)
        )

        assert result.message == "Product updated successfully"
        updated = await product_service.get_product(session, product.id)
        assert updated.name == "Gadget"
        assert updated.regular_price == 42

    @pytest.mark.asyncio
    async def test_update_missing(self, session, product_service):
        with pytest.raises(AppException) as exc_info:
            await product_service.update_product(session, "missing", product_input())

        assert exc_info.value.error_type == ErrorType.NOT_FOUND


class TestProductDelete:
    """Product deletion with best-effort image cleanup."""

    @pytest.mark.asyncio
    async def test_deletes_images_and_row(self, session, product_service, storage, add_product):
        await storage.ensure_bucket()
        urls = await product_service.upload_product_images([
            ImageFile("a.png", "image/png", b"png-bytes"),
            ImageFile("b.jpg", "image/jpeg", b"jpg-bytes"),
        ])
        product = await add_product(images=urls)

        result = await product_service.delete_product(session, product.id)

        assert result.success is True
        assert result.message == "Product deleted successfully"
        assert list((storage.bucket_dir / "products").iterdir()) == []
        assert await session.get(Product, product.id) is None

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_block(self, session, product_service, storage, add_product):
        urls = [f"http://test/media/products/products/{i}.png" for i in range(3)]
        product = await add_product(images=urls)
        storage.delete = AsyncMock(side_effect=[
            None,
            AppException(ErrorType.STORAGE_ERROR, "Failed to delete image: gone"),
            None,
        ])

        result = await product_service.delete_product(session, product.id)

        assert result.success is True
        assert storage.delete.await_count == 3
        storage.delete.assert_any_await("products/1.png")
        assert await session.get(Product, product.id) is None

    @pytest.mark.asyncio
    async def test_removes_sale_assignments(self, session, product_service, add_product, add_sale, assign):
        product = await add_product()
        sale = await add_sale()
        await assign(sale, product)

        await product_service.delete_product(session, product.id)

        result = await session.execute(select(SaleProduct).where(SaleProduct.sale_id == sale.id))
        assert result.scalars().all() == []

    @pytest.mark.asyncio
    async def test_missing_product(self, session, product_service):
        with pytest.raises(AppException) as exc_info:
            await product_service.delete_product(session, "missing")

        assert exc_info.value.error_type == ErrorType.NOT_FOUND


class TestProductImages:
    """Upload and removal of product images."""

    @pytest.mark.asyncio
    async def test_upload_returns_public_url(self, product_service, storage):
        url = await product_service.upload_product_image(ImageFile("photo.PNG", "image/png", b"data"))

        assert url.startswith("http://test/media/products/products/")
        assert url.endswith(".png")
        path = storage.path_from_url(url)
        assert (storage.bucket_dir / path).read_bytes() == b"data"

    @pytest.mark.asyncio
    async def test_extension_from_content_type(self, product_service):
        url = await product_service.upload_product_image(ImageFile("blob", "image/webp", b"data"))
        assert url.endswith(".webp")

    @pytest.mark.asyncio
    async def test_extension_follows_content_type(self, product_service, storage):
        url = await product_service.upload_product_image(ImageFile("evil.html", "image/png", b"<script>"))

        assert url.endswith(".png")
        assert ".html" not in url
        assert (storage.bucket_dir / storage.path_from_url(url)).read_bytes() == b"<script>"

    @pytest.mark.asyncio
    async def test_rejects_unsupported_type(self, product_service):
        with pytest.raises(AppException) as exc_info:
            await product_service.upload_product_image(ImageFile("doc.pdf", "application/pdf", b"%PDF"))

        assert exc_info.value.error_type == ErrorType.INVALID_IMAGE
        assert "application/pdf" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_rejects_oversized(self, product_service):
        with patch.object(Config, "MAX_IMAGE_SIZE", 4):
            with pytest.raises(AppException) as exc_info:
                await product_service.upload_product_image(ImageFile("a.png", "image/png", b"12345"))

        assert exc_info.value.error_type == ErrorType.INVALID_IMAGE

    @pytest.mark.asyncio
    async def test_rejects_empty(self, product_service):
        with pytest.raises(AppException) as exc_info:
            await product_service.upload_product_image(ImageFile("a.png", "image/png", b""))

        assert exc_info.value.error_type == ErrorType.INVALID_IMAGE

    @pytest.mark.asyncio
    async def test_batch_validated_before_upload(self, product_service, storage):
        storage.upload = AsyncMock(return_value="http://test/media/products/products/x.png")

        with pytest.raises(AppException):
            await product_service.upload_product_images([
                ImageFile("a.png", "image/png", b"ok"),
                ImageFile("b.txt", "text/plain", b"nope"),
            ])

        storage.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_batch_aborts_on_upload_failure(self, product_service, storage):
        storage.upload = AsyncMock(side_effect=[
            "http://test/media/products/products/a.png",
            AppException(ErrorType.STORAGE_ERROR, "Failed to upload image: quota"),
        ])

        with pytest.raises(AppException) as exc_info:
            await product_service.upload_product_images([
                ImageFile("a.png", "image/png", b"a"),
                ImageFile("b.png", "image/png", b"b"),
            ])

        assert exc_info.value.message == "Failed to upload image: quota"

    @pytest.mark.asyncio
    async def test_delete_image(self, product_service, storage):
        url = await product_service.upload_product_image(ImageFile("a.gif", "image/gif", b"gif"))

        result = await product_service.delete_product_image(url)

        assert result.message == "Image deleted successfully"
        assert not (storage.bucket_dir / storage.path_from_url(url)).exists()

    @pytest.mark.asyncio
    async def test_delete_image_invalid_path(self, product_service):
        with pytest.raises(AppException) as exc_info:
            await product_service.delete_product_image("https://elsewhere.example/cat.png")

        assert exc_info.value.error_type == ErrorType.VALIDATION
        assert exc_info.value.message == "Invalid image path"
