import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from httpx import AsyncClient, ASGITransport

from shopadmin.main import app
from shopadmin.db.database import Database, db, get_session
from shopadmin.models import Category, Product, Sale, SaleProduct
from shopadmin.services.product_service import ProductService
from shopadmin.storage.local import LocalStorage
from shopadmin.utils.sales import parse_datetime


@pytest.fixture
def mock_session():
    """Mock session for checking that nothing reaches the store."""
    mock = AsyncMock()
    mock.add = MagicMock()
    mock.add_all = MagicMock()
    return mock


@pytest.fixture
async def database(tmp_path):
    """Throwaway SQLite store with all tables created."""
    database = Database(url=f"sqlite:///{tmp_path}/shopadmin.db", db_type="sqlite")
    await database.create_tables()
    yield database
    await database.disconnect()


@pytest.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    """Filesystem storage under a temp dir, public URLs on http://test/media."""
    return LocalStorage(root=tmp_path / "media", bucket="products", public_base_url="http://test/media")


@pytest.fixture
def product_service(storage):
    return ProductService(storage=storage)


@pytest.fixture
def add_category(session):
    async def _add(name="Electronics", buyer_name=None):
        category = Category(name=name, buyer_name=buyer_name)
        session.add(category)
        await session.commit()
        return category
    return _add


@pytest.fixture
def add_product(session):
    async def _add(sku="SKU-1", name="Widget", regular_price="10.00", category_id=None, images=None):
        product = Product(
            sku=sku,
            name=name,
            regular_price=Decimal(regular_price),
            category_id=category_id,
            images=images or []
        )
        session.add(product)
        await session.commit()
        return product
    return _add


@pytest.fixture
def add_sale(session):
    async def _add(name="Summer Sale", start_date="2024-03-15", end_date="2024-03-22"):
        sale = Sale(name=name, start_date=parse_datetime(start_date), end_date=parse_datetime(end_date))
        session.add(sale)
        await session.commit()
        return sale
    return _add


@pytest.fixture
def assign(session):
    async def _assign(sale, product, sale_price="5.00"):
        session.add(SaleProduct(sale_id=sale.id, product_id=product.id, sale_price=Decimal(sale_price)))
        await session.commit()
    return _assign


@pytest.fixture
async def client(database, storage):
    """Async test client on the temp store and temp storage."""
    async def override_session():
        async with database.session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session

    # Mock the db.connect and db.disconnect
    original_connect = db.connect
    original_disconnect = db.disconnect
    db.connect = AsyncMock()
    db.disconnect = AsyncMock()

    with patch("shopadmin.routers.products.product_service", ProductService(storage=storage)):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test"
        ) as ac:
            yield ac

    # Restore
    app.dependency_overrides.clear()
    db.connect = original_connect
    db.disconnect = original_disconnect
