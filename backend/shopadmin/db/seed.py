import asyncio
import logging
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopadmin.db.database import db
from shopadmin.models import Category, Product, Sale, SaleProduct
from shopadmin.utils.sales import utcnow

logger = logging.getLogger(__name__)


# Sample categories (name, buyer)
CATEGORIES_DATA = [
    ("Electronics", "Dana Whitfield"),
    ("Clothing", "Marco Reyes"),
    ("Home", None),
]

# Sample products (sku, name, category, regular price)
PRODUCTS_DATA = [
    ("EL-1001", "Wireless Earbuds", "Electronics", Decimal("129.99")),
    ("EL-1002", "Bluetooth Speaker", "Electronics", Decimal("79.99")),
    ("EL-1003", "USB-C Charger", "Electronics", Decimal("24.99")),
    ("CL-2001", "Winter Jacket", "Clothing", Decimal("149.99")),
    ("CL-2002", "Running Shoes", "Clothing", Decimal("89.99")),
    ("HM-3001", "Standing Desk", "Home", Decimal("399.99")),
    ("HM-3002", "Office Chair", "Home", Decimal("299.99")),
]

# Sales relative to today (name, start offset days, length days, discount, products)
SALES_DATA = [
    ("Spring Clearance", -3, 10, Decimal("0.80"), ["EL-1001", "CL-2001"]),
    ("Home Office Week", 14, 7, Decimal("0.85"), ["HM-3001", "HM-3002"]),
]


async def seed_database(session: AsyncSession) -> bool:
    """Insert demo data into an empty store. Returns False if data exists."""
    result = await session.execute(select(Category).limit(1))
    if result.scalar():
        logger.info("Database already seeded")
        return False

    categories = {}
    for name, buyer in CATEGORIES_DATA:
        category = Category(name=name, buyer_name=buyer)
        categories[name] = category
        session.add(category)

    await session.flush()  # Get IDs

    products = {}
    for sku, name, category_name, price in PRODUCTS_DATA:
        product = Product(
            sku=sku,
            name=name,
            regular_price=price,
            category_id=categories[category_name].id,
            images=[]
        )
        products[sku] = product
        session.add(product)

    await session.flush()

    today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    for name, offset, length, discount, skus in SALES_DATA:
        start = today + timedelta(days=offset)
        sale = Sale(name=name, start_date=start, end_date=start + timedelta(days=length))
        session.add(sale)
        await session.flush()

        for sku in skus:
            product = products[sku]
            session.add(SaleProduct(
                sale_id=sale.id,
                product_id=product.id,
                sale_price=(product.regular_price * discount).quantize(Decimal("0.01"))
            ))

    await session.commit()
    logger.info("Database seeded successfully!")
    return True


async def main():
    await db.connect()
    await db.create_tables()
    async with db.session_factory() as session:
        await seed_database(session)
    await db.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
