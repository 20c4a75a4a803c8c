from shopadmin.models.category import Category
from shopadmin.models.product import Product
from shopadmin.models.sale import Sale, SaleProduct

__all__ = ["Category", "Product", "Sale", "SaleProduct"]
