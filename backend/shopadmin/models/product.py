from sqlalchemy import Column, String, Text, Numeric, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from shopadmin.db.database import Base, generate_id
from shopadmin.utils.sales import utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_id)
    sku = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    regular_price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2))
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"))
    # Public storage URLs, first one is the primary image
    images = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="products")
    sale_products = relationship("SaleProduct", back_populates="product")
