from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from shopadmin.db.database import Base, generate_id
from shopadmin.utils.sales import utcnow


class Sale(Base):
    __tablename__ = "sales"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    sale_products = relationship("SaleProduct", back_populates="sale")


class SaleProduct(Base):
    __tablename__ = "sale_products"

    sale_id = Column(String(36), ForeignKey("sales.id"), primary_key=True)
    product_id = Column(String(36), ForeignKey("products.id"), primary_key=True)
    sale_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    sale = relationship("Sale", back_populates="sale_products")
    product = relationship("Product", back_populates="sale_products")
