from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from shopadmin.db.database import Base, generate_id
from shopadmin.utils.sales import utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    buyer_name = Column(String(255))
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    products = relationship("Product", back_populates="category")
