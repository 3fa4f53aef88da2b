from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, CheckConstraint
from sqlalchemy.sql import func

from storefront.database import Base


class Product(Base):
    """
    Product model representing items shown in the catalog.

    Attributes:
        id: Unique identifier for the product
        name: Product name
        description: Free-text description
        price: Fixed-point price (must be non-negative)
        image_url: URI of the product image
        category: Free-text category label
        stock_quantity: Available quantity (must be non-negative)
        created_at: Timestamp when product was created
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(500))
    category = Column(String(100))
    stock_quantity = Column(Integer, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint('stock_quantity >= 0', name='check_stock_non_negative'),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
