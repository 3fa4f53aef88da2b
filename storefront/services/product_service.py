from sqlalchemy.orm import Session
from typing import Optional, List

from storefront.models.product import Product


class ProductService:
    """
    Read-only service for the product catalog.

    This service handles:
    - Listing products, newest first, with optional category filter
    - Looking up a single product
    - Listing distinct categories
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        category: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[Product]:
        """
        Get a page of products.

        Args:
            category: Optional exact category to filter on
            limit: Maximum number of products to return
            offset: Number of products to skip

        Returns:
            List of products ordered by creation time, newest first
        """
        query = self.db.query(Product)

        if category:
            query = query.filter(Product.category == category)

        return (
            query.order_by(Product.created_at.desc(), Product.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get a product by ID."""
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_categories(self) -> List[str]:
        """Get the sorted list of distinct categories."""
        rows = (
            self.db.query(Product.category)
            .distinct()
            .order_by(Product.category)
            .all()
        )
        return [row.category for row in rows]
