import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional

from storefront.database import get_db
from storefront.services.product_service import ProductService
from storefront.schemas.product import ProductResponse, ProductListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="Get a page of products, newest first, optionally filtered by category."
)
def list_products(
    category: Optional[str] = Query(None, description="Filter by category"),
    limit: int = Query(20, ge=0, description="Maximum number of products"),
    offset: int = Query(0, ge=0, description="Number of products to skip"),
    db: Session = Depends(get_db)
):
    """
    List products.

    - **category**: Exact category label (optional)
    - **limit**: Page size, default 20
    - **offset**: Page start, default 0
    """
    service = ProductService(db)

    try:
        products = service.get_all(category, limit, offset)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch products"
        )

    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        total=len(products),
        limit=limit,
        offset=offset
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get detailed information about a specific product."
)
def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Get a product by ID."""
    service = ProductService(db)

    try:
        product = service.get_by_id(product_id)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching product: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch product"
        )

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )

    return product
