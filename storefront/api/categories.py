import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional

from storefront.database import get_db
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get(
    "",
    response_model=List[Optional[str]],
    summary="List categories",
    description="Get the sorted list of distinct product categories."
)
def list_categories(db: Session = Depends(get_db)):
    service = ProductService(db)

    try:
        return service.get_categories()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching categories: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch categories"
        )
