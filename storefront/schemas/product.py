from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import Optional


class ProductResponse(BaseModel):
    """Schema for product response including all fields."""
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, description="Product price")
    image_url: Optional[str] = None
    category: Optional[str] = None
    stock_quantity: int = Field(0, ge=0, description="Available stock")
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    """Schema for a page of products."""
    products: list[ProductResponse]
    total: int
    limit: int
    offset: int
