"""Product Pydantic schemas"""

from typing import List, Optional
from datetime import datetime
from pydantic import Field

from app.schemas.base import BaseSchema, Money
from app.api.v1.reviews.schemas import ReviewResponse

class ProductSummary(BaseSchema):
    """Product fields embedded in cart, wishlist and order lines"""
    id: str
    name: str
    image: Optional[str] = None
    price: Money
    availability: bool = True

class ProductResponse(BaseSchema):
    """Schema for product response"""
    id: str
    name: str
    description: Optional[str] = None
    author: Optional[str] = None
    isbn: Optional[str] = None
    language: Optional[str] = None
    category: str
    sub_categories: List[str] = Field(default_factory=list)
    price: Money
    original_price: Optional[Money] = None
    image: Optional[str] = None
    bestseller: bool = False
    availability: bool = True
    created_at: datetime

class ProductDetailResponse(ProductResponse):
    """Single product with its reviews, newest first"""
    reviews: List[ReviewResponse] = Field(default_factory=list)

class PaginationInfo(BaseSchema):
    page: int
    limit: int
    total: int
    pages: int

class ProductListResponse(BaseSchema):
    success: bool = True
    message: str = "Products retrieved successfully"
    products: List[ProductResponse]
    pagination: PaginationInfo

class ProductSingleResponse(BaseSchema):
    success: bool = True
    message: str = "Product retrieved successfully"
    product: ProductDetailResponse
