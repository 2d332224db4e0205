"""Wishlist schemas"""

from typing import List, Optional
from pydantic import Field

from app.schemas.base import BaseSchema
from app.api.v1.products.schemas import ProductSummary

class WishlistItemRequest(BaseSchema):
    product_id: str = Field(..., min_length=1)

class WishlistItemResponse(BaseSchema):
    id: str
    product_id: str
    product: Optional[ProductSummary] = None

class WishlistResponse(BaseSchema):
    id: Optional[str] = None
    item_limit: int
    items: List[WishlistItemResponse] = Field(default_factory=list)

class WishlistEnvelope(BaseSchema):
    success: bool = True
    message: str
    wishlist: WishlistResponse
