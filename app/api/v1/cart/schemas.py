"""Cart schemas"""

from decimal import Decimal
from typing import List, Optional
from pydantic import Field

from app.schemas.base import BaseSchema, Money
from app.api.v1.products.schemas import ProductSummary

class CartItemAdd(BaseSchema):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)

class CartItemUpdate(BaseSchema):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)

class CartItemRemove(BaseSchema):
    product_id: str = Field(..., min_length=1)

class CartItemResponse(BaseSchema):
    id: str
    product_id: str
    quantity: int
    product: Optional[ProductSummary] = None

class CartResponse(BaseSchema):
    id: Optional[str] = None
    items: List[CartItemResponse] = Field(default_factory=list)
    total_items: int = 0
    subtotal: Money = Decimal("0")

class CartEnvelope(BaseSchema):
    success: bool = True
    message: str
    cart: CartResponse
