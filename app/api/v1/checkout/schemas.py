"""Checkout schemas"""

from decimal import Decimal
from typing import List, Optional
from pydantic import Field

from app.schemas.base import BaseSchema, Money

class CheckoutItem(BaseSchema):
    """Line priced by the server"""
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)

class CheckoutCalculateRequest(BaseSchema):
    items: List[CheckoutItem] = Field(..., min_length=1)
    taxes: Decimal = Field(Decimal("0"), ge=0)
    shipping_fee: Decimal = Field(Decimal("0"), ge=0)

class CalculatedItem(BaseSchema):
    product_id: str
    name: str
    image: Optional[str] = None
    price: Money
    original_price: Optional[Money] = None
    quantity: int
    line_total: Money

class CheckoutCalculateResponse(BaseSchema):
    success: bool = True
    message: str = "Checkout calculated successfully"
    items: List[CalculatedItem]
    subtotal: Money
    taxes: Money
    shipping_fee: Money
    total: Money

class CheckoutProcessRequest(BaseSchema):
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    post_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    mobile_number: str = Field(..., min_length=1, max_length=30)
    save_info: bool = False
    items: List[CheckoutItem] = Field(..., min_length=1)
    taxes: Decimal = Field(Decimal("0"), ge=0)
    shipping_fee: Decimal = Field(Decimal("0"), ge=0)
    payment_method: str
    online_payment_option: Optional[str] = None

class PaymentProofResponse(BaseSchema):
    success: bool = True
    message: str
    payment_proof: str
