"""
Order schemas for request/response validation
"""

from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from app.models import Order, OrderStatus, OrderPaymentStatus, ShippingMethod, PaymentRecordStatus
from app.schemas.base import BaseSchema, Money
from app.utils.validators import validate_email_address
from app.api.v1.products.schemas import ProductSummary

class OrderItemInput(BaseSchema):
    """Line submitted by the client, priced by the client"""
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0)

class OrderCreate(BaseSchema):
    """Order from a registered user"""
    items: List[OrderItemInput] = Field(..., min_length=1)
    total_price: Decimal = Field(..., ge=0)
    shipping_address: str = Field(..., min_length=1, max_length=1000)
    payment_method: str
    online_payment_option: Optional[str] = None
    taxes: Decimal = Field(Decimal("0"), ge=0)
    shipping_fee: Decimal = Field(Decimal("0"), ge=0)
    city: Optional[str] = Field(None, max_length=100)
    post_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)

    @field_validator("shipping_address")
    @classmethod
    def strip_address(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Shipping address is required")
        return v

class GuestOrderCreate(OrderCreate):
    """Order without an account: contact details replace the user"""
    guest_name: str = Field(..., min_length=1, max_length=200)
    guest_email: str = Field(..., max_length=255)
    guest_phone: Optional[str] = Field(None, max_length=30)

    @field_validator("guest_name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Guest name is required")
        return v

    @field_validator("guest_email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email_address(v.strip()).lower()

class OrderStatusUpdate(BaseSchema):
    """Admin status update; omitted fields are left unchanged"""
    status: str
    tracking_id: Optional[str] = Field(None, max_length=100)
    shipping_method: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    payment_status: Optional[str] = None

class OrderItemResponse(BaseSchema):
    id: str
    product_id: str
    quantity: int
    price: Money
    product: Optional[ProductSummary] = None

class PaymentResponse(BaseSchema):
    id: str
    payment_method: str
    status: PaymentRecordStatus
    amount: Money
    transaction_id: Optional[str] = None
    payment_proof: Optional[str] = None
    created_at: datetime

class GuestInfo(BaseSchema):
    name: str
    email: str
    phone: Optional[str] = None
    city: Optional[str] = None
    post_code: Optional[str] = None
    country: Optional[str] = None

class OrderUser(BaseSchema):
    id: str
    name: str
    last_name: Optional[str] = None
    email: str
    mobile_number: Optional[str] = None

class OrderResponse(BaseSchema):
    """Same shape for registered and guest orders"""
    id: str
    user_id: Optional[str] = None
    is_guest: bool
    guest: Optional[GuestInfo] = None
    user: Optional[OrderUser] = None
    status: OrderStatus
    payment_status: OrderPaymentStatus
    subtotal: Money
    taxes: Money
    shipping_fee: Money
    total_price: Money
    payment_method: str
    shipping_address: str
    city: Optional[str] = None
    post_code: Optional[str] = None
    country: Optional[str] = None
    shipping_method: Optional[ShippingMethod] = None
    tracking_id: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse] = Field(default_factory=list)
    payment: Optional[PaymentResponse] = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        """Build from an order loaded with items, products, payment and user"""
        guest = None
        if order.is_guest:
            guest = GuestInfo(
                name=order.guest_name,
                email=order.guest_email,
                phone=order.guest_phone,
                city=order.city,
                post_code=order.post_code,
                country=order.country,
            )

        subtotal = sum((Decimal(item.price) * item.quantity for item in order.items), Decimal("0"))

        return cls(
            id=order.id,
            user_id=order.user_id,
            is_guest=order.is_guest,
            guest=guest,
            user=OrderUser.model_validate(order.user) if order.user else None,
            status=order.status,
            payment_status=order.payment_status,
            subtotal=subtotal,
            taxes=order.taxes,
            shipping_fee=order.shipping_fee,
            total_price=order.total_price,
            payment_method=order.payment_method,
            shipping_address=order.shipping_address,
            city=order.city,
            post_code=order.post_code,
            country=order.country,
            shipping_method=order.shipping_method,
            tracking_id=order.tracking_id,
            estimated_delivery=order.estimated_delivery,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderItemResponse.model_validate(item) for item in order.items],
            payment=PaymentResponse.model_validate(order.payment) if order.payment else None,
        )

class OrderEnvelope(BaseSchema):
    success: bool = True
    message: str
    order: OrderResponse

class OrderListEnvelope(BaseSchema):
    success: bool = True
    message: str = "Orders retrieved successfully"
    orders: List[OrderResponse]
    total: int

class OrderStats(BaseSchema):
    total_orders: int
    pending_orders: int
    processing_orders: int
    delivered_orders: int
    total_revenue: Money

class OrderStatsEnvelope(BaseSchema):
    success: bool = True
    message: str = "Order statistics retrieved successfully"
    stats: OrderStats
