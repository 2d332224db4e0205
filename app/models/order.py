"""
Order model
Registered and guest orders share one table, told apart by is_guest
"""

from sqlalchemy import Column, String, Numeric, Integer, Enum, ForeignKey, Index, Text, DateTime, Boolean, CheckConstraint
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel, SerializableModel, enum_values

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    READY_FOR_SHIPMENT = "ready_for_shipment"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"

class OrderPaymentStatus(str, enum.Enum):
    PAID = "paid"
    NOT_PAID = "not_paid"
    PENDING = "pending"
    FAILED = "failed"

class ShippingMethod(str, enum.Enum):
    TCS = "tcs"
    LEOPARD = "leopard"
    TRAX = "trax"
    POSTEX = "postex"
    PAKISTAN_POST = "pakistan_post"
    OTHER = "other"

class Order(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Order placed by a registered user or a guest"""

    __tablename__ = "orders"

    # Buyer: a user relation, or guest contact details
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    is_guest = Column(Boolean, default=False, nullable=False)
    guest_name = Column(String(200), nullable=True)
    guest_email = Column(String(255), nullable=True, index=True)
    guest_phone = Column(String(30), nullable=True)
    city = Column(String(100), nullable=True)
    post_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True)

    # Status
    status = Column(Enum(OrderStatus, name="order_status", values_callable=enum_values), default=OrderStatus.PENDING, nullable=False, index=True)
    payment_status = Column(Enum(OrderPaymentStatus, name="order_payment_status", values_callable=enum_values), default=OrderPaymentStatus.NOT_PAID, nullable=False)

    # Amounts
    total_price = Column(Numeric(12, 2), nullable=False)
    taxes = Column(Numeric(12, 2), default=0, nullable=False)
    shipping_fee = Column(Numeric(12, 2), default=0, nullable=False)

    # Payment and delivery
    payment_method = Column(String(50), nullable=False)
    shipping_address = Column(Text, nullable=False)
    shipping_method = Column(Enum(ShippingMethod, name="shipping_method", values_callable=enum_values), nullable=True)
    tracking_id = Column(String(100), nullable=True)
    estimated_delivery = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.created_at")
    payment = relationship("Payment", back_populates="order", uselist=False)

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "(is_guest AND user_id IS NULL AND guest_email IS NOT NULL) "
            "OR (NOT is_guest AND user_id IS NOT NULL)",
            name="check_order_buyer_variant",
        ),
        CheckConstraint("total_price >= 0", name="check_non_negative_total"),
        Index("idx_orders_user_created", "user_id", "created_at"),
        Index("idx_orders_status_payment", "status", "payment_status"),
    )

class OrderItem(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Individual items within an order"""

    __tablename__ = "order_items"

    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)

    # Snapshot at time of order
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    # Constraints
    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_positive_order_quantity"),
    )
