"""
Shopping cart model
One cart per registered user, lazily created
"""

from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel, SerializableModel

class Cart(Base, TimestampedModel, UUIDModel, SerializableModel):
    """User shopping cart"""

    __tablename__ = "carts"

    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)

    # Relationships
    user = relationship("User", back_populates="cart")
    items = relationship("CartItem", back_populates="cart", order_by="CartItem.created_at")

class CartItem(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Shopping cart items"""

    __tablename__ = "cart_items"

    cart_id = Column(String(36), ForeignKey("carts.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    # Relationships
    cart = relationship("Cart", back_populates="items")
    product = relationship("Product")

    # Constraints
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_product"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
    )
