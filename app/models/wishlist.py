"""
Wishlist model for saved products
"""

from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel, SerializableModel

class Wishlist(Base, TimestampedModel, UUIDModel, SerializableModel):
    """User wishlist with a capacity fixed at creation"""

    __tablename__ = "wishlists"

    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    item_limit = Column(Integer, nullable=False, default=10)

    # Relationships
    user = relationship("User", back_populates="wishlist")
    items = relationship("WishlistItem", back_populates="wishlist", order_by="WishlistItem.created_at")

class WishlistItem(Base, TimestampedModel, UUIDModel, SerializableModel):
    """User wishlist items"""

    __tablename__ = "wishlist_items"

    wishlist_id = Column(String(36), ForeignKey("wishlists.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)

    # Relationships
    wishlist = relationship("Wishlist", back_populates="items")
    product = relationship("Product")

    # Constraints
    __table_args__ = (
        UniqueConstraint("wishlist_id", "product_id", name="uq_wishlist_product"),
    )
