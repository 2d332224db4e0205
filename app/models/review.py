"""
Product review and rating model
"""

from sqlalchemy import Column, String, Integer, Text, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel, SerializableModel

class Review(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Product reviews and ratings"""

    __tablename__ = "reviews"

    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    # Review content
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False, default="")

    # Relationships
    product = relationship("Product", back_populates="reviews")
    user = relationship("User", back_populates="reviews")

    # Constraints
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_product_user_review"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
        Index("idx_reviews_product_created", "product_id", "created_at"),
    )
