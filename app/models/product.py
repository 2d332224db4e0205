"""Product catalog model"""

from sqlalchemy import Column, String, Text, Numeric, Boolean, JSON, Index, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel, SerializableModel

class Product(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Book listed in the catalog"""

    __tablename__ = "products"

    # Basic info
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    author = Column(String(255), nullable=True, index=True)
    isbn = Column(String(20), unique=True, nullable=True)
    language = Column(String(50), nullable=True)

    # Categorization
    category = Column(String(100), nullable=False, index=True)
    sub_categories = Column(JSON, default=list, nullable=False)

    # Pricing
    price = Column(Numeric(12, 2), nullable=False)
    original_price = Column(Numeric(12, 2), nullable=True)

    # Media
    image = Column(String(500), nullable=True)

    # Flags
    bestseller = Column(Boolean, default=False, nullable=False, index=True)
    availability = Column(Boolean, default=True, nullable=False, index=True)

    # Relationships
    reviews = relationship("Review", back_populates="product", order_by="Review.created_at.desc()")

    # Constraints
    __table_args__ = (
        CheckConstraint("price >= 0", name="check_non_negative_price"),
        Index("idx_products_category_availability", "category", "availability"),
    )
