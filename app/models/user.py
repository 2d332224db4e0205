"""
User model
Handles account identity, profile and saved shipping details
"""

from sqlalchemy import Column, String, Boolean, BigInteger, Enum, Text
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel, SerializableModel, enum_values

class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"

class AuthProvider(str, enum.Enum):
    LOCAL = "local"
    GOOGLE = "google"

class User(Base, TimestampedModel, UUIDModel, SerializableModel):
    """User account"""

    __tablename__ = "users"

    # Identity
    name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)  # null for OAuth-only accounts
    role = Column(Enum(UserRole, name="user_role", values_callable=enum_values), default=UserRole.USER, nullable=False)

    # Verification and password reset (epoch seconds)
    is_account_verified = Column(Boolean, default=False, nullable=False)
    verify_otp = Column(String(10), nullable=True)
    verify_otp_expire_at = Column(BigInteger, default=0, nullable=False)
    reset_otp = Column(String(10), nullable=True)
    reset_otp_expire_at = Column(BigInteger, default=0, nullable=False)

    # OAuth linkage
    auth_provider = Column(Enum(AuthProvider, name="auth_provider", values_callable=enum_values), default=AuthProvider.LOCAL, nullable=False)
    google_id = Column(String(255), unique=True, nullable=True)
    profile_picture = Column(String(500), nullable=True)

    # Saved shipping details
    address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    post_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True)
    mobile_number = Column(String(20), nullable=True)
    shipping_address = Column(Text, nullable=True)

    # Relationships
    cart = relationship("Cart", back_populates="user", uselist=False)
    wishlist = relationship("Wishlist", back_populates="user", uselist=False)
    orders = relationship("Order", back_populates="user")
    reviews = relationship("Review", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}" if self.last_name else self.name
