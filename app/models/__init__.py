"""Models package initialization"""

from .base import Base
from .user import User, UserRole, AuthProvider
from .product import Product
from .cart import Cart, CartItem
from .wishlist import Wishlist, WishlistItem
from .review import Review
from .order import Order, OrderItem, OrderStatus, OrderPaymentStatus, ShippingMethod
from .payment import Payment, PaymentMethod, OnlinePaymentOption, PaymentRecordStatus

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "AuthProvider",
    "Product",
    "Cart",
    "CartItem",
    "Wishlist",
    "WishlistItem",
    "Review",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderPaymentStatus",
    "ShippingMethod",
    "Payment",
    "PaymentMethod",
    "OnlinePaymentOption",
    "PaymentRecordStatus",
]
