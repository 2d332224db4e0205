"""Services package"""

from .email_service import EmailService
from .storage import StorageService

__all__ = [
    "EmailService",
    "StorageService",
]
