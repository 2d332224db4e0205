"""Utilities package"""

from .validators import normalize_mobile_number, validate_email_address, sanitize_text
from .pagination import paginate, PaginationParams, Page

__all__ = [
    "normalize_mobile_number",
    "validate_email_address",
    "sanitize_text",
    "paginate",
    "PaginationParams",
    "Page",
]
