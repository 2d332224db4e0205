"""
Custom exception classes
Provides consistent error responses across the application
"""

from fastapi import HTTPException, status
from typing import Any, Dict, Optional

class BookstoreException(HTTPException):
    """Base exception class for the bookstore application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(BookstoreException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(BookstoreException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ForbiddenException(BookstoreException):
    """403 Forbidden"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )

class NotFoundException(BookstoreException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class ConflictException(BookstoreException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )

class InternalServerException(BookstoreException):
    """500 Internal Server Error"""

    def __init__(
        self,
        detail: str = "Internal server error",
        error_code: str = "INTERNAL_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class ProductUnavailableException(BadRequestException):
    """Product exists but is not available for sale"""

    def __init__(self, product_name: str):
        super().__init__(
            detail=f'Product "{product_name}" is not available',
            error_code="PRODUCT_UNAVAILABLE"
        )

class PriceMismatchException(BadRequestException):
    """Client price disagrees with the catalog price"""

    def __init__(self, product_name: str, expected: Any, received: Any):
        super().__init__(
            detail=(
                f'Price mismatch for product "{product_name}". '
                f"Expected: {expected}, Received: {received}"
            ),
            error_code="PRICE_MISMATCH"
        )

class TotalMismatchException(BadRequestException):
    """Declared total disagrees with the computed total"""

    def __init__(self, calculated: Any, received: Any):
        super().__init__(
            detail=f"Total price mismatch. Calculated: {calculated:.2f}, Received: {received}",
            error_code="TOTAL_MISMATCH"
        )

class InvalidPaymentException(BadRequestException):
    """Payment validation failed"""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            error_code="INVALID_PAYMENT"
        )

class InvalidStatusException(BadRequestException):
    """Order or payment status outside the allowed vocabulary"""

    def __init__(self, detail: str = "Invalid status"):
        super().__init__(
            detail=detail,
            error_code="INVALID_STATUS"
        )

class DuplicateResourceException(ConflictException):
    """Resource already exists"""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            error_code="DUPLICATE_RESOURCE"
        )

class WishlistLimitException(BadRequestException):
    """Wishlist is full"""

    def __init__(self, limit: int):
        super().__init__(
            detail=f"Wishlist limit of {limit} items reached",
            error_code="WISHLIST_LIMIT_REACHED"
        )
