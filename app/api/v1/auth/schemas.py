"""
Authentication schemas
"""

from pydantic import Field, field_validator
from typing import List, Optional

from app.models import UserRole, AuthProvider
from app.schemas.base import BaseSchema
from app.schemas.sync import LocalState
from app.utils.validators import validate_email_address

class RegisterRequest(BaseSchema):
    """Password account registration"""
    name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email_address(v.strip()).lower()

class LoginRequest(LocalState):
    """Credentials plus the client's local cart and wishlist"""
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()

class UserResponse(BaseSchema):
    id: str
    name: str
    last_name: Optional[str] = None
    email: str
    role: UserRole
    auth_provider: AuthProvider
    is_account_verified: bool
    profile_picture: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    post_code: Optional[str] = None
    country: Optional[str] = None
    mobile_number: Optional[str] = None

class SyncResponse(BaseSchema):
    success: bool = True
    message: str = "Local data synced"
    cart_synced: bool
    wishlist_synced: bool
    sync_errors: List[str] = Field(default_factory=list)

class AuthResponse(SyncResponse):
    message: str = "Login successful"
    user: UserResponse
    token: str
