"""Client-held cart and wishlist state sent at login"""

from typing import Any, List
from pydantic import Field, field_validator

from .base import BaseSchema

class LocalCartEntry(BaseSchema):
    """Entry accumulated while anonymous; checked item by item during the merge"""
    product_id: Any = None
    quantity: Any = 1

class LocalWishlistEntry(BaseSchema):
    product_id: Any = None

class LocalState(BaseSchema):
    """
    Local collections as the client stored them

    Entries are not type-checked here. A malformed entry is rejected
    during the merge and reported, so it can never fail the request.
    """
    local_cart: List[LocalCartEntry] = Field(default_factory=list)
    local_wishlist: List[Any] = Field(default_factory=list)

    @field_validator("local_cart", mode="before")
    @classmethod
    def wrap_cart_entries(cls, value):
        if not isinstance(value, list):
            return value
        return [
            entry if isinstance(entry, (dict, LocalCartEntry)) else {"productId": entry, "quantity": None}
            for entry in value
        ]

    @field_validator("local_wishlist", mode="before")
    @classmethod
    def parse_wishlist_entries(cls, value):
        if not isinstance(value, list):
            return value
        return [LocalWishlistEntry.model_validate(entry) if isinstance(entry, dict) else entry for entry in value]

class SyncResult(BaseSchema):
    cart_synced: bool = True
    wishlist_synced: bool = True
    errors: List[str] = Field(default_factory=list)
