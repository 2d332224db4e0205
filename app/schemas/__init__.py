"""Shared schemas"""

from .base import BaseSchema, APIResponse, Money
from .sync import LocalCartEntry, LocalWishlistEntry, LocalState, SyncResult

__all__ = [
    "BaseSchema",
    "APIResponse",
    "Money",
    "LocalCartEntry",
    "LocalWishlistEntry",
    "LocalState",
    "SyncResult",
]
