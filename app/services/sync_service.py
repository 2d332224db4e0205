"""
Sync-on-login merge

Reconciles the cart and wishlist a client accumulated while anonymous into
the user's persistent collections. Safe to run repeatedly with overlapping
input: cart quantities add up, wishlist entries are set-like.
"""

import logging
from typing import Any, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.sync import LocalCartEntry, LocalWishlistEntry, SyncResult
from app.api.v1.products.services import ProductService
from app.api.v1.cart.services import CartService
from app.api.v1.wishlist.services import WishlistService

logger = logging.getLogger(__name__)

def coerce_quantity(value) -> Optional[int]:
    """Positive integer quantity, or None when the value is not one"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, float) and value.is_integer():
        quantity = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        quantity = int(value.strip())
    else:
        return None
    return quantity if quantity >= 1 else None

def _product_id(value) -> Optional[str]:
    """Non-empty string id, or None for anything else"""
    if isinstance(value, str) and value.strip():
        return value
    return None

def _wishlist_product_id(entry: Any):
    if isinstance(entry, LocalWishlistEntry):
        return entry.product_id
    return entry

class SyncService:
    """Merges local cart and wishlist state for an authenticated user"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.product_service = ProductService(db)
        self.cart_service = CartService(db)
        self.wishlist_service = WishlistService(db)

    async def merge(
        self,
        user_id: str,
        local_cart: Sequence[LocalCartEntry] = (),
        local_wishlist: Sequence[Any] = ()
    ) -> SyncResult:
        """
        Merge local state and commit

        Per-item failures are skipped and reported in ``errors``; they never
        abort the merge. Empty input counts as synced.
        """
        errors: List[str] = []

        cart_synced = await self._merge_cart(user_id, list(local_cart or []), errors)
        wishlist_synced = await self._merge_wishlist(user_id, list(local_wishlist or []), errors)

        await self.db.commit()

        if errors:
            logger.warning("Merge for user %s finished with %s rejected items", user_id, len(errors))

        return SyncResult(cart_synced=cart_synced, wishlist_synced=wishlist_synced, errors=errors)

    async def _merge_cart(self, user_id: str, entries: List[LocalCartEntry], errors: List[str]) -> bool:
        if not entries:
            return True

        cart = await self.cart_service.get_or_create_cart(user_id)
        products = await self.product_service.get_products_by_ids(_product_id(e.product_id) for e in entries)
        synced = True

        for entry in entries:
            quantity = coerce_quantity(entry.quantity)

            if _product_id(entry.product_id) is None or quantity is None:
                error = f"Invalid cart item: productId={entry.product_id!r} quantity={entry.quantity!r}"
            elif entry.product_id not in products:
                error = f"Product {entry.product_id} not found"
            elif not products[entry.product_id].availability:
                error = f"Product {products[entry.product_id].name} is not available"
            else:
                await self.cart_service.upsert_item(cart, entry.product_id, quantity)
                continue

            logger.warning("Cart merge rejected item for user %s: %s", user_id, error)
            errors.append(error)
            synced = False

        return synced

    async def _merge_wishlist(self, user_id: str, entries: List[Any], errors: List[str]) -> bool:
        if not entries:
            return True

        wishlist = await self.wishlist_service.get_or_create_wishlist(user_id)
        remaining = max(wishlist.item_limit - await self.wishlist_service.count_items(wishlist), 0)

        # Entries beyond the remaining capacity are dropped without error
        accepted = [_wishlist_product_id(entry) for entry in entries[:remaining]]
        products = await self.product_service.get_products_by_ids(map(_product_id, accepted))
        synced = True

        for product_id in accepted:
            if _product_id(product_id) is None:
                error = f"Invalid wishlist item: productId={product_id!r}"
            elif product_id not in products:
                error = f"Product {product_id} not found"
            else:
                await self.wishlist_service.ensure_item(wishlist, product_id)
                continue

            logger.warning("Wishlist merge rejected item for user %s: %s", user_id, error)
            errors.append(error)
            synced = False

        return synced
