"""
Wishlist service layer
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from app.models import Wishlist, WishlistItem
from app.core.config import settings
from app.core.exceptions import NotFoundException, DuplicateResourceException, WishlistLimitException
from app.api.v1.products.services import ProductService
from .schemas import WishlistResponse, WishlistItemResponse

logger = logging.getLogger(__name__)

class WishlistService:
    """Capacity-limited wishlist per user"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.product_service = ProductService(db)

    async def get_wishlist(self, user_id: str) -> Optional[Wishlist]:
        result = await self.db.execute(
            select(Wishlist)
            .options(selectinload(Wishlist.items).selectinload(WishlistItem.product))
            .where(Wishlist.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_create_wishlist(self, user_id: str) -> Wishlist:
        """Lazily create the wishlist; its limit is fixed at creation"""
        wishlist = await self.db.scalar(select(Wishlist).where(Wishlist.user_id == user_id))
        if wishlist is None:
            wishlist = Wishlist(user_id=user_id, item_limit=settings.WISHLIST_ITEM_LIMIT)
            self.db.add(wishlist)
            await self.db.flush()
        return wishlist

    async def count_items(self, wishlist: Wishlist) -> int:
        return await self.db.scalar(
            select(func.count(WishlistItem.id)).where(WishlistItem.wishlist_id == wishlist.id)
        ) or 0

    async def has_item(self, wishlist: Wishlist, product_id: str) -> bool:
        existing = await self.db.scalar(
            select(WishlistItem.id).where(
                WishlistItem.wishlist_id == wishlist.id,
                WishlistItem.product_id == product_id,
            )
        )
        return existing is not None

    async def ensure_item(self, wishlist: Wishlist, product_id: str) -> bool:
        """Add the product unless present. Returns True when a row was created."""
        if await self.has_item(wishlist, product_id):
            return False

        self.db.add(WishlistItem(wishlist_id=wishlist.id, product_id=product_id))
        await self.db.flush()
        return True

    async def add_item(self, user_id: str, product_id: str) -> Wishlist:
        """
        Add product to wishlist

        Raises:
            NotFoundException: Unknown product
            WishlistLimitException: Wishlist is full
            DuplicateResourceException: Product already in wishlist
        """
        await self.product_service.get_product_or_404(product_id)

        wishlist = await self.get_or_create_wishlist(user_id)

        if await self.has_item(wishlist, product_id):
            raise DuplicateResourceException("Product already in wishlist")

        if await self.count_items(wishlist) >= wishlist.item_limit:
            raise WishlistLimitException(wishlist.item_limit)

        self.db.add(WishlistItem(wishlist_id=wishlist.id, product_id=product_id))

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateResourceException("Product already in wishlist")

        return await self.get_wishlist(user_id)

    async def remove_item(self, user_id: str, product_id: str) -> Wishlist:
        item = await self.db.scalar(
            select(WishlistItem)
            .join(Wishlist, Wishlist.id == WishlistItem.wishlist_id)
            .where(Wishlist.user_id == user_id, WishlistItem.product_id == product_id)
        )
        if not item:
            raise NotFoundException("Item not found in wishlist")

        await self.db.delete(item)
        await self.db.commit()
        return await self.get_wishlist(user_id)

    @staticmethod
    def to_response(wishlist: Optional[Wishlist]) -> WishlistResponse:
        if wishlist is None:
            return WishlistResponse(item_limit=settings.WISHLIST_ITEM_LIMIT)
        return WishlistResponse(
            id=wishlist.id,
            item_limit=wishlist.item_limit,
            items=[WishlistItemResponse.model_validate(item) for item in wishlist.items],
        )
