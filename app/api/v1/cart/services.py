"""
Cart service layer
One cart per user, one line per product
"""

import logging
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.orm import selectinload

from app.models import Cart, CartItem
from app.core.exceptions import NotFoundException
from app.api.v1.products.services import ProductService
from .schemas import CartResponse, CartItemResponse

logger = logging.getLogger(__name__)

class CartService:
    """Cart service for business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.product_service = ProductService(db)

    async def get_cart(self, user_id: str) -> Optional[Cart]:
        """Get the user's cart with items and products loaded"""
        result = await self.db.execute(
            select(Cart)
            .options(selectinload(Cart.items).selectinload(CartItem.product))
            .where(Cart.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_create_cart(self, user_id: str) -> Cart:
        """Lazily create the user's cart"""
        cart = await self.db.scalar(select(Cart).where(Cart.user_id == user_id))
        if cart is None:
            cart = Cart(user_id=user_id)
            self.db.add(cart)
            await self.db.flush()
        return cart

    async def upsert_item(self, cart: Cart, product_id: str, quantity: int) -> CartItem:
        """Increment the existing line for the product, or create one"""
        item = await self.db.scalar(
            select(CartItem).where(CartItem.cart_id == cart.id, CartItem.product_id == product_id)
        )
        if item:
            item.quantity += quantity
        else:
            item = CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity)
            self.db.add(item)

        await self.db.flush()
        return item

    async def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> Cart:
        """
        Add product to the user's cart

        Raises:
            NotFoundException: Product missing or unavailable
        """
        product = await self.product_service.get_product(product_id)
        if not product or not product.availability:
            raise NotFoundException("Product not found or unavailable", error_code="PRODUCT_NOT_FOUND")

        cart = await self.get_or_create_cart(user_id)
        await self.upsert_item(cart, product_id, quantity)
        await self.db.commit()

        return await self.get_cart(user_id)

    async def _get_item_or_404(self, user_id: str, product_id: str) -> CartItem:
        item = await self.db.scalar(
            select(CartItem)
            .join(Cart, Cart.id == CartItem.cart_id)
            .where(Cart.user_id == user_id, CartItem.product_id == product_id)
        )
        if not item:
            raise NotFoundException("Item not found in cart")
        return item

    async def update_item(self, user_id: str, product_id: str, quantity: int) -> Cart:
        item = await self._get_item_or_404(user_id, product_id)
        item.quantity = quantity
        await self.db.commit()
        return await self.get_cart(user_id)

    async def remove_item(self, user_id: str, product_id: str) -> Cart:
        item = await self._get_item_or_404(user_id, product_id)
        await self.db.delete(item)
        await self.db.commit()
        return await self.get_cart(user_id)

    async def clear_cart(self, user_id: str) -> int:
        """
        Delete every line of the user's cart

        Runs inside the caller's transaction; does not commit.
        """
        cart_ids = select(Cart.id).where(Cart.user_id == user_id).scalar_subquery()
        result = await self.db.execute(delete(CartItem).where(CartItem.cart_id.in_(cart_ids)))
        if result.rowcount:
            logger.info("Cleared %s cart items for user %s", result.rowcount, user_id)
        return result.rowcount or 0

    @staticmethod
    def to_response(cart: Optional[Cart]) -> CartResponse:
        """Cart shape with totals at current catalog prices"""
        if cart is None:
            return CartResponse()

        items = [CartItemResponse.model_validate(item) for item in cart.items]
        subtotal = sum(
            (Decimal(item.product.price) * item.quantity for item in cart.items if item.product),
            Decimal("0"),
        )
        return CartResponse(
            id=cart.id,
            items=items,
            total_items=sum(item.quantity for item in cart.items),
            subtotal=subtotal,
        )
