"""Cart router"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_current_user
from .schemas import CartItemAdd, CartItemUpdate, CartItemRemove, CartEnvelope
from .services import CartService

router = APIRouter()

@router.post("/add", response_model=CartEnvelope)
async def add_to_cart(
    item_data: CartItemAdd,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Add item to cart"""
    service = CartService(db)
    cart = await service.add_item(current_user["id"], item_data.product_id, item_data.quantity)
    return CartEnvelope(message="Item added to cart", cart=service.to_response(cart))

@router.get("/get", response_model=CartEnvelope)
async def get_cart(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.get_cart(current_user["id"])
    return CartEnvelope(message="Cart retrieved successfully", cart=service.to_response(cart))

@router.post("/update", response_model=CartEnvelope)
async def update_cart_item(
    item_data: CartItemUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.update_item(current_user["id"], item_data.product_id, item_data.quantity)
    return CartEnvelope(message="Cart updated", cart=service.to_response(cart))

@router.post("/remove", response_model=CartEnvelope)
async def remove_from_cart(
    item_data: CartItemRemove,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.remove_item(current_user["id"], item_data.product_id)
    return CartEnvelope(message="Item removed from cart", cart=service.to_response(cart))
