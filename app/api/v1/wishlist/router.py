"""Wishlist router"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_current_user
from .schemas import WishlistItemRequest, WishlistEnvelope
from .services import WishlistService

router = APIRouter()

@router.post("/add", response_model=WishlistEnvelope)
async def add_to_wishlist(
    data: WishlistItemRequest,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    wishlist = await service.add_item(current_user["id"], data.product_id)
    return WishlistEnvelope(message="Added to wishlist", wishlist=service.to_response(wishlist))

@router.get("/get", response_model=WishlistEnvelope)
async def get_wishlist(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    wishlist = await service.get_wishlist(current_user["id"])
    return WishlistEnvelope(message="Wishlist retrieved successfully", wishlist=service.to_response(wishlist))

@router.delete("/remove", response_model=WishlistEnvelope)
async def remove_from_wishlist(
    data: WishlistItemRequest,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    wishlist = await service.remove_item(current_user["id"], data.product_id)
    return WishlistEnvelope(message="Removed from wishlist", wishlist=service.to_response(wishlist))
