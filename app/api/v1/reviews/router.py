"""
Review API routes
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_current_user
from app.core.config import settings
from .schemas import ReviewCreate, ReviewAddResponse, ReviewListResponse, ReviewResponse
from .services import ReviewService

router = APIRouter()

@router.post(
    "/add",
    response_model=ReviewAddResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add review"
)
async def add_review(
    data: ReviewCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ReviewService(db)
    review, average = await service.add_review(
        user_id=current_user["id"],
        product_id=data.product_id,
        rating=data.rating,
        comment=data.comment,
    )
    return ReviewAddResponse(review=ReviewResponse.model_validate(review), average_rating=average)

@router.get(
    "/product/{product_id}",
    response_model=ReviewListResponse,
    summary="List product reviews"
)
async def list_product_reviews(
    product_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(3, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    service = ReviewService(db)
    result = await service.list_reviews(product_id, page=page, limit=limit)
    return ReviewListResponse(
        reviews=[ReviewResponse.model_validate(r) for r in result.items],
        average_rating=await service.average_rating(product_id),
        total_reviews=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )
