"""
Review service layer
"""

import logging
from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from app.models import Review
from app.core.exceptions import DuplicateResourceException
from app.utils.pagination import paginate, Page
from app.utils.validators import sanitize_text
from app.api.v1.products.services import ProductService

logger = logging.getLogger(__name__)

class ReviewService:
    """One review per (product, user)"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.product_service = ProductService(db)

    async def average_rating(self, product_id: str) -> float:
        avg = await self.db.scalar(
            select(func.avg(Review.rating)).where(Review.product_id == product_id)
        )
        return round(float(avg), 1) if avg is not None else 0.0

    async def add_review(self, user_id: str, product_id: str, rating: int, comment: str) -> Tuple[Review, float]:
        """
        Add a review

        Raises:
            NotFoundException: Unknown product
            DuplicateResourceException: The user already reviewed this product
        """
        await self.product_service.get_product_or_404(product_id)

        existing = await self.db.scalar(
            select(Review.id).where(Review.product_id == product_id, Review.user_id == user_id)
        )
        if existing:
            raise DuplicateResourceException("You have already reviewed this product")

        review = Review(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            comment=sanitize_text(comment),
        )
        self.db.add(review)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateResourceException("You have already reviewed this product")

        review = await self.db.scalar(
            select(Review).options(selectinload(Review.user)).where(Review.id == review.id)
        )
        logger.info("Review %s added for product %s", review.id, product_id)

        return review, await self.average_rating(product_id)

    async def list_reviews(self, product_id: str, page: int = 1, limit: int = 3) -> Page:
        """Reviews for a product, newest first"""
        query = (
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc())
        )
        return await paginate(self.db, query, page, limit)
