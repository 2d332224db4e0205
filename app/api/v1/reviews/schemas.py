"""Review schemas"""

from typing import List, Optional
from datetime import datetime
from pydantic import Field

from app.schemas.base import BaseSchema

class ReviewCreate(BaseSchema):
    product_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field("", max_length=2000)

class ReviewAuthor(BaseSchema):
    id: str
    name: str

class ReviewResponse(BaseSchema):
    id: str
    product_id: str
    user_id: str
    rating: int
    comment: str
    created_at: datetime
    user: Optional[ReviewAuthor] = None

class ReviewAddResponse(BaseSchema):
    success: bool = True
    message: str = "Review added successfully"
    review: ReviewResponse
    average_rating: float

class ReviewListResponse(BaseSchema):
    success: bool = True
    message: str = "Reviews retrieved successfully"
    reviews: List[ReviewResponse]
    average_rating: float
    total_reviews: int
    page: int
    limit: int
    pages: int
