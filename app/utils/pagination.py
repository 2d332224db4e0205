"""
Pagination utilities
"""

from typing import List, Any
from pydantic import BaseModel, Field
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.core.config import settings

class PaginationParams(BaseModel):
    """Pagination parameters"""
    page: int = Field(1, ge=1, description="Page number")
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size")

class Page(BaseModel):
    """Result of a paginated query"""
    items: List[Any]
    total: int
    page: int
    limit: int
    pages: int

async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    limit: int = 10
) -> Page:
    """
    Paginate query results

    Args:
        db: Database session
        query: SQLAlchemy select of ORM entities
        page: Page number, 1-based
        limit: Page size

    Returns:
        Page holding the ORM rows of the requested slice
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = await db.scalar(count_query) or 0

    pages = (total + limit - 1) // limit

    offset = (page - 1) * limit
    result = await db.execute(query.offset(offset).limit(limit))
    items = result.scalars().all()

    return Page(items=list(items), total=total, page=page, limit=limit, pages=pages)
