"""
Product catalog API routes
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.utils.dependencies import get_pagination_params
from app.utils.pagination import PaginationParams
from .schemas import ProductListResponse, ProductSingleResponse, ProductResponse, ProductDetailResponse, PaginationInfo
from .services import ProductService

router = APIRouter()

@router.get(
    "/list",
    response_model=ProductListResponse,
    summary="List products",
    description="Paginated list of available products"
)
async def list_products(
    category: Optional[str] = None,
    bestseller: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    page = await service.list_products(
        category=category,
        bestseller=bestseller,
        search=search,
        page=pagination.page,
        limit=pagination.limit
    )
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in page.items],
        pagination=PaginationInfo(page=page.page, limit=page.limit, total=page.total, pages=page.pages)
    )

@router.get(
    "/{product_id}",
    response_model=ProductSingleResponse,
    summary="Get product"
)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get product details with reviews"""
    service = ProductService(db)
    product = await service.get_product_detail(product_id)
    return ProductSingleResponse(product=ProductDetailResponse.model_validate(product))
