"""
Product service layer
Read path of the catalog: the single source of truth for price and availability
"""

from typing import Dict, Iterable, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.orm import selectinload

from app.models import Product, Review
from app.core.exceptions import NotFoundException
from app.utils.pagination import paginate, Page

class ProductService:
    """Catalog lookups"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_product(self, product_id: str) -> Optional[Product]:
        """Get product by ID, or None"""
        if not product_id:
            return None
        return await self.db.get(Product, product_id)

    async def get_product_or_404(self, product_id: str) -> Product:
        product = await self.get_product(product_id)
        if not product:
            raise NotFoundException("Product not found", error_code="PRODUCT_NOT_FOUND")
        return product

    async def get_products_by_ids(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        """Batch fetch products keyed by id; unknown ids are simply absent"""
        ids = {pid for pid in product_ids if pid}
        if not ids:
            return {}

        result = await self.db.execute(select(Product).where(Product.id.in_(ids)))
        return {product.id: product for product in result.scalars().all()}

    async def get_product_detail(self, product_id: str) -> Product:
        """Get product with reviews loaded"""
        result = await self.db.execute(
            select(Product)
            .options(selectinload(Product.reviews).selectinload(Review.user))
            .where(Product.id == product_id)
        )
        product = result.scalar_one_or_none()

        if not product:
            raise NotFoundException("Product not found", error_code="PRODUCT_NOT_FOUND")

        return product

    async def list_products(
        self,
        category: Optional[str] = None,
        bestseller: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Page:
        """List available products, newest first"""
        query = select(Product).where(Product.availability.is_(True))

        if category:
            query = query.where(Product.category == category)

        if bestseller is not None:
            query = query.where(Product.bestseller.is_(bestseller))

        if search:
            term = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Product.name.ilike(term),
                    Product.author.ilike(term),
                    Product.category.ilike(term),
                    Product.description.ilike(term),
                )
            )

        query = query.order_by(Product.created_at.desc())

        return await paginate(self.db, query, page, limit)
