from __future__ import annotations

from bff.models.catalog import Category, Product
from bff.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    collection = "categories"
    model = Category


class ProductRepository(BaseRepository[Product]):
    collection = "products"
    model = Product

    async def get_by_category_id(self, category_id: str) -> list[Product]:
        return await self._get_by_index("categoryId", category_id)

    async def filter(
        self, *, category_id: str | None = None, search: str | None = None
    ) -> list[Product]:
        """Products in ``category_id`` (if given) whose id or name contains ``search``."""
        if category_id:
            products = await self.get_by_category_id(category_id)
        else:
            products = await self.get_all()
        if search:
            needle = search.lower()
            products = [
                p for p in products if needle in p.id.lower() or needle in p.name.lower()
            ]
        return products
