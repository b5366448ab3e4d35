"""
Category endpoints — CRUD with search + pagination.

A category that still has products cannot be deleted.
"""

from __future__ import annotations

import logging

from bff.api.routing import RequestContext, RouteTable
from bff.core.exceptions import NotFoundError, ValidationError
from bff.core.pagination import PaginationParams, filter_by_search, paginated_response, parse_pagination_params
from bff.core.responses import Envelope, created, no_content, ok
from bff.models.catalog import Category
from bff.repositories.catalog import CategoryRepository, ProductRepository
from bff.schemas.catalog import CategoryCreate, CategoryUpdate

router = RouteTable(tags=["categories"])
logger = logging.getLogger(__name__)


class CategoryHandler:
    def __init__(self, categories: CategoryRepository, products: ProductRepository) -> None:
        self.categories = categories
        self.products = products

    async def list_page(self, params: PaginationParams) -> dict:
        categories = filter_by_search(
            await self.categories.get_all(), params.search, lambda c: (c.name, c.description)
        )
        return paginated_response(categories, params)

    async def get(self, category_id: str) -> Category:
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def create(self, body: CategoryCreate) -> Category:
        category = Category(name=body.name, description=body.description)
        await self.categories.create(category)
        logger.info("Created category %s (%s)", category.id, category.name)
        return category

    async def update(self, category_id: str, body: CategoryUpdate) -> Category:
        updates = body.model_dump(exclude_unset=True, exclude_none=True)
        if await self.categories.get_by_id(category_id) is None:
            raise NotFoundError("Category not found")
        category = await self.categories.update(category_id, updates)
        logger.info("Updated category %s", category_id)
        return category

    async def delete(self, category_id: str) -> None:
        # Check-then-delete spans two collections; nothing locks them together.
        if await self.products.get_by_category_id(category_id):
            raise ValidationError("Cannot delete category with existing products")
        await self.get(category_id)
        await self.categories.delete(category_id)
        logger.info("Deleted category %s", category_id)


@router.get("/categories", delay=True, failure="Failed to fetch categories")
async def list_categories(ctx: RequestContext) -> Envelope:
    params = parse_pagination_params(ctx.query_params, ctx.handlers.default_page_limit)
    return ok(await ctx.handlers.categories.list_page(params))


@router.post("/categories", delay=True, failure="Failed to create category")
async def create_category(ctx: RequestContext) -> Envelope:
    category = await ctx.handlers.categories.create(ctx.parse(CategoryCreate))
    return created(category)


@router.get("/categories/{category_id}", failure="Failed to fetch category")
async def get_category(ctx: RequestContext) -> Envelope:
    return ok(await ctx.handlers.categories.get(ctx.path_params["category_id"]))


@router.put("/categories/{category_id}", delay=True, failure="Failed to update category")
async def update_category(ctx: RequestContext) -> Envelope:
    category = await ctx.handlers.categories.update(
        ctx.path_params["category_id"], ctx.parse(CategoryUpdate)
    )
    return ok(category)


@router.delete("/categories/{category_id}", delay=True, failure="Failed to delete category")
async def delete_category(ctx: RequestContext) -> Envelope:
    await ctx.handlers.categories.delete(ctx.path_params["category_id"])
    return no_content()
