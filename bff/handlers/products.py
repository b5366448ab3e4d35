"""
Product endpoints — catalog listing, lookup, batch fetch and CRUD.

Responses carry ``categoryName`` (joined here) and ``imageUrls`` resolved
from stored file ids; a product never comes back with an empty image list.
A product referenced by any order cannot be deleted.
"""

from __future__ import annotations

import logging

from bff.api.routing import RequestContext, RouteTable
from bff.core.exceptions import ConflictError, NotFoundError, ValidationError
from bff.core.pagination import PaginationParams, apply_pagination, paginated_response, parse_pagination_params
from bff.core.responses import Envelope, created, ok
from bff.models.base import utcnow
from bff.models.catalog import Product
from bff.repositories.catalog import CategoryRepository, ProductRepository
from bff.repositories.files import FileRepository
from bff.repositories.orders import OrderRepository
from bff.schemas.catalog import ProductBatchRequest, ProductCreate, ProductUpdate

router = RouteTable(tags=["products"])
logger = logging.getLogger(__name__)


class ProductHandler:
    def __init__(
        self,
        products: ProductRepository,
        categories: CategoryRepository,
        orders: OrderRepository,
        files: FileRepository,
        placeholder_image_url: str,
    ) -> None:
        self.products = products
        self.categories = categories
        self.orders = orders
        self.files = files
        self.placeholder_image_url = placeholder_image_url

    # ── Response shaping ──────────────────────────────────────────
    async def category_names(self) -> dict[str, str]:
        return {c.id: c.name for c in await self.categories.get_all()}

    async def image_urls(self, product: Product) -> list[str]:
        resolved = await self.files.get_file_urls(product.image_ids)
        urls = [resolved[file_id] for file_id in product.image_ids if file_id in resolved]
        if not urls and product.image_url:
            urls = [product.image_url]
        return urls or [self.placeholder_image_url]

    async def to_response(self, product: Product, category_names: dict[str, str]) -> dict:
        body = product.model_dump(mode="json", by_alias=True, exclude_none=True)
        body["categoryName"] = category_names.get(product.category_id)
        body["imageUrls"] = await self.image_urls(product)
        return body

    # ── Queries ───────────────────────────────────────────────────
    async def list_page(self, params: PaginationParams, category_id: str | None = None) -> dict:
        products = await self.products.filter(category_id=category_id, search=params.search)
        page = paginated_response(products, params)
        names = await self.category_names()
        visible = apply_pagination(products, params.page, params.limit)
        page["data"] = [await self.to_response(p, names) for p in visible]
        return page

    async def get(self, product_id: str) -> Product:
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    async def get_many(self, product_ids: list[str]) -> list[dict]:
        """Products for the given ids, in request order; unknown ids are skipped."""
        names = await self.category_names()
        found = []
        for product_id in dict.fromkeys(product_ids):
            product = await self.products.get_by_id(product_id)
            if product is not None:
                found.append(await self.to_response(product, names))
        return found

    # ── Mutations ─────────────────────────────────────────────────
    async def _require_category(self, category_id: str) -> None:
        if await self.categories.get_by_id(category_id) is None:
            raise ValidationError("Category not found")

    async def create(self, body: ProductCreate) -> Product:
        await self._require_category(body.category_id)
        product = Product(**body.model_dump())
        await self.products.create(product)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    async def update(self, product_id: str, body: ProductUpdate) -> Product:
        await self.get(product_id)
        if body.category_id is not None:
            await self._require_category(body.category_id)
        updates = body.model_dump(exclude_unset=True, by_alias=True, mode="json")
        updates["updatedAt"] = utcnow().isoformat()
        product = await self.products.update(product_id, updates)
        logger.info("Updated product %s", product_id)
        return product

    async def delete(self, product_id: str) -> None:
        product = await self.get(product_id)
        # Full scan: order lines are not indexed by product.
        if any(order.references_product(product_id) for order in await self.orders.get_all()):
            raise ConflictError("Cannot delete product that is referenced by existing orders")
        for file_id in product.image_ids:
            await self.files.delete(file_id)
        await self.products.delete(product_id)
        logger.info("Deleted product %s (%d image files)", product_id, len(product.image_ids))


@router.get("/products", delay=True, failure="Failed to fetch products")
async def list_products(ctx: RequestContext) -> Envelope:
    params = parse_pagination_params(ctx.query_params, ctx.handlers.default_page_limit)
    category_id = ctx.query_params.get("categoryId") or None
    return ok(await ctx.handlers.products.list_page(params, category_id))


@router.post("/products/batch", failure="Failed to fetch products")
async def get_products_by_ids(ctx: RequestContext) -> Envelope:
    body = ctx.parse(ProductBatchRequest)
    return ok({"products": await ctx.handlers.products.get_many(body.product_ids)})


@router.get("/products/{product_id}", failure="Failed to fetch product")
async def get_product(ctx: RequestContext) -> Envelope:
    handler = ctx.handlers.products
    product = await handler.get(ctx.path_params["product_id"])
    names = await handler.category_names()
    return ok({"product": await handler.to_response(product, names)})


@router.post("/products", delay=True, failure="Failed to create product")
async def create_product(ctx: RequestContext) -> Envelope:
    handler = ctx.handlers.products
    product = await handler.create(ctx.parse(ProductCreate))
    return created(await handler.to_response(product, await handler.category_names()))


@router.put("/products/{product_id}", delay=True, failure="Failed to update product")
async def update_product(ctx: RequestContext) -> Envelope:
    handler = ctx.handlers.products
    product = await handler.update(ctx.path_params["product_id"], ctx.parse(ProductUpdate))
    return ok(await handler.to_response(product, await handler.category_names()))


@router.delete("/products/{product_id}", delay=True, failure="Failed to delete product")
async def delete_product(ctx: RequestContext) -> Envelope:
    await ctx.handlers.products.delete(ctx.path_params["product_id"])
    return ok({"success": True, "message": "Product deleted"})
