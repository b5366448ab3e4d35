"""
Cart endpoints — one cart per user under /users/{user_id}/cart.

Lines are unique per product; adding a product already in the cart
accumulates its quantity. Stock is not checked here.
"""

from __future__ import annotations

import logging

from bff.api.routing import Access, RequestContext, RouteTable
from bff.core.responses import Envelope, ok
from bff.models.base import utcnow
from bff.models.cart import Cart, CartItem
from bff.repositories.carts import CartRepository
from bff.schemas.cart import CartItemAdd, CartReplace

router = RouteTable(prefix="/users/{user_id}/cart", tags=["cart"])
logger = logging.getLogger(__name__)


def merge_lines(items: list[CartItem]) -> list[CartItem]:
    """Collapse duplicate product lines, summing quantities, first occurrence wins position."""
    merged: dict[str, CartItem] = {}
    for item in items:
        if item.product_id in merged:
            merged[item.product_id].quantity += item.quantity
        else:
            merged[item.product_id] = item.model_copy()
    return list(merged.values())


class CartHandler:
    def __init__(self, carts: CartRepository) -> None:
        self.carts = carts

    async def get(self, user_id: str) -> Cart:
        cart = await self.carts.get_by_user_id(user_id)
        return cart if cart is not None else Cart(user_id=user_id)

    async def replace(self, user_id: str, items: list[CartItem]) -> Cart:
        cart = Cart(user_id=user_id, items=merge_lines(items))
        await self.carts.update_full(cart)
        logger.info("Replaced cart for user %s (%d lines)", user_id, len(cart.items))
        return cart

    async def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> Cart:
        cart = await self.get(user_id)
        cart.items = merge_lines([*cart.items, CartItem(product_id=product_id, quantity=quantity)])
        cart.updated_at = utcnow()
        await self.carts.update_full(cart)
        logger.info("Cart %s: +%d x %s", user_id, quantity, product_id)
        return cart

    async def remove_item(self, user_id: str, product_id: str) -> Cart:
        cart = await self.get(user_id)
        cart.items = [item for item in cart.items if item.product_id != product_id]
        cart.updated_at = utcnow()
        await self.carts.update_full(cart)
        logger.info("Cart %s: removed %s", user_id, product_id)
        return cart

    async def clear(self, user_id: str) -> None:
        await self.carts.clear(user_id)
        logger.info("Cleared cart for user %s", user_id)


@router.get("", access=Access.OWNER, failure="Failed to fetch cart")
async def get_cart(ctx: RequestContext) -> Envelope:
    return ok(await ctx.handlers.carts.get(ctx.path_params["user_id"]))


@router.put("", delay=True, access=Access.OWNER, failure="Failed to update cart")
async def replace_cart(ctx: RequestContext) -> Envelope:
    body = ctx.parse(CartReplace)
    return ok({"cart": await ctx.handlers.carts.replace(ctx.path_params["user_id"], body.items)})


@router.delete("", delay=True, access=Access.OWNER, failure="Failed to clear cart")
async def clear_cart(ctx: RequestContext) -> Envelope:
    await ctx.handlers.carts.clear(ctx.path_params["user_id"])
    return ok({"cart": Cart(user_id=ctx.path_params["user_id"])})


@router.post("/items", delay=True, access=Access.OWNER, failure="Failed to add item to cart")
async def add_cart_item(ctx: RequestContext) -> Envelope:
    body = ctx.parse(CartItemAdd)
    cart = await ctx.handlers.carts.add_item(ctx.path_params["user_id"], body.product_id, body.quantity)
    return ok({"cart": cart})


@router.delete(
    "/items/{product_id}", delay=True, access=Access.OWNER, failure="Failed to remove item from cart"
)
async def remove_cart_item(ctx: RequestContext) -> Envelope:
    cart = await ctx.handlers.carts.remove_item(
        ctx.path_params["user_id"], ctx.path_params["product_id"]
    )
    return ok({"cart": cart})
