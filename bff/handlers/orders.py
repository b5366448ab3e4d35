"""
Order endpoints — placement, lookup, status workflow, comments, timeline.

Lifecycle:
    pending_payment → paid → warehouse → courier_pickup → in_transit → delivered
    (cancelled from any non-terminal state; delivered / cancelled are terminal)

Whether non-adjacent transitions are accepted is a settings choice
(ORDER_TRANSITION_POLICY): "free" takes any known status as a manual
override, "strict" only follows the edges above.
"""

from __future__ import annotations

import logging

from bff.api.routing import Access, RequestContext, RouteTable
from bff.core.exceptions import NotFoundError, ValidationError
from bff.core.pagination import PaginationParams, filter_by_search, paginated_response, parse_pagination_params
from bff.core.responses import Envelope, created, ok
from bff.models.base import utcnow
from bff.models.order import (
    Actor,
    Order,
    OrderComment,
    OrderItem,
    PaymentInfo,
    StatusChange,
    TimelineEntry,
    is_adjacent_transition,
)
from bff.repositories.account import AddressRepository
from bff.repositories.catalog import ProductRepository
from bff.repositories.orders import OrderRepository
from bff.schemas.order import OrderCommentCreate, OrderCreate, OrderStatusUpdate, PaymentDetails

router = RouteTable(tags=["orders"])
logger = logging.getLogger(__name__)


def mask_card_number(card_number: str) -> str:
    digits = "".join(ch for ch in card_number if ch.isdigit())
    return f"**** {digits[-4:]}" if digits else ""


def sanitize_payment(details: PaymentDetails) -> PaymentInfo:
    """Stored copy of checkout payment data: masked number, no CVV."""
    return PaymentInfo(
        card_number=mask_card_number(details.card_number),
        card_holder=details.card_holder.strip(),
        expiry_month=details.expiry_month,
        expiry_year=details.expiry_year,
        payment_method=details.payment_method,
    )


class OrderHandler:
    def __init__(
        self,
        orders: OrderRepository,
        products: ProductRepository,
        addresses: AddressRepository,
        transition_policy: str = "free",
    ) -> None:
        self.orders = orders
        self.products = products
        self.addresses = addresses
        self.transition_policy = transition_policy

    # ── Queries ───────────────────────────────────────────────────
    async def list_page(self, params: PaginationParams, status: str | None = None) -> dict:
        orders = await self.orders.get_by_status(status) if status else await self.orders.get_all()
        orders = filter_by_search(
            orders, params.search, lambda o: (o.id, o.user_id, o.delivery_address)
        )
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return paginated_response(orders, params)

    async def get(self, order_id: str) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    async def get_for_user(self, user_id: str) -> list[Order]:
        orders = await self.orders.get_by_user_id(user_id)
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    async def timeline(self, order_id: str) -> list[TimelineEntry]:
        order = await self.get(order_id)
        entries = [
            TimelineEntry(
                id=f"created-{order.id}",
                created_at=order.created_at,
                title="Order created",
                description="Order was placed by customer",
                actor=f"user:{order.user_id}",
                type="status",
            )
        ]
        for index, change in enumerate(order.status_history):
            entries.append(
                TimelineEntry(
                    id=f"status-{index}-{change.changed_at.isoformat()}",
                    created_at=change.changed_at,
                    title="Status changed",
                    description=f"{change.from_status} → {change.to_status}",
                    actor=change.actor.label,
                    type="status",
                )
            )
        for comment in order.comments:
            entries.append(
                TimelineEntry(
                    id=f"comment-{comment.id}",
                    created_at=comment.created_at,
                    title="System note" if comment.is_system else "Manager comment",
                    description=comment.text,
                    actor=comment.actor.label,
                    type="system" if comment.is_system else "comment",
                )
            )
        # Ties list the later-recorded event first.
        return sorted(reversed(entries), key=lambda e: e.created_at, reverse=True)

    # ── Mutations ─────────────────────────────────────────────────
    async def _delivery_address(self, body: OrderCreate) -> str:
        if body.delivery_address:
            return body.delivery_address
        address = await self.addresses.get_by_id(body.address_id)
        if address is None or address.user_id != body.user_id:
            raise ValidationError("Delivery address not found")
        return address.as_text()

    async def create(self, body: OrderCreate) -> Order:
        items: list[OrderItem] = []
        for line in body.items:
            product = await self.products.get_by_id(line.product_id)
            if product is None:
                raise ValidationError(f"Product {line.product_id} not found")
            items.append(
                OrderItem(product_id=product.id, quantity=line.quantity, price=product.price)
            )
        approved = body.payment_status == "approved"
        order = Order(
            user_id=body.user_id,
            status="paid" if approved else "pending_payment",
            payment_status=body.payment_status,
            items=items,
            total=round(sum(item.price * item.quantity for item in items), 2),
            delivery_address=await self._delivery_address(body),
            payment_info=sanitize_payment(body.payment_info) if body.payment_info else None,
            supplier_id=body.supplier_id,
        )
        await self.orders.create(order)
        logger.info("Created order %s for user %s (total=%.2f)", order.id, order.user_id, order.total)
        return order

    async def update_status(self, order_id: str, new_status: str, actor: Actor) -> Order:
        order = await self.get(order_id)
        if order.status == new_status:
            return order
        if self.transition_policy == "strict" and not is_adjacent_transition(order.status, new_status):
            raise ValidationError(f"Invalid transition from {order.status} to {new_status}")

        now = utcnow()
        order.status_history.append(
            StatusChange(from_status=order.status, to_status=new_status, actor=actor, changed_at=now)
        )
        if order.status == "pending_payment" and new_status != "cancelled" and order.payment_status == "pending":
            order.payment_status = "approved"
        previous, order.status, order.updated_at = order.status, new_status, now
        await self.orders.update_full(order)
        logger.info("Order %s: %s → %s by %s", order_id, previous, new_status, actor.label)
        return order

    async def add_comment(self, order_id: str, text: str, actor: Actor, is_system: bool = False) -> Order:
        order = await self.get(order_id)
        now = utcnow()
        order.comments.append(OrderComment(text=text, actor=actor, created_at=now, is_system=is_system))
        order.updated_at = now
        await self.orders.update_full(order)
        logger.info("Order %s: comment added by %s", order_id, actor.label)
        return order


def resolve_actor(ctx: RequestContext, fallback: Actor | None) -> Actor:
    """The logged-in user acts; anonymous callers must name an actor in the body."""
    user = ctx.current_user
    if user is not None:
        return Actor(id=user.id, role=user.role, email=user.email)
    if fallback is None:
        raise ValidationError("Actor is required")
    return fallback


@router.get("/orders", delay=True, access=Access.PRIVILEGED, failure="Failed to fetch orders")
async def list_orders(ctx: RequestContext) -> Envelope:
    params = parse_pagination_params(ctx.query_params, ctx.handlers.default_page_limit)
    status = ctx.query_params.get("status") or None
    return ok(await ctx.handlers.orders.list_page(params, status))


@router.post("/orders", delay=True, failure="Failed to create order")
async def create_order(ctx: RequestContext) -> Envelope:
    order = await ctx.handlers.orders.create(ctx.parse(OrderCreate))
    return created({"order": order})


@router.get("/orders/{order_id}/timeline", failure="Failed to fetch order timeline")
async def get_order_timeline(ctx: RequestContext) -> Envelope:
    order = await ctx.handlers.orders.get(ctx.path_params["order_id"])
    ctx.authorize_owner(order.user_id)
    return ok({"timeline": await ctx.handlers.orders.timeline(order.id)})


@router.get("/orders/{order_id}", failure="Failed to fetch order")
async def get_order(ctx: RequestContext) -> Envelope:
    order = await ctx.handlers.orders.get(ctx.path_params["order_id"])
    ctx.authorize_owner(order.user_id)
    return ok({"order": order})


@router.patch(
    "/orders/{order_id}/status",
    delay=True,
    access=Access.PRIVILEGED,
    failure="Failed to update order status",
)
async def update_order_status(ctx: RequestContext) -> Envelope:
    body = ctx.parse(OrderStatusUpdate)
    actor = resolve_actor(ctx, body.actor)
    order = await ctx.handlers.orders.update_status(ctx.path_params["order_id"], body.status, actor)
    return ok({"order": order})


@router.post(
    "/orders/{order_id}/comments",
    delay=True,
    access=Access.PRIVILEGED,
    failure="Failed to add order comment",
)
async def add_order_comment(ctx: RequestContext) -> Envelope:
    body = ctx.parse(OrderCommentCreate)
    actor = resolve_actor(ctx, body.actor)
    order = await ctx.handlers.orders.add_comment(
        ctx.path_params["order_id"], body.text, actor, body.is_system
    )
    return created({"order": order})


@router.get("/users/{user_id}/orders", delay=True, access=Access.OWNER, failure="Failed to fetch orders")
async def get_user_orders(ctx: RequestContext) -> Envelope:
    return ok({"orders": await ctx.handlers.orders.get_for_user(ctx.path_params["user_id"])})
