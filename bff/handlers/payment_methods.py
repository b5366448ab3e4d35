"""
Saved payment methods under /users/{user_id}/payment-methods.

Only masked card data is kept: last 4 digits, holder and expiry.
"""

from __future__ import annotations

from bff.api.routing import Access, RequestContext, RouteTable
from bff.core.responses import Envelope, created, no_content, ok
from bff.handlers.defaults import DefaultRecordHandler, normalise
from bff.models.account import PaymentMethod
from bff.schemas.account import PaymentMethodCreate, PaymentMethodUpdate

router = RouteTable(prefix="/users/{user_id}/payment-methods", tags=["payment-methods"])


class PaymentMethodHandler(DefaultRecordHandler[PaymentMethod]):
    noun = "payment method"
    model = PaymentMethod

    def identity(self, record: PaymentMethod) -> tuple:
        if record.type == "paypal":
            return ("paypal", normalise(record.paypal_email))
        return (
            "card",
            normalise(record.last4_digits),
            normalise(record.cardholder_name),
            normalise(record.expiry_month),
            normalise(record.expiry_year),
        )


@router.get("", access=Access.OWNER, failure="Failed to fetch payment methods")
async def list_payment_methods(ctx: RequestContext) -> Envelope:
    methods = await ctx.handlers.payment_methods.list_for_user(ctx.path_params["user_id"])
    return ok({"paymentMethods": methods})


@router.post("", delay=True, access=Access.OWNER, failure="Failed to create payment method")
async def create_payment_method(ctx: RequestContext) -> Envelope:
    body = ctx.parse(PaymentMethodCreate)
    method, is_new = await ctx.handlers.payment_methods.create(
        ctx.path_params["user_id"], body.model_dump(exclude={"card_number"})
    )
    return created({"paymentMethod": method}) if is_new else ok({"paymentMethod": method})


@router.patch(
    "/{method_id}", delay=True, access=Access.OWNER, failure="Failed to update payment method"
)
async def update_payment_method(ctx: RequestContext) -> Envelope:
    updates = ctx.parse(PaymentMethodUpdate).model_dump(exclude_unset=True, exclude_none=True, by_alias=True)
    method = await ctx.handlers.payment_methods.update(
        ctx.path_params["user_id"], ctx.path_params["method_id"], updates
    )
    return ok({"paymentMethod": method})


@router.delete(
    "/{method_id}", delay=True, access=Access.OWNER, failure="Failed to delete payment method"
)
async def delete_payment_method(ctx: RequestContext) -> Envelope:
    await ctx.handlers.payment_methods.delete(ctx.path_params["user_id"], ctx.path_params["method_id"])
    return no_content()
