"""
Saved delivery addresses under /users/{user_id}/addresses.

Re-submitting an address already on file updates that entry in place
(200) instead of adding a second copy (201).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bff.api.routing import Access, RequestContext, RouteTable
from bff.core.responses import Envelope, created, no_content, ok
from bff.handlers.defaults import DefaultRecordHandler, normalise
from bff.models.account import Address
from bff.schemas.account import AddressCreate, AddressUpdate

router = RouteTable(prefix="/users/{user_id}/addresses", tags=["addresses"])


class AddressHandler(DefaultRecordHandler[Address]):
    noun = "address"
    model = Address

    def identity(self, record: Address) -> tuple:
        return (
            normalise(record.recipient_name),
            normalise(record.address_line1),
            normalise(record.address_line2),
            normalise(record.city),
            normalise(record.postal_code),
            normalise(record.phone),
        )

    def merge_duplicate(self, duplicate: Address, fields: Mapping[str, Any]) -> dict:
        updates = super().merge_duplicate(duplicate, fields)
        if fields.get("label"):
            updates["label"] = fields["label"]
        return updates


@router.get("", access=Access.OWNER, failure="Failed to fetch addresses")
async def list_addresses(ctx: RequestContext) -> Envelope:
    return ok({"addresses": await ctx.handlers.addresses.list_for_user(ctx.path_params["user_id"])})


@router.post("", delay=True, access=Access.OWNER, failure="Failed to create address")
async def create_address(ctx: RequestContext) -> Envelope:
    body = ctx.parse(AddressCreate)
    address, is_new = await ctx.handlers.addresses.create(ctx.path_params["user_id"], body.model_dump())
    return created({"address": address}) if is_new else ok({"address": address})


@router.patch("/{address_id}", delay=True, access=Access.OWNER, failure="Failed to update address")
async def update_address(ctx: RequestContext) -> Envelope:
    updates = ctx.parse(AddressUpdate).model_dump(exclude_unset=True, exclude_none=True, by_alias=True)
    address = await ctx.handlers.addresses.update(
        ctx.path_params["user_id"], ctx.path_params["address_id"], updates
    )
    return ok({"address": address})


@router.delete("/{address_id}", delay=True, access=Access.OWNER, failure="Failed to delete address")
async def delete_address(ctx: RequestContext) -> Envelope:
    await ctx.handlers.addresses.delete(ctx.path_params["user_id"], ctx.path_params["address_id"])
    return no_content()
