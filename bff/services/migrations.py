"""
Bootstrap-time data migrations.

Works on raw store records rather than models: legacy rows may carry
values the current models reject (old status names, missing arrays).
"""

from __future__ import annotations

import logging

from bff.db.store import Store
from bff.models.base import utcnow

logger = logging.getLogger(__name__)

LEGACY_STATUS_MAP = {
    "queue": "pending_payment",
    "processing": "warehouse",
    "completed": "delivered",
    "canceled": "cancelled",
}
MIGRATION_ACTOR = {"id": "system-migration", "role": "admin", "email": "migration@local"}
MIGRATION_COMMENT = "Legacy migration applied: order status/payment normalized"


def normalise_order(record: dict, now: str) -> dict | None:
    """Return the migrated record, or None when it is already current."""
    raw_status = str(record.get("status"))
    status = LEGACY_STATUS_MAP.get(raw_status, raw_status)
    payment = record.get("paymentStatus") or ("pending" if status == "pending_payment" else "approved")

    if status == "pending_payment" and payment == "approved":
        status = "paid"
    if payment == "pending" and status not in ("pending_payment", "cancelled"):
        payment = "approved"

    status_changed = status != raw_status
    payment_changed = payment != record.get("paymentStatus")
    history = record.get("statusHistory")
    comments = record.get("comments")
    arrays_missing = not isinstance(history, list) or not isinstance(comments, list)
    if not (status_changed or payment_changed or arrays_missing):
        return None

    history = list(history) if isinstance(history, list) else []
    comments = list(comments) if isinstance(comments, list) else []

    if status_changed and not any(
        entry.get("actor", {}).get("id") == MIGRATION_ACTOR["id"]
        and entry.get("fromStatus") == raw_status
        and entry.get("toStatus") == status
        for entry in history
    ):
        history.append(
            {"fromStatus": raw_status, "toStatus": status, "changedAt": now, "actor": dict(MIGRATION_ACTOR)}
        )

    if (status_changed or payment_changed) and not any(
        c.get("text") == MIGRATION_COMMENT for c in comments
    ):
        comments.append(
            {
                "id": f"migration-{record.get('id')}",
                "text": MIGRATION_COMMENT,
                "createdAt": now,
                "actor": dict(MIGRATION_ACTOR),
                "isSystem": True,
            }
        )

    return {
        **record,
        "status": status,
        "paymentStatus": payment,
        "statusHistory": history,
        "comments": comments,
        "updatedAt": now,
    }


async def migrate_legacy_orders(store: Store) -> int:
    """Normalise legacy order rows in place. Returns how many were rewritten."""
    now = utcnow().isoformat()
    migrated = 0
    for record in await store.get_all("orders"):
        updated = normalise_order(record, now)
        if updated is None:
            continue
        await store.put("orders", updated, mode="upsert")
        migrated += 1
    if migrated:
        logger.info("Migrated %d legacy orders", migrated)
    return migrated
