"""
Order model — lifecycle state machine, audit trail and comment log.

``items[].price`` and ``delivery_address`` are snapshots taken when the
order is placed; they never follow later product or address edits.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from bff.models.base import Document, new_id, utcnow

OrderStatus = Literal[
    "pending_payment",
    "paid",
    "warehouse",
    "courier_pickup",
    "in_transit",
    "delivered",
    "cancelled",
]
PaymentStatus = Literal["pending", "approved", "declined", "refunded"]

ORDER_STATUSES: tuple[str, ...] = (
    "pending_payment",
    "paid",
    "warehouse",
    "courier_pickup",
    "in_transit",
    "delivered",
    "cancelled",
)
TERMINAL_STATUSES = frozenset({"delivered", "cancelled"})

# Forward edges of the lifecycle; cancelled is reachable from any non-terminal state.
NEXT_STATUS: dict[str, str] = {
    "pending_payment": "paid",
    "paid": "warehouse",
    "warehouse": "courier_pickup",
    "courier_pickup": "in_transit",
    "in_transit": "delivered",
}


def is_adjacent_transition(from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATUSES:
        return False
    return to_status == "cancelled" or NEXT_STATUS.get(from_status) == to_status


class Actor(Document):
    id: str
    role: str
    email: str | None = None

    @property
    def label(self) -> str:
        return self.email or f"{self.role}:{self.id}"


class OrderItem(Document):
    product_id: str
    quantity: int
    price: float  # unit price at order time


class PaymentInfo(Document):
    card_number: str = ""  # masked, e.g. "**** 4242"
    card_holder: str = ""
    expiry_month: int | None = None
    expiry_year: int | None = None
    payment_method: Literal["card", "paypal", "cash_on_delivery"] = "card"


class StatusChange(Document):
    from_status: str
    to_status: str
    actor: Actor
    changed_at: datetime = Field(default_factory=utcnow)


class OrderComment(Document):
    id: str = Field(default_factory=new_id)
    text: str
    actor: Actor
    created_at: datetime = Field(default_factory=utcnow)
    is_system: bool = False


class Order(Document):
    id: str = Field(default_factory=new_id)
    user_id: str
    status: OrderStatus = "pending_payment"
    payment_status: PaymentStatus = "pending"
    items: list[OrderItem] = Field(default_factory=list)
    total: float = 0.0
    delivery_address: str
    payment_info: PaymentInfo | None = None
    supplier_id: str | None = None
    estimated_delivery_date: datetime | None = None
    status_history: list[StatusChange] = Field(default_factory=list)
    comments: list[OrderComment] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def references_product(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.items)


class TimelineEntry(Document):
    id: str
    created_at: datetime
    title: str
    description: str
    actor: str
    type: Literal["system", "status", "comment"]
