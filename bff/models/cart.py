"""Cart model — one cart per user, keyed by ``userId``."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from bff.models.base import Document, utcnow


class CartItem(Document):
    product_id: str
    quantity: int
    name: str | None = None
    price: float | None = None


class Cart(Document):
    user_id: str
    items: list[CartItem] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utcnow)
