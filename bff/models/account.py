"""
Saved account records — delivery addresses and payment methods.

At most one record of each kind per user carries ``is_default``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from bff.models.base import Document, new_id, utcnow


class Address(Document):
    id: str = Field(default_factory=new_id)
    user_id: str
    label: str = "Home"
    recipient_name: str = ""
    address_line1: str = ""
    address_line2: str | None = None
    city: str = ""
    postal_code: str = ""
    phone: str = ""
    is_default: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def as_text(self) -> str:
        """Single-line snapshot used as an order's delivery address."""
        street = ", ".join(part for part in (self.address_line1, self.address_line2) if part)
        return f"{self.recipient_name}, {street}, {self.postal_code} {self.city}, {self.phone}"


class PaymentMethod(Document):
    id: str = Field(default_factory=new_id)
    user_id: str
    type: Literal["card", "paypal"] = "card"
    last4_digits: str | None = None
    cardholder_name: str | None = None
    expiry_month: str | None = None
    expiry_year: str | None = None
    paypal_email: str | None = None
    is_default: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
