"""Pydantic schemas for saved addresses and payment methods."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)
_LAST4_RE = re.compile(r"^\d{4}$")


# ── Address ─────────────────────────────────────────────────────────
class AddressCreate(BaseModel):
    model_config = _camel

    label: str | None = None
    recipient_name: str = ""
    address_line1: str = ""
    address_line2: str | None = None
    city: str = ""
    postal_code: str = ""
    phone: str = ""
    is_default: bool | None = None


class AddressUpdate(BaseModel):
    model_config = _camel

    label: str | None = None
    recipient_name: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    postal_code: str | None = None
    phone: str | None = None
    is_default: bool | None = None


# ── Payment method ──────────────────────────────────────────────────
class PaymentMethodCreate(BaseModel):
    model_config = _camel

    type: Literal["card", "paypal"] = "card"
    last4_digits: str | None = None
    card_number: str | None = None  # full number accepted, only last 4 kept
    cardholder_name: str | None = None
    expiry_month: str | None = None
    expiry_year: str | None = None
    paypal_email: str | None = None
    is_default: bool | None = None

    @model_validator(mode="after")
    def _sanitise(self) -> "PaymentMethodCreate":
        if self.type == "paypal":
            if not (self.paypal_email or "").strip():
                raise ValueError("PayPal email is required")
            return self
        if self.card_number:
            digits = re.sub(r"\D", "", self.card_number)
            self.last4_digits = digits[-4:] if len(digits) >= 4 else self.last4_digits
            self.card_number = None
        if self.last4_digits is not None and not _LAST4_RE.match(self.last4_digits):
            raise ValueError("Card must be identified by its last 4 digits")
        return self


class PaymentMethodUpdate(BaseModel):
    model_config = _camel

    cardholder_name: str | None = None
    expiry_month: str | None = None
    expiry_year: str | None = None
    paypal_email: str | None = None
    is_default: bool | None = None

    @field_validator("expiry_month")
    @classmethod
    def _month(cls, v: str | None) -> str | None:
        if v is not None and not (v.isdigit() and 1 <= int(v) <= 12):
            raise ValueError("Expiry month must be between 1 and 12")
        return v
