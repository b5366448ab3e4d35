"""Pydantic schemas for order placement, status changes and comments."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from bff.models.order import ORDER_STATUSES, Actor

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderLine(BaseModel):
    model_config = _camel

    product_id: str
    quantity: int

    @field_validator("quantity")
    @classmethod
    def _quantity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1")
        return v


class PaymentDetails(BaseModel):
    """Payment data as submitted at checkout; only a masked copy is stored."""

    model_config = _camel

    card_number: str = ""
    card_holder: str = ""
    expiry_month: int | None = None
    expiry_year: int | None = None
    cvv: str | None = None
    payment_method: Literal["card", "paypal", "cash_on_delivery"] = "card"


class OrderCreate(BaseModel):
    model_config = _camel

    user_id: str
    items: list[OrderLine]
    delivery_address: str | None = None
    address_id: str | None = None
    payment_info: PaymentDetails | None = None
    payment_status: Literal["pending", "approved"] = "pending"
    supplier_id: str | None = None

    @field_validator("items")
    @classmethod
    def _items(cls, v: list[OrderLine]) -> list[OrderLine]:
        if not v:
            raise ValueError("Order must contain at least one item")
        return v

    @model_validator(mode="after")
    def _address(self) -> "OrderCreate":
        if self.delivery_address is not None:
            self.delivery_address = self.delivery_address.strip()
        if not self.delivery_address and not self.address_id:
            raise ValueError("Delivery address is required")
        return self


class OrderStatusUpdate(BaseModel):
    status: str
    actor: Actor | None = None

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        if v not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status '{v}'")
        return v


class OrderCommentCreate(BaseModel):
    model_config = _camel

    text: str
    is_system: bool = False
    actor: Actor | None = None

    @field_validator("text")
    @classmethod
    def _text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment text must not be empty")
        if len(v) > 1000:
            raise ValueError("Comment must not exceed 1000 characters")
        return v
