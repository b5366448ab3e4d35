"""Pydantic schemas for cart mutations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from bff.models.cart import CartItem


class CartItemAdd(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: str
    quantity: int = 1

    @field_validator("product_id")
    @classmethod
    def _product_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product ID is required")
        return v

    @field_validator("quantity")
    @classmethod
    def _quantity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1")
        return v


class CartReplace(BaseModel):
    items: list[CartItem]

    @field_validator("items")
    @classmethod
    def _items(cls, v: list[CartItem]) -> list[CartItem]:
        if any(item.quantity < 1 for item in v):
            raise ValueError("Quantity must be at least 1")
        return v
