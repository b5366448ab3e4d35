"""Pydantic schemas for Category / Product requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from bff.models.catalog import CATEGORY_DESCRIPTION_MAX, CATEGORY_NAME_MAX, ProductSpecification

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Category ────────────────────────────────────────────────────────
class CategoryCreate(BaseModel):
    name: str | None = None
    description: str | None = None

    @model_validator(mode="after")
    def _validate(self) -> "CategoryCreate":
        name = (self.name or "").strip()
        description = (self.description or "").strip()
        if not name or not description:
            raise ValueError("Name and description are required")
        if len(name) > CATEGORY_NAME_MAX:
            raise ValueError(f"Name must not exceed {CATEGORY_NAME_MAX} characters")
        if len(description) > CATEGORY_DESCRIPTION_MAX:
            raise ValueError(
                f"Description must not exceed {CATEGORY_DESCRIPTION_MAX} characters"
            )
        self.name, self.description = name, description
        return self


class CategoryUpdate(BaseModel):
    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        if len(v) > CATEGORY_NAME_MAX:
            raise ValueError(f"Name must not exceed {CATEGORY_NAME_MAX} characters")
        return v

    @field_validator("description")
    @classmethod
    def _description(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Description cannot be empty")
        if len(v) > CATEGORY_DESCRIPTION_MAX:
            raise ValueError(
                f"Description must not exceed {CATEGORY_DESCRIPTION_MAX} characters"
            )
        return v


# ── Product ─────────────────────────────────────────────────────────
class ProductCreate(BaseModel):
    model_config = _camel

    name: str
    description: str = ""
    price: float
    category_id: str
    stock: int = 0
    image_ids: list[str] = Field(default_factory=list)
    specifications: list[ProductSpecification] = Field(default_factory=list)
    image_url: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product name is required")
        if len(v) > 200:
            raise ValueError("Product name must not exceed 200 characters")
        return v

    @field_validator("description")
    @classmethod
    def _description(cls, v: str) -> str:
        return v.strip()

    @field_validator("price")
    @classmethod
    def _price(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Price must not be negative")
        return round(v, 2)

    @field_validator("stock")
    @classmethod
    def _stock(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock must not be negative")
        return v


class ProductUpdate(BaseModel):
    model_config = _camel

    name: str | None = None
    description: str | None = None
    price: float | None = None
    category_id: str | None = None
    stock: int | None = None
    image_ids: list[str] | None = None
    specifications: list[ProductSpecification] | None = None
    image_url: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Product name cannot be empty")
        return v

    @field_validator("price")
    @classmethod
    def _price(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("Price must not be negative")
        return v

    @field_validator("stock")
    @classmethod
    def _stock(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Stock must not be negative")
        return v


class ProductBatchRequest(BaseModel):
    model_config = _camel

    product_ids: list[str]
