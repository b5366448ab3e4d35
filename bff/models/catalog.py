"""
Catalog models — categories and products.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from bff.models.base import Document, new_id, utcnow

CATEGORY_NAME_MAX = 32
CATEGORY_DESCRIPTION_MAX = 128


class Category(Document):
    id: str = Field(default_factory=new_id)
    name: str
    description: str


class ProductSpecification(Document):
    name: str
    value: str


class Product(Document):
    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    price: float
    category_id: str
    stock: int = 0
    image_ids: list[str] = Field(default_factory=list)  # ids in the files collection
    specifications: list[ProductSpecification] = Field(default_factory=list)
    image_url: str | None = None  # legacy single-image field
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None
