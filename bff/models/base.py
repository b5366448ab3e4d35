"""
Shared base for stored entities.

Records travel camelCase (``categoryId``, ``isDefault``) both in the store
and on the wire; Python code uses the snake_case attribute names.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_record(self) -> dict:
        """Store representation: JSON-safe, aliased, nothing dropped."""
        return self.model_dump(mode="json", by_alias=True)
