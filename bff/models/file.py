"""Stored file — uploaded blobs (product images) kept in the store."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from bff.models.base import Document, new_id, utcnow


class StoredFile(Document):
    id: str = Field(default_factory=new_id)
    filename: str
    mimetype: str
    size: int
    blob: str  # base64-encoded payload
    uploaded_at: datetime = Field(default_factory=utcnow)
    uploaded_by: str | None = None

    def metadata(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude={"blob"})
