"""Pydantic schema for file uploads (base64 payloads)."""

from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, field_validator

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class FileUpload(BaseModel):
    filename: str
    mimetype: str = "application/octet-stream"
    data: str

    @field_validator("filename")
    @classmethod
    def _filename(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Filename must not be empty")
        return v

    @field_validator("data")
    @classmethod
    def _data(cls, v: str) -> str:
        try:
            raw = base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("File data must be base64-encoded") from None
        if len(raw) > MAX_UPLOAD_BYTES:
            raise ValueError("File must not exceed 5 MB")
        return v

    @property
    def size(self) -> int:
        return len(base64.b64decode(self.data))
