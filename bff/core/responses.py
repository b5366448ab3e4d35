"""
Response envelope: every routed request resolves to ``{status, body}``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError


class Envelope(BaseModel):
    status: int
    body: Any = None


def to_body(value: Any) -> Any:
    """Serialise models (and containers of models) to wire-format JSON."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, dict):
        return {key: to_body(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_body(item) for item in value]
    return value


def ok(body: Any = None) -> Envelope:
    return Envelope(status=200, body=to_body(body))


def created(body: Any = None) -> Envelope:
    return Envelope(status=201, body=to_body(body))


def no_content() -> Envelope:
    return Envelope(status=204, body=None)


def error(status: int, message: str) -> Envelope:
    return Envelope(status=status, body={"error": message})


def validation_message(exc: PydanticValidationError) -> str:
    """First validation failure, with the validator's own wording kept verbatim."""
    first = exc.errors()[0]
    if first["type"] == "value_error" and "error" in first.get("ctx", {}):
        return str(first["ctx"]["error"])
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]
