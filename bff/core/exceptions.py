"""
Error taxonomy shared by the store, repositories, handlers and router.

Each error carries the status code it is normalised to; the message is
what ends up in the ``{"error": ...}`` body.
"""

from __future__ import annotations


class BffError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BffError):
    status_code = 400


class AuthError(BffError):
    status_code = 401

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class NotFoundError(BffError):
    status_code = 404


class ConflictError(BffError):
    status_code = 409


class DuplicateKeyError(ConflictError):
    """Insert hit an existing primary key or unique index value."""


class StoreError(BffError):
    """Underlying store failure. The message is logged, never surfaced."""

    status_code = 500
