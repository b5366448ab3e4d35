"""
Shared logic for per-user records with a single default flag.

Invariant: a user with any records has exactly one marked ``is_default``.
Writes for one user are serialized through a per-user asyncio.Lock so two
default-setting calls cannot interleave their read-modify-write cycles.
A lock is dropped once no call holds or waits on it.
Records are matched for de-duplication on a normalized identity tuple.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any, ClassVar, Generic, TypeVar

from bff.core.exceptions import ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from bff.models.base import Document, utcnow

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Document)


def normalise(value: Any) -> str:
    return str(value or "").strip().lower()


class DefaultRecordHandler(Generic[RecordT]):
    noun: ClassVar[str] = "record"
    model: ClassVar[type[Document]]

    def __init__(self, records: Any) -> None:
        self.records = records
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def identity(self, record: RecordT) -> tuple:
        raise NotImplementedError

    def merge_duplicate(self, duplicate: RecordT, fields: Mapping[str, Any]) -> dict:
        """Wire-format updates applied when a create matches an existing record."""
        updates: dict[str, Any] = {}
        if fields.get("is_default") is not None:
            updates["isDefault"] = fields["is_default"]
        return updates

    @asynccontextmanager
    async def _user_lock(self, user_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._locks[user_id]

    # ── Queries ───────────────────────────────────────────────────
    async def list_for_user(self, user_id: str) -> list[RecordT]:
        records = await self.records.get_by_user_id(user_id)
        return sorted(records, key=lambda r: r.created_at)

    async def _owned(self, user_id: str, record_id: str) -> RecordT:
        record = await self.records.get_by_id(record_id)
        if record is None or record.user_id != user_id:
            raise NotFoundError(f"{self.noun.capitalize()} not found")
        return record

    # ── Mutations ─────────────────────────────────────────────────
    async def create(self, user_id: str, fields: Mapping[str, Any]) -> tuple[RecordT, bool]:
        """Returns ``(record, created)``; ``created`` is False when a duplicate was merged."""
        async with self._user_lock(user_id):
            existing = await self.list_for_user(user_id)
            values = {k: v for k, v in fields.items() if v is not None}
            candidate = self.model(**{**values, "user_id": user_id})
            duplicate = next(
                (r for r in existing if self.identity(r) == self.identity(candidate)), None
            )
            if duplicate is not None:
                updates = self.merge_duplicate(duplicate, fields)
                updates["updatedAt"] = utcnow().isoformat()
                record = await self.records.update(duplicate.id, updates)
                logger.info("Merged duplicate %s %s for user %s", self.noun, record.id, user_id)
                await self._reconcile(user_id, record)
                return record, False

            if fields.get("is_default") is None:
                candidate.is_default = not existing
            try:
                await self.records.insert(candidate)
            except DuplicateKeyError:
                raise ConflictError(f"{self.noun.capitalize()} already exists") from None
            logger.info("Created %s %s for user %s", self.noun, candidate.id, user_id)
            await self._reconcile(user_id, candidate)
            return candidate, True

    async def update(self, user_id: str, record_id: str, updates: Mapping[str, Any]) -> RecordT:
        async with self._user_lock(user_id):
            await self._owned(user_id, record_id)
            record = await self.records.update(
                record_id, {**updates, "updatedAt": utcnow().isoformat()}
            )
            await self._reconcile(user_id, record)
            return await self._owned(user_id, record_id)

    async def delete(self, user_id: str, record_id: str) -> None:
        async with self._user_lock(user_id):
            record = await self._owned(user_id, record_id)
            if record.is_default:
                siblings = [r for r in await self.list_for_user(user_id) if r.id != record_id]
                if not siblings:
                    raise ValidationError(f"Cannot delete the only default {self.noun}")
                await self._set_default(siblings[0], True)
            await self.records.delete(record_id)
            logger.info("Deleted %s %s for user %s", self.noun, record_id, user_id)

    async def _set_default(self, record: RecordT, value: bool) -> None:
        record.is_default = value
        record.updated_at = utcnow()
        await self.records.update_full(record)

    async def _reconcile(self, user_id: str, target: RecordT) -> None:
        """Clear other defaults when ``target`` is default; promote one when none is."""
        records = await self.list_for_user(user_id)
        if target.is_default:
            for other in records:
                if other.id != target.id and other.is_default:
                    await self._set_default(other, False)
        elif records and not any(r.is_default for r in records):
            await self._set_default(records[0], True)
