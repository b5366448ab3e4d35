"""
Generic typed repository over one store collection.

Subclasses set ``collection`` / ``model`` and add index-based finders.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from bff.core.exceptions import DuplicateKeyError, NotFoundError
from bff.db.store import Store
from bff.models.base import Document

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Document)


class BaseRepository(Generic[ModelT]):
    collection: ClassVar[str]
    model: ClassVar[type[Document]]
    key_field: ClassVar[str] = "id"

    def __init__(self, store: Store) -> None:
        self.store = store

    def _load(self, record: Mapping[str, Any]) -> ModelT:
        return self.model.model_validate(record)  # type: ignore[return-value]

    def _key(self, item: ModelT) -> str:
        return getattr(item, self.key_field)

    async def get_all(self) -> list[ModelT]:
        return [self._load(record) for record in await self.store.get_all(self.collection)]

    async def get_by_id(self, id: str) -> ModelT | None:
        record = await self.store.get(self.collection, id)
        return self._load(record) if record is not None else None

    async def create(self, item: ModelT) -> None:
        """Insert ``item``; an existing key is treated as already created."""
        try:
            await self.store.put(self.collection, item.to_record(), mode="insert")
        except DuplicateKeyError:
            logger.warning(
                "Item %s already exists in %s, skipping", self._key(item), self.collection
            )

    async def insert(self, item: ModelT) -> None:
        """Insert ``item``; an existing key or unique value raises DuplicateKeyError."""
        await self.store.put(self.collection, item.to_record(), mode="insert")

    async def update(self, id: str, updates: Mapping[str, Any]) -> ModelT:
        """Merge ``updates`` (wire-format field names) into the record and replace it."""
        item = await self.get_by_id(id)
        if item is None:
            raise NotFoundError(f"{self.collection} with id {id} not found")
        merged = self._load({**item.to_record(), **updates})
        await self.store.put(self.collection, merged.to_record(), mode="upsert")
        return merged

    async def update_full(self, item: ModelT) -> None:
        await self.store.put(self.collection, item.to_record(), mode="upsert")

    async def delete(self, id: str) -> None:
        await self.store.delete(self.collection, id)

    async def count(self) -> int:
        return await self.store.count(self.collection)

    async def _get_by_index(self, index: str, value: Any) -> list[ModelT]:
        return [
            self._load(record)
            for record in await self.store.get_by_index(self.collection, index, value)
        ]

    async def _get_one_by_index(self, index: str, value: Any) -> ModelT | None:
        record = await self.store.get_one_by_index(self.collection, index, value)
        return self._load(record) if record is not None else None
