"""
Async keyed-collection store on SQLAlchemy (aiosqlite / asyncpg drivers).

Collections behave like an indexed object store: records are plain dicts
keyed by their ``key_path`` field, with secondary-index lookups and full
scans. Every operation is atomic within one collection only.

A store built without a URL is inert: reads return nothing and writes
are dropped, mirroring a host that has no live client context.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Literal

from sqlalchemy import Table, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from bff.core.exceptions import DuplicateKeyError, StoreError
from bff.db.schema import COLLECTIONS, META_TABLE, SCHEMA_VERSION, CollectionSpec, build_tables

logger = logging.getLogger(__name__)

PutMode = Literal["insert", "upsert"]


def engine_args(url: str) -> dict[str, Any]:
    args: dict[str, Any] = {"echo": False}
    if ":memory:" in url:
        # One shared connection, otherwise every checkout sees an empty database
        args.update({"poolclass": StaticPool, "connect_args": {"check_same_thread": False}})
    elif "postgresql" in url:
        args.update({"pool_pre_ping": True, "pool_size": 20, "max_overflow": 10, "pool_recycle": 300})
    return args


def _index_value(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Store:
    def __init__(
        self,
        url: str | None = None,
        *,
        engine: AsyncEngine | None = None,
        collections: tuple[CollectionSpec, ...] = COLLECTIONS,
    ) -> None:
        if engine is None and url:
            engine = create_async_engine(url, **engine_args(url))
        self._engine = engine
        self._specs = {spec.name: spec for spec in collections}
        self._metadata, self._tables = build_tables(collections)
        self._meta = self._metadata.tables[META_TABLE]
        self._open_lock = asyncio.Lock()
        self.schema_version: int | None = None

    @property
    def is_live(self) -> bool:
        return self._engine is not None

    # ── Lifecycle ────────────────────────────────────────────────────
    async def open_or_create(self, schema_version: int = SCHEMA_VERSION) -> None:
        """Create missing collections/indexes and record the schema version. Idempotent."""
        if self._engine is None or self.schema_version == schema_version:
            return
        async with self._open_lock:
            if self.schema_version == schema_version:
                return
            try:
                async with self._engine.begin() as conn:
                    await conn.run_sync(self._metadata.create_all)
                    row = (
                        await conn.execute(
                            select(self._meta.c.version).where(self._meta.c.name == "schema")
                        )
                    ).first()
                    stored = row.version if row else None
                    if stored is not None and stored > schema_version:
                        raise StoreError(
                            f"Store schema v{stored} is newer than supported v{schema_version}"
                        )
                    if stored is None:
                        await conn.execute(
                            self._meta.insert().values(name="schema", version=schema_version)
                        )
                    elif stored < schema_version:
                        await conn.execute(
                            self._meta.update()
                            .where(self._meta.c.name == "schema")
                            .values(version=schema_version)
                        )
            except SQLAlchemyError as exc:
                logger.error("Store initialisation failed: %s", exc, exc_info=True)
                raise StoreError("Store initialisation failed") from exc
            if stored != schema_version:
                logger.info("Store schema upgraded: v%s -> v%d", stored, schema_version)
            self.schema_version = schema_version

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self.schema_version = None

    # ── Internals ────────────────────────────────────────────────────
    def _table(self, collection: str) -> Table:
        try:
            return self._tables[collection]
        except KeyError:
            raise StoreError(f"Unknown collection '{collection}'") from None

    @asynccontextmanager
    async def _connection(self, collection: str, *, write: bool) -> AsyncIterator[AsyncConnection]:
        await self.open_or_create()
        assert self._engine is not None
        opener = self._engine.begin if write else self._engine.connect
        try:
            async with opener() as conn:
                yield conn
        except IntegrityError as exc:
            raise DuplicateKeyError(f"Duplicate key in '{collection}'") from exc
        except SQLAlchemyError as exc:
            logger.error("Store error on '%s': %s", collection, exc, exc_info=True)
            raise StoreError(f"Store operation failed on '{collection}'") from exc

    # ── Reads ────────────────────────────────────────────────────────
    async def get(self, collection: str, key: Any) -> dict | None:
        if not self.is_live:
            return None
        table = self._table(collection)
        async with self._connection(collection, write=False) as conn:
            row = (await conn.execute(select(table.c.data).where(table.c.key == str(key)))).first()
        return dict(row.data) if row else None

    async def get_all(self, collection: str) -> list[dict]:
        if not self.is_live:
            return []
        table = self._table(collection)
        async with self._connection(collection, write=False) as conn:
            result = await conn.execute(select(table.c.data).order_by(table.c.key))
        return [dict(row.data) for row in result]

    async def get_by_index(self, collection: str, index: str, value: Any) -> list[dict]:
        if not self.is_live:
            return []
        table = self._table(collection)
        if index not in {ix.name for ix in self._specs[collection].indexes}:
            raise StoreError(f"Index '{index}' does not exist in '{collection}'")
        async with self._connection(collection, write=False) as conn:
            result = await conn.execute(
                select(table.c.data)
                .where(table.c[index] == _index_value(value))
                .order_by(table.c.key)
            )
        return [dict(row.data) for row in result]

    async def get_one_by_index(self, collection: str, index: str, value: Any) -> dict | None:
        records = await self.get_by_index(collection, index, value)
        return records[0] if records else None

    async def count(self, collection: str) -> int:
        if not self.is_live:
            return 0
        table = self._table(collection)
        async with self._connection(collection, write=False) as conn:
            return int((await conn.execute(select(func.count()).select_from(table))).scalar_one())

    # ── Writes ───────────────────────────────────────────────────────
    async def put(self, collection: str, record: dict, mode: PutMode = "upsert") -> None:
        """Write ``record``. ``insert`` raises DuplicateKeyError if the key exists."""
        if not self.is_live:
            return
        table = self._table(collection)
        spec = self._specs[collection]
        key = record.get(spec.key_path)
        if key is None:
            raise StoreError(f"Record for '{collection}' has no '{spec.key_path}' key")

        values = {"key": str(key), "data": record}
        for ix in spec.indexes:
            values[ix.name] = _index_value(record.get(ix.key_path))

        async with self._connection(collection, write=True) as conn:
            if mode == "insert":
                await conn.execute(table.insert().values(**values))
                return
            result = await conn.execute(
                table.update().where(table.c.key == values["key"]).values(**values)
            )
            if result.rowcount == 0:
                await conn.execute(table.insert().values(**values))

    async def delete(self, collection: str, key: Any) -> None:
        if not self.is_live:
            return
        table = self._table(collection)
        async with self._connection(collection, write=True) as conn:
            await conn.execute(table.delete().where(table.c.key == str(key)))

    async def clear(self, collection: str) -> None:
        if not self.is_live:
            return
        table = self._table(collection)
        async with self._connection(collection, write=True) as conn:
            await conn.execute(table.delete())
