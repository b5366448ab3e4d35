"""
Collection catalogue for the keyed store.

Each collection is a table holding the JSON record under its primary key,
plus one plain column per secondary index so lookups stay indexed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import JSON, Column, Integer, MetaData, String, Table

SCHEMA_VERSION = 2


@dataclass(frozen=True)
class IndexSpec:
    name: str
    field: str = ""
    unique: bool = False

    @property
    def key_path(self) -> str:
        return self.field or self.name


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    key_path: str = "id"
    indexes: tuple[IndexSpec, ...] = field(default_factory=tuple)


COLLECTIONS: tuple[CollectionSpec, ...] = (
    CollectionSpec("users", indexes=(IndexSpec("email", unique=True), IndexSpec("role"))),
    CollectionSpec("categories"),
    CollectionSpec("products", indexes=(IndexSpec("categoryId"),)),
    CollectionSpec("orders", indexes=(IndexSpec("userId"), IndexSpec("status"))),
    CollectionSpec("cart", key_path="userId"),
    CollectionSpec("addresses", indexes=(IndexSpec("userId"),)),
    CollectionSpec("payment_methods", indexes=(IndexSpec("userId"),)),
    CollectionSpec("files", indexes=(IndexSpec("uploadedBy"),)),
)

META_TABLE = "_meta"


def build_tables(
    collections: tuple[CollectionSpec, ...] = COLLECTIONS,
) -> tuple[MetaData, dict[str, Table]]:
    """Declare one table per collection (plus the schema-version table)."""
    metadata = MetaData()
    Table(
        META_TABLE,
        metadata,
        Column("name", String(64), primary_key=True),
        Column("version", Integer, nullable=False),
    )
    tables: dict[str, Table] = {}
    for spec in collections:
        index_columns = [
            Column(ix.name, String(320), index=not ix.unique, unique=ix.unique, nullable=True)
            for ix in spec.indexes
        ]
        tables[spec.name] = Table(
            spec.name,
            metadata,
            Column("key", String(64), primary_key=True),
            Column("data", JSON, nullable=False),
            *index_columns,
        )
    return metadata, tables
