"""Tests for the keyed-collection store."""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from bff.core.exceptions import DuplicateKeyError, StoreError
from bff.db.store import Store


@pytest.mark.asyncio
async def test_put_and_get(store: Store):
    await store.put("categories", {"id": "c1", "name": "Books"})
    assert await store.get("categories", "c1") == {"id": "c1", "name": "Books"}
    assert await store.get("categories", "missing") is None


@pytest.mark.asyncio
async def test_insert_rejects_existing_key(store: Store):
    await store.put("categories", {"id": "c1", "name": "Books"}, mode="insert")
    with pytest.raises(DuplicateKeyError):
        await store.put("categories", {"id": "c1", "name": "Other"}, mode="insert")
    assert (await store.get("categories", "c1"))["name"] == "Books"


@pytest.mark.asyncio
async def test_upsert_replaces_record(store: Store):
    await store.put("categories", {"id": "c1", "name": "Books", "description": "old"})
    await store.put("categories", {"id": "c1", "name": "Novels"})
    assert await store.get("categories", "c1") == {"id": "c1", "name": "Novels"}
    assert await store.count("categories") == 1


@pytest.mark.asyncio
async def test_get_all_is_ordered_by_key(store: Store):
    for key in ("b", "c", "a"):
        await store.put("categories", {"id": key, "name": key})
    assert [r["id"] for r in await store.get_all("categories")] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_index_lookup_follows_updates(store: Store):
    await store.put("orders", {"id": "o1", "userId": "u1", "status": "paid"})
    await store.put("orders", {"id": "o2", "userId": "u1", "status": "warehouse"})
    await store.put("orders", {"id": "o3", "userId": "u2", "status": "paid"})

    assert [r["id"] for r in await store.get_by_index("orders", "userId", "u1")] == ["o1", "o2"]
    await store.put("orders", {"id": "o1", "userId": "u1", "status": "delivered"})
    assert [r["id"] for r in await store.get_by_index("orders", "status", "paid")] == ["o3"]
    assert (await store.get_one_by_index("orders", "status", "delivered"))["id"] == "o1"


@pytest.mark.asyncio
async def test_unique_index_rejects_second_email(store: Store):
    await store.put("users", {"id": "u1", "email": "a@demo"}, mode="insert")
    with pytest.raises(DuplicateKeyError):
        await store.put("users", {"id": "u2", "email": "a@demo"}, mode="insert")


@pytest.mark.asyncio
async def test_cart_is_keyed_by_user_id(store: Store):
    await store.put("cart", {"userId": "u1", "items": []})
    assert await store.get("cart", "u1") == {"userId": "u1", "items": []}


@pytest.mark.asyncio
async def test_delete_and_clear(store: Store):
    await store.put("categories", {"id": "c1", "name": "A"})
    await store.put("categories", {"id": "c2", "name": "B"})
    await store.delete("categories", "c1")
    assert await store.count("categories") == 1
    await store.clear("categories")
    assert await store.get_all("categories") == []


@pytest.mark.asyncio
async def test_unknown_collection_and_index(store: Store):
    with pytest.raises(StoreError):
        await store.get("suppliers", "s1")
    with pytest.raises(StoreError):
        await store.get_by_index("products", "price", 10)


@pytest.mark.asyncio
async def test_record_without_key_is_rejected(store: Store):
    with pytest.raises(StoreError):
        await store.put("categories", {"name": "Nameless"})


@pytest.mark.asyncio
async def test_inert_store_is_a_no_op():
    inert = Store()
    assert not inert.is_live
    await inert.open_or_create()
    await inert.put("categories", {"id": "c1", "name": "A"})
    assert await inert.get("categories", "c1") is None
    assert await inert.get_all("categories") == []
    assert await inert.get_by_index("orders", "userId", "u1") == []
    assert await inert.count("categories") == 0


@pytest.mark.asyncio
async def test_newer_schema_version_is_refused():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await Store(engine=engine).open_or_create(5)
    with pytest.raises(StoreError):
        await Store(engine=engine).open_or_create(2)
    await engine.dispose()


@pytest.mark.asyncio
async def test_open_is_idempotent(store: Store):
    await store.put("categories", {"id": "c1", "name": "A"})
    await store.open_or_create()
    assert await store.count("categories") == 1
