"""Tests for the typed repositories over the store."""

import pytest

from bff.core.exceptions import NotFoundError
from bff.db.store import Store
from bff.models.cart import Cart, CartItem
from bff.models.catalog import Category, Product
from bff.models.user import User
from bff.repositories.carts import CartRepository
from bff.repositories.catalog import CategoryRepository, ProductRepository
from bff.repositories.files import FileRepository
from bff.repositories.users import UserRepository


@pytest.mark.asyncio
async def test_create_swallows_duplicate_key(store: Store):
    repo = CategoryRepository(store)
    category = Category(name="Books", description="Reading")
    await repo.create(category)
    await repo.create(category.model_copy(update={"name": "Changed"}))
    assert await repo.count() == 1
    assert (await repo.get_by_id(category.id)).name == "Books"


@pytest.mark.asyncio
async def test_update_merges_partial_fields(store: Store):
    repo = CategoryRepository(store)
    category = Category(name="Books", description="Reading")
    await repo.create(category)
    updated = await repo.update(category.id, {"description": "Printed matter"})
    assert updated.name == "Books"
    assert (await repo.get_by_id(category.id)).description == "Printed matter"


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(store: Store):
    with pytest.raises(NotFoundError):
        await CategoryRepository(store).update("nope", {"name": "X"})


@pytest.mark.asyncio
async def test_records_are_stored_camel_case(store: Store):
    product = Product(name="Lamp", price=10, category_id="c1", image_ids=["f1"])
    await ProductRepository(store).create(product)
    record = await store.get("products", product.id)
    assert record["categoryId"] == "c1"
    assert record["imageIds"] == ["f1"]


@pytest.mark.asyncio
async def test_product_filter_by_category_and_search(store: Store):
    repo = ProductRepository(store)
    await repo.create(Product(name="Desk Lamp", price=10, category_id="home"))
    await repo.create(Product(name="Floor Lamp", price=20, category_id="home"))
    await repo.create(Product(name="Lamp Book", price=5, category_id="books"))

    assert len(await repo.filter(category_id="home")) == 2
    assert {p.name for p in await repo.filter(search="lamp")} == {"Desk Lamp", "Floor Lamp", "Lamp Book"}
    assert [p.name for p in await repo.filter(category_id="home", search="FLOOR")] == ["Floor Lamp"]


@pytest.mark.asyncio
async def test_user_lookup_by_email_is_case_insensitive(store: Store):
    repo = UserRepository(store)
    await repo.create(User(email="shopper@demo", password="x"))
    assert (await repo.get_by_email("  Shopper@Demo ")).email == "shopper@demo"
    assert await repo.get_by_role("user")


@pytest.mark.asyncio
async def test_cart_repository_uses_user_id_key(store: Store):
    repo = CartRepository(store)
    await repo.update_full(Cart(user_id="u1", items=[CartItem(product_id="p1", quantity=2)]))
    cart = await repo.get_by_user_id("u1")
    assert cart.items[0].quantity == 2
    await repo.clear("u1")
    assert await repo.get_by_user_id("u1") is None


@pytest.mark.asyncio
async def test_file_urls_skip_missing_ids(store: Store):
    from bff.models.file import StoredFile

    repo = FileRepository(store, url_prefix="/files/")
    stored = StoredFile(filename="a.png", mimetype="image/png", size=3, blob="YWJj")
    await repo.create(stored)
    urls = await repo.get_file_urls([stored.id, "gone"])
    assert urls == {stored.id: f"/files/{stored.id}"}


@pytest.mark.asyncio
async def test_files_by_uploader(store: Store):
    from bff.models.file import StoredFile

    repo = FileRepository(store)
    await repo.create(StoredFile(filename="a.png", mimetype="image/png", size=1, blob="YQ==", uploaded_by="u1"))
    await repo.create(StoredFile(filename="b.png", mimetype="image/png", size=1, blob="Yg==", uploaded_by="u2"))
    assert [f.filename for f in await repo.get_by_uploader("u1")] == ["a.png"]
