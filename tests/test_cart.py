"""Tests for the per-user cart."""

import pytest

from bff.api.router import BffRouter


@pytest.fixture
async def cart_url(login) -> str:
    user = await login("user@demo", "User123!")
    return f"/api/users/{user['id']}/cart"


@pytest.mark.asyncio
async def test_missing_cart_reads_as_empty(router: BffRouter, cart_url: str):
    resp = await router.route("GET", cart_url)
    assert resp.status == 200
    assert resp.body["items"] == []


@pytest.mark.asyncio
async def test_repeated_adds_accumulate(router: BffRouter, cart_url: str):
    await router.route("POST", f"{cart_url}/items", {"productId": "p1", "quantity": 2})
    resp = await router.route("POST", f"{cart_url}/items", {"productId": "p1", "quantity": 3})
    assert resp.body["cart"]["items"] == [{"productId": "p1", "quantity": 5}]


@pytest.mark.asyncio
async def test_remove_item(router: BffRouter, cart_url: str):
    await router.route("POST", f"{cart_url}/items", {"productId": "p1"})
    await router.route("POST", f"{cart_url}/items", {"productId": "p2", "quantity": 4})
    resp = await router.route("DELETE", f"{cart_url}/items/p1")
    assert resp.body["cart"]["items"] == [{"productId": "p2", "quantity": 4}]


@pytest.mark.asyncio
async def test_replace_merges_duplicate_lines(router: BffRouter, cart_url: str):
    resp = await router.route(
        "PUT",
        cart_url,
        {"items": [{"productId": "p1", "quantity": 1}, {"productId": "p2", "quantity": 1}, {"productId": "p1", "quantity": 2}]},
    )
    assert resp.status == 200
    assert resp.body["cart"]["items"] == [
        {"productId": "p1", "quantity": 3},
        {"productId": "p2", "quantity": 1},
    ]


@pytest.mark.asyncio
async def test_clear_cart(router: BffRouter, cart_url: str):
    await router.route("POST", f"{cart_url}/items", {"productId": "p1"})
    assert (await router.route("DELETE", cart_url)).status == 200
    assert (await router.route("GET", cart_url)).body["items"] == []


@pytest.mark.asyncio
async def test_quantity_must_be_positive(router: BffRouter, cart_url: str):
    resp = await router.route("POST", f"{cart_url}/items", {"productId": "p1", "quantity": 0})
    assert resp.status == 400
    assert resp.body == {"error": "Quantity must be at least 1"}
