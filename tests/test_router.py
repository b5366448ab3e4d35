"""Tests for request routing: matching, bootstrap, latency, access and error normalisation."""

import pytest

from bff.api.router import BffRouter
from bff.api.routing import RequestContext, RouteTable
from bff.core.config import Settings
from bff.core.exceptions import ConflictError
from bff.core.responses import ok
from bff.db.store import Store


@pytest.mark.asyncio
async def test_unknown_route_is_404(router: BffRouter):
    resp = await router.route("GET", "/api/suppliers")
    assert resp.status == 404
    assert resp.body == {"error": "Not found"}


@pytest.mark.asyncio
async def test_method_must_match(router: BffRouter):
    resp = await router.route("PATCH", "/api/categories")
    assert resp.status == 404


@pytest.mark.asyncio
async def test_query_string_in_path_and_trailing_slash(router: BffRouter, category: dict):
    resp = await router.route("GET", "/api/categories/?search=electro&limit=5")
    assert resp.status == 200
    assert resp.body["total"] == 1
    assert resp.body["limit"] == 5


@pytest.mark.asyncio
async def test_bootstrap_seeds_demo_accounts_once(store: Store, test_settings: Settings):
    first = BffRouter(store, settings=test_settings)
    await first.initialize()
    assert await first.repos.users.count() == 3

    second = BffRouter(store, settings=test_settings)
    await second.initialize()
    assert await second.repos.users.count() == 3


@pytest.mark.asyncio
async def test_bootstrap_skips_store_with_admin(store: Store, test_settings: Settings):
    await store.put("users", {"id": "a1", "email": "root@demo", "password": "x", "role": "admin"})
    router = BffRouter(store, settings=test_settings)
    await router.initialize()
    assert await router.repos.users.count() == 1


@pytest.mark.asyncio
async def test_bootstrap_seeds_catalog_when_enabled(store: Store):
    settings = Settings(STORE_URL="sqlite+aiosqlite:///:memory:", LATENCY_ENABLED=False, SEED_CATALOG=True)
    router = BffRouter(store, settings=settings)
    resp = await router.route("GET", "/api/categories")
    assert resp.body["total"] == 4
    products = await router.route("GET", "/api/products", query_params={"search": "wireless headphones"})
    assert products.body["data"][0]["price"] == 79.99
    assert products.body["data"][0]["categoryName"] == "Electronics"


@pytest.mark.asyncio
async def test_latency_applies_only_to_delayed_routes(store: Store):
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    settings = Settings(STORE_URL="sqlite+aiosqlite:///:memory:", LATENCY_ENABLED=True, SEED_CATALOG=False)
    router = BffRouter(store, settings=settings, sleep=fake_sleep)

    await router.route("GET", "/api/categories")
    assert len(delays) == 1
    assert 0.3 <= delays[0] <= 0.8

    await router.route("POST", "/api/auth/logout")
    assert len(delays) == 1


@pytest.mark.asyncio
async def test_anonymous_access_is_rejected(router: BffRouter):
    resp = await router.route("GET", "/api/users")
    assert resp.status == 401
    assert resp.body == {"error": "Authentication required"}


@pytest.mark.asyncio
async def test_customer_cannot_list_users(router: BffRouter, login):
    await login("user@demo", "User123!")
    resp = await router.route("GET", "/api/users")
    assert resp.status == 401
    assert resp.body == {"error": "Admin or manager access required"}


@pytest.mark.asyncio
async def test_customer_cannot_read_other_users_cart(router: BffRouter, login):
    await login("user@demo", "User123!")
    resp = await router.route("GET", "/api/users/someone-else/cart")
    assert resp.status == 401
    assert resp.body == {"error": "Access denied"}


@pytest.mark.asyncio
async def test_access_rules_can_be_disabled(store: Store):
    settings = Settings(
        STORE_URL="sqlite+aiosqlite:///:memory:",
        LATENCY_ENABLED=False,
        SEED_CATALOG=False,
        ENFORCE_ACCESS=False,
    )
    router = BffRouter(store, settings=settings)
    resp = await router.route("GET", "/api/users")
    assert resp.status == 200
    assert resp.body["total"] == 3


@pytest.mark.asyncio
async def test_handler_failures_do_not_poison_the_router(store: Store, test_settings: Settings):
    table = RouteTable(prefix="/api")

    @table.get("/boom", failure="Failed to explode")
    async def boom(ctx: RequestContext):
        raise RuntimeError("kaboom")

    @table.get("/conflict")
    async def conflict(ctx: RequestContext):
        raise ConflictError("Already taken")

    @table.get("/ping")
    async def ping(ctx: RequestContext):
        return ok({"pong": True})

    router = BffRouter(store, settings=test_settings, routes=table)
    assert (await router.route("GET", "/api/boom")).body == {"error": "Failed to explode"}
    assert (await router.route("GET", "/api/conflict")).status == 409
    assert (await router.route("GET", "/api/ping")).body == {"pong": True}


@pytest.mark.asyncio
async def test_inert_store_serves_empty_collections(test_settings: Settings):
    router = BffRouter(Store(), settings=test_settings)
    resp = await router.route("GET", "/api/categories")
    assert resp.status == 200
    assert resp.body["data"] == []
    assert resp.body["totalPages"] == 0
