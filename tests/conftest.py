"""
Shared test fixtures for the storefront BFF simulator test suite.

Every test gets its own in-memory SQLite store (aiosqlite + StaticPool),
a router bootstrapped with the demo accounts only, and no latency.
"""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["STORE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LATENCY_ENABLED"] = "false"
os.environ["SEED_CATALOG"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from httpx import ASGITransport, AsyncClient

from bff.api.deps import Handlers
from bff.api.router import BffRouter
from bff.core.config import Settings
from bff.core.responses import Envelope
from bff.db.store import Store
from bff.main import create_app

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(STORE_URL=MEMORY_URL, LATENCY_ENABLED=False, SEED_CATALOG=False)


@pytest.fixture
async def store() -> AsyncGenerator[Store, None]:
    """Fresh in-memory store; StaticPool keeps one connection per engine."""
    s = Store(MEMORY_URL)
    await s.open_or_create()
    yield s
    await s.close()


@pytest.fixture
async def router(store: Store, test_settings: Settings) -> AsyncGenerator[BffRouter, None]:
    r = BffRouter(store, settings=test_settings)
    await r.initialize()
    yield r
    r.session.end()


@pytest.fixture
def handlers(router: BffRouter) -> Handlers:
    return router.handlers


@pytest.fixture
def login(router: BffRouter) -> Callable[..., Awaitable[dict]]:
    """Log the router's session in as a seeded demo account; returns the user body."""

    async def _login(email: str = "admin@demo", password: str = "Admin123!") -> dict:
        resp: Envelope = await router.route("POST", "/api/auth/login", {"email": email, "password": password})
        assert resp.status == 200, resp.body
        return resp.body["user"]

    return _login


@pytest.fixture
async def category(router: BffRouter, login) -> dict:
    await login()
    resp = await router.route("POST", "/api/categories", {"name": "Electronics", "description": "Gadgets"})
    assert resp.status == 201
    return resp.body


@pytest.fixture
async def product(router: BffRouter, category: dict) -> dict:
    resp = await router.route(
        "POST",
        "/api/products",
        {"categoryId": category["id"], "name": "Headphones", "price": 79.99, "stock": 5},
    )
    assert resp.status == 201
    return resp.body


@pytest.fixture
async def async_client(router: BffRouter) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the simulator's ASGI adapter."""
    transport = ASGITransport(app=create_app(router))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
