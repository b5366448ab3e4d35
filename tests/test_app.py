"""Tests for the in-process HTTP adapter."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_login_over_http(async_client: AsyncClient):
    resp = await async_client.post("/api/auth/login", json={"email": "admin@demo", "password": "Admin123!"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"


@pytest.mark.asyncio
async def test_query_params_are_forwarded(async_client: AsyncClient):
    await async_client.post("/api/categories", json={"name": "Books", "description": "Reading"})
    await async_client.post("/api/categories", json={"name": "Garden", "description": "Outdoor"})
    resp = await async_client.get("/api/categories", params={"search": "garden"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert body["data"][0]["name"] == "Garden"


@pytest.mark.asyncio
async def test_no_content_has_empty_body(async_client: AsyncClient):
    created = await async_client.post("/api/categories", json={"name": "Books", "description": "Reading"})
    resp = await async_client.delete(f"/api/categories/{created.json()['id']}")
    assert resp.status_code == 204
    assert resp.content == b""


@pytest.mark.asyncio
async def test_unknown_route_is_404(async_client: AsyncClient):
    resp = await async_client.get("/api/warehouses")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not found"}


@pytest.mark.asyncio
async def test_invalid_json_is_400(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/categories", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid JSON body"}
