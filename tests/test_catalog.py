"""Tests for category and product endpoints."""

import pytest

from bff.api.router import BffRouter


@pytest.mark.asyncio
async def test_category_product_lifecycle(router: BffRouter):
    """Category deletion is blocked by products; product deletion unblocks it."""
    resp = await router.route("POST", "/api/categories", {"name": "Electronics", "description": "desc"})
    assert resp.status == 201
    category_id = resp.body["id"]
    assert (await router.route("GET", "/api/categories")).body["total"] == 1

    resp = await router.route(
        "POST",
        "/api/products",
        {"categoryId": category_id, "name": "Headphones", "price": 79.99, "stock": 5},
    )
    assert resp.status == 201
    product_id = resp.body["id"]

    resp = await router.route("DELETE", f"/api/categories/{category_id}")
    assert resp.status == 400
    assert resp.body == {"error": "Cannot delete category with existing products"}

    assert (await router.route("DELETE", f"/api/products/{product_id}")).status == 200

    resp = await router.route("DELETE", f"/api/categories/{category_id}")
    assert resp.status == 204
    assert resp.body is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, message",
    [
        ({"name": "  ", "description": "x"}, "Name and description are required"),
        ({"name": "x" * 33, "description": "x"}, "Name must not exceed 32 characters"),
        ({"name": "Books", "description": "d" * 129}, "Description must not exceed 128 characters"),
    ],
)
async def test_category_validation(router: BffRouter, payload: dict, message: str):
    resp = await router.route("POST", "/api/categories", payload)
    assert resp.status == 400
    assert resp.body == {"error": message}


@pytest.mark.asyncio
async def test_category_create_trims_whitespace(router: BffRouter):
    resp = await router.route("POST", "/api/categories", {"name": "  Books ", "description": " Reading  "})
    assert resp.body["name"] == "Books"
    assert resp.body["description"] == "Reading"


@pytest.mark.asyncio
async def test_category_update_rewrites_only_supplied_fields(router: BffRouter, category: dict):
    resp = await router.route("PUT", f"/api/categories/{category['id']}", {"description": "Devices"})
    assert resp.status == 200
    assert resp.body["name"] == "Electronics"
    assert resp.body["description"] == "Devices"

    resp = await router.route("PUT", f"/api/categories/{category['id']}", {"name": ""})
    assert resp.status == 400
    assert resp.body == {"error": "Name cannot be empty"}


@pytest.mark.asyncio
async def test_missing_category(router: BffRouter):
    assert (await router.route("GET", "/api/categories/nope")).status == 404
    assert (await router.route("DELETE", "/api/categories/nope")).status == 404


@pytest.mark.asyncio
async def test_product_requires_existing_category(router: BffRouter):
    resp = await router.route("POST", "/api/products", {"categoryId": "nope", "name": "Ghost", "price": 1})
    assert resp.status == 400
    assert resp.body == {"error": "Category not found"}


@pytest.mark.asyncio
async def test_product_rejects_negative_price(router: BffRouter, category: dict):
    resp = await router.route(
        "POST", "/api/products", {"categoryId": category["id"], "name": "Cheap", "price": -1}
    )
    assert resp.status == 400
    assert resp.body == {"error": "Price must not be negative"}


@pytest.mark.asyncio
async def test_product_response_is_enriched(router: BffRouter, product: dict):
    resp = await router.route("GET", f"/api/products/{product['id']}")
    assert resp.status == 200
    body = resp.body["product"]
    assert body["categoryName"] == "Electronics"
    assert body["imageUrls"] == ["/assets/images/product-placeholder.svg"]


@pytest.mark.asyncio
async def test_product_images_resolve_to_file_urls(router: BffRouter, category: dict):
    upload = await router.route(
        "POST", "/api/files", {"filename": "lamp.png", "mimetype": "image/png", "data": "aGVsbG8="}
    )
    assert upload.status == 201
    file_id = upload.body["id"]

    resp = await router.route(
        "POST",
        "/api/products",
        {"categoryId": category["id"], "name": "Lamp", "price": 20, "imageIds": [file_id, "missing"]},
    )
    assert resp.body["imageUrls"] == [f"/files/{file_id}"]

    assert (await router.route("DELETE", f"/api/products/{resp.body['id']}")).status == 200
    assert (await router.route("GET", f"/api/files/{file_id}")).status == 404


@pytest.mark.asyncio
async def test_product_list_filters_and_paginates(router: BffRouter, category: dict):
    other = await router.route("POST", "/api/categories", {"name": "Books", "description": "Reading"})
    for i in range(3):
        await router.route(
            "POST", "/api/products", {"categoryId": category["id"], "name": f"Cable {i}", "price": 5}
        )
    await router.route("POST", "/api/products", {"categoryId": other.body["id"], "name": "Cable Guide", "price": 9})

    resp = await router.route("GET", "/api/products", query_params={"search": "cable", "limit": "2"})
    assert resp.body["total"] == 4
    assert resp.body["totalPages"] == 2
    assert len(resp.body["data"]) == 2

    resp = await router.route("GET", "/api/products", query_params={"categoryId": other.body["id"]})
    assert [p["name"] for p in resp.body["data"]] == ["Cable Guide"]
    assert resp.body["data"][0]["categoryName"] == "Books"


@pytest.mark.asyncio
async def test_product_batch_keeps_request_order(router: BffRouter, category: dict):
    ids = []
    for name in ("A", "B"):
        resp = await router.route("POST", "/api/products", {"categoryId": category["id"], "name": name, "price": 1})
        ids.append(resp.body["id"])
    resp = await router.route("POST", "/api/products/batch", {"productIds": [ids[1], "missing", ids[0]]})
    assert resp.status == 200
    assert [p["name"] for p in resp.body["products"]] == ["B", "A"]


@pytest.mark.asyncio
async def test_product_update(router: BffRouter, product: dict):
    resp = await router.route("PUT", f"/api/products/{product['id']}", {"price": 59.5, "stock": 2})
    assert resp.status == 200
    assert resp.body["price"] == 59.5
    assert resp.body["name"] == "Headphones"
    assert "updatedAt" in resp.body


@pytest.mark.asyncio
async def test_product_referenced_by_order_cannot_be_deleted(router: BffRouter, product: dict, login):
    user = await login("user@demo", "User123!")
    order = await router.route(
        "POST",
        "/api/orders",
        {"userId": user["id"], "items": [{"productId": product["id"], "quantity": 1}], "deliveryAddress": "1 Main St"},
    )
    assert order.status == 201

    resp = await router.route("DELETE", f"/api/products/{product['id']}")
    assert resp.status == 409
    assert (await router.route("GET", f"/api/products/{product['id']}")).status == 200
