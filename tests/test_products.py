"""
tests.test_products

Catalog CRUD and search through the HTTP surface.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI
from sqlalchemy import text

STORE_FAILURE = "An error occurred while accessing the product catalog."


async def _create(client: httpx.AsyncClient, **fields) -> dict:
    body = {
        "name": "Zephyr Tent",
        "description": "Ultralight one-person shelter.",
        "price": 129.5,
        "imageUrl": "zephyr.png",
        **fields,
    }
    r = await client.post("/api/product", json=body)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.asyncio
async def test_create_then_get_returns_same_fields(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/api/product",
        json={
            "name": "Zephyr Tent",
            "description": "Ultralight one-person shelter.",
            "price": 129.5,
            "imageUrl": "zephyr.png",
        },
    )
    assert r.status_code == 201
    created = r.json()
    assert r.headers["location"] == f"/api/product/{created['id']}"

    r = await client.get(f"/api/product/{created['id']}")
    assert r.status_code == 200
    assert r.json() == {
        "id": created["id"],
        "name": "Zephyr Tent",
        "description": "Ultralight one-person shelter.",
        "price": 129.5,
        "imageUrl": "zephyr.png",
    }


@pytest.mark.asyncio
async def test_snake_case_input_is_accepted(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/api/product",
        json={"name": "Snake Lamp", "description": "", "price": 3, "image_url": "snake.png"},
    )
    assert r.status_code == 201
    assert r.json()["imageUrl"] == "snake.png"


@pytest.mark.asyncio
async def test_update_overwrites_fields(client: httpx.AsyncClient) -> None:
    created = await _create(client)

    r = await client.put(
        f"/api/product/{created['id']}",
        json={"name": "Zephyr Tent v2", "description": "", "price": 99, "imageUrl": "v2.png"},
    )
    assert r.status_code == 200

    r = await client.get(f"/api/product/{created['id']}")
    assert r.json() == {
        "id": created["id"],
        "name": "Zephyr Tent v2",
        "description": "",
        "price": 99.0,
        "imageUrl": "v2.png",
    }


@pytest.mark.asyncio
async def test_update_missing_product_is_404(client: httpx.AsyncClient) -> None:
    r = await client.put("/api/product/999999", json={"name": "Ghost", "price": 1})
    assert r.status_code == 404
    assert r.json()["detail"] == "Product not found"


@pytest.mark.asyncio
async def test_delete_then_get_is_404(client: httpx.AsyncClient) -> None:
    created = await _create(client)

    r = await client.delete(f"/api/product/{created['id']}")
    assert r.status_code == 200

    r = await client.get(f"/api/product/{created['id']}")
    assert r.status_code == 404

    r = await client.delete(f"/api/product/{created['id']}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_get_unknown_id_is_404(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/product/424242")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_create_rejects_blank_name(client: httpx.AsyncClient) -> None:
    r = await client.post("/api/product", json={"name": "", "price": 5})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_search_returns_only_name_matches_with_count(client: httpx.AsyncClient) -> None:
    await _create(client, name="Zephyr Tent")
    await _create(client, name="Zephyr Stove")
    # Description mentions the term but the name does not.
    await _create(client, name="Plain Mug", description="Pairs well with the Zephyr range.")

    r = await client.get("/api/product/search", params={"search": "Zephyr"})
    assert r.status_code == 200
    body = r.json()
    names = [p["name"] for p in body["products"]]
    assert sorted(names) == ["Zephyr Stove", "Zephyr Tent"]
    assert all("zephyr" in n.lower() for n in names)
    assert body["response"] == "2 Products found for [Zephyr]"


@pytest.mark.asyncio
async def test_search_without_matches_mentions_term(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/product/search", params={"search": "hovercraft"})
    assert r.status_code == 200
    assert r.json() == {"products": [], "response": "No products found for [hovercraft]"}


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/product/search", params={"search": "%"})
    assert r.status_code == 200
    assert r.json()["products"] == []
    assert r.json()["response"] == "No products found for [%]"


@pytest.mark.asyncio
async def test_search_requires_term(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/product/search")
    assert r.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("product_id", ["99999999999999999999", "-99999999999999999999"])
async def test_ids_beyond_integer_range_are_404(client: httpx.AsyncClient, product_id: str) -> None:
    r = await client.get(f"/api/product/{product_id}")
    assert r.status_code == 404
    assert r.json()["detail"] == "Product not found"

    r = await client.put(f"/api/product/{product_id}", json={"name": "Ghost", "price": 1})
    assert r.status_code == 404

    r = await client.delete(f"/api/product/{product_id}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_float_prices_are_stored_as_cents(client: httpx.AsyncClient) -> None:
    created = await _create(client, price=0.1 + 0.2)
    assert created["price"] == 0.3

    r = await client.post("/api/product", json={"name": "Costly", "price": 1e20})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_store_failure_is_generic_500(app: FastAPI, client: httpx.AsyncClient) -> None:
    async with app.state.engine.begin() as conn:
        await conn.execute(text("DROP TABLE products"))

    product = {"name": "Tent", "price": 10}
    calls = [
        ("GET", "/api/product", None),
        ("GET", "/api/product/1", None),
        ("GET", "/api/product/search?search=tent", None),
        ("POST", "/api/product", product),
        ("PUT", "/api/product/1", product),
        ("DELETE", "/api/product/1", None),
    ]
    for method, url, body in calls:
        r = await client.request(method, url, json=body)
        assert r.status_code == 500
        assert r.json() == {"detail": STORE_FAILURE}
