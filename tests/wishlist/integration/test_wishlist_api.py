"""Integration tests for /api/wishlist."""

import pytest


@pytest.fixture()
def headers(customer, auth_headers):
    return auth_headers(customer)


def test_empty_wishlist(client, headers):
    response = client.get("/api/wishlist", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_add_returns_wishlist(client, headers, make_product):
    product = make_product(name="Lamp", price=80.0, sale_price=60.0)

    response = client.post("/api/wishlist", json={"product_id": str(product.id)}, headers=headers)

    assert response.status_code == 201
    [entry] = response.json()["data"]
    assert entry["product_name"] == "Lamp"
    assert entry["price"] == 60.0
    assert entry["is_available"] is True


def test_out_of_stock_product_is_unavailable(client, headers, make_product):
    product = make_product(stock_quantity=0)

    response = client.post("/api/wishlist", json={"product_id": str(product.id)}, headers=headers)

    assert response.json()["data"][0]["is_available"] is False


def test_duplicate_add(client, headers, make_product):
    product = make_product()
    client.post("/api/wishlist", json={"product_id": str(product.id)}, headers=headers)

    response = client.post("/api/wishlist", json={"product_id": str(product.id)}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Product already in wishlist"


def test_add_unknown_product(client, headers):
    assert client.post("/api/wishlist", json={"product_id": "missing"}, headers=headers).status_code == 404


def test_remove(client, headers, make_product):
    product = make_product()
    client.post("/api/wishlist", json={"product_id": str(product.id)}, headers=headers)

    response = client.delete(f"/api/wishlist/{product.id}", headers=headers)

    assert response.status_code == 200
    assert client.get("/api/wishlist", headers=headers).json()["data"] == []


def test_remove_missing(client, headers, make_product):
    response = client.delete(f"/api/wishlist/{make_product().id}", headers=headers)

    assert response.status_code == 404
    assert response.json()["errors"] == ["Product not found in wishlist"]


def test_requires_authentication(client):
    assert client.get("/api/wishlist").status_code == 401


def test_item_routes(client, headers, make_product):
    product = make_product(name="Rug")

    added = client.post(f"/api/wishlist/items/{product.id}", headers=headers)
    assert added.status_code == 201
    assert [entry["product_name"] for entry in added.json()["data"]] == ["Rug"]

    removed = client.delete(f"/api/wishlist/items/{product.id}", headers=headers)
    assert removed.status_code == 200
    assert client.get("/api/wishlist", headers=headers).json()["data"] == []
