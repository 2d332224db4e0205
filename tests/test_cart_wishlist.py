"""Cart and wishlist endpoints"""

import pytest

CART_URL = "/api/v1/cart"
WISHLIST_URL = "/api/v1/wishlist"

async def test_empty_cart(client, user_headers):
    response = await client.get(f"{CART_URL}/get", headers=user_headers)

    assert response.status_code == 200
    cart = response.json()["cart"]
    assert cart["items"] == []
    assert cart["totalItems"] == 0
    assert cart["subtotal"] == 0

async def test_add_update_remove_cart_item(client, user_headers, make_product):
    book = await make_product(price="250")

    added = await client.post(f"{CART_URL}/add", json={"productId": book.id, "quantity": 2}, headers=user_headers)
    assert added.status_code == 200
    assert added.json()["cart"]["subtotal"] == 500

    again = await client.post(f"{CART_URL}/add", json={"productId": book.id}, headers=user_headers)
    cart = again.json()["cart"]
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert cart["items"][0]["product"]["price"] == 250

    updated = await client.post(f"{CART_URL}/update", json={"productId": book.id, "quantity": 1}, headers=user_headers)
    assert updated.json()["cart"]["totalItems"] == 1

    removed = await client.post(f"{CART_URL}/remove", json={"productId": book.id}, headers=user_headers)
    assert removed.status_code == 200
    assert removed.json()["cart"]["items"] == []

async def test_add_unavailable_product_is_not_found(client, user_headers, make_product):
    book = await make_product(availability=False)

    response = await client.post(f"{CART_URL}/add", json={"productId": book.id}, headers=user_headers)

    assert response.status_code == 404
    assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"

@pytest.mark.parametrize("path,payload", [
    ("update", {"productId": "missing", "quantity": 2}),
    ("remove", {"productId": "missing"}),
])
async def test_missing_cart_item_is_not_found(client, user_headers, path, payload):
    response = await client.post(f"{CART_URL}/{path}", json=payload, headers=user_headers)

    assert response.status_code == 404

async def test_cart_rejects_zero_quantity(client, user_headers, make_product):
    book = await make_product()

    response = await client.post(f"{CART_URL}/add", json={"productId": book.id, "quantity": 0}, headers=user_headers)

    assert response.status_code == 422

async def test_cart_requires_authentication(client):
    response = await client.get(f"{CART_URL}/get")

    assert response.status_code == 401

async def test_wishlist_add_and_remove(client, user_headers, make_product):
    book = await make_product(name="Wished")

    added = await client.post(f"{WISHLIST_URL}/add", json={"productId": book.id}, headers=user_headers)
    assert added.status_code == 200
    wishlist = added.json()["wishlist"]
    assert wishlist["itemLimit"] == 10
    assert [item["product"]["name"] for item in wishlist["items"]] == ["Wished"]

    duplicate = await client.post(f"{WISHLIST_URL}/add", json={"productId": book.id}, headers=user_headers)
    assert duplicate.status_code == 409

    removed = await client.request("DELETE", f"{WISHLIST_URL}/remove", json={"productId": book.id}, headers=user_headers)
    assert removed.status_code == 200
    assert removed.json()["wishlist"]["items"] == []

    missing = await client.request("DELETE", f"{WISHLIST_URL}/remove", json={"productId": book.id}, headers=user_headers)
    assert missing.status_code == 404

async def test_wishlist_unknown_product(client, user_headers):
    response = await client.post(f"{WISHLIST_URL}/add", json={"productId": "missing"}, headers=user_headers)

    assert response.status_code == 404

async def test_wishlist_limit(client, user_headers, make_product):
    books = [await make_product(name=f"Book {i}") for i in range(11)]
    for book in books[:10]:
        response = await client.post(f"{WISHLIST_URL}/add", json={"productId": book.id}, headers=user_headers)
        assert response.status_code == 200

    response = await client.post(f"{WISHLIST_URL}/add", json={"productId": books[10].id}, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "WISHLIST_LIMIT_REACHED"

    current = await client.get(f"{WISHLIST_URL}/get", headers=user_headers)
    assert len(current.json()["wishlist"]["items"]) == 10
