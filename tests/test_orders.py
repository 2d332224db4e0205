"""Order placement for registered users and guests"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.core.exceptions import ConflictException
from app.models import Cart, CartItem, Order, OrderItem, Payment
from app.api.v1.cart.services import CartService
from app.api.v1.orders.schemas import OrderItemInput
from app.api.v1.orders.services import OrderService, RegisteredBuyer
from tests.conftest import auth_headers

ORDERS_URL = "/api/v1/orders"

def order_payload(product_id, price=500, quantity=2, **overrides):
    payload = {
        "items": [{"productId": product_id, "quantity": quantity, "price": price}],
        "taxes": 50,
        "shippingFee": 100,
        "totalPrice": 1150,
        "shippingAddress": "12 Mall Road, Lahore",
        "paymentMethod": "cod",
    }
    payload.update(overrides)
    return payload

async def count_rows(session, model):
    return await session.scalar(select(func.count()).select_from(model))

async def test_order_total_reconciles_with_items(client, user_headers, make_product):
    book = await make_product(name="B1", price="500")

    response = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id), headers=user_headers)

    assert response.status_code == 201
    order = response.json()["order"]
    assert order["totalPrice"] == 1150
    assert order["subtotal"] == 1000
    assert order["taxes"] == 50
    assert order["shippingFee"] == 100
    assert order["status"] == "pending"
    assert order["paymentStatus"] == "not_paid"
    assert order["paymentMethod"] == "cod"
    assert order["items"][0]["price"] == 500
    assert order["items"][0]["quantity"] == 2
    assert order["isGuest"] is False
    assert order["guest"] is None
    assert order["user"]["email"] == "reader@example.com"
    assert order["payment"] is None

async def test_price_mismatch_creates_nothing(client, session, user_headers, make_product):
    book = await make_product(name="B1", price="500")

    response = await client.post(
        f"{ORDERS_URL}/create",
        json=order_payload(book.id, price=510, totalPrice=1170),
        headers=user_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "PRICE_MISMATCH"
    assert await count_rows(session, Order) == 0
    assert await count_rows(session, OrderItem) == 0
    assert await count_rows(session, Payment) == 0

async def test_price_within_tolerance_is_stored_at_catalog_price(client, session, user_headers, make_product):
    book = await make_product(name="B1", price="500")

    response = await client.post(
        f"{ORDERS_URL}/create",
        json=order_payload(book.id, price=500.005, totalPrice=1150.01),
        headers=user_headers,
    )

    assert response.status_code == 201
    stored = await session.scalar(select(OrderItem.price))
    assert Decimal(stored) == Decimal("500.00")

async def test_total_mismatch_is_rejected(client, session, user_headers, make_product):
    book = await make_product(price="500")

    response = await client.post(
        f"{ORDERS_URL}/create",
        json=order_payload(book.id, totalPrice=1100),
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "TOTAL_MISMATCH"
    assert await count_rows(session, Order) == 0

async def test_unknown_product_is_not_found(client, session, user_headers, make_product):
    book = await make_product(price="500")
    payload = order_payload(book.id)
    payload["items"].append({"productId": "does-not-exist", "quantity": 1, "price": 10})

    response = await client.post(f"{ORDERS_URL}/create", json=payload, headers=user_headers)

    assert response.status_code == 404
    assert await count_rows(session, Order) == 0

async def test_unavailable_product_is_rejected(client, session, user_headers, make_product):
    book = await make_product(price="500", availability=False)

    response = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id), headers=user_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "PRODUCT_UNAVAILABLE"
    assert await count_rows(session, Order) == 0

async def test_items_are_validated_before_payment_method(client, user_headers, make_product):
    book = await make_product(price="500")

    response = await client.post(
        f"{ORDERS_URL}/create",
        json=order_payload(book.id, price=999, paymentMethod="bitcoin"),
        headers=user_headers,
    )

    assert response.json()["error_code"] == "PRICE_MISMATCH"

@pytest.mark.parametrize("method,option", [("bitcoin", None), ("online", None), ("online", "PayPal")])
async def test_invalid_payment_method_is_rejected(client, session, user_headers, make_product, method, option):
    book = await make_product(price="500")

    response = await client.post(
        f"{ORDERS_URL}/create",
        json=order_payload(book.id, paymentMethod=method, onlinePaymentOption=option),
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_PAYMENT"
    assert await count_rows(session, Order) == 0

async def test_online_payment_creates_pending_payment(client, session, user_headers, make_product):
    book = await make_product(price="500")

    response = await client.post(
        f"{ORDERS_URL}/create",
        json=order_payload(book.id, paymentMethod="online", onlinePaymentOption="JazzCash"),
        headers=user_headers,
    )

    assert response.status_code == 201
    order = response.json()["order"]
    assert order["paymentMethod"] == "JazzCash"
    assert order["payment"]["status"] == "pending"
    assert order["payment"]["amount"] == 1150
    assert order["payment"]["paymentMethod"] == "JazzCash"
    assert await count_rows(session, Payment) == 1

async def test_order_clears_only_the_buyers_cart(client, session, make_user, make_product):
    buyer = await make_user(email="buyer@example.com")
    other = await make_user(email="other@example.com")
    book = await make_product(price="500")

    for user in (buyer, other):
        response = await client.post(
            "/api/v1/cart/add",
            json={"productId": book.id, "quantity": 2},
            headers=auth_headers(user),
        )
        assert response.status_code == 200

    response = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id), headers=auth_headers(buyer))
    assert response.status_code == 201

    buyer_cart = (await client.get("/api/v1/cart/get", headers=auth_headers(buyer))).json()["cart"]
    other_cart = (await client.get("/api/v1/cart/get", headers=auth_headers(other))).json()["cart"]
    assert buyer_cart["items"] == []
    assert other_cart["totalItems"] == 2

    remaining = await session.scalar(
        select(func.count(CartItem.id)).join(Cart, Cart.id == CartItem.cart_id).where(Cart.user_id == other.id)
    )
    assert remaining == 1

async def test_order_requires_items(client, user_headers, make_product):
    book = await make_product(price="500")

    response = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id, items=[]), headers=user_headers)

    assert response.status_code == 422
    assert response.json()["success"] is False

async def test_order_requires_authentication(client, make_product):
    book = await make_product(price="500")

    response = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id))

    assert response.status_code == 401

async def test_guest_order_uses_same_shape(client, session, make_product, fake_email):
    book = await make_product(name="Guest Book", price="500")
    payload = order_payload(
        book.id,
        guestName=" Ayesha ",
        guestEmail="Ayesha@Example.COM",
        guestPhone="0300 1234567",
        city="Karachi",
        postCode="75500",
        country="Pakistan",
        paymentMethod="online",
        onlinePaymentOption="EasyPaisa",
    )

    response = await client.post(f"{ORDERS_URL}/guest", json=payload)

    assert response.status_code == 201
    order = response.json()["order"]
    assert order["isGuest"] is True
    assert order["userId"] is None
    assert order["user"] is None
    assert order["guest"] == {
        "name": "Ayesha",
        "email": "ayesha@example.com",
        "phone": "0300 1234567",
        "city": "Karachi",
        "postCode": "75500",
        "country": "Pakistan",
    }
    assert order["payment"]["status"] == "pending"
    assert order["totalPrice"] == 1150

    recipients = [mail["to"] for mail in fake_email.sent]
    assert "ayesha@example.com" in recipients
    assert "ops@bookstore.test" in recipients

async def test_guest_order_rejects_bad_email(client, session, make_product):
    book = await make_product(price="500")
    payload = order_payload(book.id, guestName="Ali", guestEmail="not-an-email")

    response = await client.post(f"{ORDERS_URL}/guest", json=payload)

    assert response.status_code == 422
    assert await count_rows(session, Order) == 0

async def test_registered_order_notifies_buyer_and_operator(client, user_headers, make_product, fake_email):
    book = await make_product(name="Notified Book", price="500")

    response = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id), headers=user_headers)

    assert response.status_code == 201
    order_id = response.json()["order"]["id"]
    subjects = {mail["to"]: mail["subject"] for mail in fake_email.sent}
    assert subjects["reader@example.com"] == f"Order Confirmed - #{order_id}"
    assert subjects["ops@bookstore.test"] == f"New Order #{order_id}"
    confirmation = next(m for m in fake_email.sent if m["to"] == "reader@example.com")
    assert "Notified Book" in confirmation["body"]
    assert "1150.00" in confirmation["body"]

@pytest.mark.parametrize("mode", ["fail", "raise_error"])
async def test_notification_failure_does_not_fail_order(client, session, user_headers, make_product, fake_email, mode):
    setattr(fake_email, mode, True)
    book = await make_product(price="500")

    response = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id), headers=user_headers)

    assert response.status_code == 201
    assert response.json()["success"] is True
    assert await count_rows(session, Order) == 1

async def test_list_my_orders_newest_first(client, user_headers, make_product, make_user):
    book = await make_product(price="500")
    first = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id), headers=user_headers)
    second = await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id), headers=user_headers)
    stranger = await make_user(email="stranger@example.com")
    await client.post(f"{ORDERS_URL}/create", json=order_payload(book.id), headers=auth_headers(stranger))

    response = await client.get(f"{ORDERS_URL}/get", headers=user_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [o["id"] for o in body["orders"]] == [
        second.json()["order"]["id"],
        first.json()["order"]["id"],
    ]

async def test_store_failure_leaves_no_partial_order(session, user, make_product, monkeypatch):
    book = await make_product(price="500")
    cart_service = CartService(session)
    await cart_service.upsert_item(await cart_service.get_or_create_cart(user.id), book.id, 1)
    await session.commit()

    async def failing_commit():
        raise OperationalError("INSERT INTO orders", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)

    with pytest.raises(OperationalError):
        await OrderService(session).place_order(
            RegisteredBuyer(user_id=user.id),
            [OrderItemInput(product_id=book.id, quantity=1, price=500)],
            shipping_address="12 Mall Road, Lahore",
            payment_method="online",
            online_payment_option="EasyPaisa",
        )

    assert await count_rows(session, Order) == 0
    assert await count_rows(session, OrderItem) == 0
    assert await count_rows(session, Payment) == 0
    assert await count_rows(session, CartItem) == 1

async def test_order_for_deleted_account_is_a_conflict(session, make_product):
    book = await make_product(price="500")

    with pytest.raises(ConflictException):
        await OrderService(session).place_order(
            RegisteredBuyer(user_id="00000000-0000-0000-0000-000000000000"),
            [OrderItemInput(product_id=book.id, quantity=1, price=500)],
            shipping_address="12 Mall Road, Lahore",
            payment_method="cod",
        )

    assert await count_rows(session, Order) == 0
