"""Server-priced checkout and payment proofs"""

import io

import pytest
from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.api.v1.checkout.services import CheckoutService
from app.api.v1.orders.schemas import OrderItemInput
from app.api.v1.orders.services import OrderService, RegisteredBuyer
from app.core.exceptions import BookstoreException
from app.models import Order, Payment, User
from app.services.storage import StorageService
from tests.conftest import auth_headers

CHECKOUT_URL = "/api/v1/checkout"

def process_payload(product_id, **overrides):
    payload = {
        "address": "12 Mall Road",
        "city": "Lahore",
        "postCode": "54000",
        "country": "Pakistan",
        "mobileNumber": "+92 300-1234567",
        "items": [{"productId": product_id, "quantity": 2}],
        "taxes": 50,
        "shippingFee": 100,
        "paymentMethod": "cod",
    }
    payload.update(overrides)
    return payload

async def place_online_order(client, headers, product_id):
    response = await client.post(
        f"{CHECKOUT_URL}/process",
        json=process_payload(product_id, paymentMethod="online", onlinePaymentOption="BankTransfer"),
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["order"]

def proof_file(name="proof.png", content=b"\x89PNG fake image"):
    return {"proof": (name, content, "image/png")}

async def test_calculate_uses_catalog_prices(client, user_headers, make_product):
    book = await make_product(name="Priced", price="500")

    response = await client.post(
        f"{CHECKOUT_URL}/calculate",
        json={"items": [{"productId": book.id, "quantity": 2}], "taxes": 50, "shippingFee": 100},
        headers=user_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["subtotal"] == 1000
    assert body["total"] == 1150
    assert body["items"][0]["name"] == "Priced"
    assert body["items"][0]["lineTotal"] == 1000

async def test_calculate_rejects_unavailable_product(client, user_headers, make_product):
    book = await make_product(availability=False)

    response = await client.post(
        f"{CHECKOUT_URL}/calculate",
        json={"items": [{"productId": book.id, "quantity": 1}]},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "PRODUCT_UNAVAILABLE"

async def test_process_places_order_and_clears_cart(client, user_headers, make_product, fake_email):
    book = await make_product(price="500")
    await client.post("/api/v1/cart/add", json={"productId": book.id, "quantity": 2}, headers=user_headers)

    response = await client.post(f"{CHECKOUT_URL}/process", json=process_payload(book.id), headers=user_headers)

    assert response.status_code == 201
    order = response.json()["order"]
    assert order["totalPrice"] == 1150
    assert order["shippingAddress"] == "12 Mall Road, Lahore, 54000, Pakistan"
    assert order["items"][0]["price"] == 500

    cart = (await client.get("/api/v1/cart/get", headers=user_headers)).json()["cart"]
    assert cart["items"] == []
    assert any(mail["to"] == "reader@example.com" for mail in fake_email.sent)

async def test_process_save_info_updates_profile(client, session_factory, user, user_headers, make_product):
    book = await make_product(price="500")

    response = await client.post(
        f"{CHECKOUT_URL}/process",
        json=process_payload(book.id, saveInfo=True),
        headers=user_headers,
    )

    assert response.status_code == 201
    async with session_factory() as fresh:
        stored = await fresh.get(User, user.id)
        assert stored.city == "Lahore"
        assert stored.post_code == "54000"
        assert stored.mobile_number == "+923001234567"
        assert stored.shipping_address == "12 Mall Road, Lahore, 54000, Pakistan"

async def test_process_without_save_info_leaves_profile(client, session_factory, user, user_headers, make_product):
    book = await make_product(price="500")

    await client.post(f"{CHECKOUT_URL}/process", json=process_payload(book.id), headers=user_headers)

    async with session_factory() as fresh:
        assert (await fresh.get(User, user.id)).city is None

async def test_process_rejects_invalid_mobile(client, session, user_headers, make_product):
    book = await make_product(price="500")

    response = await client.post(
        f"{CHECKOUT_URL}/process",
        json=process_payload(book.id, mobileNumber="call me"),
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_MOBILE_NUMBER"
    assert await session.scalar(select(Order.id)) is None

async def test_upload_proof_for_pending_payment(client, session_factory, user_headers, make_product, fake_storage):
    book = await make_product(price="500")
    order = await place_online_order(client, user_headers, book.id)

    response = await client.post(
        f"{CHECKOUT_URL}/upload-proof",
        data={"orderId": order["id"]},
        files=proof_file(),
        headers=user_headers,
    )

    assert response.status_code == 200
    url = response.json()["paymentProof"]
    assert url.startswith("https://cdn.test/bookstore/payment_proofs/proof_")
    assert fake_storage.uploads[0]["size"] == len(b"\x89PNG fake image")

    async with session_factory() as fresh:
        stored = await fresh.scalar(select(Payment.payment_proof).where(Payment.order_id == order["id"]))
        assert stored == url

async def test_upload_proof_requires_payment_record(client, user_headers, make_product, fake_storage):
    book = await make_product(price="500")
    created = await client.post(f"{CHECKOUT_URL}/process", json=process_payload(book.id), headers=user_headers)

    response = await client.post(
        f"{CHECKOUT_URL}/upload-proof",
        data={"orderId": created.json()["order"]["id"]},
        files=proof_file(),
        headers=user_headers,
    )

    assert response.status_code == 400
    assert fake_storage.uploads == []

async def test_upload_proof_for_someone_elses_order(client, user_headers, make_user, make_product):
    book = await make_product(price="500")
    order = await place_online_order(client, user_headers, book.id)
    intruder = await make_user(email="intruder@example.com")

    response = await client.post(
        f"{CHECKOUT_URL}/upload-proof",
        data={"orderId": order["id"]},
        files=proof_file(),
        headers=auth_headers(intruder),
    )

    assert response.status_code == 403

async def test_upload_proof_unknown_order(client, user_headers):
    response = await client.post(
        f"{CHECKOUT_URL}/upload-proof",
        data={"orderId": "missing"},
        files=proof_file(),
        headers=user_headers,
    )

    assert response.status_code == 404

async def test_upload_proof_rejects_bad_extension(client, user_headers, make_product, fake_storage):
    book = await make_product(price="500")
    order = await place_online_order(client, user_headers, book.id)

    response = await client.post(
        f"{CHECKOUT_URL}/upload-proof",
        data={"orderId": order["id"]},
        files=proof_file(name="proof.exe"),
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_FILE_TYPE"
    assert fake_storage.uploads == []

async def test_upload_proof_after_payment_completed(client, admin_headers, user_headers, make_product):
    book = await make_product(price="500")
    order = await place_online_order(client, user_headers, book.id)
    await client.put(
        f"/api/v1/admin/orders/status/{order['id']}",
        json={"status": "confirmed", "paymentStatus": "paid"},
        headers=admin_headers,
    )

    response = await client.post(
        f"{CHECKOUT_URL}/upload-proof",
        data={"orderId": order["id"]},
        files=proof_file(),
        headers=user_headers,
    )

    assert response.status_code == 400

async def test_upload_removed_when_payment_update_fails(session, user, make_product, fake_storage, monkeypatch):
    book = await make_product(price="500")
    order, _ = await OrderService(session).place_order(
        RegisteredBuyer(user_id=user.id),
        [OrderItemInput(product_id=book.id, quantity=1, price=500)],
        shipping_address="12 Mall Road, Lahore",
        payment_method="online",
        online_payment_option="JazzCash",
    )

    async def failing_commit():
        raise OperationalError("UPDATE payments", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "commit", failing_commit)
    service = CheckoutService(session, storage=fake_storage)
    upload = UploadFile(file=io.BytesIO(b"img"), filename="proof.jpg")

    with pytest.raises(OperationalError):
        await service.upload_payment_proof(user.id, order.id, upload)

    assert fake_storage.deleted == [fake_storage.uploads[0]["public_id"]]

async def test_unconfigured_storage_refuses_upload(tmp_path):
    image = tmp_path / "proof.png"
    image.write_bytes(b"img")
    storage = StorageService()

    with pytest.raises(BookstoreException) as exc:
        await storage.upload_image(str(image), folder="bookstore/payment_proofs")

    assert exc.value.error_code == "STORAGE_UNAVAILABLE"
    assert await storage.delete_image("anything") is False
