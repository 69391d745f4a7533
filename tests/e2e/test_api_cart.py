"""
End-to-end tests for the cart and checkout
"""
from unittest.mock import AsyncMock, patch

import pytest

from app.config import settings
from app.core.exceptions import StorageError, TelegramError
from app.repositories import Database
from app.services.telegram_service import telegram_service

pytestmark = pytest.mark.e2e

ROSES = {"productId": "roses", "name": "Красные розы", "price": 2500, "image": "roses.jpg"}
TULIPS = {"productId": "tulips", "name": "Белые тюльпаны", "price": 1800, "image": "tulips.jpg"}

CHECKOUT = {
    "phone": "+79991234567",
    "adres": "ул. Цветочная, 1",
    "name": "Анна",
    "postCard": True,
    "postCardText": "С днём рождения!",
}


def test_cart_requires_session(client):
    assert client.get("/cart").status_code == 401
    assert client.post("/cart/add", json=ROSES).status_code == 401


def test_shopping_flow(client, register):
    """Register, log in again, fill the cart and read it back"""
    register(client, "alice", "alice@example.com")
    client.cookies.clear()
    login = client.post(
        "/auth/login", json={"email": "alice@example.com", "password": "secret123"}
    )
    assert login.status_code == 200

    first = client.post("/cart/add", json={**ROSES, "count": 2})
    second = client.post("/cart/add", json=TULIPS)
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["count"] == 2
    assert first.json()["userId"] == login.json()["user"]["id"]

    cart = client.get("/cart").json()
    assert {item["productId"] for item in cart["items"]} == {"roses", "tulips"}
    assert cart["total"] == 2 * 2500 + 1800
    assert cart["count"] == 3

    assert client.get("/cart/total").json() == {"total": 6800, "count": 3}


def test_add_same_product_merges_lines(user_client):
    user_client.post("/cart/add", json=ROSES)
    response = user_client.post("/cart/add", json={**ROSES, "count": 3, "image": "new.jpg"})

    assert response.json()["count"] == 4
    items = user_client.get("/cart").json()["items"]
    assert len(items) == 1
    assert items[0]["image"] == "new.jpg"


@pytest.mark.parametrize(
    "payload",
    [
        {**ROSES, "price": 0},
        {**ROSES, "count": 0},
        {"name": "Без id", "price": 10, "image": "x.jpg"},
    ],
)
def test_add_invalid_item(user_client, payload):
    response = user_client.post("/cart/add", json=payload)

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.parametrize("literal", ["Infinity", "NaN"])
def test_add_rejects_non_finite_price(user_client, data_dir, literal):
    """A non-finite price never reaches cart.json"""
    body = '{"productId": "p", "name": "n", "price": %s, "image": "i.jpg"}' % literal
    user_id = user_client.get("/users/me").json()["id"]

    response = user_client.post(
        "/cart/add", content=body, headers={"Content-Type": "application/json"}
    )
    user_client.post("/cart/add", json=ROSES)

    assert response.status_code == 400
    reloaded = Database(data_dir)
    assert [i.product_id for i in reloaded.cart.get_all_for_user(user_id)] == ["roses"]


@pytest.mark.parametrize("field, value", [("price", "2500"), ("count", "2")])
def test_add_rejects_numbers_as_strings(user_client, field, value):
    response = user_client.post("/cart/add", json={**ROSES, field: value})

    assert response.status_code == 400


def test_update_count(user_client):
    item_id = user_client.post("/cart/add", json=ROSES).json()["id"]

    response = user_client.post("/cart/update", json={"itemId": item_id, "count": 5})

    assert response.status_code == 200
    assert user_client.get("/cart/total").json()["count"] == 5


def test_update_count_to_zero_removes_item(user_client):
    item_id = user_client.post("/cart/add", json=ROSES).json()["id"]

    response = user_client.post("/cart/update", json={"itemId": item_id, "count": 0})

    assert response.status_code == 200
    assert user_client.get("/cart").json()["items"] == []


def test_update_negative_count_rejected(user_client):
    item_id = user_client.post("/cart/add", json=ROSES).json()["id"]

    response = user_client.post("/cart/update", json={"itemId": item_id, "count": -1})

    assert response.status_code == 400


def test_cannot_touch_another_users_item(client, register, test_db):
    register(client, "alice", "alice@example.com")
    alice_item = client.post("/cart/add", json=ROSES).json()["id"]
    register(client, "bobby", "bob@example.com")

    update = client.post("/cart/update", json={"itemId": alice_item, "count": 9})
    delete = client.delete(f"/cart/{alice_item}")

    assert update.status_code == 403
    assert update.json() == {"error": "Forbidden"}
    assert delete.status_code == 403
    assert test_db.cart.get_one(alice_item).count == 1


def test_unknown_item_is_forbidden(user_client):
    assert user_client.post("/cart/update", json={"itemId": "nope", "count": 1}).status_code == 403
    assert user_client.delete("/cart/nope").status_code == 403


def test_remove_item(user_client):
    item_id = user_client.post("/cart/add", json=ROSES).json()["id"]
    user_client.post("/cart/add", json=TULIPS)

    response = user_client.delete(f"/cart/{item_id}")

    assert response.status_code == 200
    assert [i["productId"] for i in user_client.get("/cart").json()["items"]] == ["tulips"]


def test_clear_cart(user_client):
    user_client.post("/cart/add", json=ROSES)
    user_client.post("/cart/add", json=TULIPS)

    response = user_client.delete("/cart")

    assert response.status_code == 200
    assert response.json()["message"] == "Корзина очищена"
    assert user_client.get("/cart/total").json() == {"total": 0, "count": 0}


def test_checkout_sends_order_and_clears_cart(user_client):
    user_client.post("/cart/add", json={**ROSES, "count": 2})
    send = AsyncMock(return_value={"message_id": 42})

    with patch.object(telegram_service, "send_message", send):
        response = user_client.post("/cart/checkout", json=CHECKOUT)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["orderId"] == 42
    assert user_client.get("/cart").json()["items"] == []

    bot_token, chat_id, text = send.await_args.args
    assert bot_token == settings.TG_BOT_TOKEN_ORDER
    assert chat_id == settings.TELEGRAM_CHAT_ID
    assert "ул. Цветочная, 1" in text
    assert "Красные розы — 2 шт × 2500 ₽ = 5000 ₽" in text
    assert "С днём рождения!" in text


def test_checkout_empty_cart(user_client):
    send = AsyncMock()

    with patch.object(telegram_service, "send_message", send):
        response = user_client.post("/cart/checkout", json=CHECKOUT)

    assert response.status_code == 400
    assert response.json() == {"error": "Корзина пуста"}
    send.assert_not_awaited()


def test_checkout_requires_address(user_client):
    user_client.post("/cart/add", json=ROSES)
    payload = {k: v for k, v in CHECKOUT.items() if k != "adres"}

    assert user_client.post("/cart/checkout", json=payload).status_code == 400


@pytest.mark.parametrize("missing", ["name", "postCard", "postCardText"])
def test_checkout_requires_every_field(user_client, missing):
    user_client.post("/cart/add", json=ROSES)
    payload = {k: v for k, v in CHECKOUT.items() if k != missing}

    assert user_client.post("/cart/checkout", json=payload).status_code == 400


def test_checkout_keeps_items_added_while_sending(user_client, test_db):
    """Only what went into the order message leaves the cart"""
    user_id = user_client.post("/cart/add", json=ROSES).json()["userId"]

    async def add_during_send(*args):
        await test_db.cart.add_item(user_id, "roses", "Красные розы", 2500, "roses.jpg")
        await test_db.cart.add_item(user_id, "tulips", "Белые тюльпаны", 1800, "tulips.jpg")
        return {"message_id": 43}

    with patch.object(telegram_service, "send_message", AsyncMock(side_effect=add_during_send)):
        response = user_client.post("/cart/checkout", json=CHECKOUT)

    assert response.status_code == 200
    remaining = {i["productId"]: i["count"] for i in user_client.get("/cart").json()["items"]}
    assert remaining == {"roses": 1, "tulips": 1}


def test_checkout_without_telegram_keeps_cart(user_client, monkeypatch):
    monkeypatch.setattr(settings, "TG_BOT_TOKEN_ORDER", None)
    monkeypatch.setattr(settings, "TELEGRAM_CHAT_ID", None)
    user_client.post("/cart/add", json=ROSES)

    response = user_client.post("/cart/checkout", json=CHECKOUT)

    assert response.status_code == 500
    assert response.json() == {"error": "Telegram не настроен"}
    assert len(user_client.get("/cart").json()["items"]) == 1


def test_checkout_telegram_failure_keeps_cart(user_client):
    user_client.post("/cart/add", json=ROSES)
    send = AsyncMock(side_effect=TelegramError("chat not found"))

    with patch.object(telegram_service, "send_message", send):
        response = user_client.post("/cart/checkout", json=CHECKOUT)

    assert response.status_code == 500
    assert response.json() == {"error": "Ошибка при отправке в Telegram"}
    assert len(user_client.get("/cart").json()["items"]) == 1


def test_storage_failure_is_server_error(user_client, test_db):
    with patch.object(test_db.cart._store, "_write", side_effect=StorageError("disk full")):
        response = user_client.post("/cart/add", json=ROSES)

    assert response.status_code == 500
    assert response.json() == {"error": "Ошибка сервера"}
    assert user_client.get("/cart").json()["items"] == []
