"""Route tests for order endpoints."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from app.core.exceptions import BadRequestError, ConflictError
from app.features.orders.routes import get_order_service
from app.features.orders.schemas import OrderRead, PlacedOrder
from app.features.orders.service import OrderService

CHECKOUT = {
    "userId": "7",
    "items": [{"foodId": "1", "name": "Caesar Salad", "price": 9.99, "quantity": 2}],
    "amount": 19.98,
    "address": {"city": "Pune"},
}


@pytest.fixture
def service(override, mock_db) -> AsyncMock:
    """Order service double wired into the app."""
    return override(get_order_service, AsyncMock(spec=OrderService))


@pytest.fixture
def order_read() -> OrderRead:
    return OrderRead(
        id=10,
        user_id="7",
        items=CHECKOUT["items"],
        amount=19.98,
        payment=True,
        status="pending",
        date=datetime(2025, 10, 1, 12, tzinfo=UTC),
    )


async def test_place_card_order(client, service):
    """Test that a card order returns the pending order id."""
    service.place_order.return_value = PlacedOrder(order_id=10, amount=19.98, currency="INR")

    response = await client.post("/order/place", json=CHECKOUT)

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {"orderId": 10, "amount": 19.98, "currency": "INR"}
    payload = service.place_order.call_args.args[1]
    assert payload.user_id == "7"


async def test_place_cod_order(client, service, order_read):
    """Test that a cash-on-delivery order is confirmed."""
    service.place_cod_order.return_value = order_read

    response = await client.post("/order/place-cod", json=CHECKOUT)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Order Placed"
    assert body["data"]["payment"] is True
    assert body["data"]["userId"] == "7"


async def test_place_order_requires_amount(client, service):
    """Test that a checkout without amount is rejected."""
    response = await client.post("/order/place", json={"items": [{"name": "Soup"}]})

    assert response.status_code == 422
    service.place_order.assert_not_awaited()


@pytest.mark.parametrize("amount", ["Infinity", "1e11"])
async def test_place_order_rejects_out_of_range_amount(client, service, amount):
    """Test that totals the amount column cannot hold are rejected."""
    response = await client.post(
        "/order/place",
        content=f'{{"items": [{{"name": "Soup"}}], "amount": {amount}}}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    service.place_order.assert_not_awaited()


@pytest.mark.parametrize(
    ("paid", "success", "message"),
    [(True, True, "Paid"), (False, False, "Not Paid")],
)
async def test_verify_order(client, service, paid, success, message):
    """Test both outcomes of the checkout redirect."""
    service.verify_order.return_value = paid

    response = await client.post("/order/verify", json={"orderId": 10, "success": "true" if paid else "false"})

    assert response.status_code == 200
    assert response.json() == {"success": success, "message": message}
    service.verify_order.assert_awaited_once()
    assert service.verify_order.call_args.args[2] is paid


async def test_verify_already_paid_is_409(client, service):
    """Test that settling a paid order is a conflict."""
    service.verify_order.side_effect = ConflictError(message="Order already paid")

    response = await client.post("/order/verify", json={"orderId": 10, "success": True})

    assert response.status_code == 409
    assert response.json()["success"] is False


async def test_verify_signature(client, service, order_read):
    """Test that a verified signature returns the paid order."""
    service.verify_signature.return_value = order_read

    response = await client.post(
        "/order/verify-signature",
        json={"orderId": 10, "providerOrderId": "order_abc", "paymentId": "pay_xyz", "signature": "ab12"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["verified"] is True
    assert body["data"]["id"] == 10
    kwargs = service.verify_signature.call_args.kwargs
    assert kwargs["provider_order_id"] == "order_abc"
    assert kwargs["payment_id"] == "pay_xyz"


async def test_verify_signature_mismatch_is_400(client, service):
    """Test that a bad signature is reported as a 400 problem."""
    service.verify_signature.side_effect = BadRequestError(message="Invalid payment signature")

    response = await client.post(
        "/order/verify-signature",
        json={"orderId": 10, "providerOrderId": "order_abc", "paymentId": "pay_xyz", "signature": "00"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid payment signature"


async def test_verify_signature_missing_fields(client, service):
    """Test that all signature fields are required."""
    response = await client.post("/order/verify-signature", json={"orderId": 10, "signature": "00"})

    assert response.status_code == 422
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"providerOrderId", "paymentId"}


async def test_list_and_user_orders(client, service, order_read):
    """Test both listing endpoints."""
    service.list_orders.return_value = [order_read]
    service.user_orders.return_value = [order_read]

    all_response = await client.get("/order/list")
    user_response = await client.get("/order/user/7")

    assert [o["id"] for o in all_response.json()["data"]] == [10]
    assert [o["id"] for o in user_response.json()["data"]] == [10]
    assert service.user_orders.call_args.args[1] == "7"


async def test_update_status(client, service, order_read):
    """Test that the status update echoes the order."""
    service.update_status.return_value = order_read.model_copy(update={"status": "delivered"})

    response = await client.post("/order/status", json={"orderId": 10, "status": "delivered"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Status Updated"
    assert body["data"]["status"] == "delivered"
