"""Feature-specific test fixtures for orders module."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.features.orders.models import Order
from app.features.orders.schemas import OrderCreate


@pytest.fixture
def order_payload() -> OrderCreate:
    """Checkout payload for two line items."""
    return OrderCreate(
        user_id="7",
        items=[
            {"foodId": "1", "name": "Caesar Salad", "price": 9.99, "quantity": 2},
            {"foodId": "2", "name": "Tomato Soup", "price": 6.0, "quantity": 1},
        ],
        amount=25.98,
        address={"street": "1 Main St", "city": "Pune"},
    )


@pytest.fixture
def pending_order() -> Order:
    """Unpaid card order, as if loaded."""
    return Order(
        id=10,
        user_id="7",
        items=[{"foodId": "1", "name": "Caesar Salad", "price": 9.99, "quantity": 1}],
        amount=Decimal("9.99"),
        address=None,
        payment=False,
        status="pending",
        date=datetime(2025, 10, 1, 12, tzinfo=UTC),
    )


@pytest.fixture
def session() -> AsyncMock:
    """AsyncSession double; refresh fills server-side defaults of new rows."""
    db = AsyncMock(spec=AsyncSession)

    async def refresh(obj):
        if obj.id is None:
            obj.id = 100
        if obj.status is None:
            obj.status = "pending"
        if obj.date is None:
            obj.date = datetime(2025, 10, 2, 9, tzinfo=UTC)

    db.refresh.side_effect = refresh
    return db


@pytest.fixture
def payment_secret(monkeypatch) -> str:
    """Configure the payment signing secret."""
    secret = "test_secret_key"
    monkeypatch.setattr(get_settings(), "payment_key_secret", secret)
    return secret
