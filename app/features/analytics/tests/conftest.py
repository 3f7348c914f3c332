"""Feature-specific test fixtures for analytics module."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pytest
from sqlalchemy.exc import OperationalError

from app.features.analytics.aggregations import day_key, round_money
from app.features.analytics.records import CatalogEntry, LineItem, expand_order_items
from app.features.analytics.schemas import DailySales
from app.features.analytics.service import AnalyticsService
from app.features.analytics.window import DateWindow

NOW = datetime(2025, 10, 30, 12, 0, tzinfo=UTC)


@dataclass
class FakeOrder:
    """Order row as the reader sees it."""

    id: int
    user_id: str | None
    date: datetime
    items: Any
    amount: float = 0.0
    payment: bool = True


@dataclass
class FakeSalesDataReader:
    """In-memory SalesDataReader for service tests."""

    foods: list[CatalogEntry] = field(default_factory=list)
    orders: list[FakeOrder] = field(default_factory=list)
    users: int = 0
    failing_stock: set[str] = field(default_factory=set)

    async def count_orders(self, db: Any) -> int:
        return len(self.orders)

    async def count_foods(self, db: Any) -> int:
        return len(self.foods)

    async def count_users(self, db: Any) -> int:
        return self.users

    async def total_paid_sales(self, db: Any) -> float:
        return sum(order.amount for order in self.orders if order.payment)

    async def count_active_users(self, db: Any, window: DateWindow) -> int:
        return len(
            {
                order.user_id
                for order in self.orders
                if order.user_id is not None and window.contains(order.date)
            }
        )

    async def daily_sales(self, db: Any, window: DateWindow) -> list[DailySales]:
        days: dict[str, list[float]] = {}
        for order in self.orders:
            if order.payment and window.contains(order.date):
                bucket = days.setdefault(day_key(order.date), [0.0, 0])
                bucket[0] += order.amount
                bucket[1] += 1
        return [
            DailySales(date=day, total=round_money(total), orders=int(count))
            for day, (total, count) in sorted(days.items())
        ]

    async def paid_line_items(self, db: Any, window: DateWindow) -> list[LineItem]:
        items: list[LineItem] = []
        for order in sorted(self.orders, key=lambda o: (o.date, o.id)):
            if order.payment and window.contains(order.date):
                items.extend(
                    expand_order_items(
                        order.items,
                        order_id=order.id,
                        user_id=order.user_id,
                        ordered_at=order.date,
                    )
                )
        return items

    async def catalog_by_ids(self, db: Any, ids: set[int]) -> dict[int, CatalogEntry]:
        return {food.id: food for food in self.foods if food.id in ids}

    async def get_food(self, db: Any, food_id: int) -> CatalogEntry | None:
        return next((food for food in self.foods if food.id == food_id), None)

    async def get_food_by_name(self, db: Any, name: str) -> CatalogEntry | None:
        return next((food for food in self.foods if food.name == name), None)

    async def find_stock(self, db: Any, product_id: str | None, name: str | None) -> int | None:
        if product_id in self.failing_stock:
            raise OperationalError("SELECT food", {}, Exception("connection lost"))
        entry = None
        if product_id is not None and product_id.isdigit():
            entry = await self.get_food(db, int(product_id))
        if entry is None and name:
            entry = await self.get_food_by_name(db, name)
        return entry.stock if entry is not None else None


def _food(
    id: int,
    name: str,
    category: str | None = "Salad",
    price: float | None = 10.0,
    stock: int | None = 50,
) -> CatalogEntry:
    """Build a catalog entry."""
    return CatalogEntry(id=id, name=name, category=category, price=price, stock=stock)


def _at(day: int, hour: int = 12) -> datetime:
    """Timestamp on a day of October 2025."""
    return datetime(2025, 10, day, hour, tzinfo=UTC)


@pytest.fixture
def reader() -> FakeSalesDataReader:
    """Empty fake reader."""
    return FakeSalesDataReader()


@pytest.fixture
def service(reader: FakeSalesDataReader) -> AnalyticsService:
    """Analytics service backed by the fake reader."""
    return AnalyticsService(reader=reader)


@pytest.fixture
def caesar_reader() -> FakeSalesDataReader:
    """One catalog product (Caesar) bought twice by the same user.

    Order 1 (Oct 1): 2 x Caesar at 10.
    Order 2 (Oct 2): 1 x Caesar at 10.
    """
    return FakeSalesDataReader(
        foods=[_food(1, "Caesar", "Salad", 10.0, stock=7)],
        orders=[
            FakeOrder(
                id=1,
                user_id="u1",
                date=_at(1),
                items=[{"foodId": "1", "name": "Caesar", "qty": 2, "price": 10}],
                amount=20.0,
            ),
            FakeOrder(
                id=2,
                user_id="u1",
                date=_at(2),
                items=[{"_id": 1, "name": "Caesar", "quantity": 1, "price": 10}],
                amount=10.0,
            ),
        ],
        users=1,
    )


@pytest.fixture
def make_food():
    """Factory for catalog entries."""
    return _food


@pytest.fixture
def at():
    """Factory for October 2025 timestamps."""
    return _at


@pytest.fixture
def make_order():
    """Factory for fake order rows."""
    return FakeOrder


@pytest.fixture
def make_reader():
    """Factory for fake readers."""
    return FakeSalesDataReader


@pytest.fixture
def now() -> datetime:
    """Pinned reference time (2025-10-30 12:00 UTC)."""
    return NOW
