"""Pure aggregation passes over resolved line items.

Each function makes a single pass that accumulates running totals into an
insertion-ordered dict, so ties and "first seen" ordering follow the order
in which items were read. Nothing here touches the database.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TypeVar

from app.features.analytics.records import (
    UNKNOWN,
    UNKNOWN_PRODUCT,
    CatalogEntry,
    LineItem,
    ResolvedLineItem,
)
from app.features.analytics.schemas import (
    BuyerActivity,
    CategorySales,
    ProductDailySales,
    ProductSummary,
    ProductTotals,
    TopProduct,
)

TOP_PRODUCTS_LIMIT = 20

T = TypeVar("T")
TOP_BUYERS_LIMIT = 10


def day_key(moment: datetime) -> str:
    """Calendar day (UTC) of a timestamp as YYYY-MM-DD."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.date().isoformat()


def round_money(value: float) -> float:
    """Round a monetary amount to cents."""
    return round(value, 2)


def resolve_line_items(
    items: Iterable[LineItem],
    catalog: Mapping[int, CatalogEntry],
) -> list[ResolvedLineItem]:
    """Join line items to catalog entries by parsed id.

    Items whose reference does not parse, or points at a missing entry, are
    kept with ``entry=None`` and fall back to their own name and category.
    """
    resolved: list[ResolvedLineItem] = []
    for item in items:
        catalog_id = item.catalog_id
        entry = catalog.get(catalog_id) if catalog_id is not None else None
        resolved.append(ResolvedLineItem(item=item, entry=entry))
    return resolved


def sales_by_category(resolved: Iterable[ResolvedLineItem]) -> list[CategorySales]:
    """Revenue and units per category, in first-seen order."""
    totals: dict[str, list[float]] = {}
    for row in resolved:
        bucket = totals.setdefault(row.category, [0.0, 0])
        bucket[0] += row.item.revenue
        bucket[1] += row.item.qty

    return [
        CategorySales(name=name, revenue=round_money(revenue), qty=qty)
        for name, (revenue, qty) in totals.items()
    ]


def top_products(
    resolved: Iterable[ResolvedLineItem],
    limit: int = TOP_PRODUCTS_LIMIT,
) -> list[TopProduct]:
    """Best sellers by units, keyed by product name.

    The sort is stable, so products with equal units keep first-seen order.
    """
    totals: dict[str, list[float]] = {}
    for row in resolved:
        bucket = totals.setdefault(row.display_name(UNKNOWN_PRODUCT), [0, 0.0])
        bucket[0] += row.item.qty
        bucket[1] += row.item.revenue

    ranked = sorted(totals.items(), key=lambda pair: pair[1][0], reverse=True)
    return [
        TopProduct(name=name, qty=qty, revenue=round_money(revenue))
        for name, (qty, revenue) in ranked[:limit]
    ]


@dataclass
class _ProductAccumulator:
    product_id: str | None
    name: str
    category: str
    qty: int | float = 0
    revenue: float = 0.0
    orders: int = 0
    price_sum: float = 0.0
    buyers: set[str] = field(default_factory=set)

    def add(self, row: ResolvedLineItem) -> None:
        self.qty += row.item.qty
        self.revenue += row.item.revenue
        self.orders += 1
        self.price_sum += row.item.price
        if row.item.user_id is not None:
            self.buyers.add(row.item.user_id)

    def summary(self) -> ProductSummary:
        return ProductSummary(
            product_id=self.product_id,
            name=self.name,
            category=self.category,
            qty=self.qty,
            revenue=round_money(self.revenue),
            orders=self.orders,
            avg_price=round(self.price_sum / self.orders, 2) if self.orders else 0.0,
            buyers_count=len(self.buyers),
        )


def summarize_products(
    resolved: Iterable[ResolvedLineItem],
    category: str | None = None,
) -> list[ProductSummary]:
    """Per-product summaries ordered by revenue, highest first.

    Name and category of a group come from its first line item.

    Args:
        resolved: Resolved line items in the window.
        category: Keep only items whose resolved category equals this value.

    Returns:
        Summaries without stock, sorted by revenue descending (stable).
    """
    groups: dict[str | None, _ProductAccumulator] = {}
    for row in resolved:
        if category is not None and row.category != category:
            continue
        key = row.product_key
        acc = groups.get(key)
        if acc is None:
            acc = _ProductAccumulator(
                product_id=key,
                name=row.display_name(UNKNOWN),
                category=row.category,
            )
            groups[key] = acc
        acc.add(row)

    summaries = [acc.summary() for acc in groups.values()]
    summaries.sort(key=lambda s: s.revenue, reverse=True)
    return summaries


def paginate(rows: Sequence[T], page: int, limit: int) -> list[T]:
    """Slice one 1-indexed page out of ``rows``."""
    offset = (page - 1) * limit
    return list(rows[offset : offset + limit])


def matches_product(item: LineItem, product: CatalogEntry) -> bool:
    """Whether a line item refers to ``product`` by id or by name."""
    if product.id is not None and item.catalog_id == product.id:
        return True
    return item.name is not None and item.name == product.name


def daily_product_sales(items: Iterable[LineItem]) -> list[ProductDailySales]:
    """Units, revenue and line-item count per day, oldest first."""
    days: dict[str, list[float]] = {}
    for item in items:
        bucket = days.setdefault(day_key(item.ordered_at), [0, 0.0, 0])
        bucket[0] += item.qty
        bucket[1] += item.revenue
        bucket[2] += 1

    return [
        ProductDailySales(date=day, qty=qty, revenue=round_money(revenue), orders=int(orders))
        for day, (qty, revenue, orders) in sorted(days.items())
    ]


def fold_totals(series: Iterable[ProductDailySales]) -> ProductTotals:
    """Sum a daily series into window totals."""
    totals = ProductTotals()
    for point in series:
        totals.qty += point.qty
        totals.revenue += point.revenue
        totals.orders += point.orders
    totals.revenue = round_money(totals.revenue)
    return totals


def buyer_activity(items: Iterable[LineItem]) -> list[BuyerActivity]:
    """Units and distinct orders per buyer, most units first.

    Items without a buyer are skipped.
    """
    units: dict[str, int | float] = {}
    orders: dict[str, set[int]] = {}
    for item in items:
        if item.user_id is None:
            continue
        units[item.user_id] = units.get(item.user_id, 0) + item.qty
        orders.setdefault(item.user_id, set()).add(item.order_id)

    activity = [
        BuyerActivity(user_id=user_id, qty=qty, orders=len(orders[user_id]))
        for user_id, qty in units.items()
    ]
    activity.sort(key=lambda b: b.qty, reverse=True)
    return activity


def count_repeat_buyers(activity: Iterable[BuyerActivity]) -> int:
    """Buyers with more than one order in ``activity``."""
    return sum(1 for buyer in activity if buyer.orders > 1)


def conversion_rate(total_orders: int, total_users: int) -> float:
    """Orders per user as a percentage, rounded to 2 decimals.

    Not clamped: repeat customers push it above 100.
    """
    if total_users <= 0:
        return 0.0
    return round(total_orders / total_users * 100, 2)
