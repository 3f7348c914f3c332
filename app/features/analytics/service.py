"""Service layer for admin sales analytics.

Reads go through a ``SalesDataReader`` (SQLAlchemy 2.0 queries); the
grouping of line items happens in ``aggregations``. Store faults propagate
as ``SQLAlchemyError`` and are turned into problem responses by the routes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.features.analytics import aggregations
from app.features.analytics.records import (
    UNCATEGORIZED,
    CatalogEntry,
    LineItem,
    ResolvedLineItem,
    expand_order_items,
    parse_catalog_id,
)
from app.features.analytics.schemas import (
    DailySales,
    OverviewData,
    PageInfo,
    ProductDetail,
    ProductInfo,
    ProductInsightsPage,
    ProductSummary,
)
from app.features.analytics.window import DateWindow, resolve_window
from app.features.catalog.models import Food
from app.features.orders.models import Order
from app.features.users.models import User
from app.shared.utils import to_float

logger = get_logger(__name__)


# =============================================================================
# Data Access
# =============================================================================


@runtime_checkable
class SalesDataReaderProtocol(Protocol):
    """Read access to orders, catalog and users needed by analytics."""

    async def count_orders(self, db: AsyncSession) -> int:
        """Count all orders."""
        ...

    async def count_foods(self, db: AsyncSession) -> int:
        """Count all catalog entries."""
        ...

    async def count_users(self, db: AsyncSession) -> int:
        """Count all users."""
        ...

    async def total_paid_sales(self, db: AsyncSession) -> float:
        """Sum amount over all paid orders."""
        ...

    async def count_active_users(self, db: AsyncSession, window: DateWindow) -> int:
        """Count distinct buyers with orders in the window."""
        ...

    async def daily_sales(self, db: AsyncSession, window: DateWindow) -> list[DailySales]:
        """Paid sales per day in the window."""
        ...

    async def paid_line_items(self, db: AsyncSession, window: DateWindow) -> list[LineItem]:
        """Line items of paid orders in the window."""
        ...

    async def catalog_by_ids(self, db: AsyncSession, ids: set[int]) -> dict[int, CatalogEntry]:
        """Catalog entries for the given ids."""
        ...

    async def get_food(self, db: AsyncSession, food_id: int) -> CatalogEntry | None:
        """Catalog entry by id."""
        ...

    async def get_food_by_name(self, db: AsyncSession, name: str) -> CatalogEntry | None:
        """Catalog entry by exact name."""
        ...

    async def find_stock(
        self, db: AsyncSession, product_id: str | None, name: str | None
    ) -> int | None:
        """Current stock of a product, looked up by id then by name."""
        ...


class SalesDataReader:
    """SQLAlchemy implementation of the analytics read model."""

    async def count_orders(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(Order))
        return int(result.scalar_one())

    async def count_foods(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(Food))
        return int(result.scalar_one())

    async def count_users(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(User))
        return int(result.scalar_one())

    async def total_paid_sales(self, db: AsyncSession) -> float:
        stmt = select(func.coalesce(func.sum(Order.amount), 0)).where(Order.payment.is_(True))
        result = await db.execute(stmt)
        return to_float(result.scalar_one()) or 0.0

    async def count_active_users(self, db: AsyncSession, window: DateWindow) -> int:
        """Count distinct buyers in the window regardless of payment.

        Orders without a user id are not counted.
        """
        stmt = select(func.count(func.distinct(Order.user_id))).where(
            (Order.date >= window.start) & (Order.date <= window.end)
        )
        result = await db.execute(stmt)
        return int(result.scalar_one())

    async def daily_sales(self, db: AsyncSession, window: DateWindow) -> list[DailySales]:
        """Group paid orders in the window by UTC calendar day."""
        day = func.date(func.timezone("UTC", Order.date))
        stmt = (
            select(
                day.label("day"),
                func.coalesce(func.sum(Order.amount), 0).label("total"),
                func.count().label("orders"),
            )
            .where(
                Order.payment.is_(True),
                (Order.date >= window.start) & (Order.date <= window.end),
            )
            .group_by(day)
            .order_by(day)
        )
        result = await db.execute(stmt)
        return [
            DailySales(
                date=str(row.day),
                total=aggregations.round_money(to_float(row.total) or 0.0),
                orders=int(row.orders),
            )
            for row in result
        ]

    async def paid_line_items(self, db: AsyncSession, window: DateWindow) -> list[LineItem]:
        """Expand every paid order in the window into line items.

        Orders are read oldest first so downstream "first seen" ordering is
        deterministic.
        """
        stmt = (
            select(Order.id, Order.user_id, Order.date, Order.items)
            .where(
                Order.payment.is_(True),
                (Order.date >= window.start) & (Order.date <= window.end),
            )
            .order_by(Order.date, Order.id)
        )
        result = await db.execute(stmt)

        items: list[LineItem] = []
        for row in result:
            items.extend(
                expand_order_items(
                    row.items,
                    order_id=row.id,
                    user_id=row.user_id,
                    ordered_at=row.date,
                )
            )
        return items

    async def catalog_by_ids(self, db: AsyncSession, ids: set[int]) -> dict[int, CatalogEntry]:
        if not ids:
            return {}

        result = await db.execute(select(Food).where(Food.id.in_(ids)))
        return {food.id: CatalogEntry.from_food(food) for food in result.scalars()}

    async def get_food(self, db: AsyncSession, food_id: int) -> CatalogEntry | None:
        food = await db.get(Food, food_id)
        return CatalogEntry.from_food(food) if food is not None else None

    async def get_food_by_name(self, db: AsyncSession, name: str) -> CatalogEntry | None:
        stmt = select(Food).where(Food.name == name).order_by(Food.id).limit(1)
        result = await db.execute(stmt)
        food = result.scalar_one_or_none()
        return CatalogEntry.from_food(food) if food is not None else None

    async def find_stock(
        self, db: AsyncSession, product_id: str | None, name: str | None
    ) -> int | None:
        """Look up current stock inside a savepoint.

        The savepoint keeps a failed lookup from aborting the surrounding
        transaction, so the caller can degrade that row and carry on.
        """
        async with db.begin_nested():
            entry: CatalogEntry | None = None
            food_id = parse_catalog_id(product_id)
            if food_id is not None:
                entry = await self.get_food(db, food_id)
            if entry is None and name:
                entry = await self.get_food_by_name(db, name)
        return entry.stock if entry is not None else None


# =============================================================================
# Service
# =============================================================================


class AnalyticsService:
    """Service for the admin dashboard KPIs and product insights.

    All methods are async and take the request's database session.
    """

    def __init__(self, reader: SalesDataReaderProtocol | None = None) -> None:
        """Initialize analytics service.

        Args:
            reader: Data access implementation; defaults to SalesDataReader.
        """
        self.settings = get_settings()
        self.reader: SalesDataReaderProtocol = reader or SalesDataReader()

    def resolve_window(
        self,
        start: str | None,
        end: str | None,
        now: datetime | None = None,
    ) -> DateWindow:
        """Resolve query bounds using the configured default window length."""
        return resolve_window(
            start,
            end,
            now=now,
            days=self.settings.analytics_default_window_days,
        )

    async def get_overview(
        self,
        db: AsyncSession,
        start: str | None = None,
        end: str | None = None,
        now: datetime | None = None,
    ) -> OverviewData:
        """Compute dashboard KPIs.

        Args:
            db: Database session.
            start: Optional ISO start date of the window.
            end: Optional ISO end date of the window (inclusive).
            now: Reference time for the default window.

        Returns:
            Global totals plus windowed series and breakdowns.
        """
        window = self.resolve_window(start, end, now)

        total_orders = await self.reader.count_orders(db)
        total_products = await self.reader.count_foods(db)
        total_users = await self.reader.count_users(db)
        total_sales = await self.reader.total_paid_sales(db)
        active_users = await self.reader.count_active_users(db, window)
        sales_over_time = await self.reader.daily_sales(db, window)

        resolved = await self._resolved_line_items(db, window)

        overview = OverviewData(
            total_sales=aggregations.round_money(total_sales),
            total_orders=total_orders,
            total_products=total_products,
            total_users=total_users,
            active_users_window=active_users,
            sales_over_time=sales_over_time,
            sales_by_category=aggregations.sales_by_category(resolved),
            top_products=aggregations.top_products(
                resolved, limit=self.settings.analytics_top_products_limit
            ),
            conversion_rate=aggregations.conversion_rate(total_orders, total_users),
            range=window.to_range(),
        )

        logger.info(
            "analytics.overview_computed",
            window_start=overview.range.start,
            window_end=overview.range.end,
            total_orders=total_orders,
            line_items=len(resolved),
            days=len(sales_over_time),
        )

        return overview

    async def get_product_insights(
        self,
        db: AsyncSession,
        start: str | None = None,
        end: str | None = None,
        category: str | None = None,
        product_id: str | None = None,
        page: int = 1,
        limit: int | None = None,
        now: datetime | None = None,
    ) -> ProductDetail | ProductInsightsPage:
        """Product drill-down when ``product_id`` is given, else a ranked list.

        Args:
            db: Database session.
            start: Optional ISO start date of the window.
            end: Optional ISO end date of the window (inclusive).
            category: List mode only; exact category filter.
            product_id: Catalog id or product name to drill into.
            page: List mode page number (1-indexed).
            limit: List mode page size; defaults from settings, capped at the maximum.
            now: Reference time for the default window.

        Returns:
            ProductDetail or ProductInsightsPage.

        Raises:
            NotFoundError: If product_id matches neither a catalog entry nor
                any line item in the window.
        """
        window = self.resolve_window(start, end, now)

        if product_id:
            return await self.get_product_detail(db, product_id, window)

        page_size = min(
            limit or self.settings.analytics_default_page_size,
            self.settings.analytics_max_page_size,
        )
        return await self.list_products(db, window, category, max(page, 1), page_size)

    async def get_product_detail(
        self,
        db: AsyncSession,
        product_id: str,
        window: DateWindow,
    ) -> ProductDetail:
        """Daily series, totals and buyer stats for one product.

        The product is looked up by id when ``product_id`` parses as one,
        then by exact name. If the catalog has no match but line items in
        the window carry that name, the detail is built from those items.
        """
        entry = await self._find_catalog_entry(db, product_id)
        items = await self.reader.paid_line_items(db, window)

        if entry is None:
            named = [item for item in items if item.name == product_id]
            if not named:
                raise NotFoundError(
                    message="Product not found",
                    details={"product_id": product_id},
                )
            entry = CatalogEntry(
                id=None,
                name=product_id,
                category=named[0].category or UNCATEGORIZED,
                price=None,
                stock=None,
            )

        matching = [item for item in items if aggregations.matches_product(item, entry)]
        series = aggregations.daily_product_sales(matching)
        buyers = aggregations.buyer_activity(matching)

        detail = ProductDetail(
            product=ProductInfo(
                id=entry.id,
                name=entry.name,
                category=entry.category,
                price=entry.price,
                stock=entry.stock,
            ),
            totals=aggregations.fold_totals(series),
            sales_over_time=series,
            repeat_buyers=aggregations.count_repeat_buyers(buyers),
            top_buyers=buyers[: aggregations.TOP_BUYERS_LIMIT],
            range=window.to_range(),
        )

        logger.info(
            "analytics.product_detail_computed",
            product_id=product_id,
            catalog_id=entry.id,
            line_items=len(matching),
            days=len(series),
        )

        return detail

    async def list_products(
        self,
        db: AsyncSession,
        window: DateWindow,
        category: str | None,
        page: int,
        limit: int,
    ) -> ProductInsightsPage:
        """One page of per-product summaries, highest revenue first.

        Stock is re-attached per row after paging; a failed lookup leaves
        that row's stock null instead of failing the page.
        """
        resolved = await self._resolved_line_items(db, window)
        summaries = aggregations.summarize_products(resolved, category=category)
        page_rows = aggregations.paginate(summaries, page, limit)

        products = [await self._with_stock(db, row) for row in page_rows]
        total_products = await self.reader.count_foods(db)

        logger.info(
            "analytics.product_list_computed",
            category=category,
            page=page,
            limit=limit,
            products_in_window=len(summaries),
            returned=len(products),
        )

        return ProductInsightsPage(
            products=products,
            pagination=PageInfo(page=page, limit=limit),
            total_products_count=total_products,
            range=window.to_range(),
        )

    async def _resolved_line_items(
        self, db: AsyncSession, window: DateWindow
    ) -> list[ResolvedLineItem]:
        items = await self.reader.paid_line_items(db, window)
        ids = {item.catalog_id for item in items if item.catalog_id is not None}
        catalog = await self.reader.catalog_by_ids(db, ids)
        return aggregations.resolve_line_items(items, catalog)

    async def _find_catalog_entry(self, db: AsyncSession, product_id: str) -> CatalogEntry | None:
        entry: CatalogEntry | None = None
        food_id = parse_catalog_id(product_id)
        if food_id is not None:
            entry = await self.reader.get_food(db, food_id)
        if entry is None:
            entry = await self.reader.get_food_by_name(db, product_id)
        return entry

    async def _with_stock(self, db: AsyncSession, row: ProductSummary) -> ProductSummary:
        try:
            stock = await self.reader.find_stock(db, row.product_id, row.name)
        except SQLAlchemyError as e:
            logger.warning(
                "analytics.stock_lookup_failed",
                product_id=row.product_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            stock = None
        return row.model_copy(update={"stock": stock})
