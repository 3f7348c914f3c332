"""Admin sales analytics.

Dashboard overview KPIs and per-product insights computed over paid
orders joined to the catalog.
"""

from app.features.analytics.routes import router
from app.features.analytics.schemas import (
    OverviewData,
    ProductDetail,
    ProductInsightsPage,
)
from app.features.analytics.service import AnalyticsService, SalesDataReader
from app.features.analytics.window import DateWindow, resolve_window

__all__ = [
    "AnalyticsService",
    "DateWindow",
    "OverviewData",
    "ProductDetail",
    "ProductInsightsPage",
    "SalesDataReader",
    "resolve_window",
    "router",
]
