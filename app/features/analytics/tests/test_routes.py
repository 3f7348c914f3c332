"""Route tests for the admin analytics endpoints.

The service runs against the in-memory reader; the database session is a mock.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.features.analytics.routes import get_analytics_service
from app.features.analytics.service import AnalyticsService

WINDOW = {"start": "2025-10-01", "end": "2025-10-30"}


@pytest.fixture
def caesar_service(caesar_reader, override, mock_db) -> AnalyticsService:
    """Route the analytics dependency to the Caesar fixture data."""
    return override(get_analytics_service, AnalyticsService(reader=caesar_reader))


class TestOverviewRoute:
    """Tests for GET /admin/overview."""

    async def test_camel_case_envelope(self, client, caesar_service):
        """Test the success envelope and camelCase keys."""
        response = await client.get("/admin/overview", params=WINDOW)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert set(data) == {
            "totalSales",
            "totalOrders",
            "totalProducts",
            "totalUsers",
            "activeUsersWindow",
            "salesOverTime",
            "salesByCategory",
            "topProducts",
            "conversionRate",
            "range",
        }
        assert data["totalSales"] == 30.0
        assert data["range"] == {"start": "2025-10-01", "end": "2025-10-30"}
        assert data["topProducts"] == [{"name": "Caesar", "qty": 3, "revenue": 30.0}]

    async def test_invalid_dates_are_ignored(self, client, caesar_service):
        """Test that unparsable dates fall back to the default window."""
        response = await client.get("/admin/overview", params={"start": "yesterday"})

        assert response.status_code == 200
        assert response.json()["data"]["range"]["start"] is not None

    async def test_extreme_end_date_is_clamped(self, client, caesar_service):
        """Test that an end date near the start of the calendar still resolves."""
        response = await client.get("/admin/overview", params={"end": "0001-01-05"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["range"] == {"start": "0001-01-01", "end": "0001-01-05"}
        assert data["salesOverTime"] == []

    async def test_store_failure_is_problem_500(self, client, override, mock_db):
        """Test that a store fault becomes a generic 500 problem document."""
        service = AsyncMock(spec=AnalyticsService)
        service.get_overview.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        override(get_analytics_service, service)

        response = await client.get("/admin/overview")

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "DATABASE_ERROR"
        assert "db down" not in body["detail"]


class TestProductInsightsRoute:
    """Tests for GET /admin/product-insights."""

    async def test_detail_mode(self, client, caesar_service):
        """Test that productId switches to the drill-down payload."""
        response = await client.get("/admin/product-insights", params={"productId": "1", **WINDOW})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["product"]["name"] == "Caesar"
        assert data["totals"] == {"qty": 3, "revenue": 30.0, "orders": 2}
        assert data["repeatBuyers"] == 1
        assert data["topBuyers"] == [{"userId": "u1", "qty": 3, "orders": 2}]
        assert "salesOverTime" in data

    async def test_list_mode(self, client, caesar_service):
        """Test the paginated list payload."""
        response = await client.get("/admin/product-insights", params={"page": 1, "limit": 5, **WINDOW})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["pagination"] == {"page": 1, "limit": 5}
        assert data["totalProductsCount"] == 1
        [product] = data["products"]
        assert product["productId"] == "1"
        assert product["buyersCount"] == 1
        assert product["avgPrice"] == 10.0
        assert product["stock"] == 7

    async def test_unknown_product_is_404(self, client, caesar_service):
        """Test that an unknown product yields a not-found problem document."""
        response = await client.get("/admin/product-insights", params={"productId": "does-not-exist"})

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["detail"] == "Product not found"
        assert body["code"] == "NOT_FOUND"

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"page": "two"}])
    async def test_invalid_paging_is_422(self, client, caesar_service, params):
        """Test that paging parameters are validated before any query."""
        response = await client.get("/admin/product-insights", params=params)

        assert response.status_code == 422
        assert response.json()["success"] is False
