"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.database import get_db
from app.main import app


@pytest.mark.asyncio
async def test_health_check_returns_ok(client):
    """Health endpoint should return status ok."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "FoodOrderAPI"


@pytest.mark.asyncio
async def test_health_check_includes_request_id_header(client):
    """Health endpoint should include X-Request-ID in response."""
    response = await client.get("/health")

    assert "X-Request-ID" in response.headers
    assert len(response.headers["X-Request-ID"]) > 0


@pytest.mark.asyncio
async def test_health_check_uses_provided_request_id(client):
    """Health endpoint should echo back provided X-Request-ID."""
    custom_id = "test-request-id-12345"
    response = await client.get("/health", headers={"X-Request-ID": custom_id})

    assert response.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_readiness_reports_connected_database(client):
    """Readiness should report a reachable database."""
    session = AsyncMock()
    app.dependency_overrides[get_db] = lambda: session
    try:
        response = await client.get("/health/ready")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["database"] == "connected"
    session.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_readiness_reports_unreachable_database(client):
    """Readiness should degrade, not fail, when the database is down."""
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    app.dependency_overrides[get_db] = lambda: session
    try:
        response = await client.get("/health/ready")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == "disconnected"
