"""Feature-specific test fixtures for catalog module."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.catalog.models import Food


@pytest.fixture
def caesar() -> Food:
    """Unsaved Food row with an id, as if loaded."""
    return Food(
        id=1,
        name="Caesar Salad",
        description="Romaine, parmesan, croutons",
        price=Decimal("9.99"),
        category="Salad",
        image="caesar.png",
        is_verified=True,
        stock=12,
    )


@pytest.fixture
def session() -> AsyncMock:
    """AsyncSession double; refresh assigns ids to new rows."""
    db = AsyncMock(spec=AsyncSession)

    async def refresh(obj):
        if obj.id is None:
            obj.id = 42

    db.refresh.side_effect = refresh
    return db


def scalars_result(rows) -> MagicMock:
    """Build an execute() result whose scalars() yields ``rows``."""
    result = MagicMock()
    result.scalars.return_value = iter(rows)
    return result


@pytest.fixture
def make_result():
    """Factory for execute() results."""
    return scalars_result
