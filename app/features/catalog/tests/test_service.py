"""Unit tests for catalog service."""

from decimal import Decimal

import pytest

from app.core.exceptions import NotFoundError
from app.features.catalog.models import Food
from app.features.catalog.schemas import FoodCreate
from app.features.catalog.service import CatalogService


class TestListFoods:
    """Tests for CatalogService.list_foods."""

    async def test_returns_all_rows(self, session, caesar, make_result):
        """Test that every row is converted to FoodRead."""
        session.execute.return_value = make_result([caesar])

        foods = await CatalogService().list_foods(session)

        assert [f.name for f in foods] == ["Caesar Salad"]
        assert foods[0].price == 9.99
        assert foods[0].stock == 12

    async def test_empty_catalog(self, session, make_result):
        """Test that an empty table yields an empty list."""
        session.execute.return_value = make_result([])

        assert await CatalogService().list_foods(session) == []


class TestAddFood:
    """Tests for CatalogService.add_food."""

    async def test_inserts_row(self, session):
        """Test that the row is added, flushed and returned with its id."""
        payload = FoodCreate(name="Tomato Soup", price=6.5, category="Soup")

        food = await CatalogService().add_food(session, payload)

        session.add.assert_called_once()
        added = session.add.call_args.args[0]
        assert isinstance(added, Food)
        assert added.price == Decimal("6.50")
        session.flush.assert_awaited_once()
        assert food.id == 42
        assert food.name == "Tomato Soup"
        assert food.is_verified is False

    def test_negative_price_rejected(self):
        """Test that negative prices fail validation."""
        with pytest.raises(ValueError):
            FoodCreate(name="Free lunch", price=-1)


class TestRemoveFood:
    """Tests for CatalogService.remove_food."""

    async def test_deletes_existing(self, session, caesar):
        """Test that an existing row is deleted."""
        session.get.return_value = caesar

        await CatalogService().remove_food(session, 1)

        session.delete.assert_awaited_once_with(caesar)

    async def test_missing_raises(self, session):
        """Test that removing an unknown id is a not-found error."""
        session.get.return_value = None

        with pytest.raises(NotFoundError):
            await CatalogService().remove_food(session, 99)

        session.delete.assert_not_awaited()


class TestUpdatePrice:
    """Tests for CatalogService.update_price."""

    async def test_updates_price(self, session, caesar):
        """Test that the new price is stored at cent precision."""
        session.get.return_value = caesar

        food = await CatalogService().update_price(session, 1, 12.5)

        assert caesar.price == Decimal("12.50")
        assert food.price == 12.5
        session.flush.assert_awaited_once()

    async def test_missing_raises(self, session):
        """Test that updating an unknown id is a not-found error."""
        session.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await CatalogService().update_price(session, 99, 1.0)

        assert exc_info.value.message == "Food item not found"
