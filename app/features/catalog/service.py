"""Service layer for catalog management."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.features.catalog.models import Food
from app.features.catalog.schemas import FoodCreate, FoodRead
from app.shared.utils import to_money

logger = get_logger(__name__)


class CatalogService:
    """CRUD over menu items."""

    async def list_foods(self, db: AsyncSession) -> list[FoodRead]:
        """List every menu item, oldest first."""
        result = await db.execute(select(Food).order_by(Food.id))
        foods = [FoodRead.model_validate(food) for food in result.scalars()]

        logger.info("catalog.foods_listed", count=len(foods))
        return foods

    async def add_food(self, db: AsyncSession, payload: FoodCreate) -> FoodRead:
        """Insert a menu item.

        Args:
            db: Database session.
            payload: Validated item fields.

        Returns:
            The stored item with its assigned id.
        """
        food = Food(**payload.model_dump(exclude={"price"}), price=to_money(payload.price))
        db.add(food)
        await db.flush()
        await db.refresh(food)

        logger.info("catalog.food_added", food_id=food.id, name=food.name, category=food.category)
        return FoodRead.model_validate(food)

    async def remove_food(self, db: AsyncSession, food_id: int) -> None:
        """Delete a menu item.

        Raises:
            NotFoundError: If no item has this id.
        """
        food = await self._get_or_404(db, food_id)
        await db.delete(food)
        await db.flush()

        logger.info("catalog.food_removed", food_id=food_id)

    async def update_price(self, db: AsyncSession, food_id: int, price: float) -> FoodRead:
        """Change a menu item's price.

        Raises:
            NotFoundError: If no item has this id.
        """
        food = await self._get_or_404(db, food_id)
        old_price = food.price
        food.price = to_money(price)
        await db.flush()
        await db.refresh(food)

        logger.info(
            "catalog.price_updated",
            food_id=food_id,
            old_price=str(old_price),
            new_price=str(food.price),
        )
        return FoodRead.model_validate(food)

    async def _get_or_404(self, db: AsyncSession, food_id: int) -> Food:
        food = await db.get(Food, food_id)
        if food is None:
            raise NotFoundError(message="Food item not found", details={"food_id": food_id})
        return food
