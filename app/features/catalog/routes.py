"""API routes for catalog management."""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.features.catalog.schemas import (
    FoodCreate,
    FoodListResponse,
    FoodRemove,
    FoodResponse,
    PriceUpdate,
)
from app.features.catalog.service import CatalogService
from app.shared.schemas import MessageResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/food", tags=["catalog"])


def get_catalog_service() -> CatalogService:
    """Dependency providing the catalog service."""
    return CatalogService()


@router.get("/list", response_model=FoodListResponse, summary="List menu items")
async def list_foods(
    db: AsyncSession = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> FoodListResponse:
    """List every menu item."""
    try:
        foods = await service.list_foods(db)
    except SQLAlchemyError as e:
        logger.error("catalog.list_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
        raise DatabaseError(message="Failed to list foods") from e
    return FoodListResponse(data=foods)


@router.post("/add", response_model=FoodResponse, summary="Add a menu item")
async def add_food(
    payload: FoodCreate,
    db: AsyncSession = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> FoodResponse:
    """Add a menu item.

    Raises:
        DatabaseError: If the insert fails.
    """
    try:
        food = await service.add_food(db, payload)
    except SQLAlchemyError as e:
        logger.error("catalog.add_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
        raise DatabaseError(message="Failed to add food") from e
    return FoodResponse(message="Food Added", data=food)


@router.post("/remove", response_model=MessageResponse, summary="Remove a menu item")
async def remove_food(
    payload: FoodRemove,
    db: AsyncSession = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> MessageResponse:
    """Remove a menu item.

    Raises:
        NotFoundError: If the item does not exist.
        DatabaseError: If the delete fails.
    """
    try:
        await service.remove_food(db, payload.id)
    except SQLAlchemyError as e:
        logger.error(
            "catalog.remove_failed",
            food_id=payload.id,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(message="Failed to remove food") from e
    return MessageResponse(message="Food Removed")


@router.post("/update-price", response_model=FoodResponse, summary="Update a menu item's price")
async def update_price(
    payload: PriceUpdate,
    db: AsyncSession = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> FoodResponse:
    """Change the price of a menu item.

    Raises:
        NotFoundError: If the item does not exist.
        DatabaseError: If the update fails.
    """
    try:
        food = await service.update_price(db, payload.id, payload.price)
    except SQLAlchemyError as e:
        logger.error(
            "catalog.update_price_failed",
            food_id=payload.id,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(message="Failed to update price") from e
    return FoodResponse(message="Price updated", data=food)
