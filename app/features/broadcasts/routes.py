"""API routes for seller broadcasts."""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.features.broadcasts.schemas import BroadcastCreate, BroadcastListResponse
from app.features.broadcasts.service import BroadcastService
from app.shared.schemas import MessageResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/broadcast", tags=["broadcasts"])


def get_broadcast_service() -> BroadcastService:
    """Dependency providing the broadcast service."""
    return BroadcastService()


@router.post("/add", response_model=MessageResponse, summary="Post a broadcast")
async def add_broadcast(
    payload: BroadcastCreate,
    db: AsyncSession = Depends(get_db),
    service: BroadcastService = Depends(get_broadcast_service),
) -> MessageResponse:
    """Post a seller broadcast."""
    try:
        await service.add_broadcast(db, payload)
    except SQLAlchemyError as e:
        logger.error("broadcasts.add_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
        raise DatabaseError(message="Failed to add broadcast") from e
    return MessageResponse(message="Broadcast added!")


@router.get("/all", response_model=BroadcastListResponse, summary="List broadcasts")
async def list_broadcasts(
    db: AsyncSession = Depends(get_db),
    service: BroadcastService = Depends(get_broadcast_service),
) -> BroadcastListResponse:
    """List broadcasts, newest first."""
    try:
        broadcasts = await service.list_broadcasts(db)
    except SQLAlchemyError as e:
        logger.error("broadcasts.list_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
        raise DatabaseError(message="Failed to list broadcasts") from e
    return BroadcastListResponse(data=broadcasts)
