"""Service layer for seller broadcasts."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.features.broadcasts.models import Broadcast
from app.features.broadcasts.schemas import BroadcastCreate, BroadcastRead

logger = get_logger(__name__)


class BroadcastService:
    """Post and list seller announcements."""

    async def add_broadcast(self, db: AsyncSession, payload: BroadcastCreate) -> BroadcastRead:
        broadcast = Broadcast(**payload.model_dump())
        db.add(broadcast)
        await db.flush()
        await db.refresh(broadcast)

        logger.info("broadcasts.broadcast_added", broadcast_id=broadcast.id, seller_name=broadcast.seller_name)
        return BroadcastRead.model_validate(broadcast)

    async def list_broadcasts(self, db: AsyncSession) -> list[BroadcastRead]:
        """All broadcasts, newest first."""
        stmt = select(Broadcast).order_by(Broadcast.created_at.desc(), Broadcast.id.desc())
        result = await db.execute(stmt)
        return [BroadcastRead.model_validate(b) for b in result.scalars()]
