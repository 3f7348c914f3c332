"""Pydantic schemas for broadcast endpoints."""

from datetime import datetime

from pydantic import Field

from app.shared.schemas import CamelModel


class BroadcastCreate(CamelModel):
    """Request body for posting a broadcast."""

    seller_name: str = Field(..., min_length=1, max_length=100)
    title: str | None = Field(None, max_length=200)
    message: str = Field(..., min_length=1)


class BroadcastRead(CamelModel):
    """Broadcast as returned to clients."""

    id: int
    seller_name: str
    title: str | None = None
    message: str
    created_at: datetime


class BroadcastListResponse(CamelModel):
    """Envelope for GET /broadcast/all."""

    success: bool = True
    data: list[BroadcastRead] = Field(default_factory=list)
