"""Seller broadcast messages."""

from app.features.broadcasts.routes import router
from app.features.broadcasts.service import BroadcastService

__all__ = ["BroadcastService", "router"]
