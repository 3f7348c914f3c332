"""Shared utilities used across 3+ features."""

from app.shared.models import TimestampMixin
from app.shared.schemas import CamelModel, MessageResponse
from app.shared.utils import to_float, to_money

__all__ = [
    "CamelModel",
    "MessageResponse",
    "TimestampMixin",
    "to_float",
    "to_money",
]
