"""Customer accounts (cart storage and analytics counts)."""

from app.features.users.models import User

__all__ = ["User"]
