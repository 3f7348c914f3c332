"""Menu catalog management."""

from app.features.catalog.models import Food
from app.features.catalog.routes import router
from app.features.catalog.service import CatalogService

__all__ = ["CatalogService", "Food", "router"]
