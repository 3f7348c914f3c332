"""Pydantic schemas for catalog endpoints."""

from pydantic import Field

from app.shared.schemas import CamelModel

# Largest value a Numeric(10, 2) price column holds.
MAX_PRICE = 99_999_999.99


class FoodCreate(CamelModel):
    """Request body for adding a menu item.

    The image is uploaded elsewhere; only its stored file name is recorded.
    """

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: float = Field(..., ge=0, le=MAX_PRICE, allow_inf_nan=False)
    category: str | None = Field(None, max_length=100)
    image: str | None = Field(None, max_length=255, description="Stored image file name.")
    is_verified: bool = False
    stock: int | None = Field(None, ge=0)


class FoodRemove(CamelModel):
    """Request body for removing a menu item."""

    id: int = Field(..., ge=1)


class PriceUpdate(CamelModel):
    """Request body for changing a menu item's price."""

    id: int = Field(..., ge=1)
    price: float = Field(..., ge=0, le=MAX_PRICE, allow_inf_nan=False)


class FoodRead(CamelModel):
    """Menu item as returned to clients."""

    id: int
    name: str
    description: str | None = None
    price: float
    category: str | None = None
    image: str | None = None
    is_verified: bool = False
    stock: int | None = None


class FoodListResponse(CamelModel):
    """Envelope for GET /food/list."""

    success: bool = True
    data: list[FoodRead] = Field(default_factory=list)


class FoodResponse(CamelModel):
    """Envelope for mutations returning the affected item."""

    success: bool = True
    message: str
    data: FoodRead
