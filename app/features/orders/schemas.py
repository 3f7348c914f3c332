"""Pydantic schemas for order endpoints."""

from datetime import datetime
from typing import Any

from pydantic import Field

from app.shared.schemas import CamelModel

# Largest value a Numeric(12, 2) amount column holds.
MAX_AMOUNT = 9_999_999_999.99

# =============================================================================
# Requests
# =============================================================================


class OrderCreate(CamelModel):
    """Checkout payload.

    ``items`` is stored as sent; each element typically carries ``foodId``,
    ``name``, ``price`` and ``quantity``.
    """

    user_id: str | None = Field(None, max_length=64, description="Buyer id.")
    items: list[dict[str, Any]] = Field(..., min_length=1, description="Line items at checkout.")
    amount: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Order total.")
    address: dict[str, Any] | None = Field(None, description="Delivery address.")


class OrderVerify(CamelModel):
    """Outcome reported by the card checkout redirect."""

    order_id: int = Field(..., ge=1)
    success: bool = Field(..., description="Whether the buyer completed payment.")


class SignatureVerify(CamelModel):
    """Signed payment confirmation from the payment provider."""

    order_id: int = Field(..., ge=1, description="Our order id.")
    provider_order_id: str = Field(..., min_length=1, description="Provider-side order id.")
    payment_id: str = Field(..., min_length=1, description="Provider payment id.")
    signature: str = Field(..., min_length=1, description="Hex HMAC-SHA256 signature.")


class StatusUpdate(CamelModel):
    """Request body for changing an order's lifecycle label."""

    order_id: int = Field(..., ge=1)
    status: str = Field(..., min_length=1, max_length=50)


# =============================================================================
# Responses
# =============================================================================


class OrderRead(CamelModel):
    """Order as returned to clients."""

    id: int
    user_id: str | None = None
    items: list[Any] = Field(default_factory=list)
    amount: float
    address: dict[str, Any] | None = None
    payment: bool
    status: str
    date: datetime | None = None


class PlacedOrder(CamelModel):
    """Pending card order awaiting payment."""

    order_id: int
    amount: float
    currency: str


class PlacedOrderResponse(CamelModel):
    """Envelope for POST /order/place."""

    success: bool = True
    message: str = "Order Created"
    data: PlacedOrder


class OrderResponse(CamelModel):
    """Envelope for mutations returning the affected order."""

    success: bool = True
    message: str
    data: OrderRead


class OrderListResponse(CamelModel):
    """Envelope for order listings."""

    success: bool = True
    data: list[OrderRead] = Field(default_factory=list)


class SignatureVerifyResponse(CamelModel):
    """Envelope for POST /order/verify-signature."""

    success: bool = True
    verified: bool = True
    data: OrderRead
