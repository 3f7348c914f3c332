"""API routes for checkout, payment capture and order management."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.features.orders.schemas import (
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderVerify,
    PlacedOrderResponse,
    SignatureVerify,
    SignatureVerifyResponse,
    StatusUpdate,
)
from app.features.orders.service import OrderService
from app.shared.schemas import MessageResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/order", tags=["orders"])


def get_order_service() -> OrderService:
    """Dependency providing the order service."""
    return OrderService()


def _database_error(event: str, message: str, e: SQLAlchemyError, **context: object) -> DatabaseError:
    logger.error(event, error=str(e), error_type=type(e).__name__, exc_info=True, **context)
    return DatabaseError(message=message)


# =============================================================================
# Checkout
# =============================================================================


@router.post(
    "/place",
    response_model=PlacedOrderResponse,
    summary="Place a card order",
    description="""
Store the order unpaid and return its id. The client completes payment with
the card provider and then calls `/order/verify` or `/order/verify-signature`.
The buyer's cart is emptied.
""",
)
async def place_order(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> PlacedOrderResponse:
    """Place a card order."""
    try:
        placed = await service.place_order(db, payload)
    except SQLAlchemyError as e:
        raise _database_error("orders.place_failed", "Failed to place order", e) from e
    return PlacedOrderResponse(data=placed)


@router.post("/place-cod", response_model=OrderResponse, summary="Place a cash-on-delivery order")
async def place_cod_order(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Place an order paid on delivery; it is recorded as paid immediately."""
    try:
        order = await service.place_cod_order(db, payload)
    except SQLAlchemyError as e:
        raise _database_error("orders.place_cod_failed", "Failed to place order", e) from e
    return OrderResponse(message="Order Placed", data=order)


# =============================================================================
# Payment Capture
# =============================================================================


@router.post(
    "/verify",
    response_model=MessageResponse,
    summary="Settle a card order from the checkout outcome",
    description="""
`success=true` marks the order paid. `success=false` deletes the pending
order and answers `{"success": false, "message": "Not Paid"}`.
""",
)
async def verify_order(
    payload: OrderVerify,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> MessageResponse:
    """Settle a card order.

    Raises:
        NotFoundError: If the order does not exist.
        ConflictError: If the order was already paid.
    """
    try:
        paid = await service.verify_order(db, payload.order_id, payload.success)
    except SQLAlchemyError as e:
        raise _database_error(
            "orders.verify_failed", "Failed to verify order", e, order_id=payload.order_id
        ) from e

    if paid:
        return MessageResponse(message="Paid")
    return MessageResponse(success=False, message="Not Paid")


@router.post(
    "/verify-signature",
    response_model=SignatureVerifyResponse,
    summary="Verify a signed payment",
    description="""
Checks `signature` against HMAC-SHA256 of `"<providerOrderId>|<paymentId>"`
keyed by the configured payment secret. On a match the order is marked paid;
otherwise the response is 400 and the order stays unpaid.
""",
)
async def verify_signature(
    payload: SignatureVerify,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> SignatureVerifyResponse:
    """Verify a signed payment.

    Raises:
        BadRequestError: If the signature does not match.
        NotFoundError: If the order does not exist.
        ConflictError: If the order was already paid.
    """
    try:
        order = await service.verify_signature(
            db,
            order_id=payload.order_id,
            provider_order_id=payload.provider_order_id,
            payment_id=payload.payment_id,
            signature=payload.signature,
        )
    except SQLAlchemyError as e:
        raise _database_error(
            "orders.verify_signature_failed",
            "Failed to verify payment",
            e,
            order_id=payload.order_id,
        ) from e
    return SignatureVerifyResponse(data=order)


# =============================================================================
# Order Management
# =============================================================================


@router.get("/list", response_model=OrderListResponse, summary="List all orders")
async def list_orders(
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    """List every order, newest first."""
    try:
        orders = await service.list_orders(db)
    except SQLAlchemyError as e:
        raise _database_error("orders.list_failed", "Failed to list orders", e) from e
    return OrderListResponse(data=orders)


@router.get("/user/{user_id}", response_model=OrderListResponse, summary="List a buyer's orders")
async def user_orders(
    user_id: str = Path(..., min_length=1, max_length=64, description="Buyer id."),
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    """List one buyer's orders, newest first."""
    try:
        orders = await service.user_orders(db, user_id)
    except SQLAlchemyError as e:
        raise _database_error(
            "orders.user_orders_failed", "Failed to list orders", e, user_id=user_id
        ) from e
    return OrderListResponse(data=orders)


@router.post("/status", response_model=OrderResponse, summary="Update an order's status")
async def update_status(
    payload: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Change an order's lifecycle label.

    Raises:
        NotFoundError: If the order does not exist.
    """
    try:
        order = await service.update_status(db, payload.order_id, payload.status)
    except SQLAlchemyError as e:
        raise _database_error(
            "orders.status_update_failed", "Failed to update status", e, order_id=payload.order_id
        ) from e
    return OrderResponse(message="Status Updated", data=order)
