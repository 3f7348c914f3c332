"""Service layer for order placement and payment capture.

Two checkout flows exist:

- cash on delivery: the order is stored already paid.
- card: the order is stored unpaid and confirmed later, either by the
  checkout redirect outcome (``verify_order``) or by a provider signature
  (``verify_signature``).

Placing an order in either flow empties the buyer's cart.
"""

import hashlib
import hmac

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import BadRequestError, ConflictError, FoodOrderError, NotFoundError
from app.core.logging import get_logger
from app.features.orders.models import Order
from app.features.orders.schemas import OrderCreate, OrderRead, PlacedOrder
from app.features.users.models import User
from app.shared.utils import to_money

logger = get_logger(__name__)


def compute_payment_signature(secret: str, provider_order_id: str, payment_id: str) -> str:
    """Hex HMAC-SHA256 of ``"<provider_order_id>|<payment_id>"`` keyed by ``secret``."""
    message = f"{provider_order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def _user_pk(user_id: str | None) -> int | None:
    if user_id is None or not (user_id.isascii() and user_id.isdigit()):
        return None
    return int(user_id)


class OrderService:
    """Order placement, payment verification and fulfilment status."""

    def __init__(self) -> None:
        self.settings = get_settings()

    async def place_order(self, db: AsyncSession, payload: OrderCreate) -> PlacedOrder:
        """Store an unpaid card order.

        Args:
            db: Database session.
            payload: Checkout payload.

        Returns:
            Order id, amount and currency to hand to the card provider.
        """
        order = await self._create(db, payload, paid=False)

        logger.info(
            "orders.order_placed",
            order_id=order.id,
            user_id=order.user_id,
            amount=str(order.amount),
            items=len(order.items),
        )
        return PlacedOrder(
            order_id=order.id,
            amount=float(order.amount),
            currency=self.settings.payment_currency,
        )

    async def place_cod_order(self, db: AsyncSession, payload: OrderCreate) -> OrderRead:
        """Store a cash-on-delivery order, paid at placement."""
        order = await self._create(db, payload, paid=True)

        logger.info(
            "orders.cod_order_placed",
            order_id=order.id,
            user_id=order.user_id,
            amount=str(order.amount),
            items=len(order.items),
        )
        return OrderRead.model_validate(order)

    async def verify_order(self, db: AsyncSession, order_id: int, success: bool) -> bool:
        """Settle a card order from the checkout outcome.

        A successful payment marks the order paid; an abandoned one is deleted.

        Returns:
            Whether the order is now paid.

        Raises:
            NotFoundError: If the order does not exist.
            ConflictError: If the order was already paid.
        """
        order = await self._get_unpaid(db, order_id)

        if success:
            order.payment = True
            await db.flush()
            logger.info("orders.payment_verified", order_id=order_id)
            return True

        await db.delete(order)
        await db.flush()
        logger.info("orders.unpaid_order_deleted", order_id=order_id)
        return False

    async def verify_signature(
        self,
        db: AsyncSession,
        order_id: int,
        provider_order_id: str,
        payment_id: str,
        signature: str,
    ) -> OrderRead:
        """Mark an order paid after checking the provider's signature.

        Raises:
            FoodOrderError: If no signing secret is configured (503).
            NotFoundError: If the order does not exist.
            ConflictError: If the order was already paid.
            BadRequestError: If the signature does not match. The order stays unpaid.
        """
        secret = self.settings.payment_key_secret
        if not secret:
            raise FoodOrderError(
                message="Payment verification is not configured",
                code="PAYMENT_NOT_CONFIGURED",
                status_code=503,
            )

        order = await self._get_unpaid(db, order_id)

        expected = compute_payment_signature(secret, provider_order_id, payment_id)
        if not hmac.compare_digest(expected, signature.lower()):
            logger.warning(
                "orders.signature_mismatch",
                order_id=order_id,
                provider_order_id=provider_order_id,
            )
            raise BadRequestError(
                message="Invalid payment signature",
                details={"order_id": order_id},
            )

        order.payment = True
        await db.flush()
        await db.refresh(order)

        logger.info(
            "orders.payment_verified",
            order_id=order_id,
            provider_order_id=provider_order_id,
            payment_id=payment_id,
        )
        return OrderRead.model_validate(order)

    async def list_orders(self, db: AsyncSession) -> list[OrderRead]:
        """Every order, newest first."""
        result = await db.execute(select(Order).order_by(Order.date.desc(), Order.id.desc()))
        orders = [OrderRead.model_validate(order) for order in result.scalars()]

        logger.info("orders.orders_listed", count=len(orders))
        return orders

    async def user_orders(self, db: AsyncSession, user_id: str) -> list[OrderRead]:
        """Orders placed by one buyer, newest first."""
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.date.desc(), Order.id.desc())
        )
        result = await db.execute(stmt)
        orders = [OrderRead.model_validate(order) for order in result.scalars()]

        logger.info("orders.user_orders_listed", user_id=user_id, count=len(orders))
        return orders

    async def update_status(self, db: AsyncSession, order_id: int, status: str) -> OrderRead:
        """Change an order's lifecycle label.

        Raises:
            NotFoundError: If the order does not exist.
        """
        order = await self._get_or_404(db, order_id)
        previous = order.status
        order.status = status
        await db.flush()
        await db.refresh(order)

        logger.info("orders.status_updated", order_id=order_id, old_status=previous, new_status=status)
        return OrderRead.model_validate(order)

    async def _create(self, db: AsyncSession, payload: OrderCreate, paid: bool) -> Order:
        order = Order(
            user_id=payload.user_id,
            items=payload.items,
            amount=to_money(payload.amount),
            address=payload.address,
            payment=paid,
        )
        db.add(order)
        await db.flush()
        await db.refresh(order)

        await self._clear_cart(db, payload.user_id)
        return order

    async def _clear_cart(self, db: AsyncSession, user_id: str | None) -> None:
        pk = _user_pk(user_id)
        if pk is None:
            return
        await db.execute(update(User).where(User.id == pk).values(cart_data={}))

    async def _get_or_404(self, db: AsyncSession, order_id: int) -> Order:
        order = await db.get(Order, order_id)
        if order is None:
            raise NotFoundError(message="Order not found", details={"order_id": order_id})
        return order

    async def _get_unpaid(self, db: AsyncSession, order_id: int) -> Order:
        order = await self._get_or_404(db, order_id)
        if order.payment:
            raise ConflictError(message="Order already paid", details={"order_id": order_id})
        return order
