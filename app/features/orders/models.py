"""Order ORM model.

CRITICAL: ``items`` is stored as a schemaless JSON array. Historical rows
use several spellings for the same line-item field (``foodId``/``_id``/``id``,
``qty``/``quantity``, ``price``/``amount``). Readers must go through
``app.features.analytics.records`` rather than index into items directly.
"""

import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, DateTime, Index, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONDocument
from app.shared.models import TimestampMixin


class Order(TimestampMixin, Base):
    """Placed order.

    Lifecycle: created unpaid for card checkout (``payment`` flips once the
    payment is verified, or the row is deleted if it is not) and created
    paid for cash on delivery.

    Attributes:
        id: Primary key.
        user_id: Buyer reference. Not a foreign key; legacy ids are opaque strings.
        items: Line items as captured at checkout. Immutable after creation.
        amount: Order total, currency-agnostic.
        address: Delivery address document.
        payment: True once payment is confirmed.
        status: Free-form lifecycle label (e.g., "pending", "delivered").
        date: Placement timestamp (UTC).
    """

    __tablename__ = "food_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    items: Mapped[list[Any]] = mapped_column(JSONDocument, default=list)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    address: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    payment: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    status: Mapped[str] = mapped_column(String(50), default="pending")
    date: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )

    __table_args__ = (
        # Analytics always filters paid orders by date window
        Index("ix_food_order_payment_date", "payment", "date"),
    )
