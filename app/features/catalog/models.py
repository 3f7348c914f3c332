"""Catalog ORM model.

A Food row is a sellable menu item. Analytics joins order line items
against this table by id and, for legacy line items, by name.
"""

from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.shared.models import TimestampMixin


class Food(TimestampMixin, Base):
    """Menu item.

    Attributes:
        id: Primary key.
        name: Display name. Legacy line items reference foods by this value.
        description: Free-form description.
        price: Current unit price.
        category: Menu category (e.g., "Salad", "Desserts").
        image: Stored image file name (upload handled outside this service).
        is_verified: Whether an admin has approved the item.
        stock: Units in stock, when tracked.
        quantity: Older stock column kept for items created before ``stock``.
    """

    __tablename__ = "food"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    category: Mapped[str | None] = mapped_column(String(100), index=True, nullable=True)
    image: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    stock: Mapped[int | None] = mapped_column(Integer, nullable=True)
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (CheckConstraint("price >= 0", name="ck_food_price_positive"),)
