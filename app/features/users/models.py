"""User ORM model.

Accounts are created and authenticated outside this service; here they
only carry the cart and serve as a count for analytics.
"""

from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONDocument
from app.shared.models import TimestampMixin


class User(TimestampMixin, Base):
    """Registered customer account.

    Attributes:
        id: Primary key.
        name: Display name.
        email: Unique login email.
        cart_data: Mapping of food id to quantity; emptied when an order is placed.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    cart_data: Mapped[dict[str, Any]] = mapped_column(JSONDocument, default=dict)
