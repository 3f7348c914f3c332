"""Broadcast ORM model."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.shared.models import TimestampMixin


class Broadcast(TimestampMixin, Base):
    """Announcement posted by a seller.

    Attributes:
        id: Primary key.
        seller_name: Name shown as the author.
        title: Optional headline.
        message: Announcement body.
    """

    __tablename__ = "broadcast"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    seller_name: Mapped[str] = mapped_column(String(100))
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    message: Mapped[str] = mapped_column(Text)
