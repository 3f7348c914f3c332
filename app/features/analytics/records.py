"""Read-side records for order line items and catalog entries.

Order line items are stored as free-form JSON and historical rows are
inconsistently shaped. Every field is resolved here, once, from an ordered
list of candidate keys; the aggregations never look at raw item dicts.

Candidate keys, first non-empty value wins:

- catalog reference: ``foodId``, ``_id``, ``id`` (else unresolved)
- quantity: ``qty``, ``quantity`` (else 1)
- unit price: ``price``, ``amount`` (else 0)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.shared.utils import to_float

if TYPE_CHECKING:
    from app.features.catalog.models import Food

CATALOG_REF_FIELDS: tuple[str, ...] = ("foodId", "_id", "id")
QTY_FIELDS: tuple[str, ...] = ("qty", "quantity")
PRICE_FIELDS: tuple[str, ...] = ("price", "amount")

DEFAULT_QTY = 1
DEFAULT_PRICE = 0.0

UNCATEGORIZED = "Uncategorized"
UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN = "Unknown"


def first_present(raw: Mapping[str, Any], candidates: Sequence[str]) -> Any:
    """Return the value of the first candidate key that is set.

    None and empty strings count as unset.
    """
    for key in candidates:
        value = raw.get(key)
        if value is None or value == "":
            continue
        return value
    return None


def parse_catalog_id(ref: Any) -> int | None:
    """Interpret a line-item reference as a catalog primary key.

    Only positive integers and strings of ASCII digits are ids. Anything
    else (legacy opaque ids, names, lists) is unresolvable and returns None
    instead of raising.
    """
    if isinstance(ref, bool):
        return None
    if isinstance(ref, int):
        return ref if ref > 0 else None
    if isinstance(ref, str):
        text = ref.strip()
        if text.isascii() and text.isdigit():
            value = int(text)
            return value if value > 0 else None
    return None


def _as_quantity(value: Any) -> int | float:
    quantity = to_float(value, default=None)
    if quantity is None:
        return DEFAULT_QTY
    return int(quantity) if quantity.is_integer() else quantity


def _as_label(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class LineItem:
    """One resolved line item of a placed order.

    Attributes:
        order_id: Owning order.
        user_id: Buyer of the owning order, if recorded.
        ordered_at: Order timestamp.
        ref: Raw catalog reference (may not be a valid id).
        name: Product name captured on the line item.
        category: Category captured on the line item.
        qty: Units ordered.
        price: Unit price captured at order time.
    """

    order_id: int
    user_id: str | None
    ordered_at: datetime
    ref: str | int | None
    name: str | None
    category: str | None
    qty: int | float
    price: float

    @property
    def catalog_id(self) -> int | None:
        """Catalog primary key, when the reference parses as one."""
        return parse_catalog_id(self.ref)

    @property
    def revenue(self) -> float:
        """Line revenue (qty x price)."""
        return self.qty * self.price

    @classmethod
    def from_raw(
        cls,
        raw: Any,
        *,
        order_id: int,
        user_id: str | None,
        ordered_at: datetime,
    ) -> LineItem:
        """Build a line item from one stored JSON element.

        Non-object elements produce an item with every field defaulted.
        """
        data: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

        ref = first_present(data, CATALOG_REF_FIELDS)
        if isinstance(ref, bool) or not isinstance(ref, str | int):
            ref = None

        price = to_float(first_present(data, PRICE_FIELDS), default=DEFAULT_PRICE)

        return cls(
            order_id=order_id,
            user_id=_as_label(user_id),
            ordered_at=ordered_at,
            ref=ref,
            name=_as_label(data.get("name")),
            category=_as_label(data.get("category")),
            qty=_as_quantity(first_present(data, QTY_FIELDS)),
            price=price if price is not None else DEFAULT_PRICE,
        )


def expand_order_items(
    items: Any,
    *,
    order_id: int,
    user_id: str | None,
    ordered_at: datetime,
) -> list[LineItem]:
    """Expand an order's stored ``items`` value into line items.

    A value that is not a list (corrupt or legacy rows) yields no items.
    """
    if not isinstance(items, list):
        return []
    return [
        LineItem.from_raw(raw, order_id=order_id, user_id=user_id, ordered_at=ordered_at)
        for raw in items
    ]


@dataclass(frozen=True)
class CatalogEntry:
    """The catalog fields analytics needs from a Food row."""

    id: int | None
    name: str
    category: str | None
    price: float | None
    stock: int | None

    @classmethod
    def from_food(cls, food: Food) -> CatalogEntry:
        """Snapshot a Food row; ``stock`` falls back to the older ``quantity`` column."""
        return cls(
            id=food.id,
            name=food.name,
            category=food.category,
            price=to_float(food.price, default=None),
            stock=food.stock if food.stock is not None else food.quantity,
        )


@dataclass(frozen=True)
class ResolvedLineItem:
    """A line item joined to its catalog entry, when one was found."""

    item: LineItem
    entry: CatalogEntry | None

    @property
    def category(self) -> str:
        """Catalog category, else the line item's own, else 'Uncategorized'."""
        if self.entry is not None and self.entry.category:
            return self.entry.category
        return self.item.category or UNCATEGORIZED

    def display_name(self, default: str = UNKNOWN) -> str:
        """Catalog name, else the line item's own, else ``default``."""
        if self.entry is not None and self.entry.name:
            return self.entry.name
        return self.item.name or default

    @property
    def product_key(self) -> str | None:
        """Grouping identity: catalog id, else raw reference, else name."""
        if self.entry is not None and self.entry.id is not None:
            return str(self.entry.id)
        if self.item.ref is not None:
            return str(self.item.ref)
        return self.item.name
