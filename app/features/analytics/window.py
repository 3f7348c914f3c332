"""Date-window resolution for analytics queries.

Both analytics endpoints accept optional ``start``/``end`` query strings.
``resolve_window`` turns them into a concrete inclusive UTC range:

- neither given: the trailing ``days`` ending now
- only start: start .. now
- only end: (end - ``days``) .. end
- both: start .. end

An explicit end always covers its whole day (23:59:59.999). Strings that do
not parse are ignored as if absent. Bounds that fall outside the datetime
range once shifted or converted to UTC are clamped to its first or last
instant. The clock is injectable so callers and
tests can pin "now".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import MINYEAR, UTC, datetime, time, timedelta

from app.features.analytics.schemas import DateRange

DEFAULT_WINDOW_DAYS = 30

_END_OF_DAY = time(23, 59, 59, 999000)
_EARLIEST = datetime.min.replace(tzinfo=UTC)
_LATEST = datetime.max.replace(tzinfo=UTC)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive ``[start, end]`` range in UTC."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        """Check whether a timestamp falls inside the window."""
        return self.start <= as_utc(moment) <= self.end

    def to_range(self) -> DateRange:
        """Render the window as calendar days."""
        return DateRange(start=self.start.date().isoformat(), end=self.end.date().isoformat())


def as_utc(moment: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    try:
        return moment.astimezone(UTC)
    except OverflowError:
        return _EARLIEST if moment.year == MINYEAR else _LATEST


def parse_date(value: str | None) -> datetime | None:
    """Parse an ISO date or datetime string.

    Args:
        value: ``YYYY-MM-DD`` or a full ISO 8601 timestamp.

    Returns:
        Aware datetime (midnight for plain dates), or None if missing or invalid.
    """
    if value is None or not value.strip():
        return None

    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def days_before(moment: datetime, days: int) -> datetime:
    """Shift back by whole days, stopping at the earliest representable instant."""
    try:
        return moment - timedelta(days=days)
    except OverflowError:
        return _EARLIEST


def start_of_day(moment: datetime) -> datetime:
    """Midnight of the same calendar day."""
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    """23:59:59.999 of the same calendar day."""
    return datetime.combine(moment.date(), _END_OF_DAY, tzinfo=moment.tzinfo)


def resolve_window(
    start: str | None = None,
    end: str | None = None,
    *,
    now: datetime | None = None,
    days: int = DEFAULT_WINDOW_DAYS,
) -> DateWindow:
    """Resolve optional query bounds into a concrete window.

    Never raises for bad input. If the bounds come out reversed they are
    swapped, with the later day extended to its end, so ``start <= end``
    always holds.

    Args:
        start: Optional ISO start date.
        end: Optional ISO end date (inclusive of the whole day).
        now: Reference time; defaults to the current UTC time.
        days: Length of the default window.

    Returns:
        Resolved DateWindow.
    """
    current = as_utc(now) if now is not None else datetime.now(UTC)

    start_dt = parse_date(start)
    if start_dt is not None:
        start_dt = as_utc(start_dt)
    end_dt = parse_date(end)
    if end_dt is not None:
        end_dt = as_utc(end_of_day(end_dt))

    if end_dt is None:
        end_dt = current
    if start_dt is None:
        start_dt = days_before(end_dt, days)

    if start_dt > end_dt:
        start_dt, end_dt = start_of_day(end_dt), end_of_day(start_dt)

    return DateWindow(start=start_dt, end=end_dt)
