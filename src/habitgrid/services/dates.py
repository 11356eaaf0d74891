"""Calendar helpers built around the canonical ``YYYY-MM-DD`` date-key.

Weeks start on Sunday throughout the application, and weekdays are numbered
0=Sunday .. 6=Saturday (Python's ``date.weekday()`` is Monday-based, so every
conversion goes through ``weekday_of``).
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

DATE_KEY_FORMAT = "%Y-%m-%d"

WeekRow = list[Optional[date]]


def format_date_key(day: date) -> str:
    """Render a calendar day as its date-key."""
    return day.strftime(DATE_KEY_FORMAT)


def parse_date_key(key: str) -> date:
    """Parse a date-key, raising ``ValueError`` if it is not ``YYYY-MM-DD``."""
    try:
        parsed = datetime.strptime(key, DATE_KEY_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid date key {key!r}; expected YYYY-MM-DD") from exc
    # strptime tolerates missing zero padding
    if format_date_key(parsed) != key:
        raise ValueError(f"Invalid date key {key!r}; expected YYYY-MM-DD")
    return parsed


def today_key(clock: Optional[Callable[[], date]] = None) -> str:
    """Date-key of the caller's local calendar day.

    ``clock`` lets callers inject a fixed day; the engine functions never call
    this themselves and always take ``today`` as an argument.
    """
    return format_date_key((clock or date.today)())


def utc_now() -> datetime:
    """Current instant as an aware UTC timestamp."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a stored timestamp to aware UTC.

    Timestamps are written in UTC; a value read back without an offset is taken
    to be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def weekday_of(day: date) -> int:
    """Sunday-based weekday index (0=Sunday .. 6=Saturday)."""
    return (day.weekday() + 1) % 7


def start_of_week(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=weekday_of(day))


def end_of_week(day: date) -> date:
    """Saturday on or after ``day``."""
    return start_of_week(day) + timedelta(days=6)


def is_within_week(day: date, anchor: date) -> bool:
    """True when ``day`` falls in the Sunday-start week containing ``anchor``."""
    return start_of_week(anchor) <= day <= end_of_week(anchor)


def year_dates(year: int) -> list[date]:
    """Every calendar day of ``year`` in order."""
    first = date(year, 1, 1)
    count = (date(year + 1, 1, 1) - first).days
    return [first + timedelta(days=offset) for offset in range(count)]


def weeks_of_year(year: int) -> list[WeekRow]:
    """Partition a year into Sunday-first week rows for a heatmap.

    The first row is left-padded with ``None`` so each slot index equals its
    weekday. The last row is not padded: it holds only the remaining days and may
    be shorter than seven.
    """
    dates = year_dates(year)
    weeks: list[WeekRow] = []
    current: WeekRow = [None] * weekday_of(dates[0])

    for day in dates:
        current.append(day)
        if len(current) == 7:
            weeks.append(current)
            current = []

    if current:
        weeks.append(current)

    return weeks


def month_label_positions(weeks: list[WeekRow]) -> list[tuple[int, int]]:
    """``(month, week_index)`` pairs marking the week row where each month's label goes.

    A label is placed on a row when the month of the row's first populated slot
    differs from the previous label's month.
    """
    positions: list[tuple[int, int]] = []
    last_month: Optional[int] = None
    for index, week in enumerate(weeks):
        first = next((d for d in week if d is not None), None)
        if first is None:
            continue
        if first.month != last_month:
            positions.append((first.month, index))
            last_month = first.month
    return positions


__all__ = [
    "DATE_KEY_FORMAT",
    "WeekRow",
    "as_utc",
    "end_of_week",
    "format_date_key",
    "is_within_week",
    "month_label_positions",
    "parse_date_key",
    "start_of_week",
    "today_key",
    "utc_now",
    "weekday_of",
    "weeks_of_year",
    "year_dates",
]
