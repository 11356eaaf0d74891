"""Recurrence rules for habits.

A habit's frequency is one of three variants:

- ``Daily``: every calendar day is expected.
- ``SpecificDays``: only the listed weekdays (0=Sunday .. 6=Saturday).
- ``TimesPerWeek``: a weekly target; adherence is judged per Sunday-start week.

The engine assumes values built here are well formed. Validation happens in
``parse_frequency`` and ``frequency_from_columns``, which callers use at the
storage and CLI boundaries.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, Optional, Union

DAILY = "daily"
SPECIFIC_DAYS = "specific_days"
TIMES_PER_WEEK = "times_per_week"
FREQUENCY_TYPES = (DAILY, SPECIFIC_DAYS, TIMES_PER_WEEK)

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True, slots=True)
class Daily:
    """Every day is scheduled."""


@dataclass(frozen=True, slots=True)
class SpecificDays:
    """Only the given weekdays are scheduled (0=Sunday)."""

    days: frozenset[int]


@dataclass(frozen=True, slots=True)
class TimesPerWeek:
    """At least ``target`` completions per Sunday-start week."""

    target: int


Frequency = Union[Daily, SpecificDays, TimesPerWeek]


def frequency_type(frequency: Frequency) -> str:
    """Return the storage discriminator for a frequency value."""

    if isinstance(frequency, Daily):
        return DAILY
    if isinstance(frequency, SpecificDays):
        return SPECIFIC_DAYS
    if isinstance(frequency, TimesPerWeek):
        return TIMES_PER_WEEK
    raise TypeError(f"Unsupported frequency: {frequency!r}")


def parse_frequency(
    kind: str,
    *,
    days: Optional[Iterable[int]] = None,
    times_per_week: Optional[int] = None,
) -> Frequency:
    """Build a validated frequency from loose input.

    Raises:
        ValueError: unknown kind, weekday outside 0..6, no days for
            ``specific_days`` or a weekly target outside 1..7.
    """

    kind = (kind or "").strip().lower()
    if kind == DAILY:
        return Daily()

    if kind == SPECIFIC_DAYS:
        day_set = frozenset(int(d) for d in (days or ()))
        if not day_set:
            raise ValueError("specific_days requires at least one weekday")
        bad = sorted(d for d in day_set if not 0 <= d <= 6)
        if bad:
            raise ValueError(f"Weekday indices must be in 0..6, got {bad}")
        return SpecificDays(days=day_set)

    if kind == TIMES_PER_WEEK:
        if times_per_week is None:
            raise ValueError("times_per_week requires a weekly target")
        target = int(times_per_week)
        if not 1 <= target <= 7:
            raise ValueError(f"Weekly target must be between 1 and 7, got {target}")
        return TimesPerWeek(target=target)

    raise ValueError(f"Unknown frequency type: {kind!r}")


def parse_weekday_names(raw: str) -> list[int]:
    """Turn ``"mon,wed,fri"`` (or ``"1,3,5"``) into weekday indices."""

    lookup = {name.lower(): idx for idx, name in enumerate(WEEKDAY_NAMES)}
    result: list[int] = []
    for token in raw.split(","):
        token = token.strip().lower()
        if not token:
            continue
        if token.isdigit():
            result.append(int(token))
        elif token[:3] in lookup:
            result.append(lookup[token[:3]])
        else:
            raise ValueError(f"Unknown weekday: {token!r}")
    return result


def frequency_to_columns(frequency: Frequency) -> tuple[str, Optional[str], Optional[int]]:
    """Flatten a frequency into ``(type, days_json, times_per_week)`` columns."""

    if isinstance(frequency, SpecificDays):
        return SPECIFIC_DAYS, json.dumps(sorted(frequency.days)), None
    if isinstance(frequency, TimesPerWeek):
        return TIMES_PER_WEEK, None, frequency.target
    return frequency_type(frequency), None, None


def frequency_from_columns(
    kind: str, days_json: Optional[str], times_per_week: Optional[int]
) -> Frequency:
    """Rebuild a frequency from its stored columns."""

    days = json.loads(days_json) if days_json else None
    return parse_frequency(kind, days=days, times_per_week=times_per_week)


def describe_frequency(frequency: Frequency) -> str:
    """Short human-readable label for listings."""

    if isinstance(frequency, SpecificDays):
        return ", ".join(WEEKDAY_NAMES[d] for d in sorted(frequency.days))
    if isinstance(frequency, TimesPerWeek):
        return f"{frequency.target}x per week"
    return "Daily"


__all__ = [
    "DAILY",
    "FREQUENCY_TYPES",
    "SPECIFIC_DAYS",
    "TIMES_PER_WEEK",
    "WEEKDAY_NAMES",
    "Daily",
    "Frequency",
    "SpecificDays",
    "TimesPerWeek",
    "describe_frequency",
    "frequency_from_columns",
    "frequency_to_columns",
    "frequency_type",
    "parse_frequency",
    "parse_weekday_names",
]
