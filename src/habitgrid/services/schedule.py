"""Recurrence evaluation: which days a habit expects activity on."""

from __future__ import annotations

from datetime import date
from typing import AbstractSet, Literal

from ..models.frequency import Daily, Frequency, SpecificDays, TimesPerWeek
from .dates import format_date_key, weekday_of

DayStatus = Literal["completed", "scheduled", "unscheduled"]

COMPLETED: DayStatus = "completed"
SCHEDULED: DayStatus = "scheduled"
UNSCHEDULED: DayStatus = "unscheduled"


def is_scheduled(day: date, frequency: Frequency) -> bool:
    """Return True when ``frequency`` expects activity on ``day``.

    ``TimesPerWeek`` is judged per week, so every day is a candidate. A
    ``SpecificDays`` rule with no days is never scheduled.
    """
    if isinstance(frequency, Daily):
        return True
    if isinstance(frequency, SpecificDays):
        return bool(frequency.days) and weekday_of(day) in frequency.days
    if isinstance(frequency, TimesPerWeek):
        return True
    return False


def classify_day(day: date, completed: AbstractSet[str], frequency: Frequency) -> DayStatus:
    """Bucket a day for heatmap shading."""
    if format_date_key(day) in completed:
        return COMPLETED
    if is_scheduled(day, frequency):
        return SCHEDULED
    return UNSCHEDULED


__all__ = [
    "COMPLETED",
    "SCHEDULED",
    "UNSCHEDULED",
    "DayStatus",
    "classify_day",
    "is_scheduled",
]
