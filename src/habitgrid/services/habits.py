"""Habit service helpers: per-habit stats, display ordering and retention."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from ..models.habit import Habit
from .aggregates import completions_this_week
from .dates import as_utc, format_date_key
from .streaks import compute_streaks


@dataclass(slots=True)
class HabitStats:
    """A habit with the figures shown next to it in listings."""

    habit: Habit
    current_streak: int
    longest_streak: int
    completed_today: bool
    completions_this_week: int


def habit_stats(habit: Habit, completions: Iterable[str], *, today: date) -> HabitStats:
    """Compute listing stats for one habit from its completion date-keys."""

    keys = set(completions)
    current, longest = compute_streaks(keys, habit.frequency, today=today)
    return HabitStats(
        habit=habit,
        current_streak=current,
        longest_streak=longest,
        completed_today=format_date_key(today) in keys,
        completions_this_week=completions_this_week(keys, today=today),
    )


def sort_for_display(stats: Sequence[HabitStats], *, auto_sort_completed: bool) -> list[HabitStats]:
    """Order habits for a listing.

    Input order (the stored sort order) is kept; with ``auto_sort_completed`` the
    habits already done today sink below the pending ones.
    """

    if not auto_sort_completed:
        return list(stats)
    return sorted(stats, key=lambda s: s.completed_today)


def is_expired(archived_at: datetime, *, now: datetime, retention_days: int) -> bool:
    """True once an archived habit has outlived its retention window.

    Both timestamps are compared as UTC; offset-less values are taken to be UTC.
    """

    return as_utc(now) - as_utc(archived_at) > timedelta(days=retention_days)


def archived_days_remaining(archived_at: datetime, *, now: datetime, retention_days: int) -> int:
    """Whole days left before an archived habit becomes eligible for purging."""

    elapsed = (as_utc(now) - as_utc(archived_at)).days
    return max(0, retention_days - elapsed)


__all__ = [
    "HabitStats",
    "archived_days_remaining",
    "habit_stats",
    "is_expired",
    "sort_for_display",
]
