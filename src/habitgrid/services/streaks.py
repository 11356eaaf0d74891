"""Streak calculations for habits.

A streak counts consecutive adherence units ending today or just before it:
days for ``Daily``, scheduled weekdays for ``SpecificDays`` and Sunday-start
weeks for ``TimesPerWeek``. The unit still in progress (today, or the current
week) is counted once it is satisfied but never breaks a streak while it is not.

Every function here is pure. ``today`` is always passed in and must use the same
local-day convention as the date-keys; nothing reads the clock.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Iterator, Union

from ..models.frequency import Daily, Frequency, SpecificDays, TimesPerWeek
from .dates import end_of_week, format_date_key, parse_date_key, start_of_week, weekday_of

MAX_LOOKBACK_DAYS = 365

_ONE_DAY = timedelta(days=1)
_ONE_WEEK = timedelta(days=7)

DateLike = Union[str, date]


def _as_date(value: DateLike) -> date:
    return value if isinstance(value, date) else parse_date_key(value)


def _weekly_counts(dates: Iterable[date]) -> Counter[date]:
    """Completions per Sunday-start week, keyed by the week's Sunday."""
    return Counter(start_of_week(d) for d in dates)


def _week_starts_back(today: date) -> Iterator[date]:
    """Sundays from the current week backwards, within the lookback window."""
    week = start_of_week(today)
    while (today - week).days <= MAX_LOOKBACK_DAYS:
        yield week
        week -= _ONE_WEEK


# ---------------------------------------------------------------------------
# Current streak
# ---------------------------------------------------------------------------


def _current_daily(done: set[str], today: date) -> int:
    streak = 1 if format_date_key(today) in done else 0
    cursor = today - _ONE_DAY
    # Each counted day consumes a distinct completion, so len(done) steps suffice.
    for _ in range(len(done)):
        if format_date_key(cursor) not in done:
            break
        streak += 1
        cursor -= _ONE_DAY
    return streak


def _current_specific_days(done: set[str], days: frozenset[int], today: date) -> int:
    if not days:
        return 0
    streak = 0
    for offset in range(MAX_LOOKBACK_DAYS + 1):
        day = today - timedelta(days=offset)
        if weekday_of(day) not in days:
            continue
        if format_date_key(day) in done:
            streak += 1
        elif offset == 0:
            continue  # today may still be completed
        else:
            break
    return streak


def _current_times_per_week(done: set[str], target: int, today: date) -> int:
    if target < 1:
        return 0
    counts = _weekly_counts(parse_date_key(key) for key in done)
    current_week = start_of_week(today)
    streak = 0
    for week in _week_starts_back(today):
        if counts[week] >= target:
            streak += 1
        elif week == current_week:
            continue  # week still in progress
        else:
            break
    return streak


def current_streak(
    completions: Iterable[str], frequency: Frequency, *, today: DateLike
) -> int:
    """Count the unbroken run of adherence units ending at ``today``.

    Args:
        completions: date-keys on which the habit was completed
        frequency: the habit's recurrence rule
        today: the caller's current local day (date-key or ``date``)

    Returns:
        Streak length, 0 when there are no completions
    """
    done = set(completions)
    if not done:
        return 0
    day = _as_date(today)

    if isinstance(frequency, Daily):
        return _current_daily(done, day)
    if isinstance(frequency, SpecificDays):
        return _current_specific_days(done, frequency.days, day)
    if isinstance(frequency, TimesPerWeek):
        return _current_times_per_week(done, frequency.target, day)
    return 0


# ---------------------------------------------------------------------------
# Longest streak
# ---------------------------------------------------------------------------


def _longest_daily(dates: list[date]) -> int:
    longest = 0
    run = 0
    previous: date | None = None
    for day in dates:
        run = run + 1 if previous is not None and day == previous + _ONE_DAY else 1
        longest = max(longest, run)
        previous = day
    return longest


def _longest_specific_days(dates: list[date], days: frozenset[int], today: date) -> int:
    done = {d for d in dates if weekday_of(d) in days}
    if not done:
        return 0
    longest = 0
    run = 0
    cursor = min(done)
    while cursor <= today:
        if weekday_of(cursor) in days:
            if cursor in done:
                run += 1
                longest = max(longest, run)
            elif cursor != today:
                run = 0
        cursor += _ONE_DAY
    return longest


def _longest_times_per_week(dates: list[date], target: int, today: date) -> int:
    if target < 1 or not dates:
        return 0
    counts = _weekly_counts(dates)
    current_week = start_of_week(today)
    longest = 0
    run = 0
    week = start_of_week(dates[0])
    while week <= current_week:
        if counts[week] >= target:
            run += 1
            longest = max(longest, run)
        elif week != current_week:
            run = 0
        week += _ONE_WEEK
    return longest


def longest_streak(
    completions: Iterable[str], frequency: Frequency, *, today: DateLike
) -> int:
    """Longest run of adherence units in the whole history up to ``today``.

    Uses the same units and in-progress rule as ``current_streak``; completions
    dated after ``today`` are ignored, except that the current week counts all of
    its days for ``TimesPerWeek``. The result is never smaller than the current
    streak.
    """
    day = _as_date(today)
    horizon = end_of_week(day) if isinstance(frequency, TimesPerWeek) else day
    dates = sorted(d for d in {parse_date_key(key) for key in completions} if d <= horizon)
    if not dates:
        return 0

    if isinstance(frequency, Daily):
        return _longest_daily(dates)
    if isinstance(frequency, SpecificDays):
        return _longest_specific_days(dates, frequency.days, day)
    if isinstance(frequency, TimesPerWeek):
        return _longest_times_per_week(dates, frequency.target, day)
    return 0


def compute_streaks(
    completions: Iterable[str], frequency: Frequency, *, today: DateLike
) -> tuple[int, int]:
    """Return (current_streak, longest_streak) for a habit's completions."""
    keys = list(completions)
    return (
        current_streak(keys, frequency, today=today),
        longest_streak(keys, frequency, today=today),
    )


__all__ = ["MAX_LOOKBACK_DAYS", "compute_streaks", "current_streak", "longest_streak"]
