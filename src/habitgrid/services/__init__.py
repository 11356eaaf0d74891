"""Pure habit engine: calendar helpers, scheduling, streaks and aggregation."""

from .aggregates import Heatmap, HeatmapCell, build_heatmap, cell_color, completions_this_week
from .dates import (
    end_of_week,
    format_date_key,
    parse_date_key,
    start_of_week,
    today_key,
    weekday_of,
    weeks_of_year,
)
from .habits import HabitStats, archived_days_remaining, habit_stats, is_expired, sort_for_display
from .schedule import classify_day, is_scheduled
from .streaks import compute_streaks, current_streak, longest_streak

__all__ = [
    "HabitStats",
    "Heatmap",
    "HeatmapCell",
    "archived_days_remaining",
    "build_heatmap",
    "cell_color",
    "classify_day",
    "completions_this_week",
    "compute_streaks",
    "current_streak",
    "end_of_week",
    "format_date_key",
    "habit_stats",
    "is_expired",
    "is_scheduled",
    "longest_streak",
    "parse_date_key",
    "sort_for_display",
    "start_of_week",
    "today_key",
    "weekday_of",
    "weeks_of_year",
]
