"""SQLModel table exports and value types."""

from .frequency import Daily, Frequency, SpecificDays, TimesPerWeek
from .habit import DEFAULT_HABIT_COLOR, Habit, HabitCompletion
from .settings import AppSetting

__all__ = [
    "AppSetting",
    "DEFAULT_HABIT_COLOR",
    "Daily",
    "Frequency",
    "Habit",
    "HabitCompletion",
    "SpecificDays",
    "TimesPerWeek",
]
