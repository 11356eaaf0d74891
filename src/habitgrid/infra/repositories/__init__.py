"""SQLModel repository implementations."""

from .habit import SQLModelHabitRepository
from .settings import SQLModelSettingsRepository

__all__ = ["SQLModelHabitRepository", "SQLModelSettingsRepository"]
