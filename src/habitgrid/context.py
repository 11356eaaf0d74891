"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from .services.habits import HabitStats, habit_stats, sort_for_display
from .services.settings import AppSettings, load_settings


@dataclass
class AppContext:
    """Configuration plus the repositories the front ends work through."""

    config: BaseConfig
    session_factory: Callable[[], Session]
    habit_repo: SQLModelHabitRepository
    settings_repo: SQLModelSettingsRepository

    def settings(self) -> AppSettings:
        return load_settings(
            self.settings_repo,
            AppSettings(
                auto_sort_completed=self.config.AUTO_SORT_COMPLETED,
                deletion_policy_days=self.config.RETENTION_DAYS,
            ),
        )

    def habits_with_stats(self, *, today: Optional[date] = None) -> list[HabitStats]:
        """Active habits with fresh stats, ordered for display.

        Completions are re-read on every call so results always reflect the
        latest toggles.
        """
        day = today or date.today()
        stats = [
            habit_stats(habit, self.habit_repo.list_completion_dates(habit.id), today=day)
            for habit in self.habit_repo.list_active_habits()
        ]
        return sort_for_display(stats, auto_sort_completed=self.settings().auto_sort_completed)


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Bootstrap the database and wire repositories."""

    config = config or BaseConfig()
    _engine, session_factory = bootstrap_database(config)
    return AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=SQLModelHabitRepository(session_factory),
        settings_repo=SQLModelSettingsRepository(session_factory),
    )
