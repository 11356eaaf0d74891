"""Typed view over the key/value settings table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

AUTO_SORT_COMPLETED_KEY = "auto_sort_completed"
DELETION_POLICY_DAYS_KEY = "deletion_policy_days"


@dataclass(slots=True)
class AppSettings:
    """User-adjustable preferences."""

    auto_sort_completed: bool = True
    deletion_policy_days: int = 30


class SettingsStore(Protocol):
    """Minimal key/value store the settings helpers need."""

    def get_value(self, key: str) -> Optional[str]:  # pragma: no cover - interface
        ...

    def set(self, key: str, value: str, description: str | None = None):  # pragma: no cover
        ...


def load_settings(store: SettingsStore, defaults: AppSettings | None = None) -> AppSettings:
    """Read settings, falling back to ``defaults`` for missing or unreadable values."""

    base = defaults or AppSettings()
    auto_sort = store.get_value(AUTO_SORT_COMPLETED_KEY)
    days = store.get_value(DELETION_POLICY_DAYS_KEY)

    retention = base.deletion_policy_days
    if days is not None and days.strip().isdigit() and int(days) > 0:
        retention = int(days)

    return AppSettings(
        auto_sort_completed=base.auto_sort_completed if auto_sort is None else auto_sort == "true",
        deletion_policy_days=retention,
    )


def update_settings(
    store: SettingsStore,
    *,
    auto_sort_completed: bool | None = None,
    deletion_policy_days: int | None = None,
) -> None:
    """Persist only the settings that were given."""

    if auto_sort_completed is not None:
        store.set(
            AUTO_SORT_COMPLETED_KEY,
            "true" if auto_sort_completed else "false",
            "Move habits completed today to the bottom of the list",
        )
    if deletion_policy_days is not None:
        if deletion_policy_days < 1:
            raise ValueError("Retention window must be at least one day")
        store.set(
            DELETION_POLICY_DAYS_KEY,
            str(deletion_policy_days),
            "Days an archived habit is kept before permanent deletion",
        )


def seed_default_settings(store: SettingsStore, defaults: AppSettings) -> None:
    """Write defaults for any setting that has never been stored."""

    if store.get_value(AUTO_SORT_COMPLETED_KEY) is None:
        update_settings(store, auto_sort_completed=defaults.auto_sort_completed)
    if store.get_value(DELETION_POLICY_DAYS_KEY) is None:
        update_settings(store, deletion_policy_days=defaults.deletion_policy_days)


__all__ = [
    "AUTO_SORT_COMPLETED_KEY",
    "DELETION_POLICY_DAYS_KEY",
    "AppSettings",
    "SettingsStore",
    "load_settings",
    "seed_default_settings",
    "update_settings",
]
