"""Habit repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ...models.frequency import Frequency
from ...models.habit import Habit


class HabitRepository(Protocol):
    """Storage contract for habits and their completion days.

    Implementations must make a toggle visible to the next read and keep at most
    one completion per (habit, date-key).
    """

    def create(
        self, name: str, frequency: Frequency, *, color: str | None = None, icon: str | None = None
    ) -> Habit:
        """Create a habit at the end of the active sort order."""
        ...

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID, archived or not."""
        ...

    def update(
        self,
        habit_id: str,
        *,
        name: str | None = None,
        frequency: Frequency | None = None,
        color: str | None = None,
        icon: str | None = None,
    ) -> Habit:
        """Apply the given edits to a habit."""
        ...

    def list_active_habits(self) -> list[Habit]:
        """Non-archived habits in display order."""
        ...

    def list_archived_habits(self) -> list[Habit]:
        """Archived habits, most recently archived first."""
        ...

    def list_completion_dates(
        self, habit_id: str, start: str | None = None, end: str | None = None
    ) -> list[str]:
        """Completion date-keys for a habit, optionally bounded (inclusive)."""
        ...

    def is_completed(self, habit_id: str, date_key: str) -> bool:
        """Whether the habit has a completion on ``date_key``."""
        ...

    def toggle_completion(self, habit_id: str, date_key: str) -> bool:
        """Flip completion for a day; returns True when it is now completed."""
        ...

    def archive_habit(self, habit_id: str) -> None:
        """Hide a habit from active lists and start its retention window."""
        ...

    def restore_habit(self, habit_id: str) -> None:
        """Bring an archived habit back at the end of the active order."""
        ...

    def permanently_delete(self, habit_id: str) -> None:
        """Remove a habit and all of its completions."""
        ...

    def reorder(self, habit_ids: Sequence[str]) -> None:
        """Assign sort positions following ``habit_ids``."""
        ...

    def purge_expired(self, retention_days: int, *, now: datetime | None = None) -> int:
        """Delete archived habits past the retention window; returns the count."""
        ...
