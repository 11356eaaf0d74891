"""Habit tracking data structures."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional
from uuid import uuid4

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from .frequency import DAILY, Frequency, frequency_from_columns, frequency_to_columns

DEFAULT_HABIT_COLOR = "#007AFF"


def _new_id() -> str:
    return uuid4().hex


class Habit(SQLModel, table=True):
    """A user-defined habit with its recurrence rule and display attributes."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=80, index=True)
    frequency_type: str = Field(default=DAILY, nullable=False, max_length=32)
    frequency_days: Optional[str] = Field(default=None, max_length=32)
    frequency_times_per_week: Optional[int] = Field(default=None)
    color: str = Field(default=DEFAULT_HABIT_COLOR, nullable=False, max_length=16)
    icon: Optional[str] = Field(default=None, max_length=64)
    sort_order: int = Field(default=0, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
    archived_at: Optional[datetime] = Field(default=None, index=True)

    @property
    def frequency(self) -> Frequency:
        """Recurrence rule decoded from the frequency columns."""
        return frequency_from_columns(
            self.frequency_type, self.frequency_days, self.frequency_times_per_week
        )

    def set_frequency(self, frequency: Frequency) -> None:
        """Store ``frequency`` so exactly the columns of its variant are populated."""
        (
            self.frequency_type,
            self.frequency_days,
            self.frequency_times_per_week,
        ) = frequency_to_columns(frequency)

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None


class HabitCompletion(SQLModel, table=True):
    """A habit marked done on one local calendar day.

    ``completed_on`` holds the canonical ``YYYY-MM-DD`` date-key; at most one row
    exists per (habit, day).
    """

    __tablename__: ClassVar[str] = "habit_completion"
    __table_args__ = (UniqueConstraint("habit_id", "completed_on", name="uq_habit_completion_day"),)

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    habit_id: str = Field(
        sa_column=Column(
            String(32),
            ForeignKey("habit.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    completed_on: str = Field(nullable=False, max_length=10, index=True)
