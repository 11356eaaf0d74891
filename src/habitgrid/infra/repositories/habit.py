"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from ...logging_config import get_logger
from ...models.frequency import Frequency
from ...models.habit import DEFAULT_HABIT_COLOR, Habit, HabitCompletion
from ...services.dates import as_utc, parse_date_key, utc_now
from ...services.habits import is_expired

logger = get_logger("repositories.habit")


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    # Helpers
    @staticmethod
    def _require(session: Session, habit_id: str) -> Habit:
        habit = session.get(Habit, habit_id)
        if habit is None:
            raise ValueError(f"Habit not found: {habit_id}")
        return habit

    @staticmethod
    def _next_sort_order(session: Session) -> int:
        current = session.exec(
            select(func.max(Habit.sort_order)).where(Habit.archived_at == None)  # noqa: E711
        ).one()
        return (current if current is not None else -1) + 1

    @staticmethod
    def _delete_habits(session: Session, habit_ids: Sequence[str]) -> None:
        completions = session.exec(
            select(HabitCompletion).where(col(HabitCompletion.habit_id).in_(habit_ids))
        ).all()
        for completion in completions:
            session.delete(completion)
        session.flush()
        for habit in session.exec(select(Habit).where(col(Habit.id).in_(habit_ids))).all():
            session.delete(habit)

    # Habit operations
    def create(
        self, name: str, frequency: Frequency, *, color: str | None = None, icon: str | None = None
    ) -> Habit:
        """Create a habit at the end of the active sort order."""
        name = name.strip()
        if not name:
            raise ValueError("Habit name cannot be empty")
        with self.session_factory() as session:
            habit = Habit(name=name, color=color or DEFAULT_HABIT_COLOR, icon=icon or None)
            habit.set_frequency(frequency)
            habit.sort_order = self._next_sort_order(session)
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            logger.info("Created habit", extra={"habit_id": habit.id, "frequency": habit.frequency_type})
            return habit

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def update(
        self,
        habit_id: str,
        *,
        name: str | None = None,
        frequency: Frequency | None = None,
        color: str | None = None,
        icon: str | None = None,
    ) -> Habit:
        """Apply the given edits; ``icon=""`` clears the icon."""
        with self.session_factory() as session:
            habit = self._require(session, habit_id)
            if name is not None:
                if not name.strip():
                    raise ValueError("Habit name cannot be empty")
                habit.name = name.strip()
            if frequency is not None:
                habit.set_frequency(frequency)
            if color is not None:
                habit.color = color
            if icon is not None:
                habit.icon = icon or None
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def list_active_habits(self) -> list[Habit]:
        """Non-archived habits by sort order, newest first on ties."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.archived_at == None)  # noqa: E711
                .order_by(col(Habit.sort_order), col(Habit.created_at).desc())
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_archived_habits(self) -> list[Habit]:
        """Archived habits, most recently archived first."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.archived_at != None)  # noqa: E711
                .order_by(col(Habit.archived_at).desc())
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def archive_habit(self, habit_id: str, *, now: datetime | None = None) -> None:
        """Stamp the habit as archived; its completions are kept."""
        with self.session_factory() as session:
            habit = self._require(session, habit_id)
            habit.archived_at = as_utc(now) if now else utc_now()
            session.add(habit)
            session.commit()
        logger.info("Archived habit", extra={"habit_id": habit_id})

    def restore_habit(self, habit_id: str) -> None:
        """Clear the archive stamp and append the habit to the active order."""
        with self.session_factory() as session:
            habit = self._require(session, habit_id)
            habit.sort_order = self._next_sort_order(session)
            habit.archived_at = None
            session.add(habit)
            session.commit()
        logger.info("Restored habit", extra={"habit_id": habit_id})

    def permanently_delete(self, habit_id: str) -> None:
        """Delete a habit together with its completions."""
        with self.session_factory() as session:
            self._require(session, habit_id)
            self._delete_habits(session, [habit_id])
            session.commit()
        logger.info("Permanently deleted habit", extra={"habit_id": habit_id})

    def reorder(self, habit_ids: Sequence[str]) -> None:
        """Use each habit's position in ``habit_ids`` as its sort order."""
        with self.session_factory() as session:
            habits = {h.id: h for h in session.exec(select(Habit).where(col(Habit.id).in_(habit_ids)))}
            missing = [hid for hid in habit_ids if hid not in habits]
            if missing:
                raise ValueError(f"Habit not found: {', '.join(missing)}")
            for position, habit_id in enumerate(habit_ids):
                habits[habit_id].sort_order = position
                session.add(habits[habit_id])
            session.commit()

    def purge_expired(self, retention_days: int, *, now: datetime | None = None) -> int:
        """Delete habits archived more than ``retention_days`` ago."""
        now = now or utc_now()
        with self.session_factory() as session:
            archived = session.exec(
                select(Habit).where(Habit.archived_at != None)  # noqa: E711
            ).all()
            expired = [
                habit.id
                for habit in archived
                if is_expired(habit.archived_at, now=now, retention_days=retention_days)
            ]
            if expired:
                self._delete_habits(session, expired)
                session.commit()
        if expired:
            logger.info("Purged expired archived habits", extra={"count": len(expired)})
        return len(expired)

    # Completion operations
    def list_completion_dates(
        self, habit_id: str, start: str | None = None, end: str | None = None
    ) -> list[str]:
        """Completion date-keys, newest first, optionally bounded inclusively."""
        with self.session_factory() as session:
            statement = select(HabitCompletion.completed_on).where(HabitCompletion.habit_id == habit_id)
            if start is not None:
                statement = statement.where(HabitCompletion.completed_on >= start)
            if end is not None:
                statement = statement.where(HabitCompletion.completed_on <= end)
            statement = statement.order_by(col(HabitCompletion.completed_on).desc())
            return list(session.exec(statement).all())

    def is_completed(self, habit_id: str, date_key: str) -> bool:
        with self.session_factory() as session:
            return (
                session.exec(
                    select(HabitCompletion.id)
                    .where(HabitCompletion.habit_id == habit_id)
                    .where(HabitCompletion.completed_on == date_key)
                ).first()
                is not None
            )

    def toggle_completion(self, habit_id: str, date_key: str) -> bool:
        """Flip the completion for ``date_key``; returns True when now completed."""
        parse_date_key(date_key)
        with self.session_factory() as session:
            self._require(session, habit_id)
            existing = session.exec(
                select(HabitCompletion)
                .where(HabitCompletion.habit_id == habit_id)
                .where(HabitCompletion.completed_on == date_key)
            ).first()

            if existing:
                session.delete(existing)
                session.commit()
                logger.debug("Cleared completion", extra={"habit_id": habit_id, "date": date_key})
                return False

            session.add(HabitCompletion(habit_id=habit_id, completed_on=date_key))
            try:
                session.commit()
            except IntegrityError:
                # A concurrent insert for the same day won; the day is completed either way.
                session.rollback()
                logger.warning(
                    "Duplicate completion collapsed", extra={"habit_id": habit_id, "date": date_key}
                )
            else:
                logger.debug("Recorded completion", extra={"habit_id": habit_id, "date": date_key})
            return True


__all__ = ["SQLModelHabitRepository"]
