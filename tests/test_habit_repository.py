"""Tests for the SQLModel habit repository (the persistence contract)."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from habitgrid.infra.repositories import SQLModelHabitRepository
from habitgrid.models import Daily, Habit, HabitCompletion, SpecificDays, TimesPerWeek
from habitgrid.services.dates import as_utc, utc_now


class TestHabitCrud:
    def test_create_assigns_id_defaults_and_order(self, habit_repo):
        first = habit_repo.create("Read", Daily())
        second = habit_repo.create("Run", TimesPerWeek(target=3), color="#34C759", icon="run")

        assert first.id and second.id and first.id != second.id
        assert first.color == "#007AFF"
        assert (first.sort_order, second.sort_order) == (0, 1)
        assert second.frequency == TimesPerWeek(target=3)
        assert second.frequency_days is None

    def test_create_rejects_blank_name(self, habit_repo):
        with pytest.raises(ValueError):
            habit_repo.create("   ", Daily())

    def test_update_switches_frequency_variant(self, habit_factory, habit_repo):
        habit = habit_factory(frequency=TimesPerWeek(target=2))
        updated = habit_repo.update(habit.id, name="Read more", frequency=SpecificDays(days=frozenset({1, 3})))

        assert updated.name == "Read more"
        assert updated.frequency == SpecificDays(days=frozenset({1, 3}))
        assert updated.frequency_times_per_week is None
        assert habit_repo.get_by_id(habit.id).frequency == SpecificDays(days=frozenset({1, 3}))

    def test_update_clears_icon(self, habit_factory, habit_repo):
        habit = habit_factory(icon="book")
        assert habit_repo.update(habit.id, icon="").icon is None

    def test_unknown_habit(self, habit_repo):
        assert habit_repo.get_by_id("missing") is None
        with pytest.raises(ValueError):
            habit_repo.update("missing", name="x")
        with pytest.raises(ValueError):
            habit_repo.archive_habit("missing")
        with pytest.raises(ValueError):
            habit_repo.toggle_completion("missing", "2024-03-06")


class TestOrdering:
    def test_active_list_follows_sort_order(self, habit_factory, habit_repo):
        a = habit_factory("A")
        b = habit_factory("B")
        c = habit_factory("C")

        habit_repo.reorder([c.id, a.id, b.id])

        assert [h.name for h in habit_repo.list_active_habits()] == ["C", "A", "B"]

    def test_reorder_rejects_unknown_ids(self, habit_factory, habit_repo):
        a = habit_factory("A")
        with pytest.raises(ValueError):
            habit_repo.reorder([a.id, "missing"])

    def test_restore_appends_to_end(self, habit_factory, habit_repo):
        a = habit_factory("A")
        habit_factory("B")
        habit_repo.archive_habit(a.id)
        habit_factory("C")

        habit_repo.restore_habit(a.id)

        assert [h.name for h in habit_repo.list_active_habits()] == ["B", "C", "A"]


class TestCompletions:
    def test_toggle_flips_state(self, habit_factory, habit_repo):
        habit = habit_factory()

        assert habit_repo.toggle_completion(habit.id, "2024-03-06") is True
        assert habit_repo.is_completed(habit.id, "2024-03-06")
        assert habit_repo.toggle_completion(habit.id, "2024-03-06") is False
        assert not habit_repo.is_completed(habit.id, "2024-03-06")
        assert habit_repo.toggle_completion(habit.id, "2024-03-06") is True

    def test_toggle_reads_its_own_write(self, habit_factory, habit_repo):
        habit = habit_factory()
        habit_repo.toggle_completion(habit.id, "2024-03-06")
        assert habit_repo.list_completion_dates(habit.id) == ["2024-03-06"]

    def test_toggle_rejects_non_canonical_date(self, habit_factory, habit_repo):
        habit = habit_factory()
        with pytest.raises(ValueError):
            habit_repo.toggle_completion(habit.id, "2024-3-6")

    def test_one_completion_per_day_enforced_by_storage(self, habit_factory, session_factory):
        habit = habit_factory()
        with session_factory() as session:
            session.add(HabitCompletion(habit_id=habit.id, completed_on="2024-03-06"))
        with pytest.raises(IntegrityError):
            with session_factory() as session:
                session.add(HabitCompletion(habit_id=habit.id, completed_on="2024-03-06"))

    def test_toggle_collapses_concurrent_insert(self, habit_factory, habit_repo, session_factory):
        """A row written by another session after the existence check still reads as completed."""
        habit = habit_factory()
        raced = []

        @contextmanager
        def racing_factory():
            with session_factory() as session:
                commit = session.commit

                def commit_after_competing_insert():
                    if not raced:
                        raced.append(True)
                        with session_factory() as other:
                            other.add(HabitCompletion(habit_id=habit.id, completed_on="2024-03-06"))
                    commit()

                session.commit = commit_after_competing_insert
                yield session

        racing_repo = SQLModelHabitRepository(racing_factory)

        assert racing_repo.toggle_completion(habit.id, "2024-03-06") is True
        assert raced == [True]
        assert habit_repo.list_completion_dates(habit.id) == ["2024-03-06"]

    def test_completion_dates_bounded_and_newest_first(self, habit_factory, habit_repo):
        habit = habit_factory()
        for key in ["2024-03-01", "2024-03-04", "2024-02-27", "2024-03-06"]:
            habit_repo.toggle_completion(habit.id, key)

        assert habit_repo.list_completion_dates(habit.id) == [
            "2024-03-06", "2024-03-04", "2024-03-01", "2024-02-27",
        ]
        assert habit_repo.list_completion_dates(habit.id, "2024-03-01", "2024-03-04") == [
            "2024-03-04", "2024-03-01",
        ]

    def test_completions_are_per_habit(self, habit_factory, habit_repo):
        a = habit_factory("A")
        b = habit_factory("B")
        habit_repo.toggle_completion(a.id, "2024-03-06")
        assert habit_repo.list_completion_dates(b.id) == []


class TestArchiveLifecycle:
    def test_archive_hides_from_active_and_keeps_history(self, habit_factory, habit_repo):
        habit = habit_factory()
        habit_repo.toggle_completion(habit.id, "2024-03-06")

        habit_repo.archive_habit(habit.id)

        assert habit_repo.list_active_habits() == []
        archived = habit_repo.list_archived_habits()
        assert [h.id for h in archived] == [habit.id]
        assert archived[0].is_archived
        assert habit_repo.list_completion_dates(habit.id) == ["2024-03-06"]

    def test_archived_list_newest_first(self, habit_factory, habit_repo):
        a = habit_factory("A")
        b = habit_factory("B")
        now = datetime(2024, 3, 6, 9, 0, tzinfo=timezone.utc)
        habit_repo.archive_habit(a.id, now=now - timedelta(days=2))
        habit_repo.archive_habit(b.id, now=now)
        assert [h.name for h in habit_repo.list_archived_habits()] == ["B", "A"]

    def test_archived_at_round_trips_as_utc(self, habit_factory, habit_repo):
        habit = habit_factory()
        now = datetime(2024, 3, 6, 9, 30, tzinfo=timezone.utc)

        habit_repo.archive_habit(habit.id, now=now)

        stored = habit_repo.get_by_id(habit.id)
        assert as_utc(stored.archived_at) == now
        assert as_utc(stored.created_at).tzinfo is timezone.utc
        assert habit_repo.purge_expired(30, now=now + timedelta(days=30)) == 0
        assert habit_repo.purge_expired(30, now=now + timedelta(days=31)) == 1

    def test_archive_defaults_to_current_utc_time(self, habit_factory, habit_repo):
        habit = habit_factory()
        before = utc_now()

        habit_repo.archive_habit(habit.id)

        archived_at = as_utc(habit_repo.get_by_id(habit.id).archived_at)
        assert before - timedelta(seconds=1) <= archived_at <= utc_now() + timedelta(seconds=1)

    def test_permanent_delete_cascades(self, habit_factory, habit_repo, session_factory):
        habit = habit_factory()
        habit_repo.toggle_completion(habit.id, "2024-03-05")
        habit_repo.toggle_completion(habit.id, "2024-03-06")

        habit_repo.permanently_delete(habit.id)

        assert habit_repo.get_by_id(habit.id) is None
        with session_factory() as session:
            assert session.exec(select(HabitCompletion)).all() == []

    def test_database_cascade_on_habit_delete(self, habit_factory, habit_repo, session_factory):
        habit = habit_factory()
        habit_repo.toggle_completion(habit.id, "2024-03-06")

        with session_factory() as session:
            session.delete(session.get(Habit, habit.id))

        with session_factory() as session:
            assert session.exec(select(HabitCompletion)).all() == []

    def test_purge_expired_respects_window(self, habit_factory, habit_repo):
        now = datetime(2024, 3, 6, 9, 0, tzinfo=timezone.utc)
        old = habit_factory("Old")
        recent = habit_factory("Recent")
        active = habit_factory("Active")
        habit_repo.toggle_completion(old.id, "2024-01-01")
        habit_repo.archive_habit(old.id, now=now - timedelta(days=31))
        habit_repo.archive_habit(recent.id, now=now - timedelta(days=29))

        assert habit_repo.purge_expired(30, now=now) == 1

        assert habit_repo.get_by_id(old.id) is None
        assert habit_repo.get_by_id(recent.id) is not None
        assert habit_repo.get_by_id(active.id) is not None
        assert habit_repo.list_completion_dates(old.id) == []

    def test_purge_with_nothing_expired(self, habit_factory, habit_repo):
        habit_factory()
        assert habit_repo.purge_expired(30) == 0
