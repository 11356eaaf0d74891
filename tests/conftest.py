"""Pytest configuration and shared fixtures for HabitGrid tests.

Provides an isolated SQLite database per test, repositories bound to it and a
habit factory. Engine tests take a fixed ``today`` so nothing depends on the
wall clock.
"""

from __future__ import annotations

from datetime import date

import pytest

from habitgrid.config import TestingConfig
from habitgrid.infra.database import create_db_engine, create_session_factory, init_database
from habitgrid.infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from habitgrid.models import Daily

# Wednesday
FIXED_TODAY = date(2024, 3, 6)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path) -> TestingConfig:
    """Configuration whose data directory is the test's temp dir."""
    return TestingConfig(data_dir=tmp_path)


@pytest.fixture(scope="function")
def db_engine(config):
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: engine with the schema created and SQLite pragmas applied
    """
    engine = create_db_engine(config)
    init_database(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect."""
    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def settings_repo(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(habit_repo):
    """Factory for persisted habits.

    Returns:
        Callable: creates a habit, daily unless a frequency is given
    """

    def _create_habit(name: str = "Read", frequency=None, **kwargs):
        return habit_repo.create(name, frequency or Daily(), **kwargs)

    return _create_habit


@pytest.fixture
def today() -> date:
    """A fixed Wednesday used as "today" by engine tests."""
    return FIXED_TODAY
