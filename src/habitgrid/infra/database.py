"""Database infrastructure."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger("database")


def _apply_sqlite_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    """Run the configured PRAGMAs on every new SQLite connection."""

    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        try:
            for name, value in pragmas.items():
                cursor.execute(f"PRAGMA {name}={value}")
        finally:
            cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    _apply_sqlite_pragmas(engine, config.SQLITE_PRAGMAS)
    return engine


def init_database(engine: Engine) -> None:
    """Initialize database schema."""
    # Import all models to ensure they're registered
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Provide a transactional scope around operations."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_session_factory(engine: Engine):
    """Create a session factory function."""

    def factory():
        """Create a new session scope."""
        return session_scope(engine)

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, object]:
    """Engine + session_factory with schema init, default settings and retention sweep.

    Expired archived habits are purged here using the stored retention window,
    so every start of the application enforces it. Returns (engine, session_factory).
    """
    from ..services.settings import AppSettings, load_settings, seed_default_settings
    from .repositories import SQLModelHabitRepository, SQLModelSettingsRepository

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    session_factory = create_session_factory(engine)

    settings_repo = SQLModelSettingsRepository(session_factory)
    defaults = AppSettings(
        auto_sort_completed=cfg.AUTO_SORT_COMPLETED,
        deletion_policy_days=cfg.RETENTION_DAYS,
    )
    seed_default_settings(settings_repo, defaults)
    settings = load_settings(settings_repo, defaults)

    purged = SQLModelHabitRepository(session_factory).purge_expired(settings.deletion_policy_days)
    if purged:
        logger.info("Cleaned up %d expired archived habit(s)", purged)

    return engine, session_factory
