"""
Database configuration and session helpers.
Uses SQLAlchemy 2.0 patterns.

The engine is built lazily from settings so that importing the package never
opens a connection. Pipeline-enabled session factories are created in
organizer.persistence.session.
"""

from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from shared.config.settings import settings


def build_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """
    Create an engine for the given URL (defaults to settings.database_url).

    Pool sizing and timeouts only apply to server databases; SQLite uses the
    dialect's default pool.
    """
    url = database_url or settings.database_url
    echo = settings.db_echo if echo is None else echo

    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        echo=echo,
    )


@lru_cache
def get_engine() -> Engine:
    """Get the cached application engine."""
    return build_engine()


def safe_commit(db: Session) -> None:
    """
    Safe commit with automatic rollback on failure.

    Usage:
        from shared.infrastructure.db import safe_commit
        safe_commit(db)

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
