"""Shared persistence helpers for the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.common import PersistenceError
from models import Base


def ensure_schema(engine: Engine) -> list[str]:
    """Create all tables and indexes when missing; return the tables created."""
    with engine.begin() as connection:
        existing_tables = set(inspect(connection).get_table_names())
        Base.metadata.create_all(bind=connection, checkfirst=True)
    created = [table for table in Base.metadata.tables if table not in existing_tables]
    if created:
        logger.info("Created tables: {}", ", ".join(created))
    return created


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures (stale versions included) as PersistenceError."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to {action}: {exc}") from exc


class SessionRepository:
    """Repository bound to one session; the caller owns the transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session


__all__ = ["SessionRepository", "ensure_schema", "storage_errors"]
