"""
SQLAlchemy declarative base for console models.

Primary keys are string UUIDs so the schema behaves the same on the hosted
PostgreSQL store and on the SQLite databases used in tests.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all console SQLAlchemy models."""

    pass
