"""Declarative base and shared column mixins."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def casefold_key(value):
    """Key used for case-insensitive uniqueness and matching."""
    return value.casefold() if value is not None else None


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetime on every backend.

    SQLite drops the offset on storage, so values read back are re-tagged
    as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for all library models."""


class IDMixin:
    """Auto-incremented integer primary key."""

    id = Column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Creation and last-update timestamps, maintained on the Python side."""

    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def touch(self) -> None:
        """Mark the row as updated now, even if only relationships changed."""
        self.updated_at = utcnow()
