"""
Declarative Base

Shared by posts, their per-locale translations and tracked provider jobs.
SQLite connection pragmas (foreign keys, WAL) live in post_translator.database,
next to the engine they configure.
"""
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, declarative_mixin, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base for all post-translator tables."""


@declarative_mixin
class TimestampMixin:
    """
    created_at / updated_at columns.

    updated_at only moves when a row is actually written, so an apply that
    finds identical translations leaves it untouched.
    """

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
