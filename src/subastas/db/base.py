"""
SQLAlchemy Base and Mixins

Provides declarative base and reusable mixins for database models.
"""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware current time, used for application-side timestamps."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Base class for all database models.

    Provides common functionality and type hints for SQLAlchemy models.
    """

    # Type annotation for primary keys
    id: Any


class CreatedAtMixin:
    """
    Mixin to add an insert-time timestamp.

    Set once by the application on insert and never touched afterwards.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when record was first seen"
    )


def import_all_models():
    """
    Import all models to register them with SQLAlchemy Base.

    Call before create_all() or alembic autogeneration so every table is
    discovered.
    """
    from src.subastas.db import models  # noqa: F401
