"""Declarative base and shared column mixins for ORM models."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for ORM models; datetimes are always timezone-aware."""

    type_annotation_map = {datetime: DateTime(timezone=True)}


class TimestampMixin:
    """Row creation and last-modification times."""

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now()
    )
