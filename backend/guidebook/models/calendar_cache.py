"""Denormalized per-provider calendar cache."""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from guidebook.db.base import Base, utcnow


class ProviderCalendarCache(Base):
    """Dates no longer bookable for a provider, rebuilt from the ledger.

    Read-only projection: safe to delete and regenerate at any time.
    """

    __tablename__ = "provider_calendar_caches"

    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("providers.id", ondelete="CASCADE"), primary_key=True
    )
    unavailable_dates: Mapped[list[str]] = mapped_column(
        JSON, default=list, nullable=False
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
