"""Provider availability calendar models."""
from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guidebook.db.base import Base, TimestampMixin, utcnow


class AvailabilityCalendar(TimestampMixin, Base):
    """Offered-date model for a single provider."""

    __tablename__ = "availability_calendars"

    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("providers.id", ondelete="CASCADE"), primary_key=True
    )
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    provider: Mapped["Provider"] = relationship(
        "Provider", back_populates="availability", lazy="joined"
    )
    days: Mapped[list["AvailabilityDay"]] = relationship(
        "AvailabilityDay",
        cascade="all, delete-orphan",
        order_by="AvailabilityDay.day",
        lazy="selectin",
    )
    recurring_patterns: Mapped[list["RecurringPattern"]] = relationship(
        "RecurringPattern",
        cascade="all, delete-orphan",
        order_by="RecurringPattern.day_of_week",
        lazy="selectin",
    )
    unavailable_periods: Mapped[list["UnavailablePeriod"]] = relationship(
        "UnavailablePeriod",
        cascade="all, delete-orphan",
        order_by="UnavailablePeriod.start_date",
        lazy="selectin",
    )


class AvailabilityDay(Base):
    """A single offered day; rows only exist for offered days."""

    __tablename__ = "availability_days"
    __table_args__ = (
        UniqueConstraint("provider_id", "day", name="uq_availability_days_provider_day"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("availability_calendars.provider_id", ondelete="CASCADE"),
        nullable=False,
    )
    day: Mapped[date] = mapped_column(Date, nullable=False)


class RecurringPattern(Base):
    """Weekly template; day_of_week 0 is Sunday."""

    __tablename__ = "recurring_patterns"
    __table_args__ = (
        UniqueConstraint(
            "provider_id", "day_of_week", name="uq_recurring_patterns_provider_dow"
        ),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_recurring_patterns_dow"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("availability_calendars.provider_id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class UnavailablePeriod(Base):
    """Blackout range that overrides the schedule."""

    __tablename__ = "unavailable_periods"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("availability_calendars.provider_id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(255))

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
