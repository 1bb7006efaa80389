"""Booking ledger models."""
from __future__ import annotations

import enum
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Date,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guidebook.db.base import Base, TimestampMixin
from guidebook.models.provider import ServiceType


class BookingStatus(str, enum.Enum):
    """Lifecycle states for bookings."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Booking(TimestampMixin, Base):
    """A client's request to book a provider for one or more days.

    Exactly one of ``booking_date`` (single day) or ``date_range`` (two or
    more ISO dates, ordered) is populated.
    """

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    client_id: Mapped[str | None] = mapped_column(String(128), index=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    client_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    service_type: Mapped[ServiceType] = mapped_column(Enum(ServiceType), nullable=False)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(16, 2), nullable=False)
    message: Mapped[str | None] = mapped_column(String(2048))
    booking_date: Mapped[date | None] = mapped_column(Date)
    date_range: Mapped[list[str] | None] = mapped_column(JSON)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False, index=True
    )
    admin_notes: Mapped[str | None] = mapped_column(String(2048))
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    provider: Mapped["Provider"] = relationship("Provider", back_populates="bookings")
    claims: Mapped[list["BookingDateClaim"]] = relationship(
        "BookingDateClaim",
        back_populates="booking",
        cascade="all, delete-orphan",
    )

    @property
    def dates(self) -> list[date]:
        if self.date_range:
            return [date.fromisoformat(value) for value in self.date_range]
        if self.booking_date is not None:
            return [self.booking_date]
        return []


class BookingDateClaim(Base):
    """Row lock on a provider's day held by a non-cancelled booking."""

    __tablename__ = "booking_date_claims"
    __table_args__ = (
        UniqueConstraint("provider_id", "day", name="uq_booking_date_claims_provider_day"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("providers.id", ondelete="CASCADE"), nullable=False
    )
    day: Mapped[date] = mapped_column(Date, nullable=False)

    booking: Mapped[Booking] = relationship("Booking", back_populates="claims")
