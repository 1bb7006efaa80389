"""Service provider (translator / tour guide) model."""

from __future__ import annotations

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guidebook.core.config import get_settings
from guidebook.db.base import Base, TimestampMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from guidebook.models.availability import AvailabilityCalendar
    from guidebook.models.booking import Booking


class ServiceType(str, enum.Enum):
    """Services a provider can be booked for."""

    TRANSLATOR = "translator"
    TOUR_GUIDE = "tour_guide"
    BOTH = "both"


class Provider(TimestampMixin, Base):
    """A verified provider whose calendar and bookings are managed here.

    Rows are written by the verification workflow once an application is
    approved; the provider id is also the application id.
    """

    __tablename__ = "providers"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    service_type: Mapped[ServiceType] = mapped_column(
        Enum(ServiceType), default=ServiceType.TRANSLATOR, nullable=False
    )
    timezone: Mapped[str] = mapped_column(
        String(64), default=lambda: get_settings().default_timezone, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    availability: Mapped["AvailabilityCalendar | None"] = relationship(
        "AvailabilityCalendar",
        back_populates="provider",
        uselist=False,
        cascade="all, delete-orphan",
    )
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="provider"
    )
