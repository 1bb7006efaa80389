"""Pydantic schemas for bookings."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from guidebook.models.booking import BookingStatus
from guidebook.models.provider import ServiceType


class SingleDate(BaseModel):
    """One calendar day."""

    kind: Literal["single"] = "single"
    date: str = Field(..., examples=["2025-03-01"])


class DateRange(BaseModel):
    """Inclusive range expanded day by day."""

    kind: Literal["range"] = "range"
    start: str = Field(..., examples=["2025-03-01"])
    end: str = Field(..., examples=["2025-03-03"])


class ExplicitDates(BaseModel):
    """Caller-chosen days, taken as-is."""

    kind: Literal["explicit"] = "explicit"
    dates: list[str] = Field(default_factory=list)


DateSelection = Annotated[
    SingleDate | DateRange | ExplicitDates, Field(discriminator="kind")
]


class BookingCreate(BaseModel):
    """Payload for a client booking request."""

    provider_id: uuid.UUID
    price_per_day: Decimal = Field(..., ge=Decimal("0"))
    dates: DateSelection
    client_name: str = Field(..., min_length=1, max_length=255)
    client_email: str = Field(..., min_length=3, max_length=320)
    client_phone: str = Field(..., min_length=1, max_length=32)
    service_type: ServiceType = ServiceType.TRANSLATOR
    message: str | None = Field(default=None, max_length=2048)


class BookingStatusUpdate(BaseModel):
    """Status transition request."""

    status: BookingStatus
    admin_notes: str | None = Field(default=None, max_length=2048)
    expected_version: int | None = Field(default=None, ge=1)


class BookingRead(BaseModel):
    """Serialized booking representation."""

    id: uuid.UUID
    provider_id: uuid.UUID
    client_id: str | None = None
    client_name: str
    client_email: str
    client_phone: str
    service_type: ServiceType
    price_per_day: Decimal
    total_price: Decimal
    message: str | None = None
    booking_date: date | None = None
    date_range: list[date] | None = None
    status: BookingStatus
    admin_notes: str | None = None
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DateConflictDetail(BaseModel):
    """Body of a 409 response for a rejected booking."""

    message: str
    conflicting_dates: list[date]
