"""Schemas for provider availability calendars."""
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from guidebook.models.availability import AvailabilityCalendar


class ScheduleEntry(BaseModel):
    """Explicit day toggle; only available days are stored."""

    date: str = Field(..., examples=["2025-03-01"])
    is_available: bool = True


class RecurringPatternPayload(BaseModel):
    """Weekly template, 0 = Sunday."""

    day_of_week: int = Field(..., ge=0, le=6)
    is_active: bool = True


class UnavailablePeriodPayload(BaseModel):
    start_date: str
    end_date: str
    reason: str | None = Field(default=None, max_length=255)


class AvailabilityData(BaseModel):
    """Full availability document; PUT replaces the stored one."""

    is_available: bool = True
    schedule: list[ScheduleEntry] = Field(default_factory=list)
    recurring_patterns: list[RecurringPatternPayload] = Field(default_factory=list)
    unavailable_periods: list[UnavailablePeriodPayload] = Field(default_factory=list)
    timezone: str | None = Field(default=None, examples=["Asia/Jakarta"])


class ScheduleEntryRead(BaseModel):
    day: date
    is_available: bool = True

    model_config = ConfigDict(from_attributes=True)


class RecurringPatternRead(BaseModel):
    day_of_week: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UnavailablePeriodRead(BaseModel):
    id: uuid.UUID
    start_date: date
    end_date: date
    reason: str | None = None

    model_config = ConfigDict(from_attributes=True)


class AvailabilityRead(BaseModel):
    """Serialized availability calendar."""

    provider_id: uuid.UUID
    is_available: bool
    timezone: str
    schedule: list[ScheduleEntryRead] = Field(default_factory=list)
    recurring_patterns: list[RecurringPatternRead] = Field(default_factory=list)
    unavailable_periods: list[UnavailablePeriodRead] = Field(default_factory=list)
    last_updated: datetime

    @classmethod
    def from_calendar(cls, calendar: AvailabilityCalendar, *, timezone: str) -> AvailabilityRead:
        return cls(
            provider_id=calendar.provider_id,
            is_available=calendar.is_available,
            timezone=timezone,
            schedule=[ScheduleEntryRead.model_validate(day) for day in calendar.days],
            recurring_patterns=[
                RecurringPatternRead.model_validate(pattern)
                for pattern in calendar.recurring_patterns
            ],
            unavailable_periods=[
                UnavailablePeriodRead.model_validate(period)
                for period in calendar.unavailable_periods
            ],
            last_updated=calendar.last_updated,
        )


class AvailabilityReplaceResult(BaseModel):
    """PUT response: the stored document plus entries that were skipped."""

    availability: AvailabilityRead
    rejected_dates: list[str] = Field(default_factory=list)


class DayAvailabilityUpdate(BaseModel):
    is_available: bool


class DateWindow(BaseModel):
    """Inclusive window of days; defaults are resolved by the service."""

    window_start: str | None = None
    window_end: str | None = None


class PatternApplyRequest(DateWindow):
    day_of_week: int | None = Field(default=None, ge=0, le=6)


class OfferedDates(BaseModel):
    provider_id: uuid.UUID
    window_start: date
    window_end: date
    dates: list[date]
    total: int


class OfferedDay(BaseModel):
    provider_id: uuid.UUID
    day: date
    offered: bool


class PatternApplyResult(BaseModel):
    availability: AvailabilityRead
    stamped_dates: list[date] = Field(default_factory=list)
