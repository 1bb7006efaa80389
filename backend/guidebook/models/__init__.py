"""ORM models package export."""

from guidebook.models.availability import (
    AvailabilityCalendar,
    AvailabilityDay,
    RecurringPattern,
    UnavailablePeriod,
)
from guidebook.models.booking import Booking, BookingDateClaim, BookingStatus
from guidebook.models.calendar_cache import ProviderCalendarCache
from guidebook.models.provider import Provider, ServiceType

__all__ = [
    "AvailabilityCalendar",
    "AvailabilityDay",
    "RecurringPattern",
    "UnavailablePeriod",
    "Booking",
    "BookingDateClaim",
    "BookingStatus",
    "ProviderCalendarCache",
    "Provider",
    "ServiceType",
]
