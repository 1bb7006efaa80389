"""Schema exports."""

from guidebook.schemas.availability import (
    AvailabilityData,
    AvailabilityRead,
    AvailabilityReplaceResult,
    DateWindow,
    DayAvailabilityUpdate,
    OfferedDates,
    OfferedDay,
    PatternApplyRequest,
    PatternApplyResult,
    RecurringPatternPayload,
    UnavailablePeriodPayload,
)
from guidebook.schemas.booking import (
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
    DateConflictDetail,
    DateRange,
    DateSelection,
    ExplicitDates,
    SingleDate,
)
from guidebook.schemas.calendar import ProviderCalendarRead

__all__ = [
    "AvailabilityData",
    "AvailabilityRead",
    "AvailabilityReplaceResult",
    "DateWindow",
    "DayAvailabilityUpdate",
    "OfferedDates",
    "OfferedDay",
    "PatternApplyRequest",
    "PatternApplyResult",
    "RecurringPatternPayload",
    "UnavailablePeriodPayload",
    "BookingCreate",
    "BookingRead",
    "BookingStatusUpdate",
    "DateConflictDetail",
    "DateRange",
    "DateSelection",
    "ExplicitDates",
    "SingleDate",
    "ProviderCalendarRead",
]
