"""Domain errors raised by the booking and availability services."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date


class BookingError(ValueError):
    """Base class for user-visible booking engine errors."""


class ValidationError(BookingError):
    """Request rejected before touching the store."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NoDatesRequestedError(ValidationError):
    def __init__(self, message: str = "No dates requested", *, field: str | None = "dates") -> None:
        super().__init__(message, field=field)


class DateConflictError(BookingError):
    """Requested dates are already held by another booking."""

    def __init__(self, conflicting_dates: Iterable[date]) -> None:
        self.conflicting_dates = sorted(set(conflicting_dates))
        rendered = ", ".join(day.isoformat() for day in self.conflicting_dates)
        super().__init__(f"Dates already booked: {rendered}")


class InvalidTransitionError(BookingError):
    pass


class NotFoundError(BookingError):
    pass


class StaleBookingError(BookingError):
    """The booking changed since the caller last read it."""


class StorageError(RuntimeError):
    """The backing store failed while writing the ledger."""


__all__ = [
    "BookingError",
    "ValidationError",
    "NoDatesRequestedError",
    "DateConflictError",
    "InvalidTransitionError",
    "NotFoundError",
    "StaleBookingError",
    "StorageError",
]
