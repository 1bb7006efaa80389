"""Translate service errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from guidebook.schemas.booking import DateConflictDetail
from guidebook.services.errors import (
    BookingError,
    DateConflictError,
    InvalidTransitionError,
    NotFoundError,
    StaleBookingError,
    StorageError,
    ValidationError,
)


def http_error(exc: BookingError | StorageError) -> HTTPException:
    if isinstance(exc, DateConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=DateConflictDetail(
                message=str(exc), conflicting_dates=exc.conflicting_dates
            ).model_dump(mode="json"),
        )
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, StaleBookingError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, ValidationError):
        detail: dict[str, str | None] = {"message": str(exc), "field": exc.field}
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    if isinstance(exc, InvalidTransitionError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, StorageError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to save changes, please retry",
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
