"""Role helpers for explicit authorization checks."""

from __future__ import annotations

import uuid

from fastapi import HTTPException, status

from guidebook.models.booking import Booking, BookingStatus
from guidebook.security.principal import Principal


def _forbidden() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Insufficient permissions",
    )


def require_provider_access(principal: Principal, provider_id: uuid.UUID) -> None:
    """Only admins and the provider itself may change its calendar."""

    if principal.is_admin or principal.acts_for_provider(provider_id):
        return
    raise _forbidden()


def owns_booking(principal: Principal, booking: Booking) -> bool:
    if booking.client_id is not None and booking.client_id == principal.subject:
        return True
    return principal.email is not None and booking.client_email == principal.email


def can_view_booking(principal: Principal, booking: Booking) -> bool:
    if principal.is_admin or principal.acts_for_provider(booking.provider_id):
        return True
    return owns_booking(principal, booking)


def require_status_change(
    principal: Principal, booking: Booking, target: BookingStatus
) -> None:
    """Admins and the booked provider drive the lifecycle; clients may only cancel."""

    if principal.is_admin or principal.acts_for_provider(booking.provider_id):
        return
    if owns_booking(principal, booking) and target == BookingStatus.CANCELLED:
        return
    raise _forbidden()


__all__ = [
    "can_view_booking",
    "owns_booking",
    "require_provider_access",
    "require_status_change",
]
