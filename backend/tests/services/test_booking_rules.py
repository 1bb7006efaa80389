"""Pricing and lifecycle rules for bookings."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from guidebook.models import BookingStatus
from guidebook.services import booking_service
from guidebook.services.errors import InvalidTransitionError

PRICE = Decimal("300000")


def test_compute_total_price() -> None:
    assert booking_service.compute_total_price(PRICE, [date(2025, 3, 1)]) == Decimal("300000.00")
    days = [date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3)]
    assert booking_service.compute_total_price(PRICE, days) == Decimal("900000.00")
    assert booking_service.compute_total_price(Decimal("0"), days) == Decimal("0.00")


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED),
        (BookingStatus.PENDING, BookingStatus.CANCELLED),
        (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    ],
)
def test_allowed_status_transitions(current: BookingStatus, target: BookingStatus) -> None:
    booking_service.validate_status_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (BookingStatus.PENDING, BookingStatus.COMPLETED),
        (BookingStatus.PENDING, BookingStatus.PENDING),
        (BookingStatus.CONFIRMED, BookingStatus.PENDING),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
        (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
    ],
)
def test_rejected_status_transitions(current: BookingStatus, target: BookingStatus) -> None:
    with pytest.raises(InvalidTransitionError):
        booking_service.validate_status_transition(current, target)
