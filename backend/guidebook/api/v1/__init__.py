"""Booking API router."""

from fastapi import APIRouter

from . import availability, bookings, health, provider_calendars

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(
    provider_calendars.router, prefix="/provider-calendars", tags=["calendars"]
)
router.include_router(availability.router, prefix="/applications", tags=["availability"])
