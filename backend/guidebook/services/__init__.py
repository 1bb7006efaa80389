"""Service layer exports."""
from guidebook.services import (
    availability_service,
    booking_service,
    calendar_cache_service,
    provider_service,
)

__all__ = [
    "availability_service",
    "booking_service",
    "calendar_cache_service",
    "provider_service",
]
