"""Rebuild and read the denormalized provider calendar cache."""
from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from guidebook.models.booking import Booking, BookingStatus
from guidebook.models.calendar_cache import ProviderCalendarCache
from guidebook.services import provider_service
from guidebook.services.calendar_dates import to_iso

logger = logging.getLogger(__name__)

# Completed bookings keep their days blocked.
BLOCKING_STATUSES = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.COMPLETED}
)


async def collect_blocked_dates(
    session: AsyncSession, *, provider_id: uuid.UUID
) -> set[date]:
    """Union of dates held by the provider's non-cancelled bookings."""
    result = await session.execute(
        select(Booking).where(
            Booking.provider_id == provider_id,
            Booking.status.in_(BLOCKING_STATUSES),
        )
    )
    blocked: set[date] = set()
    for booking in result.scalars():
        blocked.update(booking.dates)
    return blocked


async def rebuild_provider_cache(
    session: AsyncSession, *, provider_id: uuid.UUID
) -> ProviderCalendarCache:
    """Recompute the cache from the ledger and overwrite the stored copy."""
    blocked = await collect_blocked_dates(session, provider_id=provider_id)
    cache = await session.get(ProviderCalendarCache, provider_id)
    if cache is None:
        cache = ProviderCalendarCache(provider_id=provider_id)
        session.add(cache)
    cache.unavailable_dates = to_iso(sorted(blocked))
    cache.last_updated = datetime.now(UTC)
    await session.commit()
    await session.refresh(cache)
    return cache


async def rebuild_provider_cache_safely(
    session: AsyncSession, *, provider_id: uuid.UUID
) -> ProviderCalendarCache | None:
    """Rebuild after a ledger write; a failure leaves the cache stale."""
    try:
        return await rebuild_provider_cache(session, provider_id=provider_id)
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Calendar cache rebuild failed for provider %s", provider_id)
        return None


async def get_provider_cache(
    session: AsyncSession, *, provider_id: uuid.UUID
) -> ProviderCalendarCache:
    """Return the cached calendar, building it on first read."""
    await provider_service.get_provider(session, provider_id=provider_id)
    cache = await session.get(ProviderCalendarCache, provider_id)
    if cache is not None:
        return cache
    async with provider_service.provider_lock(provider_id):
        return await rebuild_provider_cache(session, provider_id=provider_id)
