"""Provider lookups and per-provider write serialization."""
from __future__ import annotations

import asyncio
import uuid
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guidebook.models.provider import Provider
from guidebook.services.calendar_dates import resolve_timezone
from guidebook.services.errors import NotFoundError

# Entries drop out once no writer holds or awaits the lock.
_provider_locks: weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock] = (
    weakref.WeakValueDictionary()
)


@asynccontextmanager
async def provider_lock(provider_id: uuid.UUID) -> AsyncIterator[None]:
    """Serialize ledger writes for one provider within this process.

    Cross-process safety comes from the row lock and the claim constraint;
    this keeps in-process writers from racing each other on backends such
    as SQLite that ignore ``FOR UPDATE``.
    """
    lock = _provider_locks.setdefault(provider_id, asyncio.Lock())
    async with lock:
        yield


async def get_provider(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    for_update: bool = False,
) -> Provider:
    stmt = select(Provider).where(Provider.id == provider_id)
    if for_update:
        stmt = stmt.with_for_update()
    provider = (await session.execute(stmt)).scalar_one_or_none()
    if provider is None:
        raise NotFoundError("Provider not found")
    return provider


async def get_active_provider(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    for_update: bool = False,
) -> Provider:
    provider = await get_provider(session, provider_id=provider_id, for_update=for_update)
    if not provider.is_active:
        raise NotFoundError("Provider is not accepting bookings")
    return provider


def set_timezone(provider: Provider, timezone: str) -> None:
    """Validate and assign an IANA timezone; caller commits."""
    resolve_timezone(timezone)
    provider.timezone = timezone
