"""Booking ledger and date-conflict resolution."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from guidebook.core.config import get_settings
from guidebook.models.booking import Booking, BookingDateClaim, BookingStatus
from guidebook.models.provider import ServiceType
from guidebook.schemas.booking import DateSelection
from guidebook.services import (
    availability_service,
    calendar_cache_service,
    provider_service,
)
from guidebook.services.calendar_dates import normalize_request, to_iso
from guidebook.services.errors import (
    DateConflictError,
    InvalidTransitionError,
    NotFoundError,
    StaleBookingError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_MONEY_PLACES: Final = Decimal("0.01")

_ALLOWED_STATUS_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}


def compute_total_price(price_per_day: Decimal, days: Sequence[date]) -> Decimal:
    total = Decimal(price_per_day) * max(1, len(days))
    return total.quantize(_MONEY_PLACES, rounding=ROUND_HALF_UP)


def validate_status_transition(current: BookingStatus, target: BookingStatus) -> None:
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidTransitionError(
            f"Invalid status transition from {current.value} to {target.value}"
        )


def _assign_dates(booking: Booking, days: Sequence[date]) -> None:
    if len(days) == 1:
        booking.booking_date = days[0]
        booking.date_range = None
    else:
        booking.booking_date = None
        booking.date_range = to_iso(days)


def _validate_contact(client_name: str, client_email: str, client_phone: str) -> None:
    if not client_name.strip():
        raise ValidationError("Client name is required", field="client_name")
    if "@" not in client_email:
        raise ValidationError("Client email is invalid", field="client_email")
    if not client_phone.strip():
        raise ValidationError("Client phone is required", field="client_phone")


async def active_dates_for_provider(
    session: AsyncSession, *, provider_id: uuid.UUID
) -> set[date]:
    """Days held by pending, confirmed or completed bookings, read from the ledger."""
    return await calendar_cache_service.collect_blocked_dates(
        session, provider_id=provider_id
    )


async def find_conflicts(
    session: AsyncSession, *, provider_id: uuid.UUID, days: Sequence[date]
) -> list[date]:
    blocked = await active_dates_for_provider(session, provider_id=provider_id)
    return sorted(blocked.intersection(days))


async def create_booking(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    price_per_day: Decimal,
    dates: DateSelection,
    client_name: str,
    client_email: str,
    client_phone: str,
    service_type: ServiceType = ServiceType.TRANSLATOR,
    message: str | None = None,
    client_id: str | None = None,
) -> Booking:
    """Record a pending booking if none of its days are taken.

    The conflict check and the insert run under the provider lock and in a
    single transaction; the claim table's unique key rejects any writer that
    slipped past the check from another process.
    """
    if price_per_day < 0:
        raise ValidationError("Price per day must not be negative", field="price_per_day")
    _validate_contact(client_name, client_email, client_phone)
    requested = normalize_request(dates)

    async with provider_service.provider_lock(provider_id):
        provider = await provider_service.get_active_provider(
            session, provider_id=provider_id, for_update=True
        )
        if get_settings().enforce_offered_dates:
            unoffered = await availability_service.unoffered_dates(
                session, provider=provider, days=requested
            )
            if unoffered:
                raise ValidationError(
                    "Provider is not available on: " + ", ".join(to_iso(unoffered)),
                    field="dates",
                )

        conflicts = await find_conflicts(session, provider_id=provider_id, days=requested)
        if conflicts:
            logger.warning(
                "Booking rejected for provider %s; dates taken: %s",
                provider_id,
                to_iso(conflicts),
            )
            raise DateConflictError(conflicts)

        booking = Booking(
            id=uuid.uuid4(),
            provider_id=provider_id,
            client_id=client_id,
            client_name=client_name.strip(),
            client_email=client_email.strip(),
            client_phone=client_phone.strip(),
            service_type=service_type,
            price_per_day=price_per_day,
            total_price=compute_total_price(price_per_day, requested),
            message=message,
            status=BookingStatus.PENDING,
        )
        _assign_dates(booking, requested)
        session.add(booking)
        session.add_all(
            BookingDateClaim(booking_id=booking.id, provider_id=provider_id, day=day)
            for day in requested
        )
        try:
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            conflicts = await find_conflicts(
                session, provider_id=provider_id, days=requested
            )
            logger.warning(
                "Concurrent booking claimed dates for provider %s: %s",
                provider_id,
                to_iso(conflicts or requested),
            )
            raise DateConflictError(conflicts or requested) from exc
        except SQLAlchemyError as exc:
            await session.rollback()
            raise StorageError("Unable to record booking") from exc
        await session.refresh(booking)
        logger.info(
            "Booking %s created for provider %s covering %d day(s)",
            booking.id,
            provider_id,
            len(requested),
        )
        cache = await calendar_cache_service.rebuild_provider_cache_safely(
            session, provider_id=provider_id
        )
        if cache is None:
            await session.refresh(booking)
    return booking


async def get_booking(session: AsyncSession, *, booking_id: uuid.UUID) -> Booking:
    booking = await session.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


async def update_booking_status(
    session: AsyncSession,
    *,
    booking_id: uuid.UUID,
    status: BookingStatus,
    admin_notes: str | None = None,
    expected_version: int | None = None,
) -> Booking:
    """Move a booking through its lifecycle and refresh the provider cache."""
    booking = await get_booking(session, booking_id=booking_id)
    provider_id = booking.provider_id

    async with provider_service.provider_lock(provider_id):
        await session.refresh(booking)
        if expected_version is not None and booking.version != expected_version:
            raise StaleBookingError("Booking was modified by another request")
        previous = booking.status
        validate_status_transition(previous, status)

        booking.status = status
        if admin_notes:
            booking.admin_notes = admin_notes
        try:
            if status == BookingStatus.CANCELLED:
                await session.execute(
                    delete(BookingDateClaim).where(
                        BookingDateClaim.booking_id == booking.id
                    )
                )
            await session.commit()
        except StaleDataError as exc:
            await session.rollback()
            raise StaleBookingError("Booking was modified by another request") from exc
        except SQLAlchemyError as exc:
            await session.rollback()
            raise StorageError("Unable to update booking") from exc
        await session.refresh(booking)
        logger.info(
            "Booking %s moved from %s to %s",
            booking.id,
            previous.value,
            status.value,
        )
        cache = await calendar_cache_service.rebuild_provider_cache_safely(
            session, provider_id=provider_id
        )
        if cache is None:
            await session.refresh(booking)
    return booking


async def list_bookings(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID | None = None,
    status: BookingStatus | None = None,
    client_email: str | None = None,
    client_id: str | None = None,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[Booking]:
    stmt = select(Booking).order_by(Booking.created_at.desc())
    if provider_id is not None:
        stmt = stmt.where(Booking.provider_id == provider_id)
    if status is not None:
        stmt = stmt.where(Booking.status == status)
    if client_email is not None:
        stmt = stmt.where(Booking.client_email == client_email)
    if client_id is not None:
        stmt = stmt.where(Booking.client_id == client_id)
    result = await session.execute(stmt.offset(skip).limit(limit))
    return result.scalars().all()


async def list_by_provider(session: AsyncSession, *, provider_id: uuid.UUID) -> Sequence[Booking]:
    return await list_bookings(session, provider_id=provider_id)


async def list_by_client(session: AsyncSession, *, client_id: str) -> Sequence[Booking]:
    return await list_bookings(session, client_id=client_id)


async def list_by_status(session: AsyncSession, *, status: BookingStatus) -> Sequence[Booking]:
    return await list_bookings(session, status=status)
