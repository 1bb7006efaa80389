"""Provider availability calendar API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from guidebook.api import deps
from guidebook.api.errors import http_error
from guidebook.models.availability import AvailabilityCalendar
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
from guidebook.security.permissions import require_provider_access
from guidebook.security.principal import Principal
from guidebook.services import availability_service
from guidebook.services.calendar_dates import require_calendar_date
from guidebook.services.errors import BookingError

router = APIRouter()


def _serialize(calendar: AvailabilityCalendar) -> AvailabilityRead:
    return AvailabilityRead.from_calendar(calendar, timezone=calendar.provider.timezone)


@router.get(
    "/{provider_id}/availability",
    response_model=AvailabilityRead,
    summary="Get provider availability",
)
async def get_availability(
    provider_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> AvailabilityRead:
    try:
        calendar = await availability_service.get_availability(
            session, provider_id=provider_id
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return _serialize(calendar)


@router.put(
    "/{provider_id}/availability",
    response_model=AvailabilityReplaceResult,
    summary="Replace provider availability",
)
async def replace_availability(
    provider_id: uuid.UUID,
    payload: AvailabilityData,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> AvailabilityReplaceResult:
    require_provider_access(principal, provider_id)
    try:
        calendar, rejected = await availability_service.replace_availability(
            session, provider_id=provider_id, payload=payload
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return AvailabilityReplaceResult(availability=_serialize(calendar), rejected_dates=rejected)


@router.get(
    "/{provider_id}/availability/offered",
    response_model=OfferedDates,
    summary="Offered dates in a window",
)
async def list_offered_dates(
    provider_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    start: str | None = None,
    end: str | None = None,
) -> OfferedDates:
    try:
        window_start, window_end, offered = await availability_service.list_offered_dates(
            session, provider_id=provider_id, window_start=start, window_end=end
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return OfferedDates(
        provider_id=provider_id,
        window_start=window_start,
        window_end=window_end,
        dates=offered,
        total=len(offered),
    )


@router.get(
    "/{provider_id}/availability/days/{day}",
    response_model=OfferedDay,
    summary="Whether a single day is offered",
)
async def get_day(
    provider_id: uuid.UUID,
    day: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> OfferedDay:
    try:
        target = require_calendar_date(day, "day")
        offered = await availability_service.is_offered(
            session, provider_id=provider_id, day=target
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return OfferedDay(provider_id=provider_id, day=target, offered=offered)


@router.put(
    "/{provider_id}/availability/days/{day}",
    response_model=AvailabilityRead,
    summary="Offer or withdraw a single day",
)
async def set_day(
    provider_id: uuid.UUID,
    day: str,
    payload: DayAvailabilityUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> AvailabilityRead:
    require_provider_access(principal, provider_id)
    try:
        calendar = await availability_service.set_day_availability(
            session, provider_id=provider_id, day=day, is_available=payload.is_available
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return _serialize(calendar)


@router.post(
    "/{provider_id}/availability/patterns",
    response_model=AvailabilityRead,
    summary="Create or update a weekly pattern",
)
async def upsert_pattern(
    provider_id: uuid.UUID,
    payload: RecurringPatternPayload,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> AvailabilityRead:
    require_provider_access(principal, provider_id)
    try:
        calendar = await availability_service.upsert_recurring_pattern(
            session,
            provider_id=provider_id,
            day_of_week=payload.day_of_week,
            is_active=payload.is_active,
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return _serialize(calendar)


@router.post(
    "/{provider_id}/availability/patterns/apply",
    response_model=PatternApplyResult,
    summary="Stamp weekly patterns into the schedule",
)
async def apply_patterns(
    provider_id: uuid.UUID,
    payload: PatternApplyRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> PatternApplyResult:
    require_provider_access(principal, provider_id)
    try:
        calendar, stamped = await availability_service.apply_recurring_pattern(
            session,
            provider_id=provider_id,
            day_of_week=payload.day_of_week,
            window_start=payload.window_start,
            window_end=payload.window_end,
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return PatternApplyResult(availability=_serialize(calendar), stamped_dates=stamped)


@router.post(
    "/{provider_id}/availability/bulk",
    response_model=AvailabilityRead,
    summary="Offer every day in a window",
)
async def set_window_available(
    provider_id: uuid.UUID,
    payload: DateWindow,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> AvailabilityRead:
    require_provider_access(principal, provider_id)
    try:
        calendar = await availability_service.set_window_available(
            session,
            provider_id=provider_id,
            window_start=payload.window_start,
            window_end=payload.window_end,
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return _serialize(calendar)


@router.delete(
    "/{provider_id}/availability/schedule",
    response_model=AvailabilityRead,
    summary="Clear scheduled days in a window",
)
async def clear_schedule(
    provider_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
    window_start: str | None = None,
    window_end: str | None = None,
) -> AvailabilityRead:
    require_provider_access(principal, provider_id)
    try:
        calendar = await availability_service.clear_window(
            session,
            provider_id=provider_id,
            window_start=window_start,
            window_end=window_end,
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return _serialize(calendar)


@router.post(
    "/{provider_id}/availability/unavailable-periods",
    response_model=AvailabilityRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a blackout period",
)
async def add_unavailable_period(
    provider_id: uuid.UUID,
    payload: UnavailablePeriodPayload,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> AvailabilityRead:
    require_provider_access(principal, provider_id)
    try:
        calendar = await availability_service.add_unavailable_period(
            session,
            provider_id=provider_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            reason=payload.reason,
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return _serialize(calendar)
