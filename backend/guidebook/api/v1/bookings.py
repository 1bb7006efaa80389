"""Booking ledger API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from guidebook.api import deps
from guidebook.api.errors import http_error
from guidebook.api.rate_limit import parse_rate, rate_dependency
from guidebook.core.config import get_settings
from guidebook.models.booking import BookingStatus
from guidebook.schemas.booking import (
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
    DateConflictDetail,
)
from guidebook.security.permissions import can_view_booking, require_status_change
from guidebook.security.principal import Principal, PrincipalRole
from guidebook.services import booking_service
from guidebook.services.errors import BookingError, StorageError

router = APIRouter()

settings = get_settings()

_CREATE_RATE_DEP = rate_dependency(parse_rate(settings.rate_limit_bookings, fallback=(20, 60)))


@router.post(
    "",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request a booking",
    responses={status.HTTP_409_CONFLICT: {"model": DateConflictDetail}},
    dependencies=[_CREATE_RATE_DEP],
)
async def create_booking(
    payload: BookingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> BookingRead:
    client_id = principal.subject if principal.role == PrincipalRole.CLIENT else None
    try:
        booking = await booking_service.create_booking(
            session,
            client_id=client_id,
            **payload.model_dump(exclude={"dates"}),
            dates=payload.dates,
        )
    except (BookingError, StorageError) as exc:
        raise http_error(exc) from exc
    return BookingRead.model_validate(booking)


@router.get("", response_model=list[BookingRead], summary="List bookings")
async def list_bookings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
    provider_id: uuid.UUID | None = None,
    status_filter: Annotated[BookingStatus | None, Query(alias="status")] = None,
    client_email: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1),
) -> list[BookingRead]:
    client_id: str | None = None
    if principal.role == PrincipalRole.PROVIDER:
        if principal.provider_id is None or (
            provider_id is not None and provider_id != principal.provider_id
        ):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions"
            )
        provider_id = principal.provider_id
    elif principal.role == PrincipalRole.CLIENT:
        client_id = principal.subject
        client_email = None
    bookings = await booking_service.list_bookings(
        session,
        provider_id=provider_id,
        status=status_filter,
        client_email=client_email,
        client_id=client_id,
        skip=skip,
        limit=min(limit, 100),
    )
    return [BookingRead.model_validate(obj) for obj in bookings]


@router.get("/{booking_id}", response_model=BookingRead, summary="Get booking")
async def get_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> BookingRead:
    try:
        booking = await booking_service.get_booking(session, booking_id=booking_id)
    except BookingError as exc:
        raise http_error(exc) from exc
    if not can_view_booking(principal, booking):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )
    return BookingRead.model_validate(booking)


@router.patch(
    "/{booking_id}/status",
    response_model=BookingRead,
    summary="Change booking status",
)
async def update_booking_status(
    booking_id: uuid.UUID,
    payload: BookingStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    principal: Annotated[Principal, Depends(deps.get_current_principal)],
) -> BookingRead:
    try:
        booking = await booking_service.get_booking(session, booking_id=booking_id)
    except BookingError as exc:
        raise http_error(exc) from exc
    if not can_view_booking(principal, booking):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )
    require_status_change(principal, booking, payload.status)
    try:
        updated = await booking_service.update_booking_status(
            session,
            booking_id=booking_id,
            status=payload.status,
            admin_notes=payload.admin_notes if principal.role != PrincipalRole.CLIENT else None,
            expected_version=payload.expected_version,
        )
    except (BookingError, StorageError) as exc:
        raise http_error(exc) from exc
    return BookingRead.model_validate(updated)
