"""Public read of the provider calendar cache."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from guidebook.api import deps
from guidebook.api.errors import http_error
from guidebook.schemas.calendar import ProviderCalendarRead
from guidebook.services import calendar_cache_service
from guidebook.services.errors import BookingError

router = APIRouter()


@router.get(
    "/{provider_id}",
    response_model=ProviderCalendarRead,
    summary="Dates a provider can no longer be booked for",
)
async def get_provider_calendar(
    provider_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ProviderCalendarRead:
    try:
        cache = await calendar_cache_service.get_provider_cache(
            session, provider_id=provider_id
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return ProviderCalendarRead.model_validate(cache)
