"""Provider availability calendar management."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guidebook.core.config import get_settings
from guidebook.models.availability import (
    AvailabilityCalendar,
    AvailabilityDay,
    RecurringPattern,
    UnavailablePeriod,
)
from guidebook.models.provider import Provider
from guidebook.schemas.availability import AvailabilityData
from guidebook.services import provider_service
from guidebook.services.calendar_dates import (
    iter_window,
    js_day_of_week,
    parse_calendar_date,
    provider_today,
    require_calendar_date,
)
from guidebook.services.errors import ValidationError

logger = logging.getLogger(__name__)


def is_covered_by_period(calendar: AvailabilityCalendar, day: date) -> bool:
    return any(period.covers(day) for period in calendar.unavailable_periods)


def is_day_offered(calendar: AvailabilityCalendar, day: date, *, today: date) -> bool:
    """Offered = master switch on, scheduled, not blacked out, not in the past."""
    if not calendar.is_available or day < today:
        return False
    if is_covered_by_period(calendar, day):
        return False
    return any(entry.day == day for entry in calendar.days)


async def _load_calendar(
    session: AsyncSession, *, provider_id: uuid.UUID
) -> AvailabilityCalendar | None:
    result = await session.execute(
        select(AvailabilityCalendar)
        .where(AvailabilityCalendar.provider_id == provider_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().unique().one_or_none()


async def get_availability(
    session: AsyncSession, *, provider_id: uuid.UUID
) -> AvailabilityCalendar:
    """Return the provider's calendar, creating the default document lazily."""
    await provider_service.get_provider(session, provider_id=provider_id)
    calendar = await _load_calendar(session, provider_id=provider_id)
    if calendar is not None:
        return calendar
    session.add(AvailabilityCalendar(provider_id=provider_id, is_available=True))
    await session.commit()
    calendar = await _load_calendar(session, provider_id=provider_id)
    assert calendar is not None
    return calendar


async def _save(session: AsyncSession, calendar: AvailabilityCalendar) -> AvailabilityCalendar:
    calendar.last_updated = datetime.now(UTC)
    provider_id = calendar.provider_id
    await session.commit()
    reloaded = await _load_calendar(session, provider_id=provider_id)
    assert reloaded is not None
    return reloaded


def _resolve_window(
    provider: Provider,
    window_start: date | str | None,
    window_end: date | str | None,
) -> tuple[date, date]:
    start = (
        require_calendar_date(window_start, "window_start")
        if window_start is not None
        else provider_today(provider.timezone)
    )
    if window_end is not None:
        end = require_calendar_date(window_end, "window_end")
    else:
        # Clamp at date.max.
        span = min(get_settings().pattern_window_days - 1, (date.max - start).days)
        end = start + timedelta(days=span)
    if end < start:
        raise ValidationError("Window end must not be before its start", field="window_end")
    return start, end


def _stamp_days(calendar: AvailabilityCalendar, days: Iterable[date]) -> list[date]:
    existing = {entry.day for entry in calendar.days}
    stamped: list[date] = []
    for day in days:
        if is_covered_by_period(calendar, day):
            continue
        if day not in existing:
            calendar.days.append(AvailabilityDay(day=day))
            existing.add(day)
        stamped.append(day)
    return stamped


async def replace_availability(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    payload: AvailabilityData,
) -> tuple[AvailabilityCalendar, list[str]]:
    """Overwrite the whole availability document.

    Entries with malformed dates are skipped and returned so the caller can
    report them; the rest of the document is stored.
    """
    provider = await provider_service.get_provider(session, provider_id=provider_id)
    calendar = await get_availability(session, provider_id=provider_id)
    rejected: list[str] = []

    if payload.timezone:
        provider_service.set_timezone(provider, payload.timezone)

    days: set[date] = set()
    for entry in payload.schedule:
        day = parse_calendar_date(entry.date)
        if day is None:
            rejected.append(entry.date)
            continue
        if entry.is_available:
            days.add(day)

    periods: list[UnavailablePeriod] = []
    for period in payload.unavailable_periods:
        start = parse_calendar_date(period.start_date)
        end = parse_calendar_date(period.end_date)
        if start is None or end is None or end < start:
            rejected.append(f"{period.start_date}..{period.end_date}")
            continue
        periods.append(UnavailablePeriod(start_date=start, end_date=end, reason=period.reason))

    patterns = {pattern.day_of_week: pattern.is_active for pattern in payload.recurring_patterns}

    if rejected:
        logger.warning(
            "Skipped %d malformed availability entries for provider %s",
            len(rejected),
            provider_id,
        )

    calendar.days.clear()
    calendar.recurring_patterns.clear()
    calendar.unavailable_periods.clear()
    # Orphans must be deleted before re-inserting rows under the same unique keys.
    await session.flush()

    calendar.is_available = payload.is_available
    calendar.days.extend(AvailabilityDay(day=day) for day in sorted(days))
    calendar.recurring_patterns.extend(
        RecurringPattern(day_of_week=day_of_week, is_active=is_active)
        for day_of_week, is_active in sorted(patterns.items())
    )
    calendar.unavailable_periods.extend(periods)
    return await _save(session, calendar), rejected


async def set_day_availability(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    day: date | str,
    is_available: bool,
) -> AvailabilityCalendar:
    """Offer or withdraw a single day; repeating the call changes nothing."""
    target = require_calendar_date(day, "date")
    calendar = await get_availability(session, provider_id=provider_id)
    existing = next((entry for entry in calendar.days if entry.day == target), None)
    if is_available and existing is None:
        calendar.days.append(AvailabilityDay(day=target))
    elif not is_available and existing is not None:
        calendar.days.remove(existing)
    return await _save(session, calendar)


async def upsert_recurring_pattern(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    day_of_week: int,
    is_active: bool = True,
) -> AvailabilityCalendar:
    if not 0 <= day_of_week <= 6:
        raise ValidationError("day_of_week must be between 0 and 6", field="day_of_week")
    calendar = await get_availability(session, provider_id=provider_id)
    pattern = next(
        (item for item in calendar.recurring_patterns if item.day_of_week == day_of_week),
        None,
    )
    if pattern is None:
        calendar.recurring_patterns.append(
            RecurringPattern(day_of_week=day_of_week, is_active=is_active)
        )
    else:
        pattern.is_active = is_active
    return await _save(session, calendar)


async def apply_recurring_pattern(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    day_of_week: int | None = None,
    window_start: date | str | None = None,
    window_end: date | str | None = None,
) -> tuple[AvailabilityCalendar, list[date]]:
    """Stamp weekly patterns into the schedule for a window of days.

    With ``day_of_week`` only that weekday is stamped, unless its stored
    pattern is inactive; without it every active pattern is stamped.
    Existing entries are never removed.
    """
    provider = await provider_service.get_provider(session, provider_id=provider_id)
    start, end = _resolve_window(provider, window_start, window_end)
    calendar = await get_availability(session, provider_id=provider_id)

    stored = {pattern.day_of_week: pattern.is_active for pattern in calendar.recurring_patterns}
    if day_of_week is None:
        weekdays = {dow for dow, is_active in stored.items() if is_active}
    elif stored.get(day_of_week, True):
        weekdays = {day_of_week}
    else:
        weekdays = set()

    matching = (day for day in iter_window(start, end) if js_day_of_week(day) in weekdays)
    stamped = _stamp_days(calendar, matching)
    return await _save(session, calendar), stamped


async def set_window_available(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    window_start: date | str | None = None,
    window_end: date | str | None = None,
) -> AvailabilityCalendar:
    """Offer every day in the window that is not blacked out."""
    provider = await provider_service.get_provider(session, provider_id=provider_id)
    start, end = _resolve_window(provider, window_start, window_end)
    calendar = await get_availability(session, provider_id=provider_id)
    _stamp_days(calendar, iter_window(start, end))
    return await _save(session, calendar)


async def clear_window(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    window_start: date | str | None = None,
    window_end: date | str | None = None,
) -> AvailabilityCalendar:
    provider = await provider_service.get_provider(session, provider_id=provider_id)
    start, end = _resolve_window(provider, window_start, window_end)
    calendar = await get_availability(session, provider_id=provider_id)
    for entry in [entry for entry in calendar.days if start <= entry.day <= end]:
        calendar.days.remove(entry)
    return await _save(session, calendar)


async def add_unavailable_period(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    start_date: date | str,
    end_date: date | str,
    reason: str | None = None,
) -> AvailabilityCalendar:
    """Append a blackout range; overlapping ranges are kept as given."""
    start = require_calendar_date(start_date, "start_date")
    end = require_calendar_date(end_date, "end_date")
    if end < start:
        raise ValidationError("end_date must not be before start_date", field="end_date")
    calendar = await get_availability(session, provider_id=provider_id)
    calendar.unavailable_periods.append(
        UnavailablePeriod(start_date=start, end_date=end, reason=reason)
    )
    return await _save(session, calendar)


async def is_offered(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    day: date | str,
    today: date | None = None,
) -> bool:
    target = parse_calendar_date(day)
    if target is None:
        return False
    calendar = await get_availability(session, provider_id=provider_id)
    if today is None:
        today = provider_today(calendar.provider.timezone)
    return is_day_offered(calendar, target, today=today)


async def list_offered_dates(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    window_start: date | str | None = None,
    window_end: date | str | None = None,
    today: date | None = None,
) -> tuple[date, date, list[date]]:
    provider = await provider_service.get_provider(session, provider_id=provider_id)
    start, end = _resolve_window(provider, window_start, window_end)
    calendar = await get_availability(session, provider_id=provider_id)
    if today is None:
        today = provider_today(provider.timezone)
    offered = [day for day in iter_window(start, end) if is_day_offered(calendar, day, today=today)]
    return start, end, offered


async def unoffered_dates(
    session: AsyncSession,
    *,
    provider: Provider,
    days: Sequence[date],
) -> list[date]:
    calendar = await _load_calendar(session, provider_id=provider.id)
    if calendar is None:
        return list(days)
    today = provider_today(provider.timezone)
    return [day for day in days if not is_day_offered(calendar, day, today=today)]
