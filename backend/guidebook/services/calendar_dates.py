"""Calendar-day parsing, expansion and request normalization.

All booking and availability arithmetic happens on plain ``date`` values.
Strings on the wire are ``YYYY-MM-DD`` in the provider's timezone; the
provider timezone is only consulted to answer "what day is it today".
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from guidebook.schemas.booking import DateRange, DateSelection, ExplicitDates, SingleDate
from guidebook.services.errors import NoDatesRequestedError, ValidationError

_ONE_DAY = timedelta(days=1)


def parse_calendar_date(value: date | str | None) -> date | None:
    """Return the day for ``value`` or ``None`` when it is not a valid day.

    Never raises, so batch callers can skip a bad entry and keep going.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    parts = value.strip().split("-")
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        return None
    year, month, day = (int(part) for part in parts)
    try:
        return date(year, month, day)
    except ValueError:
        return None


def require_calendar_date(value: date | str | None, field: str) -> date:
    parsed = parse_calendar_date(value)
    if parsed is None:
        raise ValidationError(f"Invalid date for {field}: {value!r}", field=field)
    return parsed


def expand_range(start: date | str, end: date | str) -> list[date]:
    """Expand an inclusive range day by day; reversed ranges expand to nothing."""
    first = parse_calendar_date(start)
    last = parse_calendar_date(end)
    if first is None or last is None or last < first:
        return []
    return list(iter_window(first, last))


def iter_window(start: date, end: date) -> Iterator[date]:
    if end < start:
        return
    current = start
    while True:
        yield current
        if current == end:
            break
        current += _ONE_DAY


def dedupe_sorted(days: Iterable[date]) -> list[date]:
    return sorted(set(days))


def normalize_request(selection: DateSelection) -> list[date]:
    """Resolve a tagged date selection to ordered, de-duplicated days."""
    if isinstance(selection, SingleDate):
        days = [require_calendar_date(selection.date, "dates.date")]
    elif isinstance(selection, DateRange):
        start = require_calendar_date(selection.start, "dates.start")
        end = require_calendar_date(selection.end, "dates.end")
        if end < start:
            raise ValidationError(
                "Range end must not be before its start", field="dates.end"
            )
        days = expand_range(start, end)
    elif isinstance(selection, ExplicitDates):
        days = [
            require_calendar_date(value, f"dates.dates[{index}]")
            for index, value in enumerate(selection.dates)
        ]
    else:  # pragma: no cover - guarded by the discriminated union
        raise ValidationError("Unsupported date selection", field="dates.kind")

    normalized = dedupe_sorted(days)
    if not normalized:
        raise NoDatesRequestedError()
    return normalized


def to_iso(days: Iterable[date]) -> list[str]:
    return [day.isoformat() for day in days]


def js_day_of_week(day: date) -> int:
    """Day of week with Sunday as 0, matching the calendar clients."""
    return (day.weekday() + 1) % 7


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Unknown timezone: {name}", field="timezone") from exc


def provider_today(timezone: str, *, now: datetime | None = None) -> date:
    """Current calendar day in the provider's timezone."""
    moment = now or datetime.now(UTC)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(resolve_timezone(timezone)).date()
