"""Timestamp normalization - outline timestamps to calendar date-times.

Pure functions - no I/O.
"""

import logging
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .options import ExportOptions
from .outline import DateSpec, InvalidInput, Timestamp

logger = logging.getLogger(__name__)

# End of a timed point event when no default appointment duration is set.
POINT_EVENT_HOURS = 2

RRULE_FREQUENCIES = {
    "hour": "HOURLY",
    "day": "DAILY",
    "week": "WEEKLY",
    "month": "MONTHLY",
    "year": "YEARLY",
}


def _civil(day: DateSpec, with_time: bool) -> datetime:
    # timedelta carries minute/hour overflow into the following day
    base = datetime(day.year, day.month, day.day)
    if not with_time:
        return base
    return base + timedelta(hours=day.hour or 0, minutes=day.minute or 0)


def normalize(
    timestamp: Timestamp,
    want_end: bool = False,
    default_duration: int | None = None,
) -> datetime:
    """
    Resolve a timestamp to a concrete naive civil date-time.

    Date-only: midnight of the start day, or for the end, midnight of the end
    day (or the day after start when the timestamp has no end).

    Timed: the start, or for the end, the explicit end. A point in time gets
    ``default_duration`` minutes when configured, two hours otherwise.

    Raises:
        InvalidInput: timestamp has no start date.
    """
    start = timestamp.start
    if start is None:
        raise InvalidInput(f"timestamp has no start date: {timestamp!r}")

    if not start.has_time:
        if not want_end:
            return _civil(start, False)
        if timestamp.end is not None:
            return _civil(timestamp.end, False)
        return _civil(start, False) + timedelta(days=1)

    start_dt = _civil(start, True)
    if not want_end:
        return start_dt

    end = timestamp.end or start
    if not end.has_time:
        end = DateSpec(end.year, end.month, end.day, start.hour, start.minute)
    end_dt = _civil(end, True)

    if end_dt != start_dt:
        return end_dt
    if default_duration:
        return start_dt + timedelta(minutes=default_duration)
    return start_dt + timedelta(hours=POINT_EVENT_HOURS)


def local_zone_name() -> str:
    return datetime.now().astimezone().tzname() or "UTC"


def to_utc(value: datetime, tz: str | None = None) -> datetime:
    """Interpret a naive civil time in ``tz`` (system zone if None) and convert to UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc)
    if tz:
        try:
            return value.replace(tzinfo=ZoneInfo(tz)).astimezone(timezone.utc)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {tz!r}, using system zone")
    return value.astimezone(timezone.utc)


def format_timestamp(
    timestamp: Timestamp,
    keyword: str,
    options: ExportOptions,
    want_end: bool = False,
    tz: str | None = None,
    utc: bool = False,
) -> str:
    """
    Render ``KEYWORD...`` for a timestamp, e.g. ``DTSTART;VALUE=DATE:20240301``.

    ``tz`` is the per-entry TIMEZONE property. It overrides the configured
    timezone and is the only source of a ``;TZID=`` parameter; the configured
    zone only feeds UTC conversion and the ``%Z`` placeholder.
    """
    zone = tz or options.timezone
    value = normalize(timestamp, want_end, options.default_appointment_duration)

    if utc or zone == "UTC":
        return f"{keyword}:{to_utc(value, zone):%Y%m%dT%H%M%SZ}"
    if not timestamp.has_time:
        return f"{keyword};VALUE=DATE:{value:%Y%m%d}"

    fmt = options.date_time_format
    if options.uses_utc:
        return keyword + to_utc(value, zone).strftime(fmt)
    if "%Z" in fmt:
        return keyword + value.strftime(fmt.replace("%Z", zone or local_zone_name()))
    if tz:
        return f"{keyword};TZID={tz}" + value.strftime(fmt)
    return keyword + value.strftime(fmt)


def dtstamp(now: datetime) -> str:
    """DTSTAMP line - always the export time, in UTC."""
    return f"DTSTAMP:{to_utc(now):%Y%m%dT%H%M%SZ}"


def rrule(timestamp: Timestamp) -> str | None:
    """RRULE line from the repeater, or None when absent or unsupported."""
    repeater = timestamp.repeater
    if repeater is None:
        return None
    freq = RRULE_FREQUENCIES.get(repeater.unit)
    if freq is None:
        logger.debug(f"Unsupported repeater unit {repeater.unit!r}, omitting RRULE")
        return None
    return f"RRULE:FREQ={freq};INTERVAL={repeater.value}"


def now_timestamp(now: datetime, tz: str | None = None) -> Timestamp:
    """Synthetic active timestamp for "now" in local civil time."""
    if now.tzinfo is not None:
        if tz:
            try:
                now = now.astimezone(ZoneInfo(tz))
            except (ZoneInfoNotFoundError, ValueError):
                now = now.astimezone()
        else:
            now = now.astimezone()
    return Timestamp.from_datetime(now)
