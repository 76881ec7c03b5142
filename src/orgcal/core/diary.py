"""Diary expressions to recurring VEVENTs.

Supports the common rule forms: anniversary, cyclic, block, float and date.
Anything else is skipped with a warning, never raised.
"""

import calendar
import logging
import re
from datetime import date, datetime, timedelta

from .options import ExportOptions
from .outline import DateSpec, Repeater, Timestamp
from .text import fold
from .timestamps import dtstamp, format_timestamp, rrule

logger = logging.getLogger(__name__)

_SEXP = re.compile(r"^\s*<?%%\((diary-[-a-z]+)((?:\s+[-\w]+)*)\s*\)>?\s*(.*)$", re.DOTALL)
_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?:\s*-\s*(\d{1,2}):(\d{2}))?")

# Diary day names count from Sunday
_BYDAY = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")


class UnsupportedDiary(ValueError):
    """Diary expression this renderer cannot express as a calendar rule."""


def _int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise UnsupportedDiary(f"expected a number, got {token!r}") from None


def _date_args(tokens: list[str], style: str) -> tuple[str, str, str]:
    """Reorder three date tokens into (month, day, year)."""
    if len(tokens) != 3:
        raise UnsupportedDiary(f"expected a date, got {' '.join(tokens)!r}")
    match style:
        case "european":
            d, m, y = tokens
        case "iso":
            y, m, d = tokens
        case _:
            m, d, y = tokens
    return m, d, y


def _to_date(tokens: list[str], style: str) -> date:
    m, d, y = _date_args(tokens, style)
    return date(_int(y), _int(m), _int(d))


def _nth_weekday(year: int, month: int, dayname: int, n: int) -> date:
    """The n-th (negative: from the end) ``dayname`` of a month; 0 is Sunday."""
    weekday = (dayname - 1) % 7
    if n > 0:
        offset = (weekday - date(year, month, 1).weekday()) % 7
        return date(year, month, 1 + offset + 7 * (n - 1))
    last_day = calendar.monthrange(year, month)[1]
    offset = (date(year, month, last_day).weekday() - weekday) % 7
    return date(year, month, last_day - offset - 7 * (-n - 1))


def _parse_time(annotation: str) -> tuple[tuple[int, int] | None, tuple[int, int] | None]:
    match = _TIME.match(annotation.strip())
    if not match:
        return None, None
    start = (int(match.group(1)), int(match.group(2)))
    end = (int(match.group(3)), int(match.group(4))) if match.group(3) else None
    return start, end


def _stamp(
    first: date,
    last: date | None,
    start_time: tuple[int, int] | None,
    end_time: tuple[int, int] | None,
    repeater: Repeater | None = None,
) -> Timestamp:
    """Build a timestamp covering ``first`` (optionally until ``last``) at the given times."""
    if start_time is None:
        start = DateSpec(first.year, first.month, first.day)
        end = DateSpec(last.year, last.month, last.day) if last else None
    else:
        start = DateSpec(first.year, first.month, first.day, *start_time)
        end = DateSpec(first.year, first.month, first.day, *end_time) if end_time else None
    return Timestamp(start=start, end=end, repeater=repeater)


def _rule(name: str, args: list[str], annotation: str, options: ExportOptions) -> tuple[Timestamp, str | None]:
    """Timestamp plus RRULE for one expression."""
    style = options.diary_date_style
    start_time, end_time = _parse_time(annotation)

    match name:
        case "diary-anniversary":
            first = _to_date(args, style)
            stamp = _stamp(first, None, start_time, end_time, Repeater("year", 1))
            return stamp, rrule(stamp)

        case "diary-cyclic":
            if not args:
                raise UnsupportedDiary("diary-cyclic needs an interval")
            interval = _int(args[0])
            first = _to_date(args[1:], style)
            stamp = _stamp(first, None, start_time, end_time, Repeater("day", interval))
            return stamp, rrule(stamp)

        case "diary-block":
            if len(args) != 6:
                raise UnsupportedDiary("diary-block needs two dates")
            first = _to_date(args[:3], style)
            last = _to_date(args[3:], style)
            if start_time is None:
                return _stamp(first, last + timedelta(days=1), None, None), None
            until = f"{last:%Y%m%d}T235959" + ("Z" if options.uses_utc else "")
            return _stamp(first, None, start_time, end_time), f"RRULE:FREQ=DAILY;INTERVAL=1;UNTIL={until}"

        case "diary-float":
            if len(args) != 3:
                raise UnsupportedDiary("diary-float needs month, day name and index")
            month, dayname, n = args
            dayname, n = _int(dayname), _int(n)
            if not 0 <= dayname <= 6 or n == 0 or abs(n) > 5:
                raise UnsupportedDiary(f"bad diary-float arguments {args!r}")
            byday = f"BYDAY={n}{_BYDAY[dayname]}"
            if month == "t":
                first = _nth_weekday(options.diary_start_year, 1, dayname, n)
                line = f"RRULE:FREQ=MONTHLY;{byday}"
            else:
                m = _int(month)
                first = _nth_weekday(options.diary_start_year, m, dayname, n)
                line = f"RRULE:FREQ=YEARLY;BYMONTH={m};{byday}"
            return _stamp(first, None, start_time, end_time), line

        case "diary-date":
            m, d, y = _date_args(args, style)
            if y == "t":
                first = date(options.diary_start_year, _int(m), _int(d))
                stamp = _stamp(first, None, start_time, end_time, Repeater("year", 1))
                return stamp, rrule(stamp)
            return _stamp(date(_int(y), _int(m), _int(d)), None, start_time, end_time), None

    raise UnsupportedDiary(f"unsupported diary function {name}")


def render_diary(
    value: str,
    uid: str,
    summary: str,
    options: ExportOptions,
    now: datetime,
    tz: str | None = None,
) -> str:
    """
    Transcode one diary expression into a folded VEVENT.

    ``summary`` must already be escaped. Returns "" when the expression
    cannot be expressed as a calendar rule.
    """
    match = _SEXP.match(value)
    if not match:
        logger.warning(f"Skipping malformed diary expression {value!r}")
        return ""
    name, raw_args, annotation = match.groups()
    try:
        stamp, rule = _rule(name, raw_args.split(), annotation, options)
    except (UnsupportedDiary, ValueError) as e:
        logger.warning(f"Skipping diary expression {value!r}: {e}")
        return ""

    lines = [
        "BEGIN:VEVENT",
        f"UID:{uid}",
        dtstamp(now),
        format_timestamp(stamp, "DTSTART", options, tz=tz),
        format_timestamp(stamp, "DTEND", options, want_end=True, tz=tz),
    ]
    if rule:
        lines.append(rule)
    lines.append(f"SUMMARY:{summary}")
    lines.append("END:VEVENT")
    return fold("\n".join(lines))
