"""VEVENT, VTODO and VALARM component builders.

Pure functions - no I/O. Every builder returns folded text without a
trailing newline.
"""

import math
from dataclasses import dataclass
from datetime import datetime

from .diary import render_diary
from .options import TODO_DUE, TODO_START, ExportOptions
from .outline import OutlineEntry, Timestamp
from .text import fold
from .timestamps import dtstamp, format_timestamp, now_timestamp, rrule


@dataclass(frozen=True)
class ComponentFields:
    """Escaped descriptive fields shared by every component of one entry."""

    summary: str
    location: str | None = None
    description: str | None = None
    categories: str = ""
    classification: str | None = None
    timezone: str | None = None


def _nonblank(value: str | None) -> bool:
    return bool(value and value.strip())


def _descriptive_lines(fields: ComponentFields) -> list[str]:
    lines = [f"SUMMARY:{fields.summary}"]
    if _nonblank(fields.location):
        lines.append(f"LOCATION:{fields.location}")
    if _nonblank(fields.classification):
        lines.append(f"CLASS:{fields.classification}")
    if _nonblank(fields.description):
        lines.append(f"DESCRIPTION:{fields.description}")
    lines.append(f"CATEGORIES:{fields.categories}")
    return lines


def alarm_minutes(entry: OutlineEntry, options: ExportOptions) -> int:
    """Per-entry APPT_WARNTIME when positive, the global alarm time otherwise."""
    warntime = entry.get_property("APPT_WARNTIME")
    try:
        minutes = int(warntime) if warntime else 0
    except ValueError:
        minutes = 0
    return minutes if minutes > 0 else options.alarm_time


def build_valarm(
    entry: OutlineEntry,
    timestamp: Timestamp,
    summary: str,
    options: ExportOptions,
) -> str | None:
    """DISPLAY alarm for timed timestamps, or None when alarms are off."""
    minutes = alarm_minutes(entry, options)
    if minutes <= 0 or not timestamp.has_time:
        return None
    return "\n".join(
        [
            "BEGIN:VALARM",
            "ACTION:DISPLAY",
            f"DESCRIPTION:{summary}",
            f"TRIGGER:-P0DT0H{minutes}M0S",
            "END:VALARM",
        ]
    )


def build_vevent(
    entry: OutlineEntry,
    timestamp: Timestamp,
    uid: str,
    fields: ComponentFields,
    options: ExportOptions,
    now: datetime,
) -> str:
    """
    Build a VEVENT for one timestamp of an entry.

    Diary timestamps are handed to the diary renderer, which folds its own
    output.

    Raises:
        InvalidInput: timestamp has no start date.
    """
    if timestamp.is_diary:
        return render_diary(timestamp.diary or "", uid, fields.summary, options, now, fields.timezone)

    lines = [
        "BEGIN:VEVENT",
        dtstamp(now),
        f"UID:{uid}",
        format_timestamp(timestamp, "DTSTART", options, tz=fields.timezone),
        format_timestamp(timestamp, "DTEND", options, want_end=True, tz=fields.timezone),
    ]
    rule = rrule(timestamp)
    if rule:
        lines.append(rule)
    lines.extend(_descriptive_lines(fields))
    alarm = build_valarm(entry, timestamp, fields.summary, options)
    if alarm:
        lines.append(alarm)
    lines.append("END:VEVENT")
    return fold("\n".join(lines))


def todo_priority(entry: OutlineEntry, options: ExportOptions) -> int:
    """Map the outline priority range onto iCalendar's 1 (urgent) .. 9 scale."""
    priority = entry.priority if entry.priority is not None else options.priority_default
    span = (options.priority_lowest - options.priority_highest) or 1
    return math.floor(9 - 8 * (options.priority_lowest - priority) / span)


def build_vtodo(
    entry: OutlineEntry,
    uid: str,
    fields: ComponentFields,
    options: ExportOptions,
    now: datetime,
) -> str:
    """
    Build a VTODO for an entry.

    Starts at SCHEDULED when ``todo-start`` is enabled, otherwise now.
    """
    start = None
    if TODO_START in options.use_scheduled and entry.scheduled and not entry.scheduled.is_diary:
        start = entry.scheduled
    if start is None:
        start = now_timestamp(now, fields.timezone or options.timezone)

    lines = [
        "BEGIN:VTODO",
        f"UID:TODO-{uid}",
        dtstamp(now),
        format_timestamp(start, "DTSTART", options, tz=fields.timezone),
    ]
    if TODO_DUE in options.use_deadline and entry.deadline and not entry.deadline.is_diary:
        lines.append(format_timestamp(entry.deadline, "DUE", options, tz=fields.timezone))
    lines.extend(_descriptive_lines(fields))
    lines.append("SEQUENCE:1")
    lines.append(f"PRIORITY:{todo_priority(entry, options)}")
    lines.append(f"STATUS:{'NEEDS-ACTION' if entry.is_todo else 'COMPLETED'}")
    lines.append("END:VTODO")
    return fold("\n".join(lines))
