"""JSON outline adapter - loads a tree produced by an external parser."""

import json
import logging
from datetime import datetime
from pathlib import Path

from orgcal.core.outline import (
    DateSpec,
    DiaryExpression,
    EntryKind,
    OutlineDocument,
    OutlineEntry,
    Repeater,
    Timestamp,
    TimestampKind,
)

logger = logging.getLogger(__name__)


class OutlineLoadError(Exception):
    """Raised when an outline file cannot be read or has the wrong shape."""


def _date_spec(data) -> DateSpec | None:
    """Accept {"year": .., "month": .., ...} or an ISO string ("2024-03-01", "2024-03-01T09:00")."""
    if data is None:
        return None
    if isinstance(data, str):
        if "T" in data or " " in data:
            dt = datetime.fromisoformat(data)
            return DateSpec(dt.year, dt.month, dt.day, dt.hour, dt.minute)
        d = datetime.fromisoformat(data)
        return DateSpec(d.year, d.month, d.day)
    return DateSpec(
        year=int(data["year"]),
        month=int(data["month"]),
        day=int(data["day"]),
        hour=int(data["hour"]) if data.get("hour") is not None else None,
        minute=int(data["minute"]) if data.get("minute") is not None else None,
    )


def parse_timestamp(data: dict | None) -> Timestamp | None:
    if data is None:
        return None
    repeater = data.get("repeater")
    return Timestamp(
        kind=TimestampKind(data.get("kind", "active")),
        start=_date_spec(data.get("start")),
        end=_date_spec(data.get("end")),
        repeater=Repeater(repeater["unit"], int(repeater["value"])) if repeater else None,
        diary=data.get("diary"),
    )


def _parse_priority(value) -> int | None:
    if value is None:
        return None
    if isinstance(value, str):
        # Letter cookies like [#A]
        return ord(value) if len(value) == 1 and not value.isdigit() else int(value)
    return int(value)


def _parse_content(items) -> tuple:
    if isinstance(items, str):
        return (items,)
    content = []
    for item in items or []:
        if isinstance(item, str):
            content.append(item)
            continue
        match item.get("type"):
            case "timestamp":
                content.append(parse_timestamp(item))
            case "diary":
                content.append(DiaryExpression(item["value"]))
            case "inlinetask":
                content.append(parse_entry(item, EntryKind.INLINETASK))
            case "text" | "paragraph":
                content.append(item.get("value", ""))
            case other:
                logger.debug(f"Ignoring unknown content type {other!r}")
    return tuple(content)


def parse_entry(data: dict, kind: EntryKind = EntryKind.HEADLINE) -> OutlineEntry:
    properties = {str(k).upper(): str(v) for k, v in (data.get("properties") or {}).items()}
    return OutlineEntry(
        title=_parse_content(data.get("title", "")),
        kind=kind,
        begin=int(data.get("begin", 0)),
        todo_keyword=data.get("todo"),
        todo_type=data.get("todo_type"),
        priority=_parse_priority(data.get("priority")),
        tags=tuple(data.get("tags", ())),
        properties=properties,
        scheduled=parse_timestamp(data.get("scheduled")),
        deadline=parse_timestamp(data.get("deadline")),
        children=tuple(parse_entry(child) for child in data.get("children", ())),
        body=_parse_content(data.get("body", ())),
        commented=bool(data.get("commented", False)),
        footnote_section=bool(data.get("footnote_section", False)),
    )


def parse_document(data: dict, default_name: str = "") -> OutlineDocument:
    return OutlineDocument(
        name=data.get("name") or default_name,
        entries=tuple(parse_entry(entry) for entry in data.get("entries", ())),
        title=data.get("title"),
        author=data.get("author", ""),
        description=data.get("description", ""),
        category=data.get("category"),
        tags=tuple(data.get("tags", ())),
    )


class JsonOutlineSource:
    """
    Reads outline trees serialized as JSON.

    Implements OutlineSource protocol.
    """

    def load(self, path: Path | str) -> OutlineDocument:
        path = Path(path).expanduser()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return parse_document(data, default_name=path.name)
        except OSError as e:
            raise OutlineLoadError(f"Cannot read {path}: {e}") from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise OutlineLoadError(f"Malformed outline in {path}: {e}") from e
