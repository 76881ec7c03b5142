"""Outline entries to calendar components.

Pure functions - no I/O. Identifier generation is injected so the engine
stays deterministic under test.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable

from .categories import Genealogy, get_categories, is_blocked
from .components import ComponentFields, build_vevent, build_vtodo
from .diary import render_diary
from .options import (
    EVENT_IF_NOT_TODO,
    EVENT_IF_TODO,
    EVENT_IF_TODO_NOT_DONE,
    ExportOptions,
)
from .outline import (
    DiaryExpression,
    InvalidInput,
    OutlineDocument,
    OutlineEntry,
    Timestamp,
    TimestampKind,
    render_plain,
)
from .text import escape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportContext:
    """
    Everything one export pass needs besides the tree.

    ``marked`` is the agenda-view overlay: when not None, only entries whose
    ``begin`` position is listed produce their own components.
    """

    options: ExportOptions
    new_id: Callable[[], str]
    now: datetime
    marked: frozenset[int] | None = None

    @property
    def restricted(self) -> bool:
        return self.marked is not None


def _event_wanted(entry: OutlineEntry, policies: frozenset[str]) -> bool:
    match entry.todo_type:
        case "todo":
            return EVENT_IF_TODO_NOT_DONE in policies or EVENT_IF_TODO in policies
        case "done":
            return EVENT_IF_TODO in policies
        case _:
            return EVENT_IF_NOT_TODO in policies


def _timestamp_wanted(timestamp: Timestamp, policy: str) -> bool:
    match policy:
        case "active":
            return timestamp.kind == TimestampKind.ACTIVE
        case "inactive":
            return timestamp.kind == TimestampKind.INACTIVE
        case "all":
            return True
        case _:
            return False


def _todo_wanted(entry: OutlineEntry, genealogy: Genealogy, options: ExportOptions) -> bool:
    if not entry.todo_type:
        return False
    policy = options.include_todo
    if isinstance(policy, (set, frozenset)):
        return entry.todo_keyword in policy
    match policy:
        case "all":
            return True
        case "unfinished":
            return entry.is_todo
        case "unblocked":
            return entry.is_todo and entry.is_headline and not is_blocked(entry, genealogy)
    return False


def _description(entry: OutlineEntry, options: ExportOptions) -> str | None:
    explicit = entry.get_property("DESCRIPTION")
    if explicit is not None:
        return escape(explicit)
    include = options.include_body
    if include is False:
        return None
    contents = render_plain(entry.body).strip()
    if not contents:
        return None
    if include is not True:
        contents = contents[:include]
    return escape(contents)


def _is_excluded(entry: OutlineEntry, genealogy: Genealogy, options: ExportOptions) -> bool:
    if entry.commented:
        return True
    return any(tag in options.exclude_tags for tag in genealogy.all_tags(entry))


def entry_fields(entry: OutlineEntry, genealogy: Genealogy, options: ExportOptions) -> ComponentFields:
    """Escaped summary, location, description and categories of one entry."""
    summary = entry.get_property("SUMMARY") or render_plain(entry.title).strip()
    location = genealogy.inherited_property(entry, "LOCATION")
    classification = genealogy.inherited_property(entry, "CLASS")
    return ComponentFields(
        summary=escape(summary),
        location=escape(location) if location else None,
        description=_description(entry, options),
        categories=get_categories(entry, genealogy, options),
        classification=escape(classification) if classification else None,
        timezone=genealogy.inherited_property(entry, "TIMEZONE"),
    )


def _own_components(entry: OutlineEntry, genealogy: Genealogy, ctx: ExportContext) -> list[str]:
    options = ctx.options
    uid = entry.get_property("ID") or ctx.new_id()
    fields = entry_fields(entry, genealogy, options)
    components: list[str] = []

    def emit(label: str, build: Callable[[], str]) -> None:
        try:
            text = build()
        except InvalidInput as e:
            logger.warning(f"Skipping {label} of {fields.summary!r}: {e}")
            return
        if text:
            components.append(text)

    if entry.deadline and _event_wanted(entry, options.use_deadline):
        deadline_fields = replace(fields, summary=escape(options.deadline_summary_prefix) + fields.summary)
        emit(
            "deadline",
            lambda: build_vevent(entry, entry.deadline, f"DL-{uid}", deadline_fields, options, ctx.now),
        )

    if entry.scheduled and _event_wanted(entry, options.use_scheduled):
        scheduled_fields = replace(fields, summary=escape(options.scheduled_summary_prefix) + fields.summary)
        emit(
            "scheduled",
            lambda: build_vevent(entry, entry.scheduled, f"SC-{uid}", scheduled_fields, options, ctx.now),
        )

    counter = 0
    for element in entry.own_elements():
        if isinstance(element, Timestamp) and _timestamp_wanted(element, options.with_timestamps):
            counter += 1
            ts_uid = f"TS{counter}-{uid}"
            emit("timestamp", lambda: build_vevent(entry, element, ts_uid, fields, options, ctx.now))

    if _todo_wanted(entry, genealogy, options):
        emit("task", lambda: build_vtodo(entry, uid, fields, options, ctx.now))

    if options.include_sexps:
        counter = 0
        for element in entry.own_elements():
            if isinstance(element, DiaryExpression):
                counter += 1
                ds_uid = f"DS{counter}-{uid}"
                emit(
                    "diary expression",
                    lambda: render_diary(
                        element.value, ds_uid, fields.summary, options, ctx.now, fields.timezone
                    ),
                )

    return components


def transcode_entry(entry: OutlineEntry, genealogy: Genealogy, ctx: ExportContext) -> list[str]:
    """
    Components for one entry, followed by those of its inline tasks.

    Order: deadline event, scheduled event, plain timestamp events, task,
    diary events, then inline tasks.
    """
    if entry.footnote_section or _is_excluded(entry, genealogy, ctx.options):
        return []

    components: list[str] = []
    if not ctx.restricted or entry.begin in ctx.marked:
        components.extend(_own_components(entry, genealogy, ctx))

    if entry.is_headline:
        for task in entry.inline_tasks():
            components.extend(transcode_entry(task, genealogy, ctx))
    return components


def transcode_document(document: OutlineDocument, ctx: ExportContext) -> list[str]:
    """Every component of a document, headlines in pre-order."""
    genealogy = Genealogy(document)
    components: list[str] = []

    def visit(entries: tuple[OutlineEntry, ...]) -> None:
        for entry in entries:
            if _is_excluded(entry, genealogy, ctx.options):
                continue
            components.extend(transcode_entry(entry, genealogy, ctx))
            visit(entry.children)

    visit(document.entries)
    logger.debug(f"Transcoded {len(components)} components from {document.name}")
    return components
