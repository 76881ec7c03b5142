"""Outline tree model - immutable snapshots handed over by a parser."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, Union


class InvalidInput(ValueError):
    """Raised when an outline node violates its contract (e.g. no start date)."""


class TimestampKind(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DIARY = "diary"


class EntryKind(str, Enum):
    HEADLINE = "headline"
    INLINETASK = "inlinetask"


@dataclass(frozen=True)
class DateSpec:
    """A civil date with optional time of day."""

    year: int
    month: int
    day: int
    hour: int | None = None
    minute: int | None = None

    @property
    def has_time(self) -> bool:
        return self.hour is not None


@dataclass(frozen=True)
class Repeater:
    """Recurrence attached to a timestamp, e.g. ``+2w``."""

    unit: str
    value: int


@dataclass(frozen=True)
class Timestamp:
    """
    A parsed timestamp.

    ``end`` is None for point timestamps. Diary timestamps carry the raw
    expression in ``diary`` and no dates.
    """

    kind: TimestampKind = TimestampKind.ACTIVE
    start: DateSpec | None = None
    end: DateSpec | None = None
    repeater: Repeater | None = None
    diary: str | None = None

    @property
    def has_time(self) -> bool:
        return self.start is not None and self.start.has_time

    @property
    def is_diary(self) -> bool:
        return self.kind == TimestampKind.DIARY

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Timestamp":
        """Active point timestamp at minute precision."""
        return cls(
            kind=TimestampKind.ACTIVE,
            start=DateSpec(dt.year, dt.month, dt.day, dt.hour, dt.minute),
        )

    def as_text(self) -> str:
        """Outline-style rendering, used when a timestamp appears in plain text."""
        if self.is_diary:
            return f"<{self.diary}>"
        if self.start is None:
            return ""
        opening, closing = ("<", ">") if self.kind == TimestampKind.ACTIVE else ("[", "]")

        def _one(d: DateSpec) -> str:
            text = f"{d.year:04d}-{d.month:02d}-{d.day:02d}"
            if d.has_time:
                text += f" {d.hour:02d}:{d.minute or 0:02d}"
            return text

        text = opening + _one(self.start)
        if self.repeater:
            text += f" +{self.repeater.value}{self.repeater.unit[0]}"
        text += closing
        if self.end and self.end != self.start:
            text += "--" + opening + _one(self.end) + closing
        return text


@dataclass(frozen=True)
class DiaryExpression:
    """A ``%%(...)`` diary expression with optional trailing time annotation."""

    value: str


Content = Union[str, Timestamp, DiaryExpression, "OutlineEntry"]


@dataclass(frozen=True)
class OutlineEntry:
    """A headline or inline task."""

    title: tuple = ()
    kind: EntryKind = EntryKind.HEADLINE
    begin: int = 0
    todo_keyword: str | None = None
    todo_type: str | None = None  # "todo", "done" or None
    priority: int | None = None
    tags: tuple[str, ...] = ()
    properties: dict[str, str] = field(default_factory=dict, hash=False, compare=False)
    scheduled: Timestamp | None = None
    deadline: Timestamp | None = None
    children: tuple["OutlineEntry", ...] = ()
    body: tuple = ()
    commented: bool = False
    footnote_section: bool = False

    @property
    def is_headline(self) -> bool:
        return self.kind == EntryKind.HEADLINE

    @property
    def is_todo(self) -> bool:
        return self.todo_type == "todo"

    def get_property(self, name: str) -> str | None:
        return self.properties.get(name.upper())

    def inline_tasks(self) -> Iterator["OutlineEntry"]:
        """Inline tasks in this entry's body, in document order."""
        for element in self.body:
            if isinstance(element, OutlineEntry):
                yield element

    def own_elements(self) -> Iterator[Content]:
        """Title then body elements, skipping nested inline tasks."""
        yield from self.title
        for element in self.body:
            if not isinstance(element, OutlineEntry):
                yield element


@dataclass(frozen=True)
class OutlineDocument:
    """One parsed outline file."""

    name: str
    entries: tuple[OutlineEntry, ...] = ()
    title: str | None = None
    author: str = ""
    description: str = ""
    category: str | None = None
    tags: tuple[str, ...] = ()

    def walk(self) -> Iterator[OutlineEntry]:
        """Every headline in document pre-order."""
        stack = list(reversed(self.entries))
        while stack:
            entry = stack.pop()
            yield entry
            stack.extend(reversed(entry.children))


def render_plain(elements) -> str:
    """Flatten rich content to text, dropping nested inline tasks."""
    parts = []
    for element in elements:
        if isinstance(element, str):
            parts.append(element)
        elif isinstance(element, Timestamp):
            parts.append(element.as_text())
        elif isinstance(element, DiaryExpression):
            parts.append(element.value)
    return "".join(parts)
