"""Category resolution and task blocking.

Pure functions - no I/O. Parent and sibling lookups go through a
``Genealogy`` side table so the outline tree itself stays immutable.
"""

from pathlib import PurePath

from .options import ExportOptions
from .outline import OutlineDocument, OutlineEntry


class Genealogy:
    """Parent/sibling index over one document, keyed by node identity."""

    def __init__(self, document: OutlineDocument):
        self.document = document
        self._parent: dict[int, OutlineEntry | None] = {}
        self._siblings: dict[int, tuple[OutlineEntry, ...]] = {}
        self._index(document.entries, None)

    def _index(self, entries: tuple[OutlineEntry, ...], parent: OutlineEntry | None) -> None:
        for entry in entries:
            self._parent[id(entry)] = parent
            self._siblings[id(entry)] = entries
            tasks = tuple(entry.inline_tasks())
            for task in tasks:
                self._parent[id(task)] = entry
                self._siblings[id(task)] = tasks
            self._index(entry.children, entry)

    def parent(self, entry: OutlineEntry) -> OutlineEntry | None:
        return self._parent.get(id(entry))

    def ancestors(self, entry: OutlineEntry) -> list[OutlineEntry]:
        """Parents from nearest to the root."""
        lineage = []
        parent = self.parent(entry)
        while parent is not None:
            lineage.append(parent)
            parent = self.parent(parent)
        return lineage

    def previous_siblings(self, entry: OutlineEntry) -> list[OutlineEntry]:
        """Siblings before ``entry``, nearest first."""
        siblings = self._siblings.get(id(entry), ())
        for i, sibling in enumerate(siblings):
            if sibling is entry:
                return list(reversed(siblings[:i]))
        return []

    def inherited_property(self, entry: OutlineEntry, name: str) -> str | None:
        """Value of ``name`` on the entry or its nearest ancestor that has it."""
        for node in [entry, *self.ancestors(entry)]:
            value = node.get_property(name)
            if value is not None:
                return value
        return None

    def category(self, entry: OutlineEntry) -> str:
        value = self.inherited_property(entry, "CATEGORY")
        if value:
            return value
        if self.document.category:
            return self.document.category
        return PurePath(self.document.name).stem or "???"

    def all_tags(self, entry: OutlineEntry) -> list[str]:
        """File tags, then ancestor tags from the root down, then local tags."""
        tags = list(self.document.tags)
        for ancestor in reversed(self.ancestors(entry)):
            tags.extend(ancestor.tags)
        tags.extend(entry.tags)
        return _unique(tags)


def _unique(items: list[str]) -> list[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def get_categories(entry: OutlineEntry, genealogy: Genealogy, options: ExportOptions) -> str:
    """CATEGORIES value built from the configured sources, in order."""
    categories: list[str] = []
    for source in options.categories:
        match source:
            case "category":
                categories.append(genealogy.category(entry))
            case "todo-state":
                if entry.todo_keyword:
                    categories.append(entry.todo_keyword)
            case "local-tags":
                categories.extend(entry.tags)
            case "all-tags":
                categories.extend(genealogy.all_tags(entry))
    return ",".join(_unique(categories))


def _is_set(value: str | None) -> bool:
    return bool(value) and value.strip().lower() != "nil"


def _has_open_descendant(entry: OutlineEntry) -> bool:
    return any(child.is_todo or _has_open_descendant(child) for child in entry.children)


def is_blocked(entry: OutlineEntry, genealogy: Genealogy) -> bool:
    """
    Whether a task cannot be acted upon yet.

    Blocked when any descendant headline is still open, or when an ancestor
    chain of todo items includes one with ORDERED children and an earlier
    sibling of ``entry`` is still open.

    The sibling scan always looks at ``entry``'s own siblings, whichever
    ancestor carries ORDERED; it does not switch to the siblings of the
    intermediate ancestor.
    """
    if _has_open_descendant(entry):
        return True
    for ancestor in genealogy.ancestors(entry):
        if not ancestor.todo_keyword:
            return False
        if _is_set(ancestor.get_property("ORDERED")):
            if any(sibling.is_todo for sibling in genealogy.previous_siblings(entry)):
                return True
    return False
