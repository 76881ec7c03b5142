"""Tests for categories and task blocking."""

import pytest

from orgcal.core.categories import Genealogy, get_categories, is_blocked
from orgcal.core.options import ExportOptions
from orgcal.core.outline import EntryKind, OutlineDocument, OutlineEntry


def todo(title, **kwargs):
    return OutlineEntry(title=(title,), todo_keyword="TODO", todo_type="todo", **kwargs)


def done(title, **kwargs):
    return OutlineEntry(title=(title,), todo_keyword="DONE", todo_type="done", **kwargs)


def index(*entries, **kwargs):
    return Genealogy(OutlineDocument(name=kwargs.pop("name", "notes.org"), entries=entries, **kwargs))


class TestGenealogy:
    def test_ancestors_nearest_first(self):
        leaf = todo("Leaf")
        middle = todo("Middle", children=(leaf,))
        root = OutlineEntry(title=("Root",), children=(middle,))
        genealogy = index(root)
        assert genealogy.ancestors(leaf) == [middle, root]
        assert genealogy.parent(root) is None

    def test_previous_siblings_nearest_first(self):
        a, b, c = todo("A"), todo("B"), todo("C")
        genealogy = index(OutlineEntry(title=("P",), children=(a, b, c)))
        assert genealogy.previous_siblings(c) == [b, a]
        assert genealogy.previous_siblings(a) == []

    def test_inline_task_parent_is_headline(self):
        task = OutlineEntry(title=("Inline",), kind=EntryKind.INLINETASK)
        headline = OutlineEntry(title=("Host",), body=("text", task))
        genealogy = index(headline)
        assert genealogy.parent(task) is headline

    def test_inherited_property(self):
        child = OutlineEntry(title=("Talk",))
        parent = OutlineEntry(title=("Conference",), properties={"LOCATION": "Berlin"}, children=(child,))
        genealogy = index(parent)
        assert genealogy.inherited_property(child, "LOCATION") == "Berlin"
        assert genealogy.inherited_property(child, "CLASS") is None


class TestCategories:
    def test_default_sources_local_tags_then_category(self):
        child = OutlineEntry(title=("Step",), tags=("urgent",))
        parent = OutlineEntry(title=("Project",), properties={"CATEGORY": "proj"}, children=(child,))
        assert get_categories(child, index(parent), ExportOptions()) == "urgent,proj"

    def test_category_falls_back_to_file_name(self):
        entry = OutlineEntry(title=("Entry",))
        assert get_categories(entry, index(entry, name="work.org"), ExportOptions()) == "work"

    def test_document_category(self):
        entry = OutlineEntry(title=("Entry",))
        genealogy = index(entry, category="Chores")
        assert get_categories(entry, genealogy, ExportOptions(categories=("category",))) == "Chores"

    def test_todo_state(self):
        entry = todo("Call")
        options = ExportOptions(categories=("todo-state", "category"))
        assert get_categories(entry, index(entry), options) == "TODO,notes"

    def test_all_tags_include_inherited(self):
        child = OutlineEntry(title=("Step",), tags=("urgent",))
        parent = OutlineEntry(title=("Project",), tags=("work",), children=(child,))
        genealogy = index(parent, tags=("home",))
        options = ExportOptions(categories=("all-tags",))
        assert get_categories(child, genealogy, options) == "home,work,urgent"

    def test_duplicates_removed_keeping_first(self):
        entry = OutlineEntry(title=("Entry",), tags=("notes", "x"), properties={})
        options = ExportOptions(categories=("local-tags", "category", "all-tags"))
        assert get_categories(entry, index(entry), options) == "notes,x"


class TestIsBlocked:
    def test_open_child_blocks(self):
        parent = todo("Parent", children=(todo("Child"),))
        assert is_blocked(parent, index(parent)) is True

    def test_all_children_done_unblocks(self):
        parent = todo("Parent", children=(done("Child"), done("Other")))
        assert is_blocked(parent, index(parent)) is False

    def test_open_grandchild_blocks(self):
        parent = todo("Parent", children=(OutlineEntry(title=("Notes",), children=(todo("Deep"),)),))
        assert is_blocked(parent, index(parent)) is True

    def test_ordered_parent_blocks_later_sibling(self):
        first, second = todo("First"), todo("Second")
        parent = todo("Parent", properties={"ORDERED": "t"}, children=(first, second))
        genealogy = index(parent)
        assert is_blocked(second, genealogy) is True
        assert is_blocked(first, genealogy) is False

    def test_ordered_parent_with_done_predecessor(self):
        first, second = done("First"), todo("Second")
        parent = todo("Parent", properties={"ORDERED": "t"}, children=(first, second))
        assert is_blocked(second, index(parent)) is False

    def test_ordered_nil_is_not_set(self):
        first, second = todo("First"), todo("Second")
        parent = todo("Parent", properties={"ORDERED": "nil"}, children=(first, second))
        assert is_blocked(second, index(parent)) is False

    def test_walk_stops_at_ancestor_without_keyword(self):
        first, second = todo("First"), todo("Second")
        parent = OutlineEntry(title=("Plain",), properties={"ORDERED": "t"}, children=(first, second))
        assert is_blocked(second, index(parent)) is False

    def test_ordered_grandparent_through_todo_parent(self):
        first, second = todo("First"), todo("Second")
        parent = todo("Parent", children=(first, second))
        grandparent = todo("Grandparent", properties={"ORDERED": "t"}, children=(parent,))
        assert is_blocked(second, index(grandparent)) is True

    @pytest.mark.parametrize("entry", [todo("Alone"), done("Finished")])
    def test_top_level_leaf_not_blocked(self, entry):
        assert is_blocked(entry, index(entry)) is False
