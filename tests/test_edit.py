"""Tests for inline rename."""

from timeline_dashboard.core.edit import InlineEditor, rename_item
from timeline_dashboard.core.item import TimelineItem


def _make_items():
    return [
        TimelineItem(id=1, name="Design", start="2024-01-01", end="2024-01-05"),
        TimelineItem(id=2, name="Build", start="2024-01-06", end="2024-01-20"),
    ]


def test_rename_item_returns_new_list():
    items = _make_items()
    renamed = rename_item(items, 2, "Implement")
    assert renamed[1].name == "Implement"
    assert renamed[0] is items[0]
    assert items[1].name == "Build"


def test_rename_unknown_id_changes_nothing():
    items = _make_items()
    assert rename_item(items, 99, "X") == items


def test_editor_flow():
    items = _make_items()
    editor = InlineEditor()
    editor.start_edit(items[0])
    assert editor.is_editing
    assert editor.text == "Design"

    editor.update_text("Discovery")
    items = editor.save_edit(items)
    assert items[0].name == "Discovery"
    assert not editor.is_editing
    assert editor.text == ""


def test_empty_name_is_accepted():
    items = _make_items()
    editor = InlineEditor()
    editor.start_edit(items[0])
    editor.update_text("")
    assert editor.save_edit(items)[0].name == ""


def test_save_without_edit_is_noop():
    items = _make_items()
    assert InlineEditor().save_edit(items) is items


def test_cancel_discards_text():
    items = _make_items()
    editor = InlineEditor()
    editor.start_edit(items[1])
    editor.update_text("Something else")
    editor.cancel_edit()
    assert editor.save_edit(items) is items
