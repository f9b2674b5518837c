"""Inline rename of timeline items."""

from typing import List, Optional

from timeline_dashboard.core.item import ItemId, TimelineItem


def rename_item(items: List[TimelineItem], item_id: ItemId, name: str) -> List[TimelineItem]:
    """Return a new list where the item with ``item_id`` is called ``name``."""
    return [item.replace(name=name) if item.id == item_id else item for item in items]


class InlineEditor:
    """Tracks which item is being renamed and the text typed so far.

    Any text is accepted on save, including an empty or unchanged name.
    """

    def __init__(self) -> None:
        self.editing_id: Optional[ItemId] = None
        self.text = ""

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def start_edit(self, item: TimelineItem) -> None:
        self.editing_id = item.id
        self.text = item.name

    def update_text(self, text: str) -> None:
        self.text = text

    def save_edit(self, items: List[TimelineItem]) -> List[TimelineItem]:
        """Commit the edit and return the updated list (unchanged if not editing)."""
        if self.editing_id is None:
            return items
        updated = rename_item(items, self.editing_id, self.text)
        self.cancel_edit()
        return updated

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.text = ""
