"""
Timeline item data structures.

Items keep their dates exactly as the host supplied them (ISO-8601 day
strings), so that malformed values reach the layout code, which degrades
gracefully instead of failing at load time.
"""

import dataclasses
import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import jsonschema

from timeline_dashboard.core.dates import parse_date

ItemId = Union[str, int]

_KNOWN_FIELDS = ("id", "name", "start", "end", "color")

ITEM_DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "start", "end"],
        "properties": {
            "id": {"type": ["string", "integer"]},
            "name": {"type": "string"},
            "start": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}"},
            "end": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}"},
            "color": {"type": ["string", "null"]},
        },
    },
}


@dataclass(frozen=True)
class TimelineItem:
    """A single date-ranged item on the timeline.

    Attributes
    ----------
    id : str or int
        Stable identifier, unchanged by edits.
    name : str
        Display label.
    start, end : str
        Calendar days as ``YYYY-MM-DD``.
    color : str, optional
        Bar color; no effect on layout.
    extra : dict
        Any other fields of the source record, kept for round-tripping.
    """

    id: ItemId
    name: str
    start: str
    end: str
    color: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def start_date(self) -> date:
        return parse_date(self.start)

    @property
    def end_date(self) -> date:
        return parse_date(self.end)

    @property
    def duration_days(self) -> int:
        return self.end_date.toordinal() - self.start_date.toordinal()

    def replace(self, **changes: Any) -> "TimelineItem":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "name": self.name,
                "start": self.start,
                "end": self.end,
            }
        )
        if self.color is not None:
            data["color"] = self.color
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimelineItem":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            start=data["start"],
            end=data["end"],
            color=data.get("color"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_FIELDS},
        )


def find_item(items: List[TimelineItem], item_id: ItemId) -> Optional[TimelineItem]:
    """Return the item with ``item_id`` or None."""
    for item in items:
        if item.id == item_id:
            return item
    return None


def replace_item(items: List[TimelineItem], updated: TimelineItem) -> List[TimelineItem]:
    """Return a new list with the item sharing ``updated.id`` swapped out."""
    return [updated if item.id == updated.id else item for item in items]


@dataclass
class TimelineDocument:
    """An ordered collection of timeline items, as loaded from JSON.

    Accepts both a bare JSON array (the json-server ``/timelines`` shape) and
    an object with an ``items`` key.
    """

    items: List[TimelineItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}

    @classmethod
    def from_dict(cls, data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> "TimelineDocument":
        records = data.get("items", []) if isinstance(data, dict) else data
        return cls(items=[TimelineItem.from_dict(r) for r in records])

    def validate(self, strict: bool = False) -> bool:
        """Validate the items against the item document JSON schema.

        Parameters
        ----------
        strict : bool
            If True, raise ``jsonschema.ValidationError`` on failure.
            If False, return bool.
        """
        try:
            jsonschema.validate(
                [item.to_dict() for item in self.items], ITEM_DOCUMENT_SCHEMA
            )
        except jsonschema.ValidationError:
            if strict:
                raise
            return False
        return True

    def to_json(self, path: Union[str, Path]) -> None:
        """Save items to a JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "TimelineDocument":
        """Load items from a JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))
