"""Pointer-drag state machine for moving and resizing timeline items.

Interaction model:
- Pointer down on an item body -> move (both dates shift)
- Pointer down on the start/end handle -> resize that edge only
- Pointer move -> whole-day steps, computed from the pixel delta and zoom
- Pointer up -> session discarded

A step that would leave ``start >= end`` is dropped without error.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from timeline_dashboard.core.dates import add_days, format_date
from timeline_dashboard.core.item import ItemId, TimelineItem, find_item, replace_item
from timeline_dashboard.layouts.coordinates import pixel_delta_to_days

logger = logging.getLogger(__name__)


class DragMode(Enum):
    """Which date field(s) a drag mutates."""

    START = "start"
    END = "end"
    MOVE = "move"


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DragSession:
    """An in-progress drag: target item, mode and last pointer x."""

    item_id: ItemId
    mode: DragMode
    last_x: float


def resolve_drag_mode(handle: Optional[str] = None) -> DragMode:
    """Map the pressed element to a drag mode.

    ``handle`` is ``"start"`` or ``"end"`` for the edge handles and None for
    the item body. A handle press always wins over the body.
    """
    if handle is None:
        return DragMode.MOVE
    try:
        mode = DragMode(handle)
    except ValueError:
        raise ValueError(f"Unknown drag handle: {handle!r}") from None
    if mode is DragMode.MOVE:
        raise ValueError("'move' is not a handle; pass handle=None for the item body")
    return mode


def apply_drag(item: TimelineItem, mode: DragMode, day_delta: int) -> TimelineItem:
    """Shift an item's dates by ``day_delta`` days according to ``mode``.

    Returns the same item when the step is rejected (it would make
    ``start >= end``) or when ``day_delta`` is 0.
    """
    if day_delta == 0:
        return item

    start = item.start_date
    end = item.end_date

    if mode is DragMode.MOVE:
        return item.replace(
            start=format_date(add_days(start, day_delta)),
            end=format_date(add_days(end, day_delta)),
        )
    if mode is DragMode.START:
        new_start = add_days(start, day_delta)
        if new_start < end:
            return item.replace(start=format_date(new_start))
        return item
    if mode is DragMode.END:
        new_end = add_days(end, day_delta)
        if new_end > start:
            return item.replace(end=format_date(new_end))
        return item
    raise ValueError(f"Unknown drag mode: {mode!r}")


class DragController:
    """Two-state machine (IDLE / DRAGGING) translating pointer x into date edits.

    The controller never holds items. ``pointer_move`` receives the current
    list and returns a new one with at most the target item replaced.

    Sub-day movement accumulates: a move event that rounds to zero days does
    not advance the reference x, so slow drags still step once they cross
    half a day's width.
    """

    def __init__(self) -> None:
        self._session: Optional[DragSession] = None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def state(self) -> DragState:
        return DragState.IDLE if self._session is None else DragState.DRAGGING

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    def pointer_down(self, item_id: ItemId, x: float, handle: Optional[str] = None) -> DragSession:
        """Start a drag on ``item_id``. Replaces any active session."""
        mode = resolve_drag_mode(handle)
        if self._session is not None:
            logger.debug("Replacing drag session on %r", self._session.item_id)
        self._session = DragSession(item_id=item_id, mode=mode, last_x=x)
        logger.debug("Drag start: item=%r mode=%s x=%s", item_id, mode.value, x)
        return self._session

    def pointer_move(self, items: List[TimelineItem], x: float, zoom: float) -> List[TimelineItem]:
        """Apply one pointer sample and return the resulting item list."""
        session = self._session
        if session is None:
            return items

        day_delta = pixel_delta_to_days(x - session.last_x, zoom)
        if day_delta == 0:
            return items

        self._session = DragSession(item_id=session.item_id, mode=session.mode, last_x=x)

        target = find_item(items, session.item_id)
        if target is None:
            return items

        try:
            updated = apply_drag(target, session.mode, day_delta)
        except (ValueError, OverflowError) as e:
            logger.error("Error applying drag to item %r: %s", target.id, e)
            return items

        if updated is target:
            return items
        return replace_item(items, updated)

    def pointer_up(self) -> None:
        """End the drag, whether or not anything changed."""
        if self._session is not None:
            logger.debug("Drag end: item=%r", self._session.item_id)
        self._session = None
