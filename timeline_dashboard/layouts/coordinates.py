"""Date <-> pixel mapping for the horizontal timeline.

One day is ``BASE_DAY_WIDTH`` pixels wide at zoom 1. Every pixel position is
measured from the left edge of the visible range, so the range must be
recomputed whenever the item set changes.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from timeline_dashboard.core.dates import DateLike, add_days, days_between
from timeline_dashboard.core.item import TimelineItem

logger = logging.getLogger(__name__)

BASE_DAY_WIDTH = 24  # px per day at zoom 1
MIN_ITEM_WIDTH = 80  # px, keeps short labels legible
RANGE_PADDING_DAYS = 7
DEFAULT_WINDOW_DAYS = 30

MIN_ZOOM = 0.5
MAX_ZOOM = 5.0
ZOOM_STEP = 1.2


@dataclass(frozen=True)
class VisibleRange:
    """The padded date window that serves as origin for all pixel math."""

    min_date: date
    max_date: date

    @property
    def total_days(self) -> int:
        """Day span of the window, never less than 1."""
        return max(1, days_between(self.min_date, self.max_date))


@dataclass
class ItemGeometry:
    """Horizontal placement of one item bar, in pixels."""

    left: float
    width: float


def default_range(today: Optional[date] = None) -> VisibleRange:
    """The window shown when there is nothing (valid) to show."""
    start = today or date.today()
    return VisibleRange(start, add_days(start, DEFAULT_WINDOW_DAYS))


def compute_visible_range(
    items: Sequence[TimelineItem],
    today: Optional[date] = None,
) -> VisibleRange:
    """Compute the padded date window covering all items.

    Returns ``[min(start) - 7, max(end) + 7]``, or ``[today, today + 30]`` for
    an empty item list. Never raises: a malformed date, or padding that would
    run past the calendar limits, falls back to the default window.
    """
    if not items:
        return default_range(today)

    try:
        min_date = min(item.start_date for item in items)
        max_date = max(item.end_date for item in items)
        return VisibleRange(
            add_days(min_date, -RANGE_PADDING_DAYS),
            add_days(max_date, RANGE_PADDING_DAYS),
        )
    except (ValueError, TypeError, OverflowError) as e:
        logger.error("Error calculating date range: %s", e)
        return default_range(today)


def date_to_pixel(value: DateLike, min_date: DateLike, zoom: float) -> float:
    """Pixel offset of ``value`` from ``min_date`` at the given zoom."""
    return days_between(min_date, value) * BASE_DAY_WIDTH * zoom


def item_geometry(item: TimelineItem, min_date: DateLike, zoom: float) -> ItemGeometry:
    """Left offset and width of an item bar.

    The width is clamped to ``MIN_ITEM_WIDTH``; the clamp is display-only and
    never feeds back into dates. A malformed date yields a bar at the origin.
    """
    try:
        left = date_to_pixel(item.start_date, min_date, zoom)
        right = date_to_pixel(item.end_date, min_date, zoom)
    except (ValueError, TypeError) as e:
        logger.error("Error calculating geometry for item %r: %s", item.id, e)
        return ItemGeometry(left=0, width=MIN_ITEM_WIDTH)

    return ItemGeometry(left=left, width=max(right - left, MIN_ITEM_WIDTH))


def pixel_delta_to_days(delta_x: float, zoom: float) -> int:
    """Convert a horizontal pointer movement into whole days.

    Rounds to the nearest day with halves going up (like ``Math.round`` in
    the browser), so a movement of less than half a day's width is 0.
    """
    return math.floor(delta_x / (BASE_DAY_WIDTH * zoom) + 0.5)


def timeline_width(visible_range: VisibleRange, zoom: float) -> float:
    """Total pixel width of the timeline canvas."""
    return visible_range.total_days * BASE_DAY_WIDTH * zoom


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


def step_zoom(zoom: float, zoom_in: bool) -> float:
    """Zoom one step in or out, clamped to ``[MIN_ZOOM, MAX_ZOOM]``."""
    new_zoom = zoom * ZOOM_STEP if zoom_in else zoom / ZOOM_STEP
    return clamp_zoom(new_zoom)
