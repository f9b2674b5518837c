"""
Timeline Dashboard — Interactive lane timelines for Jupyter notebooks.
"""

__version__ = "0.1.0"

from timeline_dashboard.core.drag import DragController, DragMode, DragSession, DragState
from timeline_dashboard.core.errors import TimelineError, TimelineLoadError
from timeline_dashboard.core.item import TimelineDocument, TimelineItem
from timeline_dashboard.core.timeline import TimelineView
from timeline_dashboard.layouts.coordinates import (
    ItemGeometry,
    VisibleRange,
    compute_visible_range,
    date_to_pixel,
    item_geometry,
    pixel_delta_to_days,
)
from timeline_dashboard.layouts.lanes import assign_lanes


def load_json_server(**kwargs):  # type: ignore[no-untyped-def]
    """Convenience function to build a TimelineView from a running json-server."""
    return TimelineView.from_json_server(**kwargs)


__all__ = [
    "TimelineItem",
    "TimelineDocument",
    "TimelineView",
    "DragController",
    "DragMode",
    "DragSession",
    "DragState",
    "TimelineError",
    "TimelineLoadError",
    "VisibleRange",
    "ItemGeometry",
    "assign_lanes",
    "compute_visible_range",
    "date_to_pixel",
    "item_geometry",
    "pixel_delta_to_days",
    "load_json_server",
    "__version__",
]
