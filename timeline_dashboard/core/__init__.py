"""Core data model and interaction state for timelines."""

from timeline_dashboard.core.dates import (
    add_days,
    days_between,
    format_date,
    is_after,
    is_before,
    is_same_day,
    parse_date,
)
from timeline_dashboard.core.errors import TimelineError, TimelineLoadError
from timeline_dashboard.core.item import TimelineDocument, TimelineItem

__all__ = [
    "TimelineItem",
    "TimelineDocument",
    "TimelineError",
    "TimelineLoadError",
    "parse_date",
    "format_date",
    "days_between",
    "add_days",
    "is_before",
    "is_after",
    "is_same_day",
]
