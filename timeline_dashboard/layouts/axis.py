"""Month labels for the timeline header."""

from dataclasses import dataclass
from datetime import MAXYEAR, date
from typing import List

from timeline_dashboard.layouts.coordinates import VisibleRange, date_to_pixel

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass
class MonthLabel:
    """A tick on the date axis."""

    date: date
    label: str
    left: float


def _next_month(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def month_labels(visible_range: VisibleRange, zoom: float) -> List[MonthLabel]:
    """Compute one label per month touched by the visible range.

    The first label sits at ``min_date`` even when that is mid-month; the
    following ones sit on the first day of each month up to ``max_date``.
    """
    labels = []
    current = visible_range.min_date
    while current <= visible_range.max_date:
        labels.append(
            MonthLabel(
                date=current,
                label=f"{MONTH_ABBREVIATIONS[current.month - 1]} {current.year}",
                left=date_to_pixel(current, visible_range.min_date, zoom),
            )
        )
        if current.year == MAXYEAR and current.month == 12:
            break
        current = _next_month(current)
    return labels
