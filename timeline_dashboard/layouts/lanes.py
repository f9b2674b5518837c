"""Greedy lane assignment for timeline items (interval-graph coloring)."""

from typing import Dict, List, Sequence

from timeline_dashboard.core.item import ItemId, TimelineItem


def assign_lanes(items: Sequence[TimelineItem]) -> List[List[TimelineItem]]:
    """Pack items into the fewest lanes with no overlap inside a lane.

    Items are visited in ascending start order (stable, so equal starts keep
    their input order). Each item goes into the first lane whose last item
    ends strictly before it starts; if none qualifies a new lane is opened.
    The lane count equals the largest number of items overlapping on any
    single day.

    Parameters
    ----------
    items : Sequence[TimelineItem]
        Items with valid ISO dates. Malformed dates raise ``ValueError``.

    Returns
    -------
    List[List[TimelineItem]]
        Lanes in creation order, each sorted by start date.
    """
    if not items:
        return []

    sorted_items = sorted(items, key=lambda item: item.start_date)
    lanes: List[List[TimelineItem]] = []
    # End date of the last item in each lane, parallel to ``lanes``
    lane_ends = []

    for item in sorted_items:
        start = item.start_date
        for i, lane_end in enumerate(lane_ends):
            if lane_end < start:
                lanes[i].append(item)
                lane_ends[i] = item.end_date
                break
        else:
            lanes.append([item])
            lane_ends.append(item.end_date)

    return lanes


def lane_index(lanes: List[List[TimelineItem]]) -> Dict[ItemId, int]:
    """Map each item id to the index of the lane holding it."""
    return {item.id: i for i, lane in enumerate(lanes) for item in lane}
