"""Tests for greedy lane assignment."""

import random

from timeline_dashboard.core.dates import add_days, format_date
from timeline_dashboard.core.item import TimelineItem
from timeline_dashboard.layouts.lanes import assign_lanes, lane_index


def _item(item_id, start, end):
    return TimelineItem(id=item_id, name=f"Item {item_id}", start=start, end=end)


def _max_overlap(items):
    """Largest number of items covering any single day (closed intervals)."""
    best = 0
    days = {item.start_date for item in items} | {item.end_date for item in items}
    for day in days:
        count = sum(1 for item in items if item.start_date <= day <= item.end_date)
        best = max(best, count)
    return best


def _random_items(seed, n=40):
    rng = random.Random(seed)
    items = []
    for i in range(n):
        start = add_days("2024-01-01", rng.randint(0, 60))
        end = add_days(start, rng.randint(0, 10))
        items.append(_item(i, format_date(start), format_date(end)))
    return items


def test_empty_input():
    assert assign_lanes([]) == []


def test_example_three_items_two_lanes():
    a = _item("A", "2024-01-01", "2024-01-05")
    b = _item("B", "2024-01-03", "2024-01-07")
    c = _item("C", "2024-01-06", "2024-01-10")
    lanes = assign_lanes([a, b, c])
    assert lanes == [[a, c], [b]]


def test_input_order_does_not_matter_for_lanes():
    a = _item("A", "2024-01-01", "2024-01-05")
    b = _item("B", "2024-01-03", "2024-01-07")
    c = _item("C", "2024-01-06", "2024-01-10")
    assert assign_lanes([c, b, a]) == [[a, c], [b]]


def test_touching_items_do_not_share_a_lane():
    """An item starting on the day another ends overlaps it."""
    a = _item("A", "2024-01-01", "2024-01-05")
    b = _item("B", "2024-01-05", "2024-01-08")
    assert len(assign_lanes([a, b])) == 2


def test_equal_starts_keep_input_order():
    first = _item(1, "2024-01-01", "2024-01-03")
    second = _item(2, "2024-01-01", "2024-01-02")
    third = _item(3, "2024-01-01", "2024-01-04")
    lanes = assign_lanes([first, second, third])
    assert [lane[0].id for lane in lanes] == [1, 2, 3]


def test_zero_duration_items_occupy_lanes():
    a = _item("A", "2024-01-01", "2024-01-01")
    b = _item("B", "2024-01-01", "2024-01-01")
    c = _item("C", "2024-01-02", "2024-01-02")
    lanes = assign_lanes([a, b, c])
    assert lanes == [[a, c], [b]]


def test_every_item_in_exactly_one_lane():
    items = _random_items(seed=1)
    lanes = assign_lanes(items)
    placed = [item.id for lane in lanes for item in lane]
    assert sorted(placed) == sorted(item.id for item in items)


def test_lane_count_is_max_overlap():
    for seed in range(10):
        items = _random_items(seed)
        assert len(assign_lanes(items)) == _max_overlap(items), f"seed {seed}"


def test_lanes_are_sorted_and_non_overlapping():
    for seed in range(10):
        for lane in assign_lanes(_random_items(seed)):
            for earlier, later in zip(lane, lane[1:]):
                assert earlier.start_date <= later.start_date
                assert earlier.end_date < later.start_date


def test_input_is_not_mutated():
    items = _random_items(seed=3, n=10)
    snapshot = list(items)
    assign_lanes(items)
    assert items == snapshot


def test_lane_index():
    a = _item("A", "2024-01-01", "2024-01-05")
    b = _item("B", "2024-01-03", "2024-01-07")
    c = _item("C", "2024-01-06", "2024-01-10")
    assert lane_index(assign_lanes([a, b, c])) == {"A": 0, "B": 1, "C": 0}
