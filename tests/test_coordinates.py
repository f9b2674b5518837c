"""Tests for date <-> pixel mapping."""

from datetime import date

import pytest

from timeline_dashboard.core.dates import days_between
from timeline_dashboard.core.item import TimelineItem
from timeline_dashboard.layouts.coordinates import (
    BASE_DAY_WIDTH,
    MIN_ITEM_WIDTH,
    ItemGeometry,
    VisibleRange,
    clamp_zoom,
    compute_visible_range,
    date_to_pixel,
    item_geometry,
    pixel_delta_to_days,
    step_zoom,
    timeline_width,
)

TODAY = date(2024, 6, 15)


def _item(start, end, item_id=1):
    return TimelineItem(id=item_id, name="Item", start=start, end=end)


def test_constants():
    assert BASE_DAY_WIDTH == 24
    assert MIN_ITEM_WIDTH == 80


def test_empty_range_is_thirty_days_from_today():
    vr = compute_visible_range([], today=TODAY)
    assert vr == VisibleRange(date(2024, 6, 15), date(2024, 7, 15))
    assert vr.total_days == 30


def test_empty_range_defaults_to_current_day():
    vr = compute_visible_range([])
    assert vr.min_date == date.today()
    assert days_between(vr.min_date, vr.max_date) == 30


def test_range_is_padded_by_seven_days():
    items = [
        _item("2024-01-10", "2024-01-20", 1),
        _item("2024-01-05", "2024-01-08", 2),
        _item("2024-01-15", "2024-02-02", 3),
    ]
    vr = compute_visible_range(items, today=TODAY)
    assert vr.min_date == date(2023, 12, 29)
    assert vr.max_date == date(2024, 2, 9)


def test_malformed_date_falls_back_to_default_window():
    items = [_item("2024-01-10", "2024-01-20", 1), _item("garbage", "2024-01-02", 2)]
    vr = compute_visible_range(items, today=TODAY)
    assert vr == VisibleRange(TODAY, date(2024, 7, 15))


def test_malformed_date_is_logged(caplog):
    compute_visible_range([_item("2024-01-10", "nope")], today=TODAY)
    assert "Error calculating date range" in caplog.text


@pytest.mark.parametrize(
    "start, end",
    [("9999-12-20", "9999-12-30"), ("0001-01-02", "0001-01-05")],
)
def test_padding_past_calendar_limits_falls_back_to_default_window(start, end):
    vr = compute_visible_range([_item(start, end)], today=TODAY)
    assert vr == VisibleRange(TODAY, date(2024, 7, 15))


def test_padding_up_to_last_calendar_day_is_kept():
    vr = compute_visible_range([_item("9999-12-01", "9999-12-24")], today=TODAY)
    assert vr.max_date == date(9999, 12, 31)


def test_total_days_never_below_one():
    assert VisibleRange(date(2024, 1, 1), date(2024, 1, 1)).total_days == 1


def test_date_to_pixel():
    assert date_to_pixel("2024-01-11", "2024-01-01", 1) == 240
    assert date_to_pixel("2024-01-11", "2024-01-01", 2.5) == 600
    assert date_to_pixel("2023-12-31", "2024-01-01", 1) == -24


def test_geometry_two_day_item_clamped_at_zoom_one():
    geo = item_geometry(_item("2024-01-03", "2024-01-05"), "2024-01-01", 1)
    assert geo == ItemGeometry(left=48, width=80)


def test_geometry_two_day_item_unclamped_at_zoom_five():
    geo = item_geometry(_item("2024-01-03", "2024-01-05"), "2024-01-01", 5)
    assert geo.left == 240
    assert geo.width == 240


def test_geometry_zero_duration_item_gets_min_width():
    geo = item_geometry(_item("2024-01-03", "2024-01-03"), "2024-01-01", 1)
    assert geo.width == MIN_ITEM_WIDTH


def test_geometry_malformed_date_is_placed_at_origin():
    geo = item_geometry(_item("2024-01-03", "bad"), "2024-01-01", 1)
    assert geo == ItemGeometry(left=0, width=MIN_ITEM_WIDTH)


@pytest.mark.parametrize(
    "delta_x, zoom, expected",
    [
        (0, 1, 0),
        (11, 1, 0),
        (-11, 1, 0),
        (12, 1, 1),
        (-12, 1, 0),
        (-36, 1, -1),
        (72, 1, 3),
        (36, 1, 2),
        (59, 2, 1),
        (72, 2, 2),
        (12, 0.5, 1),
        (119, 5, 1),
    ],
)
def test_pixel_delta_to_days_rounds_to_nearest(delta_x, zoom, expected):
    assert pixel_delta_to_days(delta_x, zoom) == expected


@pytest.mark.parametrize("zoom", [0.5, 0.833, 1, 1.2, 1.44, 1.7, 3.3, 5])
def test_pixel_round_trip_reconstructs_day_difference(zoom):
    pairs = [
        ("2024-01-01", "2024-01-01"),
        ("2024-01-01", "2024-01-02"),
        ("2024-01-01", "2024-03-17"),
        ("2024-05-30", "2023-11-02"),
        ("2020-02-29", "2030-07-04"),
    ]
    for d1, d2 in pairs:
        delta = date_to_pixel(d2, "2024-01-01", zoom) - date_to_pixel(d1, "2024-01-01", zoom)
        assert pixel_delta_to_days(delta, zoom) == days_between(d1, d2)


def test_timeline_width():
    vr = VisibleRange(date(2024, 1, 1), date(2024, 1, 31))
    assert timeline_width(vr, 1) == 30 * 24
    assert timeline_width(vr, 2) == 30 * 48


def test_zoom_steps_and_clamps():
    assert step_zoom(1.0, zoom_in=True) == pytest.approx(1.2)
    assert step_zoom(1.2, zoom_in=False) == pytest.approx(1.0)
    assert step_zoom(4.9, zoom_in=True) == 5.0
    assert step_zoom(0.55, zoom_in=False) == 0.5
    assert clamp_zoom(10) == 5.0
    assert clamp_zoom(0.1) == 0.5
