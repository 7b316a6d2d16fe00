"""
Tests for overlap offsetting and the declarative map render model.
"""

import copy
import math

import pytest

from logic.render import (
    APP_LAYERS,
    JOURNEY_PATHS,
    MODE_LAYERS,
    OVERLAP_RADIUS,
    REGION_BOUNDS,
    TIMELINE_PATH,
    build_map_view,
    coordinate_key,
    spread_overlapping_points,
    visible_layers,
)


def _points(n, lat=31.7683, lng=35.2137):
    return [{"id": i, "latitude": lat, "longitude": lng} for i in range(n)]


def test_overlapping_points_get_distinct_positions_on_the_circle():
    spread = spread_overlapping_points(_points(5))

    positions = {(round(p["displayLatitude"], 9), round(p["displayLongitude"], 9)) for p in spread}
    assert len(positions) == 5

    for point in spread:
        distance = math.hypot(
            point["displayLatitude"] - point["latitude"],
            point["displayLongitude"] - point["longitude"],
        )
        assert distance == pytest.approx(OVERLAP_RADIUS)


def test_first_member_sits_east_of_the_original():
    first = spread_overlapping_points(_points(4))[0]
    assert first["displayLatitude"] == pytest.approx(31.7683)
    assert first["displayLongitude"] == pytest.approx(35.2137 + OVERLAP_RADIUS)


def test_single_point_keeps_its_position():
    spread = spread_overlapping_points(_points(1))
    assert spread[0]["displayLatitude"] == 31.7683
    assert spread[0]["displayLongitude"] == 35.2137


def test_input_is_not_modified():
    points = _points(3) + [{"id": 9, "latitude": 41.9, "longitude": 12.5}]
    original = copy.deepcopy(points)
    spread = spread_overlapping_points(points)

    assert points == original
    assert [p["latitude"] for p in spread] == [p["latitude"] for p in original]
    assert [p["id"] for p in spread] == [0, 1, 2, 9]


def test_points_equal_after_rounding_are_grouped():
    points = [
        {"latitude": 30.00001, "longitude": 31.00001},
        {"latitude": 30.00002, "longitude": 31.00002},
    ]
    spread = spread_overlapping_points(points)
    assert spread[0]["displayLongitude"] != spread[1]["displayLongitude"]


def test_spreading_is_deterministic():
    points = _points(3) + _points(2, lat=1.0, lng=2.0)
    assert spread_overlapping_points(points) == spread_overlapping_points(points)


def test_visible_layers_come_from_the_allow_list():
    for mode in MODE_LAYERS:
        assert set(visible_layers(mode)) <= set(APP_LAYERS)


def test_unknown_mode_falls_back_to_timeline():
    assert visible_layers("satellite") == visible_layers("timeline")


def _selection():
    location = {"name": "Jerusalem", "latitude": 31.7683, "longitude": 35.2137}
    return {
        "timeline": [
            {"type": "biblical_event", "year": 30, "title": "Later", "location": dict(location)},
            {"type": "biblical_event", "year": -4, "title": "Earlier", "location": dict(location)},
            {
                "type": "database_event",
                "year": 10,
                "title": "Rome",
                "location": {"name": "Rome", "latitude": 41.9, "longitude": 12.5},
            },
        ],
        "journeys": [
            {
                "id": "j1",
                "title": "Trip",
                "stops": [
                    {"orderIndex": 2, "location": {"name": "C", "latitude": 3.0, "longitude": 3.0}},
                    {"orderIndex": 1, "location": {"name": "B", "latitude": 2.0, "longitude": 2.0}},
                ],
            },
            {
                "id": "j2",
                "title": "Too short",
                "stops": [
                    {"orderIndex": 0, "location": {"name": "A", "latitude": 1.0, "longitude": 1.0}}
                ],
            },
        ],
        "bounds": {"north": 41.9, "south": 1.0, "east": 35.2, "west": 1.0},
    }


def test_timeline_view_numbers_markers_chronologically():
    view = build_map_view(_selection(), "timeline")

    assert view["mode"] == "timeline"
    assert [m["sequence"] for m in view["markers"]] == [1, 2, 3]
    assert [m["title"] for m in view["markers"]] == ["Earlier", "Rome", "Later"]
    assert len(view["labels"]) == 3
    assert view["labels"][0]["text"] == "1. Earlier"
    assert view["bounds"] is None


def test_timeline_path_uses_true_coordinates():
    view = build_map_view(_selection(), "timeline")
    path = next(line for line in view["lines"] if line["layer"] == TIMELINE_PATH)
    assert path["coordinates"] == [[35.2137, 31.7683], [12.5, 41.9], [35.2137, 31.7683]]

    shared = [m for m in view["markers"] if m["latitude"] == 31.7683]
    assert shared[0]["displayLongitude"] != shared[1]["displayLongitude"]


def test_journeys_view_draws_ordered_stops_and_skips_short_paths():
    view = build_map_view(_selection(), "journeys")

    assert view["layers"] == visible_layers("journeys")
    assert all(m["layer"] == "journey-stops" for m in view["markers"])
    assert [line["id"] for line in view["lines"]] == ["journey-j1"]
    assert view["lines"][0]["coordinates"] == [[2.0, 2.0], [3.0, 3.0]]


def test_overview_includes_bounds_and_journey_paths():
    view = build_map_view(_selection(), "overview")
    assert REGION_BOUNDS in view["layers"]
    assert view["bounds"]["north"] == 41.9
    assert all(line["layer"] == JOURNEY_PATHS for line in view["lines"])
    assert view["labels"] == []


def test_empty_selection_renders_nothing():
    view = build_map_view({}, "bogus")
    assert view["mode"] == "timeline"
    assert view["markers"] == view["lines"] == view["labels"] == []


def test_points_either_side_of_zero_are_grouped():
    points = [
        {"latitude": -0.00001, "longitude": 10.0},
        {"latitude": 0.00001, "longitude": 10.0},
    ]
    spread = spread_overlapping_points(points)

    positions = {(p["displayLatitude"], p["displayLongitude"]) for p in spread}
    assert len(positions) == 2
    assert spread[0]["displayLongitude"] == pytest.approx(10.0 + OVERLAP_RADIUS)
    assert coordinate_key(-0.00001, -0.00001) == coordinate_key(0.0, 0.0)
