"""
Unit tests for radius queries over activity summaries
"""
import math

import pytest

from poi_catalog.schemas.activity import ActivitySummary
from poi_catalog.services.activity_query import (
    UNBOUNDED_RESULT_LIMIT,
    ActivityQuery,
    GeoPoint,
    parse_float,
    query_activities,
)
from poi_catalog.services.geo import EARTH_RADIUS_M

CENTER = GeoPoint(48.8566, 2.3522)


def _north_of_center(activity_id, meters, category="bar"):
    """Summary placed ``meters`` due north of CENTER."""
    return ActivitySummary(
        id=activity_id,
        name=f"poi-{activity_id}",
        latitude=CENTER.lat + math.degrees(meters / EARTH_RADIUS_M),
        longitude=CENTER.lng,
        category=category,
    )


def test_radius_filters_and_sorts_nearest_first():
    candidates = [
        _north_of_center(1, 200),
        _north_of_center(2, 900),
        _north_of_center(3, 1500),
        _north_of_center(4, 50),
    ]
    query = ActivityQuery(center=CENTER, radius_m=1000)
    results = query_activities(candidates, query)
    assert [a.id for a in results] == [4, 1, 2]


def test_unbounded_query_is_capped():
    candidates = [_north_of_center(i, 10 * (150 - i)) for i in range(150)]
    results = query_activities(candidates, ActivityQuery(center=CENTER))
    assert len(results) == UNBOUNDED_RESULT_LIMIT == 100
    assert results[0].id == 149
    assert results[-1].id == 50


def test_radius_query_is_not_capped():
    candidates = [_north_of_center(i, i) for i in range(150)]
    results = query_activities(candidates, ActivityQuery(center=CENTER, radius_m=10_000))
    assert len(results) == 150


def test_custom_limit():
    candidates = [_north_of_center(i, i) for i in range(10)]
    results = query_activities(candidates, ActivityQuery(center=CENTER), limit=3)
    assert [a.id for a in results] == [0, 1, 2]


def test_no_center_keeps_store_order_and_ignores_radius():
    candidates = [_north_of_center(1, 5000), _north_of_center(2, 10), _north_of_center(3, 700)]
    results = query_activities(candidates, ActivityQuery(radius_m=100))
    assert [a.id for a in results] == [1, 2, 3]


def test_category_filter_is_case_insensitive():
    candidates = [
        _north_of_center(1, 10, category="Musée"),
        _north_of_center(2, 20, category="bar"),
        _north_of_center(3, 30, category="musée"),
    ]
    results = query_activities(candidates, ActivityQuery(category="MUSÉE"))
    assert [a.id for a in results] == [1, 3]


def test_equal_distances_keep_store_order():
    candidates = [_north_of_center(7, 300), _north_of_center(3, 300), _north_of_center(5, 100)]
    results = query_activities(candidates, ActivityQuery(center=CENTER))
    assert [a.id for a in results] == [5, 7, 3]


def test_zero_radius_keeps_exact_matches():
    candidates = [_north_of_center(1, 0), _north_of_center(2, 1)]
    results = query_activities(candidates, ActivityQuery(center=CENTER, radius_m=0))
    assert [a.id for a in results] == [1]


@pytest.mark.parametrize("raw,expected", [
    ("1500", 1500.0),
    (" 48.85 ", 48.85),
    (2, 2.0),
    (None, None),
    ("", None),
    ("abc", None),
    ("nan", None),
    ("inf", None),
    (True, None),
])
def test_parse_float(raw, expected):
    assert parse_float(raw) == expected


def test_from_params_needs_both_coordinates():
    assert ActivityQuery.from_params(lat="48.85").center is None
    assert ActivityQuery.from_params(lat="48.85", lng="oops").center is None
    assert ActivityQuery.from_params(lat="48.85", lng="2.35").center == GeoPoint(48.85, 2.35)


def test_from_params_ignores_malformed_radius_and_blank_category():
    query = ActivityQuery.from_params(category="  ", lat="1", lng="2", radius="-5")
    assert query.category is None
    assert query.radius_m is None
    assert ActivityQuery.from_params(radius="far").radius_m is None
    assert ActivityQuery.from_params(category=" parc ").category == "parc"


def test_antipodal_candidate_within_half_circumference():
    center = GeoPoint(80.05814743531747, -75.23459307653654)
    antipode = ActivitySummary(
        id=1, name="antipode", latitude=-center.lat, longitude=center.lng + 180, category="bar",
    )
    results = query_activities([antipode], ActivityQuery(center=center, radius_m=EARTH_RADIUS_M * math.pi + 1))
    assert [a.id for a in results] == [1]
