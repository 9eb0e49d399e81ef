"""
Unit tests for great-circle distance
"""
import math

import pytest

from poi_catalog.services.geo import EARTH_RADIUS_M, haversine_distance


def test_distance_to_self_is_zero():
    assert haversine_distance(48.8566, 2.3522, 48.8566, 2.3522) == 0.0


def test_distance_is_symmetric():
    paris = (48.8566, 2.3522)
    lyon = (45.7640, 4.8357)
    assert haversine_distance(*paris, *lyon) == pytest.approx(haversine_distance(*lyon, *paris))


def test_paris_to_lyon():
    d = haversine_distance(48.8566, 2.3522, 45.7640, 4.8357)
    assert d == pytest.approx(391_500, rel=0.01)


def test_one_degree_along_meridian():
    d = haversine_distance(0.0, 0.0, 1.0, 0.0)
    assert d == pytest.approx(EARTH_RADIUS_M * math.pi / 180)


def test_antipodes_half_circumference():
    d = haversine_distance(0.0, 0.0, 0.0, 180.0)
    assert d == pytest.approx(EARTH_RADIUS_M * math.pi)


def test_nan_propagates():
    assert math.isnan(haversine_distance(float("nan"), 0.0, 1.0, 1.0))


def test_near_antipodal_pair_does_not_raise():
    lat, lon = 80.05814743531747, -75.23459307653654
    d = haversine_distance(lat, lon, -lat, lon + 180)
    assert d == pytest.approx(EARTH_RADIUS_M * math.pi)


@pytest.mark.parametrize("lat", [-89.5, -45.123456789, 0.1, 33.3333333, 80.05814743531747])
def test_antipodes_at_any_latitude(lat):
    d = haversine_distance(lat, -75.23459307653654, -lat, 104.76540692346346)
    assert d == pytest.approx(EARTH_RADIUS_M * math.pi, rel=1e-6)
