import math
import random

import pytest

from drivestate.core.geo import (
    EARTH_RADIUS_METERS,
    MILES_TO_METERS,
    Coordinate,
    angle_difference,
    bearing_to,
    distance_in_miles,
    haversine_distance,
    is_within_cone,
    normalize_angle,
    offset_position,
    relative_bearing,
)


def _random_points(n: int, seed: int = 7) -> list[Coordinate]:
    rng = random.Random(seed)
    return [Coordinate(lat=rng.uniform(-80, 80), lng=rng.uniform(-180, 180)) for _ in range(n)]


def test_haversine_is_symmetric():
    pts = _random_points(40)
    for a, b in zip(pts, reversed(pts)):
        assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a), rel=1e-6, abs=1e-6)


def test_haversine_zero_for_coincident_points():
    p = Coordinate(lat=39.0, lng=-94.0)
    assert haversine_distance(p, p) == 0


def test_distance_in_miles_uses_fixed_conversion():
    a = Coordinate(lat=39.0, lng=-94.0)
    b = Coordinate(lat=39.0, lng=-93.9)
    assert distance_in_miles(a, b) == haversine_distance(a, b) / 1609.34
    assert distance_in_miles(a, b) == pytest.approx(5.37, abs=0.05)


def test_bearing_cardinal_directions_on_equator():
    origin = Coordinate(lat=0.0, lng=0.0)
    assert bearing_to(origin, Coordinate(lat=1.0, lng=0.0)) == pytest.approx(0.0)
    assert bearing_to(origin, Coordinate(lat=0.0, lng=1.0)) == pytest.approx(90.0)
    assert bearing_to(origin, Coordinate(lat=-1.0, lng=0.0)) == pytest.approx(180.0)
    assert bearing_to(origin, Coordinate(lat=0.0, lng=-1.0)) == pytest.approx(270.0)


def test_bearing_always_in_range():
    pts = _random_points(60, seed=11)
    for a, b in zip(pts, pts[1:]):
        assert 0 <= bearing_to(a, b) < 360


def test_normalize_angle_handles_negative_and_large_inputs():
    assert normalize_angle(-90) == 270
    assert normalize_angle(720) == 0
    assert normalize_angle(-1e-20) == 0
    assert normalize_angle(359.5) == 359.5


def test_angle_difference_wraps_around():
    assert angle_difference(350, 10) == pytest.approx(20)
    assert angle_difference(10, 350) == pytest.approx(20)
    assert angle_difference(-10, 370) == pytest.approx(20)
    assert angle_difference(0, 180) == pytest.approx(180)


def test_relative_bearing_sign_and_range():
    assert relative_bearing(90, 100) == pytest.approx(10)
    assert relative_bearing(90, 80) == pytest.approx(-10)
    assert relative_bearing(350, 10) == pytest.approx(20)
    # Directly behind is +180, never -180.
    assert relative_bearing(180, 0) == 180
    assert relative_bearing(0, 180) == 180

    rng = random.Random(3)
    for _ in range(500):
        r = relative_bearing(rng.uniform(-720, 720), rng.uniform(-720, 720))
        assert -180 < r <= 180


def test_cone_of_360_degrees_depends_only_on_distance():
    origin = Coordinate(lat=39.0, lng=-94.0)
    near = Coordinate(lat=39.0, lng=-94.1)
    far = Coordinate(lat=40.0, lng=-94.1)
    max_m = 20 * MILES_TO_METERS
    for heading in range(0, 360, 45):
        assert is_within_cone(origin, heading, near, max_m, 360) is True
        assert is_within_cone(origin, heading, far, max_m, 360) is False


def test_cone_edges():
    origin = Coordinate(lat=0.0, lng=0.0)
    east = Coordinate(lat=0.0, lng=0.1)
    max_m = 50_000
    assert is_within_cone(origin, 90, east, max_m, 10) is True
    assert is_within_cone(origin, 40, east, max_m, 100) is True
    assert is_within_cone(origin, 39, east, max_m, 100) is False
    assert is_within_cone(origin, 270, east, max_m, 90) is False


def test_cone_range_boundary_is_inclusive():
    origin = Coordinate(lat=39.0, lng=-94.0)
    target = Coordinate(lat=39.1, lng=-94.05)
    d = haversine_distance(origin, target)
    assert is_within_cone(origin, 0, target, d, 360) is True
    assert is_within_cone(origin, 0, target, math.nextafter(d, 0), 360) is False


@pytest.mark.parametrize(
    "a,b",
    [
        (Coordinate(lat=39.0, lng=-94.0), Coordinate(lat=39.3, lng=-93.6)),
        (Coordinate(lat=-33.9, lng=151.2), Coordinate(lat=-37.8, lng=144.9)),
        (Coordinate(lat=10.0, lng=179.5), Coordinate(lat=10.2, lng=-179.5)),
        (Coordinate(lat=60.0, lng=5.0), Coordinate(lat=59.0, lng=4.0)),
    ],
)
def test_offset_position_inverts_bearing_and_distance(a, b):
    landed = offset_position(a, bearing_to(a, b), haversine_distance(a, b))
    assert haversine_distance(landed, b) < 1e-3
    assert -180 <= landed.lng < 180


def test_offset_position_moves_north():
    origin = Coordinate(lat=0.0, lng=0.0)
    one_degree = EARTH_RADIUS_METERS * math.radians(1)
    landed = offset_position(origin, 0, one_degree)
    assert landed.lat == pytest.approx(1.0)
    assert landed.lng == pytest.approx(0.0, abs=1e-9)


def test_extreme_coordinates_do_not_raise():
    north_pole = Coordinate(lat=90.0, lng=0.0)
    south_pole = Coordinate(lat=-90.0, lng=0.0)
    assert haversine_distance(north_pole, south_pole) == pytest.approx(math.pi * EARTH_RADIUS_METERS)
    assert 0 <= bearing_to(north_pole, Coordinate(lat=80.0, lng=45.0)) < 360

    odd = haversine_distance(Coordinate(lat=100.0, lng=0.0), Coordinate(lat=-100.0, lng=10.0))
    assert math.isfinite(odd)
    offset_position(north_pole, 45, 1000)


def test_non_finite_coordinates_yield_nan_not_errors():
    origin = Coordinate(lat=39.0, lng=-94.0)
    for bad in (Coordinate(lat=math.nan, lng=-94.0), Coordinate(lat=39.0, lng=math.inf)):
        assert math.isnan(haversine_distance(origin, bad))
        assert math.isnan(bearing_to(origin, bad))
        assert is_within_cone(origin, 0, bad, 1e9, 360) is False
