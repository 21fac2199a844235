import math

import pytest

from kinetic.engine import DegenerateGeometryError, Landmark, angle_between, horizontal_distance
from kinetic.engine.geometry import round_half_up, vertical_distance


def _point_at(degrees: float) -> Landmark:
    radians = math.radians(degrees)
    return Landmark(math.cos(radians), math.sin(radians))


ORIGIN = Landmark(0.0, 0.0)


def test_right_angle():
    assert angle_between(Landmark(1.0, 0.0), ORIGIN, Landmark(0.0, 1.0)) == 90


def test_straight_line_is_180():
    assert angle_between(Landmark(-1.0, 0.0), ORIGIN, Landmark(1.0, 0.0)) == 180


def test_bearing_difference_above_180_is_reflected():
    # Bearings -90° and 180° differ by 270°, which folds to 90°
    assert angle_between(Landmark(0.0, -1.0), ORIGIN, Landmark(-1.0, 0.0)) == 90


def test_angle_is_symmetric_in_endpoints():
    a, c = _point_at(10), _point_at(145)
    assert angle_between(a, ORIGIN, c) == angle_between(c, ORIGIN, a) == 135


@pytest.mark.parametrize("degrees, expected", [(20.4, 20), (20.6, 21), (179.6, 180)])
def test_angle_rounds_to_nearest_degree(degrees, expected):
    assert angle_between(_point_at(0), ORIGIN, _point_at(degrees)) == expected


def test_coincident_points_raise():
    with pytest.raises(DegenerateGeometryError):
        angle_between(ORIGIN, ORIGIN, Landmark(1.0, 0.0))
    with pytest.raises(DegenerateGeometryError):
        angle_between(Landmark(1.0, 0.0), ORIGIN, Landmark(0.0, 0.0))


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_non_finite_coordinates_raise(bad):
    with pytest.raises(DegenerateGeometryError):
        angle_between(Landmark(bad, 0.0), ORIGIN, Landmark(0.0, 1.0))
    with pytest.raises(DegenerateGeometryError):
        angle_between(Landmark(1.0, 0.0), Landmark(0.0, bad), Landmark(0.0, 1.0))


def test_distances_ignore_other_axis():
    a = Landmark(0.25, 0.9)
    b = Landmark(0.40, 0.1)
    assert horizontal_distance(a, b) == pytest.approx(0.15)
    assert horizontal_distance(b, a) == pytest.approx(0.15)
    assert vertical_distance(a, b) == pytest.approx(0.8)


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(66.666) == 67
    assert round_half_up(2.49) == 2
