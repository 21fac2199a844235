from kinetic.engine import Landmark, Orientation, Side, classify_orientation, select_visible_side
from kinetic.engine.landmarks import LandmarkId
from kinetic.engine.orientation import lateral_chain


def test_wide_shoulders_are_frontal():
    left, right = Landmark(0.40, 0.3), Landmark(0.60, 0.3)
    assert classify_orientation(left, right) == Orientation.FRONTAL


def test_collapsed_shoulders_are_lateral():
    left, right = Landmark(0.50, 0.3), Landmark(0.56, 0.3)
    assert classify_orientation(left, right) == Orientation.LATERAL


def test_threshold_boundary_is_frontal():
    left, right = Landmark(0.25, 0.3), Landmark(0.50, 0.3)
    assert classify_orientation(left, right, threshold=0.25) == Orientation.FRONTAL
    assert classify_orientation(left, right, threshold=0.26) == Orientation.LATERAL


def test_more_visible_side_is_selected():
    left = Landmark(0.5, 0.3, visibility=0.9)
    right = Landmark(0.52, 0.3, visibility=0.2)
    assert select_visible_side(left, right) == Side.LEFT
    assert select_visible_side(right, left) == Side.RIGHT


def test_visibility_tie_uses_right_side():
    left = Landmark(0.5, 0.3, visibility=0.7)
    right = Landmark(0.52, 0.3, visibility=0.7)
    assert select_visible_side(left, right) == Side.RIGHT


def test_lateral_chain_matches_side():
    chain = lateral_chain(Side.RIGHT)
    assert chain["ear"] == LandmarkId.RIGHT_EAR
    assert chain["ankle"] == LandmarkId.RIGHT_ANKLE
    assert lateral_chain(Side.LEFT)["knee"] == LandmarkId.LEFT_KNEE
