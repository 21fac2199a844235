"""
Camera orientation classification.

A subject turned sideways presents a collapsed shoulder span in the 2-D
projection. The span threshold is a tuned constant, not derived from camera
calibration.
"""

from enum import Enum
from typing import Dict

from kinetic.engine.geometry import horizontal_distance
from kinetic.engine.landmarks import Landmark, LandmarkId

DEFAULT_LATERAL_SPAN = 0.15


class Orientation(Enum):
    """Subject orientation relative to the camera."""
    FRONTAL = "frontal"
    LATERAL = "lateral"


class Side(Enum):
    """Body side used for lateral measurements."""
    LEFT = "left"
    RIGHT = "right"


# Landmarks measured on the camera-facing side in lateral view
_LATERAL_CHAIN: Dict[Side, Dict[str, LandmarkId]] = {
    Side.LEFT: {
        "ear": LandmarkId.LEFT_EAR,
        "shoulder": LandmarkId.LEFT_SHOULDER,
        "hip": LandmarkId.LEFT_HIP,
        "knee": LandmarkId.LEFT_KNEE,
        "ankle": LandmarkId.LEFT_ANKLE,
    },
    Side.RIGHT: {
        "ear": LandmarkId.RIGHT_EAR,
        "shoulder": LandmarkId.RIGHT_SHOULDER,
        "hip": LandmarkId.RIGHT_HIP,
        "knee": LandmarkId.RIGHT_KNEE,
        "ankle": LandmarkId.RIGHT_ANKLE,
    },
}


def shoulder_span(left_shoulder: Landmark, right_shoulder: Landmark) -> float:
    return horizontal_distance(left_shoulder, right_shoulder)


def classify_orientation(
    left_shoulder: Landmark,
    right_shoulder: Landmark,
    threshold: float = DEFAULT_LATERAL_SPAN,
) -> Orientation:
    """LATERAL when the shoulder span is below ``threshold``, else FRONTAL."""
    if shoulder_span(left_shoulder, right_shoulder) < threshold:
        return Orientation.LATERAL
    return Orientation.FRONTAL


def select_visible_side(left_shoulder: Landmark, right_shoulder: Landmark) -> Side:
    """Pick the side facing the camera; ties go to the right side."""
    if left_shoulder.visibility > right_shoulder.visibility:
        return Side.LEFT
    return Side.RIGHT


def lateral_chain(side: Side) -> Dict[str, LandmarkId]:
    """Landmark ids for ear, shoulder, hip, knee and ankle on ``side``."""
    return dict(_LATERAL_CHAIN[side])
