"""Shared fixtures and synthetic pose builders."""

import math
from typing import Dict, List, Optional

import pytest

from kinetic.config import Settings
from kinetic.engine import Landmark, LandmarkFrame, LandmarkId


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


# Frontal standing pose: shoulders 0.20 apart, hips and knees 0.16 apart
_BASE_POSE: Dict[LandmarkId, Landmark] = {
    LandmarkId.NOSE: Landmark(0.50, 0.15),
    LandmarkId.LEFT_EAR: Landmark(0.46, 0.16),
    LandmarkId.RIGHT_EAR: Landmark(0.54, 0.16),
    LandmarkId.LEFT_SHOULDER: Landmark(0.40, 0.30),
    LandmarkId.RIGHT_SHOULDER: Landmark(0.60, 0.30),
    LandmarkId.LEFT_ELBOW: Landmark(0.38, 0.42),
    LandmarkId.RIGHT_ELBOW: Landmark(0.62, 0.42),
    LandmarkId.LEFT_WRIST: Landmark(0.37, 0.52),
    LandmarkId.RIGHT_WRIST: Landmark(0.63, 0.52),
    LandmarkId.LEFT_HIP: Landmark(0.42, 0.55),
    LandmarkId.RIGHT_HIP: Landmark(0.58, 0.55),
    LandmarkId.LEFT_KNEE: Landmark(0.42, 0.72),
    LandmarkId.RIGHT_KNEE: Landmark(0.58, 0.72),
    LandmarkId.LEFT_ANKLE: Landmark(0.42, 0.90),
    LandmarkId.RIGHT_ANKLE: Landmark(0.58, 0.90),
}

THIGH_LENGTH = 0.17


def build_frame(visibility: float = 0.95, **overrides: Optional[Landmark]) -> LandmarkFrame:
    """
    Full 33-point frame based on a frontal standing pose.

    Keyword overrides use lowercase landmark names; ``None`` removes the point.
    """
    landmarks = {}
    for landmark_id in LandmarkId:
        base = _BASE_POSE.get(landmark_id, Landmark(0.5, 0.5))
        landmarks[landmark_id] = Landmark(base.x, base.y, 0.0, visibility)

    for name, value in overrides.items():
        landmark_id = LandmarkId.parse(name)
        if value is None:
            landmarks.pop(landmark_id, None)
        else:
            landmarks[landmark_id] = value

    return LandmarkFrame(landmarks=landmarks)


def hip_for_angle(knee: Landmark, angle: float, visibility: float = 0.95) -> Landmark:
    """Hip position giving ``angle`` at the knee when the ankle is straight below it."""
    radians = math.radians(angle)
    return Landmark(
        knee.x + THIGH_LENGTH * math.sin(radians),
        knee.y + THIGH_LENGTH * math.cos(radians),
        0.0,
        visibility,
    )


def squat_frame(angle: float, **overrides: Optional[Landmark]) -> LandmarkFrame:
    """Frontal squat frame whose left hip-knee-ankle angle is ``angle``."""
    left_knee = _BASE_POSE[LandmarkId.LEFT_KNEE]
    right_knee = _BASE_POSE[LandmarkId.RIGHT_KNEE]
    params = {
        "left_hip": hip_for_angle(left_knee, angle),
        "right_hip": hip_for_angle(right_knee, angle),
    }
    params.update(overrides)
    return build_frame(**params)


def plank_frame(slope: float, **overrides: Optional[Landmark]) -> LandmarkFrame:
    """Frontal frame with a shoulder height difference of ``slope``."""
    params = {
        "left_shoulder": Landmark(0.40, 0.30, 0.0, 0.95),
        "right_shoulder": Landmark(0.60, 0.30 + slope, 0.0, 0.95),
    }
    params.update(overrides)
    return build_frame(**params)


def lateral_frame(
    ear_offset: float = 0.02,
    knee_angle: Optional[float] = None,
    **overrides: Optional[Landmark],
) -> LandmarkFrame:
    """Side-on frame with the left side facing the camera."""
    knee = Landmark(0.52, 0.72, 0.0, 0.95)
    params = {
        "left_shoulder": Landmark(0.50, 0.30, 0.0, 0.95),
        "right_shoulder": Landmark(0.53, 0.31, 0.0, 0.30),
        "left_ear": Landmark(0.50 + ear_offset, 0.18, 0.0, 0.95),
        "left_hip": Landmark(0.50, 0.55, 0.0, 0.95),
        "left_knee": knee,
        "left_ankle": Landmark(0.52, 0.90, 0.0, 0.95),
    }
    if knee_angle is not None:
        params["left_hip"] = hip_for_angle(knee, knee_angle)
    params.update(overrides)
    return build_frame(**params)


def frame_payload(frame: LandmarkFrame) -> List[Optional[dict]]:
    """API body ``landmarks`` list in MediaPipe order."""
    points = []
    for landmark_id in LandmarkId:
        lm = frame.get(landmark_id)
        points.append(
            None if lm is None
            else {"x": lm.x, "y": lm.y, "z": lm.z, "visibility": lm.visibility}
        )
    return points


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
