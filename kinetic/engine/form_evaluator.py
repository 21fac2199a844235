"""
Per-frame form quality checks.

Each check inspects one structural relationship and either passes or
produces a fault message. Only the first failing check for the current
exercise/orientation combination is surfaced.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from kinetic.config import Settings, get_settings
from kinetic.engine.exercises import AnyExercise, Exercise
from kinetic.engine.geometry import horizontal_distance, vertical_distance
from kinetic.engine.landmarks import LandmarkFrame, LandmarkId
from kinetic.engine.orientation import Orientation, Side, lateral_chain

logger = logging.getLogger(__name__)

HEAD_FORWARD = "Head forward detected."
KNEE_VALGUS = "Knee valgus detected."
SHOULDERS_UNLEVEL = "Keep shoulders level."


@dataclass(frozen=True)
class FormCheck:
    """Outcome of form evaluation for one frame."""
    is_bad_form: bool
    message: str = ""

    @classmethod
    def ok(cls) -> "FormCheck":
        return cls(is_bad_form=False, message="")

    @classmethod
    def fault(cls, message: str) -> "FormCheck":
        return cls(is_bad_form=True, message=message)


Check = Callable[[LandmarkFrame], Optional[str]]


class FormQualityEvaluator:
    """
    Rule-based form checks.

    Lateral view (any exercise):
    - Head forward: ear ahead of shoulder by more than ``head_forward_offset``

    Frontal view:
    - Squats: knee separation narrower than ``knee_valgus_ratio`` x hip separation
    - Plank: shoulder height difference of ``shoulder_level_slope`` or more
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def evaluate(
        self,
        frame: LandmarkFrame,
        exercise: AnyExercise,
        orientation: Orientation,
        side: Side = Side.RIGHT,
    ) -> FormCheck:
        """Run the checks for this combination; the first fault wins."""
        for check in self._checks_for(exercise, orientation, side):
            message = check(frame)
            if message:
                return FormCheck.fault(message)
        return FormCheck.ok()

    def _checks_for(
        self,
        exercise: AnyExercise,
        orientation: Orientation,
        side: Side,
    ) -> List[Check]:
        if orientation == Orientation.LATERAL:
            return [lambda frame: self.check_head_posture(frame, side)]

        if exercise == Exercise.SQUATS:
            return [self.check_knee_alignment]
        if exercise == Exercise.PLANK:
            return [self.check_shoulder_level]
        return []

    # -------------------------------------------------------------------------
    # Individual checks
    # -------------------------------------------------------------------------

    def check_head_posture(self, frame: LandmarkFrame, side: Side) -> Optional[str]:
        chain = lateral_chain(side)
        ear, shoulder = frame.require([chain["ear"], chain["shoulder"]])
        offset = horizontal_distance(ear, shoulder)
        if offset > self.settings.head_forward_offset:
            logger.debug(f"Head forward: offset={offset:.3f}")
            return HEAD_FORWARD
        return None

    def check_knee_alignment(self, frame: LandmarkFrame) -> Optional[str]:
        left_hip, right_hip, left_knee, right_knee = frame.require([
            LandmarkId.LEFT_HIP,
            LandmarkId.RIGHT_HIP,
            LandmarkId.LEFT_KNEE,
            LandmarkId.RIGHT_KNEE,
        ])
        hip_sep = horizontal_distance(left_hip, right_hip)
        knee_sep = horizontal_distance(left_knee, right_knee)
        if knee_sep < hip_sep * self.settings.knee_valgus_ratio:
            logger.debug(f"Knee valgus: knee_sep={knee_sep:.3f}, hip_sep={hip_sep:.3f}")
            return KNEE_VALGUS
        return None

    def check_shoulder_level(self, frame: LandmarkFrame) -> Optional[str]:
        left_shoulder, right_shoulder = frame.require([
            LandmarkId.LEFT_SHOULDER,
            LandmarkId.RIGHT_SHOULDER,
        ])
        if vertical_distance(left_shoulder, right_shoulder) >= self.settings.shoulder_level_slope:
            return SHOULDERS_UNLEVEL
        return None
