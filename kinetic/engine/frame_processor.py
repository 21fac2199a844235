"""
Frame processing pipeline for live exercise tracking.

PIPELINE (fixed order, once per landmark frame):
1. Orientation: frontal vs. lateral from the shoulder span
2. Metric: joint angle or alignment value for the active exercise
3. Form: first failing form check, if any
4. Phase: advance the exercise's state machine
5. Stats: update the session aggregator
6. Result: read-only FrameResult for display

Steps 1-3 only read the frame. A frame that lacks a required landmark or
has degenerate geometry is rejected there, before any state is touched.

Frames must be processed in arrival order and never concurrently for the
same processor; the caller serializes delivery.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from kinetic.config import Settings, get_settings
from kinetic.engine.errors import FrameRejectedError, SessionFinishedError
from kinetic.engine.exercises import AnyExercise, Exercise, ExerciseFamily, resolve_exercise
from kinetic.engine.form_evaluator import FormCheck, FormQualityEvaluator
from kinetic.engine.geometry import angle_between, round_half_up, vertical_distance
from kinetic.engine.landmarks import LandmarkFrame, LandmarkId
from kinetic.engine.orientation import (
    Orientation,
    Side,
    classify_orientation,
    lateral_chain,
    select_visible_side,
    shoulder_span,
)
from kinetic.engine.session_stats import SessionAggregator, SessionStats, SessionSummary
from kinetic.engine.state_machines import (
    HoldStateMachine,
    Phase,
    PhaseUpdate,
    SquatStateMachine,
    StateMachine,
    create_state_machine,
)

logger = logging.getLogger(__name__)

SHOULDERS = [LandmarkId.LEFT_SHOULDER, LandmarkId.RIGHT_SHOULDER]
FRONTAL_SQUAT_LANDMARKS = [
    LandmarkId.LEFT_HIP,
    LandmarkId.RIGHT_HIP,
    LandmarkId.LEFT_KNEE,
    LandmarkId.RIGHT_KNEE,
    LandmarkId.LEFT_ANKLE,
]


@dataclass(frozen=True)
class FrameMetric:
    """Labeled per-frame value for display."""
    label: str
    value: int  # Display value (degrees, or normalized distance x 100)
    raw: float  # Unrounded magnitude


@dataclass(frozen=True)
class FrameResult:
    """Read-only snapshot of one processed frame, safe to render."""
    exercise: AnyExercise
    orientation: Orientation
    phase: Phase
    metric: FrameMetric
    is_bad_form: bool
    fault_message: str
    rep_count: int
    hold_seconds: int
    rep_completed: bool = False

    @property
    def counter(self) -> int:
        """Hold seconds for hold-family exercises, otherwise reps."""
        if self.exercise.family == ExerciseFamily.HOLD:
            return self.hold_seconds
        return self.rep_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercise": self.exercise.display_name,
            "orientation": self.orientation.value,
            "phase": self.phase.value,
            "metric_label": self.metric.label,
            "metric_value": self.metric.value,
            "is_bad_form": self.is_bad_form,
            "fault_message": self.fault_message,
            "rep_count": self.rep_count,
            "hold_seconds": self.hold_seconds,
            "rep_completed": self.rep_completed,
        }


@dataclass
class _Measurement:
    """Everything read from a frame before any state is mutated."""
    orientation: Orientation
    metric: FrameMetric
    form: FormCheck
    angle: Optional[int] = None  # Drives the cyclic machine (frontal only)
    alignment_ok: Optional[bool] = None  # Drives the hold machine (frontal only)


class FrameProcessor:
    """
    Orchestrates orientation, metrics, form checks, phase and session stats
    for one exercise session.

    Usage:
        processor = FrameProcessor("Squats")

        for frame in landmark_stream:
            result = processor.process(frame)
            if result:
                render(result)

        summary = processor.finish()
    """

    def __init__(
        self,
        exercise: Union[str, AnyExercise] = Exercise.SQUATS,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.settings = settings or get_settings()
        self._clock = clock or time.monotonic
        self.exercise = resolve_exercise(exercise)
        self.evaluator = FormQualityEvaluator(self.settings)
        self._machine: StateMachine = create_state_machine(self.exercise, self.settings)
        self.aggregator = SessionAggregator(self.exercise, clock=self._clock)
        self.frames_skipped = 0

        logger.info(f"FrameProcessor initialized: {self.exercise.display_name}")

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._machine.phase

    @property
    def stats(self) -> SessionStats:
        return self.aggregator.stats

    @property
    def is_finished(self) -> bool:
        return self.aggregator.is_finished

    def select_exercise(self, exercise: Union[str, AnyExercise]):
        """
        Switch the active exercise.
        Names outside the catalogue are tracked as passthrough.

        The state machine and all session counters are replaced together, so
        no frame can observe the new exercise with the old counters.
        """
        self._ensure_active()
        exercise = resolve_exercise(exercise)
        self._machine = create_state_machine(exercise, self.settings)
        self.exercise = exercise
        self.aggregator.reset(exercise)
        self.frames_skipped = 0
        logger.info(f"Exercise selected: {exercise.display_name}")

    def start(self):
        """Explicit session start: keep the exercise, clear phase and counters."""
        self._ensure_active()
        self._machine.reset()
        self.aggregator.reset()
        self.frames_skipped = 0

    def finish(self) -> SessionSummary:
        """End the session. No further frames are accepted afterwards."""
        return self.aggregator.finish()

    # -------------------------------------------------------------------------
    # Per-frame processing
    # -------------------------------------------------------------------------

    def process(self, frame: LandmarkFrame) -> Optional[FrameResult]:
        """
        Process one landmark frame.

        Returns:
            FrameResult, or None if the frame was rejected (missing landmark
            or degenerate geometry). Rejected frames leave phase and stats
            untouched.

        Raises:
            SessionFinishedError: if the session has been finished.
        """
        self._ensure_active()

        try:
            measurement = self._measure(frame)
        except FrameRejectedError as e:
            self.frames_skipped += 1
            logger.debug(f"Frame skipped: {e}")
            return None

        update = self._advance(measurement)

        self.aggregator.record_frame(
            is_good=not measurement.form.is_bad_form,
            angle=measurement.angle,
        )
        if update.rep_completed:
            self.aggregator.record_rep()
        if update.hold_tick:
            self.aggregator.record_hold_tick()

        stats = self.aggregator.stats
        return FrameResult(
            exercise=self.exercise,
            orientation=measurement.orientation,
            phase=update.phase,
            metric=measurement.metric,
            is_bad_form=measurement.form.is_bad_form,
            fault_message=measurement.form.message,
            rep_count=stats.rep_count,
            hold_seconds=stats.hold_seconds,
            rep_completed=update.rep_completed,
        )

    def snapshot(self) -> Dict[str, Any]:
        """Live session state for status queries."""
        return {
            "exercise": self.exercise.display_name,
            "family": self.exercise.family.value,
            "phase": self.phase.value,
            "finished": self.is_finished,
            "frames_skipped": self.frames_skipped,
            "stats": self.aggregator.stats.to_dict(),
        }

    def required_landmarks(self, orientation: Orientation, side: Side = Side.RIGHT) -> List[LandmarkId]:
        """Landmarks that must be confidently visible for this combination."""
        if orientation == Orientation.LATERAL:
            chain = lateral_chain(side)
            ids = [chain["ear"], chain["shoulder"]]
            if self.exercise.family == ExerciseFamily.CYCLIC:
                ids += [chain["hip"], chain["knee"], chain["ankle"]]
            return ids

        if self.exercise.family == ExerciseFamily.CYCLIC:
            return SHOULDERS + FRONTAL_SQUAT_LANDMARKS
        return list(SHOULDERS)

    def _measure(self, frame: LandmarkFrame) -> _Measurement:
        left_shoulder, right_shoulder = frame.require(SHOULDERS)
        span = shoulder_span(left_shoulder, right_shoulder)
        orientation = classify_orientation(
            left_shoulder, right_shoulder, self.settings.lateral_shoulder_span
        )

        if orientation == Orientation.LATERAL:
            return self._measure_lateral(frame, left_shoulder, right_shoulder, span)

        frame.require(self.required_landmarks(orientation), self.settings.min_landmark_visibility)
        family = self.exercise.family

        if family == ExerciseFamily.CYCLIC:
            hip, knee, ankle = frame.require([
                LandmarkId.LEFT_HIP, LandmarkId.LEFT_KNEE, LandmarkId.LEFT_ANKLE
            ])
            angle = angle_between(hip, knee, ankle)
            return _Measurement(
                orientation=orientation,
                metric=FrameMetric("Knee Angle", angle, float(angle)),
                form=self.evaluator.evaluate(frame, self.exercise, orientation),
                angle=angle,
            )

        if family == ExerciseFamily.HOLD:
            slope = vertical_distance(left_shoulder, right_shoulder)
            return _Measurement(
                orientation=orientation,
                metric=FrameMetric("Shoulder Level", round_half_up(slope * 100), slope),
                form=self.evaluator.evaluate(frame, self.exercise, orientation),
                alignment_ok=slope < self.settings.shoulder_level_slope,
            )

        return _Measurement(
            orientation=orientation,
            metric=FrameMetric("Tracking", 0, 0.0),
            form=FormCheck.ok(),
        )

    def _measure_lateral(self, frame, left_shoulder, right_shoulder, span) -> _Measurement:
        side = select_visible_side(left_shoulder, right_shoulder)
        frame.require(
            self.required_landmarks(Orientation.LATERAL, side),
            self.settings.min_landmark_visibility,
        )

        metric = FrameMetric("Lateral", round_half_up(span * 100), span)
        if self.exercise.family == ExerciseFamily.CYCLIC:
            chain = lateral_chain(side)
            hip, knee, ankle = frame.require([chain["hip"], chain["knee"], chain["ankle"]])
            angle = angle_between(hip, knee, ankle)
            metric = FrameMetric("Lateral", angle, float(angle))

        return _Measurement(
            orientation=Orientation.LATERAL,
            metric=metric,
            form=self.evaluator.evaluate(frame, self.exercise, Orientation.LATERAL, side),
        )

    def _advance(self, measurement: _Measurement) -> PhaseUpdate:
        """Advance the state machine; lateral frames hold the current phase."""
        machine = self._machine
        if isinstance(machine, SquatStateMachine) and measurement.angle is not None:
            return machine.advance(measurement.angle)
        if isinstance(machine, HoldStateMachine) and measurement.alignment_ok is not None:
            return machine.advance(measurement.alignment_ok, self._clock())
        return PhaseUpdate(phase=machine.phase, previous_phase=machine.phase)

    def _ensure_active(self):
        if self.aggregator.is_finished:
            raise SessionFinishedError("Session already finished")
