"""
Exercise engine: frame-level geometry and exercise state machines.

PIPELINE COMPONENTS:
1. Geometry: joint angles and planar landmark distances
2. Orientation: frontal vs. lateral classification, visible-side selection
3. FormQualityEvaluator: per-frame form faults (head forward, knee valgus,
   uneven shoulders)
4. State machines: squat repetition cycle, plank hold timer, passthrough
5. SessionAggregator: session counters and the terminal SessionSummary
6. FrameProcessor: per-frame orchestration

Usage:
    from kinetic.engine import FrameProcessor, LandmarkFrame

    processor = FrameProcessor("Squats")
    for points in pose_stream:
        result = processor.process(LandmarkFrame.from_sequence(points))
        if result:
            print(result.phase.value, result.rep_count)

    summary = processor.finish()
"""

from kinetic.engine.errors import (
    EngineError,
    FrameRejectedError,
    MissingLandmarkError,
    DegenerateGeometryError,
    UnsupportedExerciseError,
    SessionFinishedError,
)
from kinetic.engine.landmarks import Landmark, LandmarkId, LandmarkFrame
from kinetic.engine.geometry import angle_between, horizontal_distance, vertical_distance
from kinetic.engine.orientation import (
    Orientation,
    Side,
    classify_orientation,
    select_visible_side,
)
from kinetic.engine.exercises import (
    AnyExercise,
    Exercise,
    ExerciseFamily,
    UnlistedExercise,
    resolve_exercise,
)
from kinetic.engine.form_evaluator import FormCheck, FormQualityEvaluator
from kinetic.engine.state_machines import (
    CyclicPhase,
    HoldPhase,
    PassthroughPhase,
    PhaseUpdate,
    SquatStateMachine,
    HoldStateMachine,
    PassthroughStateMachine,
    create_state_machine,
)
from kinetic.engine.session_stats import SessionStats, SessionSummary, SessionAggregator
from kinetic.engine.frame_processor import FrameProcessor, FrameResult, FrameMetric

__all__ = [
    # Errors
    "EngineError",
    "FrameRejectedError",
    "MissingLandmarkError",
    "DegenerateGeometryError",
    "UnsupportedExerciseError",
    "SessionFinishedError",

    # Landmarks & geometry
    "Landmark",
    "LandmarkId",
    "LandmarkFrame",
    "angle_between",
    "horizontal_distance",
    "vertical_distance",

    # Orientation
    "Orientation",
    "Side",
    "classify_orientation",
    "select_visible_side",

    # Exercises & form
    "Exercise",
    "ExerciseFamily",
    "UnlistedExercise",
    "AnyExercise",
    "resolve_exercise",
    "FormCheck",
    "FormQualityEvaluator",

    # State machines
    "CyclicPhase",
    "HoldPhase",
    "PassthroughPhase",
    "PhaseUpdate",
    "SquatStateMachine",
    "HoldStateMachine",
    "PassthroughStateMachine",
    "create_state_machine",

    # Session
    "SessionStats",
    "SessionSummary",
    "SessionAggregator",

    # Main pipeline
    "FrameProcessor",
    "FrameResult",
    "FrameMetric",
]
