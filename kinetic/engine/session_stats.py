"""
Session-scoped counters and the terminal session summary.

The SessionAggregator is the only writer of SessionStats. Repetition and
hold credits decided by the state machines are applied here as well, so
all session counters live in one record.
"""

import logging
import math
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from kinetic.engine.errors import SessionFinishedError
from kinetic.engine.exercises import AnyExercise, Exercise, ExerciseFamily
from kinetic.engine.geometry import round_half_up

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class SessionStats:
    """Running counters for one exercise session."""
    good_frames: int = 0
    total_frames: int = 0
    angle_sum: float = 0.0
    angle_frame_count: int = 0  # Cyclic-family frames only
    rep_count: int = 0
    hold_seconds: int = 0
    session_start_time: float = 0.0

    @property
    def accuracy_score(self) -> int:
        """Share of good frames as a 0-100 integer; 100 before any frame."""
        if self.total_frames == 0:
            return 100
        return round_half_up(self.good_frames / self.total_frames * 100)

    @property
    def average_angle(self) -> int:
        return round_half_up(self.angle_sum / max(self.angle_frame_count, 1))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["accuracy_score"] = self.accuracy_score
        data["average_angle"] = self.average_angle
        return data


@dataclass(frozen=True)
class SessionSummary:
    """Immutable snapshot handed to the report collaborator at session end."""
    duration_seconds: int
    exercises: Tuple[str, ...]
    reps: int
    average_angle: int
    accuracy_score: int
    hold_seconds: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duration_seconds": self.duration_seconds,
            "exercises": list(self.exercises),
            "reps": self.reps,
            "average_angle": self.average_angle,
            "accuracy_score": self.accuracy_score,
            "hold_seconds": self.hold_seconds,
        }


class SessionAggregator:
    """
    Owns SessionStats for the lifetime of one session.

    Usage:
        aggregator = SessionAggregator(Exercise.SQUATS)
        aggregator.record_frame(is_good=True, angle=152)
        aggregator.record_rep()
        summary = aggregator.finish()
    """

    def __init__(self, exercise: AnyExercise, clock: Optional[Clock] = None):
        self._clock: Clock = clock or time.monotonic
        self.exercise = exercise
        self.stats = SessionStats(session_start_time=self._clock())
        self.summary: Optional[SessionSummary] = None

    @property
    def is_finished(self) -> bool:
        return self.summary is not None

    def reset(self, exercise: Optional[AnyExercise] = None):
        """Zero all counters and restart the session clock."""
        self._ensure_active()
        if exercise is not None:
            self.exercise = exercise
        self.stats = SessionStats(session_start_time=self._clock())
        logger.info(f"Session stats reset for {self.exercise.display_name}")

    def record_frame(self, is_good: bool, angle: Optional[float] = None):
        """
        Count one processed frame.

        ``angle`` is accumulated only for cyclic-family exercises and only
        when supplied.
        """
        self._ensure_active()
        self.stats.total_frames += 1
        if is_good:
            self.stats.good_frames += 1
        if angle is not None and self.exercise.family == ExerciseFamily.CYCLIC:
            self.stats.angle_sum += angle
            self.stats.angle_frame_count += 1

    def record_rep(self):
        self._ensure_active()
        self.stats.rep_count += 1

    def record_hold_tick(self):
        self._ensure_active()
        self.stats.hold_seconds += 1

    def finish(self) -> SessionSummary:
        """
        Freeze the session into a SessionSummary.

        Terminal: later calls return the same summary and any further
        recording raises SessionFinishedError.
        """
        if self.summary is not None:
            return self.summary

        stats = self.stats
        elapsed = max(0.0, self._clock() - stats.session_start_time)
        is_hold = self.exercise.family == ExerciseFamily.HOLD

        self.summary = SessionSummary(
            duration_seconds=int(math.floor(elapsed)),
            exercises=(self.exercise.display_name,),
            reps=0 if is_hold else stats.rep_count,
            average_angle=stats.average_angle,
            accuracy_score=stats.accuracy_score,
            hold_seconds=stats.hold_seconds,
        )

        logger.info(f"Session finished: {self.exercise.display_name}, "
                    f"{self.summary.duration_seconds}s, reps={self.summary.reps}, "
                    f"hold={self.summary.hold_seconds}s, accuracy={self.summary.accuracy_score}%")
        return self.summary

    def _ensure_active(self):
        if self.summary is not None:
            raise SessionFinishedError("Session already finished")
