"""
Exercise Phase State Machines

One state machine per exercise family, all sharing the same contract:

- ``phase`` / ``initial_phase``: current and starting phase
- ``advance(...)``: consume this frame's metric, return a PhaseUpdate
- ``reset()``: return to the initial phase

FAMILIES:
1. Cyclic (squats): Standing → Descending → Bottom → Ascending → Standing,
   driven by the hip-knee-ankle angle with asymmetric thresholds.
2. Hold (plank): Holding / Resting, driven by a structural alignment check,
   crediting at most one second of hold per wall-clock second.
3. Passthrough: every other exercise. Metric only, no phase changes.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from kinetic.config import Settings, get_settings
from kinetic.engine.exercises import AnyExercise, ExerciseFamily, resolve_exercise

logger = logging.getLogger(__name__)


class CyclicPhase(Enum):
    """Phases of a repetition-counted movement."""
    STANDING = "STANDING"
    DESCENDING = "DESCENDING"
    BOTTOM = "BOTTOM"
    ASCENDING = "ASCENDING"


class HoldPhase(Enum):
    """Phases of a static-hold exercise."""
    HOLDING = "HOLDING"
    RESTING = "REST"


class PassthroughPhase(Enum):
    """Single phase for exercises without a modeled state machine."""
    TRACKING = "TRACKING"


Phase = Union[CyclicPhase, HoldPhase, PassthroughPhase]


@dataclass(frozen=True)
class PhaseUpdate:
    """Result of advancing a state machine by one frame."""
    phase: Phase
    previous_phase: Phase
    rep_completed: bool = False
    hold_tick: bool = False

    @property
    def changed(self) -> bool:
        return self.phase != self.previous_phase


# =============================================================================
# Cyclic family
# =============================================================================

class SquatStateMachine:
    """
    Squat repetition state machine.

    | From       | Condition    | To                              |
    |------------|--------------|---------------------------------|
    | STANDING   | angle < 160  | DESCENDING                      |
    | DESCENDING | angle < 140  | BOTTOM                          |
    | DESCENDING | angle > 170  | STANDING (aborted, no count)    |
    | BOTTOM     | angle > 140  | ASCENDING                       |
    | ASCENDING  | angle > 165  | STANDING + 1 rep                |
    | ASCENDING  | angle < 130  | BOTTOM (failed rise, no count)  |

    The gaps between thresholds are dead-bands that keep the phase from
    flickering when the angle sits near a boundary.
    """

    family = ExerciseFamily.CYCLIC
    initial_phase = CyclicPhase.STANDING

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.descend_below = settings.squat_descend_below
        self.bottom_below = settings.squat_bottom_below
        self.abort_above = settings.squat_abort_above
        self.rise_above = settings.squat_rise_above
        self.stand_above = settings.squat_stand_above
        self.fall_back_below = settings.squat_fall_back_below

        self.phase: CyclicPhase = self.initial_phase

    def advance(self, angle: float) -> PhaseUpdate:
        """Advance by one frame's joint angle."""
        previous = self.phase
        next_phase = previous
        rep_completed = False

        if previous == CyclicPhase.STANDING:
            if angle < self.descend_below:
                next_phase = CyclicPhase.DESCENDING

        elif previous == CyclicPhase.DESCENDING:
            if angle < self.bottom_below:
                next_phase = CyclicPhase.BOTTOM
            elif angle > self.abort_above:
                next_phase = CyclicPhase.STANDING
                logger.info(f"Descent aborted at {angle}°, no rep")

        elif previous == CyclicPhase.BOTTOM:
            if angle > self.rise_above:
                next_phase = CyclicPhase.ASCENDING

        elif previous == CyclicPhase.ASCENDING:
            if angle > self.stand_above:
                next_phase = CyclicPhase.STANDING
                rep_completed = True
            elif angle < self.fall_back_below:
                next_phase = CyclicPhase.BOTTOM

        if next_phase != previous:
            logger.info(f"{previous.value} → {next_phase.value} (angle={angle}°)"
                        + (", rep completed" if rep_completed else ""))
            self.phase = next_phase

        return PhaseUpdate(
            phase=self.phase,
            previous_phase=previous,
            rep_completed=rep_completed,
        )

    def reset(self):
        self.phase = self.initial_phase


# =============================================================================
# Hold family
# =============================================================================

class HoldStateMachine:
    """
    Static-hold state machine.

    HOLDING while the alignment metric is acceptable, RESTING otherwise.
    Entering HOLDING anchors the tick clock; while HOLDING, one hold second
    is credited each time ``tick_seconds`` of wall-clock time has passed
    since the last credit. Frame rate has no effect on the credited time.
    """

    family = ExerciseFamily.HOLD
    initial_phase = HoldPhase.RESTING

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.tick_seconds = settings.hold_tick_seconds

        self.phase: HoldPhase = self.initial_phase
        self._last_tick: Optional[float] = None

    def advance(self, form_ok: bool, now: float) -> PhaseUpdate:
        """Advance by one frame's alignment verdict at clock time ``now``."""
        previous = self.phase
        hold_tick = False

        if form_ok:
            if previous != HoldPhase.HOLDING:
                self.phase = HoldPhase.HOLDING
                self._last_tick = now
            elif self._last_tick is not None and now - self._last_tick >= self.tick_seconds:
                self._last_tick = now
                hold_tick = True
        else:
            self.phase = HoldPhase.RESTING
            self._last_tick = None

        if self.phase != previous:
            logger.info(f"{previous.value} → {self.phase.value}")

        return PhaseUpdate(
            phase=self.phase,
            previous_phase=previous,
            hold_tick=hold_tick,
        )

    def reset(self):
        self.phase = self.initial_phase
        self._last_tick = None


# =============================================================================
# Passthrough
# =============================================================================

class PassthroughStateMachine:
    """Explicit no-op machine for exercises without modeled phases."""

    family = ExerciseFamily.PASSTHROUGH
    initial_phase = PassthroughPhase.TRACKING

    def __init__(self, settings: Optional[Settings] = None):
        self.phase: PassthroughPhase = self.initial_phase

    def advance(self, *args, **kwargs) -> PhaseUpdate:
        return PhaseUpdate(phase=self.phase, previous_phase=self.phase)

    def reset(self):
        self.phase = self.initial_phase


StateMachine = Union[SquatStateMachine, HoldStateMachine, PassthroughStateMachine]


def create_state_machine(
    exercise: Union[str, AnyExercise],
    settings: Optional[Settings] = None,
) -> StateMachine:
    """
    Factory function to create the state machine for an exercise.

    Args:
        exercise: Exercise or its name; unlisted names get the passthrough machine
        settings: Threshold configuration (uses global settings if None)

    Returns:
        Fresh state machine in its family's initial phase
    """
    exercise = resolve_exercise(exercise)
    family = exercise.family

    if family == ExerciseFamily.CYCLIC:
        machine: StateMachine = SquatStateMachine(settings)
    elif family == ExerciseFamily.HOLD:
        machine = HoldStateMachine(settings)
    else:
        machine = PassthroughStateMachine(settings)

    logger.info(f"State machine for {exercise.display_name}: {family.value}")
    return machine
