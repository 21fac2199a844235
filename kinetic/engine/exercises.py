"""Exercise catalogue and state-machine family selection."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from kinetic.engine.errors import UnsupportedExerciseError


class ExerciseFamily(Enum):
    """How an exercise is scored."""
    CYCLIC = "cyclic"            # Repetitions counted from a joint angle
    HOLD = "hold"                # Seconds of sustained correct posture
    PASSTHROUGH = "passthrough"  # Metric only, no phase or credit


class Exercise(Enum):
    """Exercises offered for selection. Values are display names."""
    SQUATS = "Squats"
    PUSHUPS = "Pushups"
    BURPEES = "Burpees"
    LUNGES = "Lunges"
    TRICEPS_DIP = "Triceps Dip"
    PLANK = "Plank"
    MOUNTAIN_CLIMBER = "Mountain Climber"
    STRETCHES = "Stretches"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def family(self) -> ExerciseFamily:
        return _FAMILIES.get(self, ExerciseFamily.PASSTHROUGH)

    @classmethod
    def parse(cls, name: Union[str, "Exercise"]) -> "Exercise":
        """
        Resolve a display name, enum name or slug case-insensitively.

        Raises:
            UnsupportedExerciseError: if ``name`` matches no exercise.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("_", " ").replace("-", " ")
        for exercise in cls:
            if key in (exercise.value.lower(), exercise.name.lower().replace("_", " ")):
                return exercise
        raise UnsupportedExerciseError(
            f"Unsupported exercise: {name!r}. Must be one of: {cls.all()}"
        )

    @classmethod
    def all(cls) -> List[str]:
        return [exercise.value for exercise in cls]


_FAMILIES = {
    Exercise.SQUATS: ExerciseFamily.CYCLIC,
    Exercise.PLANK: ExerciseFamily.HOLD,
}


@dataclass(frozen=True)
class UnlistedExercise:
    """
    An exercise outside the catalogue.

    It has no modeled phases, so it is tracked as passthrough under the
    name the client supplied.
    """
    display_name: str

    @property
    def family(self) -> ExerciseFamily:
        return ExerciseFamily.PASSTHROUGH


AnyExercise = Union[Exercise, UnlistedExercise]


def resolve_exercise(name: Union[str, Exercise, UnlistedExercise]) -> AnyExercise:
    """
    Resolve a catalogue exercise, falling back to passthrough tracking.

    Raises:
        UnsupportedExerciseError: if ``name`` is blank.
    """
    if isinstance(name, (Exercise, UnlistedExercise)):
        return name
    try:
        return Exercise.parse(name)
    except UnsupportedExerciseError:
        display_name = str(name).strip()
        if not display_name:
            raise
        return UnlistedExercise(display_name)
