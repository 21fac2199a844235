"""Exceptions raised by the exercise engine."""

from typing import Iterable, List


class EngineError(Exception):
    """Base class for engine errors."""


class FrameRejectedError(EngineError):
    """A frame cannot be processed and must be skipped without side effects."""


class MissingLandmarkError(FrameRejectedError):
    """One or more required landmarks are absent or below usable confidence."""

    def __init__(self, missing: Iterable[str]):
        self.missing: List[str] = list(missing)
        super().__init__(f"Missing or low-confidence landmarks: {', '.join(self.missing)}")


class DegenerateGeometryError(FrameRejectedError):
    """Coincident points make an angle undefined."""


class UnsupportedExerciseError(EngineError, ValueError):
    """The exercise name is not one the engine knows about."""


class SessionFinishedError(EngineError):
    """The session has been finished and accepts no more frames or commands."""
