"""Pydantic schemas for API request/response models."""

from kinetic.schemas.session import (
    ExerciseSelect,
    ExerciseInfo,
    LandmarkIn,
    FrameIn,
    FrameResultResponse,
    SessionStatusResponse,
    SessionSummaryResponse,
)

__all__ = [
    "ExerciseSelect",
    "ExerciseInfo",
    "LandmarkIn",
    "FrameIn",
    "FrameResultResponse",
    "SessionStatusResponse",
    "SessionSummaryResponse",
]
