"""Exercise session schemas."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from kinetic.engine import Exercise, LandmarkFrame, LandmarkId


class ExerciseSelect(BaseModel):
    """Schema for creating a session or switching its exercise."""
    exercise: str = Field("Squats", description=f"One of: {Exercise.all()}")


class LandmarkIn(BaseModel):
    """A single pose landmark in normalized image coordinates."""
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)
    z: float = Field(0.0, allow_inf_nan=False)
    visibility: float = Field(1.0, ge=0.0, le=1.0)


class FrameIn(BaseModel):
    """
    One pose frame in MediaPipe order.

    Undetected landmarks may be sent as null.
    """
    landmarks: List[Optional[LandmarkIn]]
    timestamp: Optional[float] = None

    @field_validator("landmarks")
    @classmethod
    def validate_length(cls, v: List[Optional[LandmarkIn]]) -> List[Optional[LandmarkIn]]:
        if len(v) > len(LandmarkId):
            raise ValueError(f"At most {len(LandmarkId)} landmarks per frame")
        return v

    def to_frame(self) -> LandmarkFrame:
        return LandmarkFrame.from_sequence(
            [lm.model_dump() if lm is not None else None for lm in self.landmarks],
            timestamp=self.timestamp,
        )


class FrameResultResponse(BaseModel):
    """Per-frame display snapshot. ``skipped`` frames carry no measurement."""
    skipped: bool = False
    exercise: str
    phase: str
    orientation: Optional[str] = None
    metric_label: Optional[str] = None
    metric_value: Optional[int] = None
    is_bad_form: bool = False
    fault_message: str = ""
    rep_count: int
    hold_seconds: int
    rep_completed: bool = False


class SessionStatusResponse(BaseModel):
    """Live session state."""
    session_id: str
    exercise: str
    family: str
    phase: str
    finished: bool
    frames_skipped: int
    stats: Dict[str, Any]


class SessionSummaryResponse(BaseModel):
    """Terminal summary handed to reporting."""
    session_id: str
    duration_seconds: int
    exercises: List[str]
    reps: int
    average_angle: int
    accuracy_score: int = Field(..., ge=0, le=100)
    hold_seconds: int


class ExerciseInfo(BaseModel):
    name: str
    family: str
