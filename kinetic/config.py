"""Application configuration."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Kinetic Rehab Engine"
    debug: bool = False
    api_prefix: str = "/api"
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    max_active_sessions: int = 100

    # Landmark validation
    min_landmark_visibility: float = 0.5  # Below this a required landmark is unusable

    # Orientation
    lateral_shoulder_span: float = 0.15  # Shoulder span below this = side-on to camera

    # Form fault thresholds
    head_forward_offset: float = 0.08  # Ear ahead of shoulder (normalized width)
    knee_valgus_ratio: float = 0.75  # Knee separation vs. hip separation
    shoulder_level_slope: float = 0.15  # Shoulder height difference (normalized height)

    # Squat state machine (hip-knee-ankle angle, degrees)
    squat_descend_below: float = 160.0
    squat_bottom_below: float = 140.0
    squat_abort_above: float = 170.0
    squat_rise_above: float = 140.0
    squat_stand_above: float = 165.0
    squat_fall_back_below: float = 130.0

    # Hold timer
    hold_tick_seconds: float = 1.0

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
