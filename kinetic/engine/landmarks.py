"""
Landmark frame model for the exercise engine.

A frame is the 33-point MediaPipe Pose output for one camera image, in
normalized image coordinates (x, y in 0-1, y increasing downward). The
engine never estimates landmarks itself; frames arrive from the pose
collaborator already extracted.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np

from kinetic.engine.errors import DegenerateGeometryError, MissingLandmarkError


class LandmarkId(IntEnum):
    """MediaPipe Pose landmark indices."""
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32

    @classmethod
    def parse(cls, key: Union[int, str, "LandmarkId"]) -> "LandmarkId":
        """Resolve an index, enum member or name such as ``"left_knee"``."""
        if isinstance(key, cls):
            return key
        if isinstance(key, int):
            return cls(key)
        name = str(key).strip().upper().replace("-", "_").replace(" ", "_")
        if name.isdigit():
            return cls(int(name))
        return cls[name]


@dataclass
class Landmark:
    """Single landmark with normalized position and detection confidence."""
    x: float  # Normalized x coordinate (0-1)
    y: float  # Normalized y coordinate (0-1)
    z: float = 0.0  # Relative depth, not used for thresholds
    visibility: float = 1.0  # Confidence score (0-1)

    @property
    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite([self.x, self.y, self.visibility])))

    def to_array(self) -> np.ndarray:
        """Planar position as numpy array [x, y]."""
        return np.array([self.x, self.y], dtype=float)

    @classmethod
    def from_value(cls, value: Any) -> "Landmark":
        """Build from a mapping, a sequence ``(x, y[, z[, visibility]])`` or an object."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(
                x=float(value["x"]),
                y=float(value["y"]),
                z=float(value.get("z", 0.0)),
                visibility=float(value.get("visibility", 1.0)),
            )
        if isinstance(value, Sequence) and not isinstance(value, str):
            coords = [float(v) for v in value]
            if len(coords) < 2:
                raise ValueError("Landmark needs at least x and y")
            z = coords[2] if len(coords) > 2 else 0.0
            visibility = coords[3] if len(coords) > 3 else 1.0
            return cls(x=coords[0], y=coords[1], z=z, visibility=visibility)
        # Duck-typed MediaPipe NormalizedLandmark
        return cls(
            x=float(value.x),
            y=float(value.y),
            z=float(getattr(value, "z", 0.0)),
            visibility=float(getattr(value, "visibility", 1.0)),
        )


@dataclass
class LandmarkFrame:
    """
    One frame of pose landmarks.

    Landmarks that the pose model did not report are simply absent.
    ``timestamp`` is informational; the engine keeps time with its own clock.
    """
    landmarks: Dict[LandmarkId, Landmark] = field(default_factory=dict)
    timestamp: Optional[float] = None

    @classmethod
    def from_sequence(
        cls,
        points: Iterable[Any],
        timestamp: Optional[float] = None,
    ) -> "LandmarkFrame":
        """Create from a list in MediaPipe order; ``None`` entries are skipped."""
        landmarks: Dict[LandmarkId, Landmark] = {}
        for idx, point in enumerate(points):
            if point is None or idx >= len(LandmarkId):
                continue
            landmarks[LandmarkId(idx)] = Landmark.from_value(point)
        return cls(landmarks=landmarks, timestamp=timestamp)

    @classmethod
    def from_mapping(
        cls,
        points: Mapping[Any, Any],
        timestamp: Optional[float] = None,
    ) -> "LandmarkFrame":
        """Create from a mapping keyed by index or landmark name."""
        landmarks = {
            LandmarkId.parse(key): Landmark.from_value(point)
            for key, point in points.items()
            if point is not None
        }
        return cls(landmarks=landmarks, timestamp=timestamp)

    def get(self, landmark_id: LandmarkId) -> Optional[Landmark]:
        return self.landmarks.get(landmark_id)

    def __contains__(self, landmark_id: LandmarkId) -> bool:
        return landmark_id in self.landmarks

    def __len__(self) -> int:
        return len(self.landmarks)

    def require(
        self,
        ids: Iterable[LandmarkId],
        min_visibility: float = 0.0,
    ) -> List[Landmark]:
        """
        Return the requested landmarks in order.

        Raises:
            MissingLandmarkError: naming every id that is absent or whose
                visibility is below ``min_visibility``.
            DegenerateGeometryError: if a requested landmark has a NaN or
                infinite coordinate or visibility.
        """
        found: List[Landmark] = []
        missing: List[str] = []
        for landmark_id in ids:
            landmark = self.landmarks.get(landmark_id)
            if landmark is not None and not landmark.is_finite:
                raise DegenerateGeometryError(f"Non-finite landmark: {landmark_id.name.lower()}")
            if landmark is None or landmark.visibility < min_visibility:
                missing.append(landmark_id.name.lower())
                continue
            found.append(landmark)

        if missing:
            raise MissingLandmarkError(missing)
        return found

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "timestamp": self.timestamp,
            "landmarks": [
                {
                    "id": int(landmark_id),
                    "name": landmark_id.name.lower(),
                    "x": lm.x,
                    "y": lm.y,
                    "z": lm.z,
                    "visibility": lm.visibility,
                }
                for landmark_id, lm in sorted(self.landmarks.items())
            ],
        }
