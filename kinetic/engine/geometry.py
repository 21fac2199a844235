"""
Planar geometry helpers for joint angles and landmark spacing.

All functions work on normalized image coordinates and ignore depth.
"""

import math

import numpy as np

from kinetic.engine.errors import DegenerateGeometryError
from kinetic.engine.landmarks import Landmark

# Points closer than this are treated as coincident
COINCIDENT_EPSILON = 1e-9


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (display rounding)."""
    return int(math.floor(value + 0.5))


def angle_between(a: Landmark, b: Landmark, c: Landmark) -> int:
    """
    Angle at vertex ``b`` formed by points ``a`` and ``c``.

    Computed as the difference of the two bearings from ``b``, folded into
    [0, 180] and rounded to whole degrees.

    Raises:
        DegenerateGeometryError: if ``a`` or ``c`` coincides with ``b``, or
            any coordinate is NaN or infinite.
    """
    ba = a.to_array() - b.to_array()
    bc = c.to_array() - b.to_array()

    if not (np.all(np.isfinite(ba)) and np.all(np.isfinite(bc))):
        raise DegenerateGeometryError("Angle has a non-finite coordinate")

    if np.linalg.norm(ba) < COINCIDENT_EPSILON or np.linalg.norm(bc) < COINCIDENT_EPSILON:
        raise DegenerateGeometryError("Angle vertex coincides with an arm endpoint")

    radians = np.arctan2(bc[1], bc[0]) - np.arctan2(ba[1], ba[0])
    angle = abs(float(np.degrees(radians)))
    if not math.isfinite(angle):
        raise DegenerateGeometryError("Angle is not finite")
    if angle > 180.0:
        angle = 360.0 - angle

    return round_half_up(angle)


def horizontal_distance(a: Landmark, b: Landmark) -> float:
    """Absolute difference of normalized x coordinates."""
    return abs(a.x - b.x)


def vertical_distance(a: Landmark, b: Landmark) -> float:
    """Absolute difference of normalized y coordinates."""
    return abs(a.y - b.y)
