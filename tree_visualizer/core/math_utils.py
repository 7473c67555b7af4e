"""
Math utilities for tree layout and hit testing.

Provides:
- Vector2D: 2D point/vector operations
- slice_midpoints: equal angular slices of a sector
- stable_seed: deterministic per-node seed for jittered layouts
"""

from typing import Tuple, List
from dataclasses import dataclass
import math
import zlib


@dataclass
class Vector2D:
    """Simple 2D vector for layout calculations."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x - other.x, self.y - other.y)

    @property
    def magnitude(self) -> float:
        """Length of the vector."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: 'Vector2D') -> float:
        """Distance to another vector."""
        return (self - other).magnitude

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_angle(cls, angle_rad: float, magnitude: float = 1.0) -> 'Vector2D':
        """Create vector from angle and magnitude."""
        return cls(
            math.cos(angle_rad) * magnitude,
            math.sin(angle_rad) * magnitude
        )

    @classmethod
    def from_tuple(cls, t) -> 'Vector2D':
        """Create vector from an (x, y) pair."""
        return cls(float(t[0]), float(t[1]))


def slice_midpoints(count: int, start_angle: float, spread: float) -> List[float]:
    """
    Split a sector into equal slices and return each slice's midpoint.

    Args:
        count: Number of slices
        start_angle: Sector start in radians
        spread: Sector width in radians

    Returns:
        List of midpoint angles in radians
    """
    if count <= 0:
        return []
    step = spread / count
    return [start_angle + (i + 0.5) * step for i in range(count)]


def stable_seed(identity: str) -> int:
    """
    Deterministic seed for an identity string.

    CRC-32 of the UTF-8 bytes, so the value is the same on every platform
    and interpreter run (unlike the builtin hash()).
    """
    return zlib.crc32(identity.encode('utf-8')) & 0xFFFFFFFF
