"""Normalized 2D geometry shared by the parsers and vision adapters.

All coordinates are in [0, 1] with the origin at the top-left corner and y
growing downward.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def angle(self) -> float:
        """Direction of this vector in radians, measured from the +x axis."""
        return math.atan2(self.y, self.x)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> Point:
        return Point(self.mid_x, self.mid_y)

    @property
    def area(self) -> float:
        return self.width * self.height

    def union(self, other: Rect) -> Rect:
        min_x = min(self.min_x, other.min_x)
        min_y = min(self.min_y, other.min_y)
        max_x = max(self.max_x, other.max_x)
        max_y = max(self.max_y, other.max_y)
        return Rect(min_x, min_y, max_x - min_x, max_y - min_y)

    def scaled(self, factor: float) -> Rect:
        """Grow (or shrink) around the center by ``factor``."""
        width = self.width * factor
        height = self.height * factor
        return Rect(self.mid_x - width / 2, self.mid_y - height / 2, width, height)

    def clamped(self) -> Rect:
        """Clip to the unit square.

        A rect already inside the square is returned as is, so its width and
        height are not recomputed from the edges.
        """
        x, width = _clamp_span(self.x, self.width)
        y, height = _clamp_span(self.y, self.height)
        if (x, y, width, height) == (self.x, self.y, self.width, self.height):
            return self
        return Rect(x, y, width, height)

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.width, self.height]

    @classmethod
    def from_list(cls, values: list[float] | tuple[float, ...]) -> Rect:
        x, y, width, height = (float(v) for v in values)
        return cls(x, y, width, height)


def _clamp_span(start: float, length: float) -> tuple[float, float]:
    """Clip one axis to [0, 1]; spans inside the range pass through untouched."""
    end = start + length
    if start >= 0.0 and end <= 1.0:
        return start, length
    low = max(0.0, start)
    high = min(1.0, end)
    return low, max(0.0, high - low)
