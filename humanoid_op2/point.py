"""Points in the plane and in space."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

_Number = (int, float)


@dataclass(frozen=True)
class Point2D:
    """A point in two dimensions."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def distance(self, other: Point2D) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def __add__(self, other: Point2D | float) -> Point2D:
        if isinstance(other, Point2D):
            return Point2D(self.x + other.x, self.y + other.y)
        if isinstance(other, _Number):
            return Point2D(self.x + other, self.y + other)
        return NotImplemented

    def __sub__(self, other: Point2D | float) -> Point2D:
        if isinstance(other, Point2D):
            return Point2D(self.x - other.x, self.y - other.y)
        if isinstance(other, _Number):
            return Point2D(self.x - other, self.y - other)
        return NotImplemented

    def __mul__(self, value: float) -> Point2D:
        if isinstance(value, _Number):
            return Point2D(self.x * value, self.y * value)
        return NotImplemented

    def __truediv__(self, value: float) -> Point2D:
        if isinstance(value, _Number):
            return Point2D(self.x / value, self.y / value)
        return NotImplemented


@dataclass(frozen=True)
class Point3D:
    """A point in three dimensions."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def distance(self, other: Point3D) -> float:
        """Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def __add__(self, other: Point3D | float) -> Point3D:
        if isinstance(other, Point3D):
            return Point3D(self.x + other.x, self.y + other.y, self.z + other.z)
        if isinstance(other, _Number):
            return Point3D(self.x + other, self.y + other, self.z + other)
        return NotImplemented

    def __sub__(self, other: Point3D | float) -> Point3D:
        if isinstance(other, Point3D):
            return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, _Number):
            return Point3D(self.x - other, self.y - other, self.z - other)
        return NotImplemented

    def __mul__(self, value: float) -> Point3D:
        if isinstance(value, _Number):
            return Point3D(self.x * value, self.y * value, self.z * value)
        return NotImplemented

    def __truediv__(self, value: float) -> Point3D:
        if isinstance(value, _Number):
            return Point3D(self.x / value, self.y / value, self.z / value)
        return NotImplemented