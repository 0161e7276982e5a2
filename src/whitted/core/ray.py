"""Ray data structure.

A ray is an origin point plus a direction vector. Directions are not required
to be unit length: transforming a ray into an object's local frame scales the
direction, and intersection distances are reported in that scaled parameter,
which is what keeps ``t`` comparable across objects.

Example:
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.tuples import Point, Vector
    >>> ray = Ray(Point(2.0, 3.0, 4.0), Vector(1.0, 0.0, 0.0))
    >>> ray.position(2.5)
    Point(4.5, 3.0, 4.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.matrix import Matrix
from src.whitted.core.tuples import Point, Vector


@dataclass(frozen=True)
class Ray:
    """A parametric ray ``origin + t * direction``.

    Attributes:
        origin: Starting point.
        direction: Direction vector.
    """

    origin: Point
    direction: Vector

    def position(self, t: float) -> Point:
        return self.origin + self.direction * t

    def transform(self, matrix: Matrix) -> Ray:
        """Return the ray with both origin and direction multiplied by ``matrix``."""
        return Ray(matrix * self.origin, matrix * self.direction)
