"""Infinite plane primitive lying in the local x-z plane (y = 0)."""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.whitted.core.intersection import Intersection, IntersectionCollector
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import EPSILON, Point, Vector
from src.whitted.geometry.bounds import BoundingBox

_UP = Vector(0.0, 1.0, 0.0)


@dataclass(frozen=True)
class Plane:
    """The x-z plane; normal is +y everywhere."""

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        # Parallel or coplanar rays never hit
        if abs(ray.direction.y) < EPSILON:
            return
        collector.push(-ray.origin.y / ray.direction.y)

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        return _UP

    def bounds(self) -> BoundingBox:
        return BoundingBox(Point(-math.inf, 0.0, -math.inf), Point(math.inf, 0.0, math.inf))
