"""Axis-aligned cube spanning -1..1 on every local axis."""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.intersection import Intersection, IntersectionCollector
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Point, Vector
from src.whitted.geometry.bounds import BoundingBox, slab_interval

_MIN = Point(-1.0, -1.0, -1.0)
_MAX = Point(1.0, 1.0, 1.0)


@dataclass(frozen=True)
class Cube:
    """Unit cube intersected with the slab method."""

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        tmin, tmax = slab_interval(ray, _MIN, _MAX)
        if tmin <= tmax and tmax >= 0.0:
            collector.push(tmin)
            collector.push(tmax)

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        """Normal of the face whose axis has the largest absolute coordinate."""
        ax, ay, az = abs(point.x), abs(point.y), abs(point.z)
        maxc = max(ax, ay, az)
        if maxc == ax:
            return Vector(point.x, 0.0, 0.0)
        if maxc == ay:
            return Vector(0.0, point.y, 0.0)
        return Vector(0.0, 0.0, point.z)

    def bounds(self) -> BoundingBox:
        return BoundingBox(_MIN, _MAX)
