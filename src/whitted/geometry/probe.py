"""Diagnostic shape that records how it was probed.

``ProbeShape`` never reports intersections. It keeps the last local-space ray
it received and how many times it was asked, which lets tests observe object
transforms and group pruning from the outside. It is the one mutable shape and
is not meant for rendering.
"""

from __future__ import annotations

from src.whitted.core.intersection import Intersection, IntersectionCollector
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Point, Vector
from src.whitted.geometry.bounds import BoundingBox


class ProbeShape:
    """Test double with plain inspectable fields.

    Attributes:
        last_ray: Local-space ray from the most recent intersection call.
        calls: Number of intersection calls received.
    """

    def __init__(self) -> None:
        self.last_ray: Ray | None = None
        self.calls = 0

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        self.last_ray = ray
        self.calls += 1

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        return Vector(point.x, point.y, point.z)

    def bounds(self) -> BoundingBox:
        return BoundingBox(Point(-1.0, -1.0, -1.0), Point(1.0, 1.0, 1.0))
