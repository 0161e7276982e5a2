"""Flat and smooth triangle primitives.

Intersection uses the Moller-Trumbore algorithm and reports the barycentric
(u, v) of each hit, which smooth triangles use to interpolate their vertex
normals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.whitted.core.intersection import Intersection, IntersectionCollector
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import EPSILON, Point, Vector
from src.whitted.geometry.bounds import BoundingBox


@dataclass(frozen=True)
class Triangle:
    """A triangle with precomputed edges and face normal.

    Attributes:
        p1: First vertex.
        p2: Second vertex.
        p3: Third vertex.
        e1: Edge ``p2 - p1``.
        e2: Edge ``p3 - p1``.
        normal: Unit face normal.
    """

    p1: Point
    p2: Point
    p3: Point
    e1: Vector = field(init=False, repr=False)
    e2: Vector = field(init=False, repr=False)
    normal: Vector = field(init=False, repr=False)

    def __post_init__(self) -> None:
        e1 = self.p2 - self.p1
        e2 = self.p3 - self.p1
        object.__setattr__(self, "e1", e1)
        object.__setattr__(self, "e2", e2)
        object.__setattr__(self, "normal", e2.cross(e1).normalize())

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        dir_cross_e2 = ray.direction.cross(self.e2)
        det = self.e1.dot(dir_cross_e2)
        if abs(det) < EPSILON:
            return

        f = 1.0 / det
        p1_to_origin = ray.origin - self.p1
        u = f * p1_to_origin.dot(dir_cross_e2)
        if u < 0.0 or u > 1.0:
            return

        origin_cross_e1 = p1_to_origin.cross(self.e1)
        v = f * ray.direction.dot(origin_cross_e1)
        if v < 0.0 or u + v > 1.0:
            return

        collector.push_uv(f * self.e2.dot(origin_cross_e1), u, v)

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        return self.normal

    def bounds(self) -> BoundingBox:
        box = BoundingBox.empty()
        for p in (self.p1, self.p2, self.p3):
            box.add_point(p)
        return box


@dataclass(frozen=True)
class SmoothTriangle:
    """A triangle whose normal is interpolated from per-vertex normals.

    Attributes:
        triangle: Underlying flat triangle used for intersection.
        n1: Normal at ``p1``.
        n2: Normal at ``p2``.
        n3: Normal at ``p3``.
    """

    triangle: Triangle
    n1: Vector
    n2: Vector
    n3: Vector

    @classmethod
    def from_points(
        cls, p1: Point, p2: Point, p3: Point, n1: Vector, n2: Vector, n3: Vector
    ) -> SmoothTriangle:
        return cls(Triangle(p1, p2, p3), n1, n2, n3)

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        self.triangle.local_intersect(ray, collector)

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        if hit is None:
            raise ValueError("SmoothTriangle normals need the hit's (u, v)")
        return self.n2 * hit.u + self.n3 * hit.v + self.n1 * (1.0 - hit.u - hit.v)

    def bounds(self) -> BoundingBox:
        return self.triangle.bounds()
