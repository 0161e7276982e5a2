"""Cylinder and double-napped cone primitives around the local y axis.

Both shapes are truncated to ``minimum < y < maximum`` (infinite by default)
and may be closed with end caps. The cylinder has radius 1; the cone's radius
at height ``y`` is ``|y|``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.whitted.core.intersection import Intersection, IntersectionCollector
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import EPSILON, Point, Vector, approx_eq
from src.whitted.geometry.bounds import BoundingBox
from src.whitted.geometry.sphere import solve_quadratic


def _intersect_caps(
    ray: Ray,
    collector: IntersectionCollector,
    minimum: float,
    maximum: float,
    radius_at,
) -> None:
    """Push hits on the two end caps.

    ``radius_at(y)`` gives the cap radius at height ``y``.
    """
    o, d = ray.origin, ray.direction
    if approx_eq(d.y, 0.0):
        return

    for y in (minimum, maximum):
        if math.isinf(y):
            continue
        t = (y - o.y) / d.y
        x = o.x + t * d.x
        z = o.z + t * d.z
        r = radius_at(y)
        if x * x + z * z <= r * r:
            collector.push(t)


def _push_walls(
    ray: Ray,
    collector: IntersectionCollector,
    roots: tuple[float, ...],
    minimum: float,
    maximum: float,
) -> None:
    o, d = ray.origin, ray.direction
    for t in roots:
        y = o.y + t * d.y
        if minimum < y < maximum:
            collector.push(t)


@dataclass(frozen=True)
class Cylinder:
    """Unit-radius cylinder.

    Attributes:
        minimum: Lower truncation height (exclusive).
        maximum: Upper truncation height (exclusive).
        closed: Whether the ends are capped.
    """

    minimum: float = -math.inf
    maximum: float = math.inf
    closed: bool = False

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            lo, hi = self.maximum, self.minimum
            object.__setattr__(self, "minimum", lo)
            object.__setattr__(self, "maximum", hi)

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        o, d = ray.origin, ray.direction
        a = d.x * d.x + d.z * d.z

        # Parallel to the axis: only the caps can be hit
        if not approx_eq(a, 0.0):
            b = 2.0 * (o.x * d.x + o.z * d.z)
            c = o.x * o.x + o.z * o.z - 1.0
            roots = solve_quadratic(a, b, c)
            if roots is not None:
                _push_walls(ray, collector, roots, self.minimum, self.maximum)

        if self.closed:
            _intersect_caps(ray, collector, self.minimum, self.maximum, lambda y: 1.0)

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        dist = point.x * point.x + point.z * point.z
        if dist < 1.0 and point.y >= self.maximum - EPSILON:
            return Vector(0.0, 1.0, 0.0)
        if dist < 1.0 and point.y <= self.minimum + EPSILON:
            return Vector(0.0, -1.0, 0.0)
        return Vector(point.x, 0.0, point.z)

    def bounds(self) -> BoundingBox:
        return BoundingBox(Point(-1.0, self.minimum, -1.0), Point(1.0, self.maximum, 1.0))


@dataclass(frozen=True)
class Cone:
    """Double-napped cone ``x^2 + z^2 = y^2``.

    Attributes:
        minimum: Lower truncation height (exclusive).
        maximum: Upper truncation height (exclusive).
        closed: Whether the ends are capped.
    """

    minimum: float = -math.inf
    maximum: float = math.inf
    closed: bool = False

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            lo, hi = self.maximum, self.minimum
            object.__setattr__(self, "minimum", lo)
            object.__setattr__(self, "maximum", hi)

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        o, d = ray.origin, ray.direction
        a = d.x * d.x - d.y * d.y + d.z * d.z
        b = 2.0 * (o.x * d.x - o.y * d.y + o.z * d.z)
        c = o.x * o.x - o.y * o.y + o.z * o.z

        if approx_eq(a, 0.0):
            # Ray parallel to one of the halves: the equation is linear
            if not approx_eq(b, 0.0):
                _push_walls(ray, collector, (-c / (2.0 * b),), self.minimum, self.maximum)
        else:
            roots = solve_quadratic(a, b, c)
            if roots is not None:
                _push_walls(ray, collector, roots, self.minimum, self.maximum)

        if self.closed:
            _intersect_caps(ray, collector, self.minimum, self.maximum, abs)

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        dist = point.x * point.x + point.z * point.z
        if dist < 1.0 and point.y >= self.maximum - EPSILON:
            return Vector(0.0, 1.0, 0.0)
        if dist < 1.0 and point.y <= self.minimum + EPSILON:
            return Vector(0.0, -1.0, 0.0)

        y = math.sqrt(dist)
        if point.y > 0.0:
            y = -y
        return Vector(point.x, y, point.z)

    def bounds(self) -> BoundingBox:
        limit = max(abs(self.minimum), abs(self.maximum))
        return BoundingBox(Point(-limit, self.minimum, -limit), Point(limit, self.maximum, limit))
