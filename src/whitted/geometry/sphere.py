"""Unit sphere primitive.

The sphere is centred at the local origin with radius 1; placement and size
come from the owning object's transform. Roots use the numerically robust form
of the quadratic formula, which avoids cancellation when ``b^2`` is close to
``4ac``.

Example:
    >>> from src.whitted.core.intersection import IntersectionCollector
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.tuples import Point, Vector
    >>> from src.whitted.geometry.sphere import Sphere
    >>> collector = IntersectionCollector()
    >>> Sphere().local_intersect(Ray(Point(0, 0, -5), Vector(0, 0, 1)), collector)
    >>> [i.t for i in collector.entries]
    [4.0, 6.0]
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.whitted.core.intersection import Intersection, IntersectionCollector
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Point, Vector
from src.whitted.geometry.bounds import BoundingBox


def solve_quadratic(a: float, b: float, c: float) -> tuple[float, float] | None:
    """Solve ``a t^2 + b t + c = 0`` for real roots.

    Args:
        a: Quadratic coefficient, must be non-zero.
        b: Linear coefficient.
        c: Constant term.

    Returns:
        ``(t0, t1)`` with ``t0 <= t1``, or None when the discriminant is
        negative. A tangent ray yields a repeated root.
    """
    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return None

    q = -0.5 * (b + math.copysign(math.sqrt(discriminant), b))
    if q == 0.0:
        # b and the discriminant are both zero, so c is zero as well
        return 0.0, 0.0

    t0 = q / a
    t1 = c / q
    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


@dataclass(frozen=True)
class Sphere:
    """Unit sphere centred at the origin."""

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        o, d = ray.origin, ray.direction
        a = d.dot(d)
        if a == 0.0:
            return
        b = 2.0 * (d.x * o.x + d.y * o.y + d.z * o.z)
        c = o.x * o.x + o.y * o.y + o.z * o.z - 1.0

        roots = solve_quadratic(a, b, c)
        if roots is None:
            return
        collector.push(roots[0])
        collector.push(roots[1])

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        return Vector(point.x, point.y, point.z)

    def bounds(self) -> BoundingBox:
        return BoundingBox(Point(-1.0, -1.0, -1.0), Point(1.0, 1.0, 1.0))
