"""Axis-aligned bounding boxes.

An empty box has its minimum at +inf and maximum at -inf on every axis, so
adding points and taking unions only ever grows it.

Example:
    >>> from src.whitted.core.tuples import Point
    >>> from src.whitted.geometry.bounds import BoundingBox
    >>> box = BoundingBox.empty()
    >>> box.add_point(Point(-5.0, 2.0, 0.0))
    >>> box.add_point(Point(7.0, 0.0, -3.0))
    >>> box.min, box.max
    (Point(-5.0, 0.0, -3.0), Point(7.0, 2.0, 0.0))
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from src.whitted.core.tuples import Point, approx_eq

if TYPE_CHECKING:
    from src.whitted.core.matrix import Matrix
    from src.whitted.core.ray import Ray

INF = math.inf


def check_axis(origin: float, direction: float, lo: float, hi: float) -> tuple[float, float]:
    """Entry and exit distances of a ray against one pair of slab planes.

    A ray parallel to the slabs either stays between them forever or never
    enters; it never divides by zero.
    """
    if direction == 0.0:
        if lo <= origin <= hi:
            return -INF, INF
        return INF, -INF

    tmin = (lo - origin) / direction
    tmax = (hi - origin) / direction
    if tmin > tmax:
        return tmax, tmin
    return tmin, tmax


def slab_interval(ray: Ray, lo: Point, hi: Point) -> tuple[float, float]:
    """Widest entry and narrowest exit of ``ray`` across the three slabs."""
    o, d = ray.origin, ray.direction
    xmin, xmax = check_axis(o.x, d.x, lo.x, hi.x)
    ymin, ymax = check_axis(o.y, d.y, lo.y, hi.y)
    zmin, zmax = check_axis(o.z, d.z, lo.z, hi.z)
    return max(xmin, ymin, zmin), min(xmax, ymax, zmax)


class BoundingBox:
    """A mutable axis-aligned box that only grows.

    Attributes:
        min: Corner with the smallest coordinates.
        max: Corner with the largest coordinates.
    """

    __slots__ = ("min", "max")

    def __init__(self, minimum: Point, maximum: Point) -> None:
        self.min = minimum
        self.max = maximum

    @classmethod
    def empty(cls) -> BoundingBox:
        return cls(Point(INF, INF, INF), Point(-INF, -INF, -INF))

    @classmethod
    def infinite(cls) -> BoundingBox:
        return cls(Point(-INF, -INF, -INF), Point(INF, INF, INF))

    def __repr__(self) -> str:
        return f"BoundingBox({self.min!r}, {self.max!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.min == other.min and self.max == other.max

    __hash__ = None

    def __add__(self, other: BoundingBox) -> BoundingBox:
        union = BoundingBox(self.min, self.max)
        union.add_point(other.min)
        union.add_point(other.max)
        return union

    def is_empty(self) -> bool:
        return self.min.x > self.max.x or self.min.y > self.max.y or self.min.z > self.max.z

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in (*self.min, *self.max))

    def add_point(self, point: Point) -> None:
        self.min = Point(min(self.min.x, point.x), min(self.min.y, point.y), min(self.min.z, point.z))
        self.max = Point(max(self.max.x, point.x), max(self.max.y, point.y), max(self.max.z, point.z))

    def contains_point(self, point: Point) -> bool:
        return (
            self.min.x <= point.x <= self.max.x
            and self.min.y <= point.y <= self.max.y
            and self.min.z <= point.z <= self.max.z
        )

    def contains_box(self, other: BoundingBox) -> bool:
        return self.contains_point(other.min) and self.contains_point(other.max)

    def corners(self) -> list[Point]:
        lo, hi = self.min, self.max
        return [
            Point(x, y, z)
            for x in (lo.x, hi.x)
            for y in (lo.y, hi.y)
            for z in (lo.z, hi.z)
        ]

    def transform(self, matrix: Matrix) -> BoundingBox:
        """Box enclosing the eight transformed corners.

        Empty boxes stay empty. A box with an infinite extent becomes fully
        infinite, since a rotation can spread that extent onto any axis.
        """
        if self.is_empty():
            return BoundingBox.empty()
        if not self.is_finite():
            return BoundingBox.infinite()

        box = BoundingBox.empty()
        for corner in self.corners():
            box.add_point(matrix * corner)
        return box

    def is_intersected(self, ray: Ray) -> bool:
        """Slab test of ``ray`` against the box."""
        if self.is_empty():
            return False
        tmin, tmax = slab_interval(ray, self.min, self.max)
        if tmax < 0.0:
            return False
        return tmin <= tmax

    def split(self) -> tuple[BoundingBox, BoundingBox]:
        """Bisect the box at the midpoint of its longest axis.

        Returns:
            ``(left, right)`` boxes whose union is this box.
        """
        dx = self.max.x - self.min.x
        dy = self.max.y - self.min.y
        dz = self.max.z - self.min.z
        greatest = max(dx, dy, dz)

        x0, y0, z0 = self.min.x, self.min.y, self.min.z
        x1, y1, z1 = self.max.x, self.max.y, self.max.z

        if approx_eq(greatest, dx):
            x0 = x1 = x0 + dx / 2.0
        elif approx_eq(greatest, dy):
            y0 = y1 = y0 + dy / 2.0
        else:
            z0 = z1 = z0 + dz / 2.0

        left = BoundingBox(self.min, Point(x1, y1, z1))
        right = BoundingBox(Point(x0, y0, z0), self.max)
        return left, right
