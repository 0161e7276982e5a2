"""Homogeneous point and vector tuples.

Points carry ``w = 1`` and vectors ``w = 0``. The two are distinct classes so
that arithmetic yields the geometrically meaningful type: subtracting two
points gives a vector, adding a vector to a point gives a point, and adding
two points is rejected.

Example:
    >>> from src.whitted.core.tuples import Point, Vector
    >>> p = Point(1.0, 2.0, 3.0)
    >>> v = Vector(0.0, 1.0, 0.0)
    >>> p + v
    Point(1.0, 3.0, 3.0)
    >>> (Point(3.0, 2.0, 1.0) - p).magnitude()
    2.8284271247461903
"""

from __future__ import annotations

import math

# Library-wide tolerance for float comparisons and surface offsets
EPSILON = 1e-4
# Coarser tolerance for values accumulated over several operations
LOW_EPSILON = 1e-3


def approx_eq(a: float, b: float, epsilon: float = EPSILON) -> bool:
    """Return True if two floats agree within ``epsilon``.

    Infinities of the same sign compare equal.
    """
    if a == b:
        return True
    return abs(a - b) < epsilon


# =============================================================================
# Tuple base
# =============================================================================


class Tuple:
    """Common storage and comparison for points and vectors."""

    __slots__ = ("x", "y", "z")

    w = 0.0

    def __init__(self, x: float, y: float, z: float) -> None:
        object.__setattr__(self, "x", float(x))
        object.__setattr__(self, "y", float(y))
        object.__setattr__(self, "z", float(z))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.x, self.y, self.z))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x}, {self.y}, {self.z})"

    def __reduce__(self):
        return (type(self), (self.x, self.y, self.z))

    def isclose(self, other: Tuple, epsilon: float = EPSILON) -> bool:
        """Compare componentwise within ``epsilon``; types must match."""
        return (
            type(other) is type(self)
            and approx_eq(self.x, other.x, epsilon)
            and approx_eq(self.y, other.y, epsilon)
            and approx_eq(self.z, other.z, epsilon)
        )


# =============================================================================
# Point
# =============================================================================


class Point(Tuple):
    """A position in space (``w = 1``)."""

    __slots__ = ()

    w = 1.0

    def __add__(self, other: Vector) -> Point:
        if type(other) is Vector:
            return Point(self.x + other.x, self.y + other.y, self.z + other.z)
        if isinstance(other, Point):
            raise TypeError("cannot add two points")
        return NotImplemented

    def __sub__(self, other: Tuple) -> Tuple:
        if type(other) is Point:
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        if type(other) is Vector:
            return Point(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    @classmethod
    def origin(cls) -> Point:
        return cls(0.0, 0.0, 0.0)


# =============================================================================
# Vector
# =============================================================================


class Vector(Tuple):
    """A direction and magnitude with no position (``w = 0``)."""

    __slots__ = ()

    w = 0.0

    def __add__(self, other: Tuple) -> Tuple:
        if type(other) is Vector:
            return Vector(self.x + other.x, self.y + other.y, self.z + other.z)
        if type(other) is Point:
            return Point(self.x + other.x, self.y + other.y, self.z + other.z)
        return NotImplemented

    def __sub__(self, other: Vector) -> Vector:
        if type(other) is Vector:
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Point):
            raise TypeError("cannot subtract a point from a vector")
        return NotImplemented

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector:
        if isinstance(scalar, Tuple):
            return NotImplemented
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        return Vector(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> Vector:
        """Return the unit vector in this direction.

        A zero-length vector is returned unchanged; callers treat it as
        degenerate geometry rather than an error.
        """
        length = self.magnitude()
        if length == 0.0:
            return self
        return Vector(self.x / length, self.y / length, self.z / length)

    def reflect(self, normal: Vector) -> Vector:
        """Reflect this vector about ``normal``: ``v - n * 2(v . n)``."""
        return self - normal * (2.0 * self.dot(normal))

    @classmethod
    def zero(cls) -> Vector:
        return cls(0.0, 0.0, 0.0)
