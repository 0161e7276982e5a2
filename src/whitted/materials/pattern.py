"""Spatial color functions sampled by materials.

A pattern is one of a fixed set of kinds, dispatched on :class:`PatternKind`.
Patterns are sampled in their own local space: the world point is first
brought into the object's space, then into the pattern's, so a pattern moves
with its object and can be transformed independently.

Example:
    >>> from src.whitted.core.color import Color
    >>> from src.whitted.core.tuples import Point
    >>> from src.whitted.materials.pattern import Pattern
    >>> stripes = Pattern.stripe(Color(1, 1, 1), Color(0, 0, 0)).scale(0.5, 1, 1)
    >>> stripes.pattern_at(Point(0.75, 0, 0))
    Color(0.0, 0.0, 0.0)
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import TYPE_CHECKING, Sequence

from src.whitted.core.color import WHITE, Color
from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.transform import Transformable
from src.whitted.core.tuples import Point, approx_eq

if TYPE_CHECKING:
    from src.whitted.scene.object import SceneObject


class PatternKind(IntEnum):
    """Enumeration of supported pattern kinds."""

    PLAIN = 0
    STRIPE = 1
    RING = 2
    GRADIENT = 3
    CHECKER = 4
    TEST = 5


class Pattern(Transformable):
    """A transformable color function.

    Prefer the named constructors (:meth:`plain`, :meth:`stripe`, ...).

    Args:
        kind: Which color function to evaluate.
        colors: Colors used by the function; their meaning depends on ``kind``.
        transform: Pattern-space transform.

    Raises:
        ValueError: If ``colors`` does not suit ``kind``.
        NonInvertibleMatrixError: If ``transform`` is singular.
    """

    def __init__(
        self, kind: PatternKind, colors: Sequence[Color] = (), transform: Matrix = IDENTITY
    ) -> None:
        colors = tuple(colors)
        if kind in (PatternKind.STRIPE, PatternKind.RING) and not colors:
            raise ValueError(f"{kind.name.lower()} pattern needs at least one color")
        if kind in (PatternKind.GRADIENT, PatternKind.CHECKER) and len(colors) != 2:
            raise ValueError(f"{kind.name.lower()} pattern needs exactly two colors, got {len(colors)}")
        if kind == PatternKind.PLAIN and len(colors) != 1:
            raise ValueError(f"plain pattern needs exactly one color, got {len(colors)}")

        self.kind = kind
        self.colors = colors
        self.transform = transform
        self.inverse = transform.inverse()

    # -------------------------------------------------------------------------
    # Named constructors
    # -------------------------------------------------------------------------

    @classmethod
    def plain(cls, color: Color = WHITE) -> Pattern:
        return cls(PatternKind.PLAIN, (color,))

    @classmethod
    def stripe(cls, *colors: Color) -> Pattern:
        """Stripes alternating along x, one band per color."""
        return cls(PatternKind.STRIPE, colors)

    @classmethod
    def ring(cls, *colors: Color) -> Pattern:
        """Concentric rings around the y axis, one band per color."""
        return cls(PatternKind.RING, colors)

    @classmethod
    def gradient(cls, start: Color, end: Color) -> Pattern:
        """Linear blend from ``start`` at x=0 to ``end`` at x=1."""
        return cls(PatternKind.GRADIENT, (start, end))

    @classmethod
    def checker(cls, first: Color, second: Color) -> Pattern:
        """3D checkerboard of unit cubes."""
        return cls(PatternKind.CHECKER, (first, second))

    @classmethod
    def test(cls) -> Pattern:
        """Returns the pattern-space point as a color, for tests."""
        return cls(PatternKind.TEST)

    # -------------------------------------------------------------------------

    def transformed(self, matrix: Matrix) -> Pattern:
        return Pattern(self.kind, self.colors, matrix * self.transform)

    def pattern_at(self, point: Point) -> Color:
        """Evaluate the pattern at a point already in pattern space."""
        kind = self.kind
        colors = self.colors

        if kind == PatternKind.PLAIN:
            return colors[0]
        if kind == PatternKind.STRIPE:
            index = abs(math.floor(point.x * len(colors))) % len(colors)
            return colors[index]
        if kind == PatternKind.RING:
            index = math.floor(math.sqrt(point.x * point.x + point.z * point.z)) % len(colors)
            return colors[index]
        if kind == PatternKind.GRADIENT:
            start, end = colors
            return start + (end - start) * point.x
        if kind == PatternKind.CHECKER:
            total = math.floor(point.x) + math.floor(point.y) + math.floor(point.z)
            return colors[0] if approx_eq(total % 2, 0.0) else colors[1]
        return Color(point.x, point.y, point.z)

    def pattern_at_object(self, obj: SceneObject, world_point: Point) -> Color:
        """Evaluate the pattern at a world point on ``obj``."""
        object_point = obj.inverse * world_point
        return self.pattern_at(self.inverse * object_point)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.colors == other.colors
            and self.transform == other.transform
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Pattern({self.kind.name}, colors={list(self.colors)!r})"
