"""Linear RGB colors.

Colors are unclamped floats; clamping and quantisation happen only at export
time (see ``src.whitted.preview.export``).
"""

from __future__ import annotations

from src.whitted.core.tuples import EPSILON, approx_eq


class Color:
    """An RGB triple supporting the arithmetic used by the shading model."""

    __slots__ = ("r", "g", "b")

    def __init__(self, r: float, g: float, b: float) -> None:
        object.__setattr__(self, "r", float(r))
        object.__setattr__(self, "g", float(g))
        object.__setattr__(self, "b", float(b))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Color is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Color is immutable")

    def __add__(self, other: Color) -> Color:
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other: Color) -> Color:
        return Color(self.r - other.r, self.g - other.g, self.b - other.b)

    def __mul__(self, other: Color | float) -> Color:
        # Color * Color is the Hadamard (componentwise) product
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b)
        return Color(self.r * other, self.g * other, self.b * other)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Color:
        return Color(self.r / scalar, self.g / scalar, self.b / scalar)

    def __iter__(self):
        yield self.r
        yield self.g
        yield self.b

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self.r == other.r and self.g == other.g and self.b == other.b

    def __hash__(self) -> int:
        return hash((self.r, self.g, self.b))

    def __repr__(self) -> str:
        return f"Color({self.r}, {self.g}, {self.b})"

    def __reduce__(self):
        return (Color, (self.r, self.g, self.b))

    def isclose(self, other: Color, epsilon: float = EPSILON) -> bool:
        return (
            approx_eq(self.r, other.r, epsilon)
            and approx_eq(self.g, other.g, epsilon)
            and approx_eq(self.b, other.b, epsilon)
        )

    @classmethod
    def black(cls) -> Color:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def white(cls) -> Color:
        return cls(1.0, 1.0, 1.0)


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
