"""Core math and data types.

Components:
    tuples: Points and vectors with type-checked arithmetic
    color: RGB colors
    matrix: 4x4 matrices backed by NumPy
    transform: Transform constructors and the chainable Transformable mixin
    ray: Rays and their transformation
    intersection: Intersections, hit selection and shading state
    canvas: The render target
"""

from .canvas import Canvas
from .color import BLACK, WHITE, Color
from .intersection import (
    Intersection,
    IntersectionCollector,
    Intersections,
    IntersectionState,
    RenderStats,
)
from .matrix import IDENTITY, Matrix, NonInvertibleMatrixError
from .ray import Ray
from .transform import (
    Transformable,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    translation,
    view_transform,
)
from .tuples import EPSILON, LOW_EPSILON, Point, Tuple, Vector, approx_eq

__all__ = [
    # Tuples
    "EPSILON",
    "LOW_EPSILON",
    "approx_eq",
    "Tuple",
    "Point",
    "Vector",
    # Colors and canvas
    "Color",
    "BLACK",
    "WHITE",
    "Canvas",
    # Matrices and transforms
    "Matrix",
    "IDENTITY",
    "NonInvertibleMatrixError",
    "Transformable",
    "translation",
    "scaling",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "shearing",
    "view_transform",
    # Rays and intersections
    "Ray",
    "Intersection",
    "IntersectionCollector",
    "Intersections",
    "IntersectionState",
    "RenderStats",
]
