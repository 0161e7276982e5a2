"""Scene objects: a shape bound to a material, a transform and a shadow flag.

Objects are immutable once created. Transform helpers and ``with_*`` methods
return new objects, so an object can be shared freely between groups, worlds
and worker processes.

Example:
    >>> from src.whitted.geometry.sphere import Sphere
    >>> from src.whitted.materials.material import Material
    >>> from src.whitted.scene.object import SceneObject
    >>> ball = SceneObject(Sphere(), Material(reflective=0.5)).scale(2, 2, 2).translate(0, 2, 0)
    >>> ball.bounding_box()
    BoundingBox(Point(-2.0, 0.0, -2.0), Point(2.0, 4.0, 2.0))
"""

from __future__ import annotations

from typing import Union

from src.whitted.core.intersection import Intersection, IntersectionCollector, Intersections
from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.ray import Ray
from src.whitted.core.transform import Transformable
from src.whitted.core.tuples import Point, Vector
from src.whitted.geometry.bounds import BoundingBox
from src.whitted.geometry.cube import Cube
from src.whitted.geometry.cylinder import Cone, Cylinder
from src.whitted.geometry.group import Group
from src.whitted.geometry.plane import Plane
from src.whitted.geometry.probe import ProbeShape
from src.whitted.geometry.sphere import Sphere
from src.whitted.geometry.triangle import SmoothTriangle, Triangle
from src.whitted.materials.material import Material

# The closed set of shapes an object may hold
Shape = Union[Sphere, Plane, Cube, Cylinder, Cone, Triangle, SmoothTriangle, Group, ProbeShape]
SHAPE_TYPES = (Sphere, Plane, Cube, Cylinder, Cone, Triangle, SmoothTriangle, Group, ProbeShape)

_DEFAULT_MATERIAL = Material()


class SceneObject(Transformable):
    """A placed, shaded shape.

    Args:
        shape: One of :data:`SHAPE_TYPES`.
        material: Surface material (default :class:`Material`).
        transform: Object-to-world transform. Must be identity for groups,
            whose transforms are resolved into their children.
        has_shadow: Whether the object blocks shadow rays.

    Raises:
        TypeError: If ``shape`` is not a supported shape.
        ValueError: If a group is given a non-identity transform.
        NonInvertibleMatrixError: If ``transform`` is singular.
    """

    __slots__ = (
        "shape",
        "material",
        "transform",
        "inverse",
        "inverse_transpose",
        "has_shadow",
        "_bounding_box",
    )

    def __init__(
        self,
        shape: Shape,
        material: Material | None = None,
        transform: Matrix = IDENTITY,
        has_shadow: bool = True,
    ) -> None:
        if not isinstance(shape, SHAPE_TYPES):
            raise TypeError(f"Unsupported shape type: {type(shape).__name__}")
        if isinstance(shape, Group) and transform != IDENTITY:
            raise ValueError("Group transforms must be resolved with GroupBuilder")

        self.shape = shape
        self.material = material if material is not None else _DEFAULT_MATERIAL
        self.transform = transform
        self.inverse = transform.inverse()
        self.inverse_transpose = self.inverse.transpose()
        self.has_shadow = has_shadow
        self._bounding_box = shape.bounds().transform(transform)

    def __repr__(self) -> str:
        return f"SceneObject({type(self.shape).__name__}, has_shadow={self.has_shadow})"

    def is_group(self) -> bool:
        return isinstance(self.shape, Group)

    # -------------------------------------------------------------------------
    # Derived objects
    # -------------------------------------------------------------------------

    def transformed(self, matrix: Matrix) -> SceneObject:
        """Left-multiply ``matrix`` onto the transform.

        For groups the matrix is pushed down onto every descendant instead.
        """
        if self.is_group():
            children = tuple(child.transformed(matrix) for child in self.shape.children)
            return SceneObject(Group(children))
        return SceneObject(self.shape, self.material, matrix * self.transform, self.has_shadow)

    def with_material(self, material: Material) -> SceneObject:
        if self.is_group():
            children = tuple(child.with_material(material) for child in self.shape.children)
            return SceneObject(Group(children))
        return SceneObject(self.shape, material, self.transform, self.has_shadow)

    def with_shadow(self, has_shadow: bool) -> SceneObject:
        if self.is_group():
            children = tuple(child.with_shadow(has_shadow) for child in self.shape.children)
            return SceneObject(Group(children))
        return SceneObject(self.shape, self.material, self.transform, has_shadow)

    def divide(self, threshold: int) -> SceneObject:
        """Subdivide groups into nested bounding volumes; leaves are returned as is."""
        if self.is_group():
            return SceneObject(self.shape.divide(threshold))
        return self

    # -------------------------------------------------------------------------
    # Geometry queries
    # -------------------------------------------------------------------------

    def intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        """Push this object's intersections with a world-space ray."""
        collector.tests += 1
        shape = self.shape
        if type(shape) is Group:
            shape.local_intersect(ray, collector)
            return
        collector.target = self
        shape.local_intersect(ray.transform(self.inverse), collector)

    def intersects(self, ray: Ray) -> Intersections:
        """Sorted intersections with a world-space ray."""
        collector = IntersectionCollector()
        self.intersect(ray, collector)
        return collector.intersections()

    def normal_at(self, world_point: Point, hit: Intersection | None = None) -> Vector:
        """World-space unit normal at a point on the surface.

        Args:
            world_point: Point on the object's surface.
            hit: The intersection being shaded; smooth triangles read its (u, v).
        """
        local_point = self.inverse * world_point
        local_normal = self.shape.local_normal_at(local_point, hit)
        return (self.inverse_transpose * local_normal).normalize()

    def bounding_box(self) -> BoundingBox:
        """World-space bounding box."""
        return self._bounding_box
