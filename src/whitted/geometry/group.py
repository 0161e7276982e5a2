"""Groups of objects with bounding-box pruning.

Groups never carry a transform of their own at render time. A
:class:`GroupBuilder` describes a tree of children with per-node transforms;
building it multiplies every ancestor transform into each leaf object, so the
resulting :class:`Group` holds objects already placed in world space and
traversal never accumulates matrices.

Example:
    >>> from src.whitted.geometry.group import GroupBuilder
    >>> from src.whitted.geometry.sphere import Sphere
    >>> from src.whitted.scene.object import SceneObject
    >>> inner = GroupBuilder([SceneObject(Sphere()).translate(5, 0, 0)]).scale(2, 2, 2)
    >>> outer = GroupBuilder([inner]).rotate_y(1.5708)
    >>> group = outer.build()
    >>> leaf = group.shape.children[0].shape.children[0]
    >>> # leaf.transform == rotation_y * scaling * translation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Union

from src.whitted.core.intersection import Intersection, IntersectionCollector
from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.ray import Ray
from src.whitted.core.transform import Transformable
from src.whitted.core.tuples import Point, Vector
from src.whitted.geometry.bounds import BoundingBox

if TYPE_CHECKING:
    from src.whitted.materials.material import Material
    from src.whitted.scene.object import SceneObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Group:
    """Immutable collection of world-space children.

    Attributes:
        children: Child objects, shared rather than copied between traversals.
        bbox: Union of the children's bounding boxes.
    """

    children: tuple[SceneObject, ...] = ()
    bbox: BoundingBox = field(init=False, repr=False)

    def __post_init__(self) -> None:
        box = BoundingBox.empty()
        for child in self.children:
            box = box + child.bounding_box()
        object.__setattr__(self, "bbox", box)

    def local_intersect(self, ray: Ray, collector: IntersectionCollector) -> None:
        """Intersect children, skipping them all when the box is missed.

        ``ray`` is in world space since children carry resolved transforms.
        """
        if not self.bbox.is_intersected(ray):
            return
        for child in self.children:
            child.intersect(ray, collector)

    def local_normal_at(self, point: Point, hit: Intersection | None = None) -> Vector:
        raise TypeError("Groups have no surface; normals come from their children")

    def bounds(self) -> BoundingBox:
        return self.bbox

    def partition(self) -> tuple[list[SceneObject], list[SceneObject], list[SceneObject]]:
        """Sort children into the halves of the split bounding box.

        Returns:
            ``(left, right, remaining)``; children straddling the split stay
            in ``remaining``.
        """
        left: list[SceneObject] = []
        right: list[SceneObject] = []
        remaining: list[SceneObject] = []

        if not self.bbox.is_finite():
            return left, right, list(self.children)

        left_box, right_box = self.bbox.split()
        for child in self.children:
            if left_box.contains_box(child.bounding_box()):
                left.append(child)
            elif right_box.contains_box(child.bounding_box()):
                right.append(child)
            else:
                remaining.append(child)
        return left, right, remaining

    def divide(self, threshold: int) -> Group:
        """Recursively subdivide into nested groups of at most ``threshold``.

        Args:
            threshold: Minimum child count that triggers a split.

        Returns:
            A new group; this one is left unchanged.
        """
        from src.whitted.scene.object import SceneObject

        children = list(self.children)
        if threshold <= len(children):
            left, right, remaining = self.partition()
            # One half holds every child only when the box has no extent
            if len(left) == len(children) or len(right) == len(children):
                logger.debug("Cannot split %d coincident children", len(children))
            else:
                logger.debug(
                    "Split %d children: %d left, %d right, %d straddling",
                    len(children), len(left), len(right), len(remaining),
                )
                children = remaining
                if left:
                    children.append(SceneObject(Group(tuple(left))))
                if right:
                    children.append(SceneObject(Group(tuple(right))))

        return Group(tuple(child.divide(threshold) for child in children))


GroupChild = Union["SceneObject", "GroupBuilder"]


class GroupBuilder(Transformable):
    """Mutable description of a group tree, flattened by :meth:`build`.

    Args:
        children: Leaf objects, built groups or nested builders.
        transform: Transform applied to every descendant.
        material: If given, replaces the material of every leaf.
        has_shadow: If given, replaces the shadow flag of every leaf.
    """

    def __init__(
        self,
        children: Iterable[GroupChild] = (),
        transform: Matrix = IDENTITY,
        material: Material | None = None,
        has_shadow: bool | None = None,
    ) -> None:
        self.children: list[GroupChild] = list(children)
        self.transform = transform
        self.material = material
        self.has_shadow = has_shadow

    def add(self, child: GroupChild) -> GroupBuilder:
        self.children.append(child)
        return self

    def transformed(self, matrix: Matrix) -> GroupBuilder:
        return GroupBuilder(self.children, matrix * self.transform, self.material, self.has_shadow)

    def build(self) -> SceneObject:
        """Produce the immutable group object.

        Every leaf ends up with ``T1 * ... * Tn * own_transform`` where
        ``T1..Tn`` are the transforms of its enclosing builders, outermost
        first. Empty sub-groups are dropped.
        """
        return self._build(IDENTITY, None, None)

    def _build(
        self, accumulated: Matrix, material: Material | None, has_shadow: bool | None
    ) -> SceneObject:
        from src.whitted.scene.object import SceneObject

        matrix = accumulated * self.transform
        material = self.material if self.material is not None else material
        has_shadow = self.has_shadow if self.has_shadow is not None else has_shadow

        children: list[SceneObject] = []
        for child in self.children:
            if isinstance(child, GroupBuilder):
                built = child._build(matrix, material, has_shadow)
            else:
                built = child.transformed(matrix)
                if material is not None:
                    built = built.with_material(material)
                if has_shadow is not None:
                    built = built.with_shadow(has_shadow)

            if built.is_group() and not built.shape.children:
                continue
            children.append(built)

        return SceneObject(Group(tuple(children)))
