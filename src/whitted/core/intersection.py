"""Intersection records, sorted collections and shading frames.

Shapes never allocate result lists. They report raw roots to an
:class:`IntersectionCollector`, which stamps each root with the object being
traversed and accumulates an explicit test counter. The collected candidates
become an :class:`Intersections` collection sorted by ``t``, from which the
:class:`IntersectionState` (the shading frame used by the world) is derived.

Example:
    >>> from src.whitted.core.intersection import Intersection, Intersections
    >>> xs = Intersections([Intersection(5.0, None), Intersection(-3.0, None),
    ...                     Intersection(2.0, None)])
    >>> xs.hit().t
    2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

from src.whitted.core.tuples import EPSILON, Point, Vector

if TYPE_CHECKING:
    from src.whitted.core.ray import Ray
    from src.whitted.scene.object import SceneObject


@dataclass
class RenderStats:
    """Counters accumulated explicitly by the caller of a trace.

    Attributes:
        rays: Number of rays intersected against the world.
        intersection_tests: Number of object-level intersection tests,
            including group bounding-box tests.
    """

    rays: int = 0
    intersection_tests: int = 0

    def merge(self, other: RenderStats) -> None:
        self.rays += other.rays
        self.intersection_tests += other.intersection_tests


class Intersection:
    """A candidate hit: distance ``t`` along a ray, the object, and (u, v)."""

    __slots__ = ("t", "object", "u", "v")

    def __init__(self, t: float, obj: SceneObject | None, u: float = 0.0, v: float = 0.0) -> None:
        self.t = t
        self.object = obj
        self.u = u
        self.v = v

    def __repr__(self) -> str:
        return f"Intersection(t={self.t}, object={self.object!r}, u={self.u}, v={self.v})"


class IntersectionCollector:
    """Push-consumer passed to shapes during intersection.

    Attributes:
        target: The object whose shape is currently being intersected. Set by
            the object and group traversal before delegating to a shape.
        tests: Number of intersection tests performed through this collector.
    """

    __slots__ = ("entries", "target", "tests")

    def __init__(self) -> None:
        self.entries: list[Intersection] = []
        self.target: SceneObject | None = None
        self.tests = 0

    def push(self, t: float) -> None:
        self.entries.append(Intersection(t, self.target))

    def push_uv(self, t: float, u: float, v: float) -> None:
        self.entries.append(Intersection(t, self.target, u, v))

    def intersections(self) -> Intersections:
        return Intersections(self.entries)


def _sort_key(intersection: Intersection) -> tuple[bool, float]:
    # NaN sorts after every real value
    return (math.isnan(intersection.t), intersection.t)


class Intersections:
    """Intersections sorted ascending by ``t``."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Intersection] = ()) -> None:
        self._items = sorted(items, key=_sort_key)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Intersection:
        return self._items[index]

    def __iter__(self) -> Iterator[Intersection]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"Intersections({self._items!r})"

    def hit_index(self) -> int | None:
        """Index of the first entry with ``t >= 0``, or None."""
        for index, intersection in enumerate(self._items):
            if intersection.t >= 0.0:
                return index
        return None

    def hit(self) -> Intersection | None:
        index = self.hit_index()
        return None if index is None else self._items[index]


# =============================================================================
# Shading frame
# =============================================================================


@dataclass
class IntersectionState:
    """Everything the shading model needs about one hit.

    Attributes:
        t: Distance of the hit along the ray.
        object: The object that was hit.
        point: World-space hit point.
        eye: Vector pointing back toward the ray origin.
        normal: Surface normal, flipped to face the eye.
        inside: True if the normal had to be flipped.
        reflect: Ray direction reflected about the normal.
        over_point: Point nudged along the normal, origin for shadow and
            reflection rays.
        under_point: Point nudged against the normal, origin for refraction.
        n1: Refractive index of the medium being left.
        n2: Refractive index of the medium being entered.
        cos_i: Cosine between eye and normal.
    """

    t: float
    object: SceneObject
    point: Point
    eye: Vector
    normal: Vector
    inside: bool
    reflect: Vector
    over_point: Point
    under_point: Point
    n1: float
    n2: float
    cos_i: float

    @classmethod
    def prepare(cls, xs: Intersections, index: int, ray: Ray) -> IntersectionState:
        """Build the shading frame for ``xs[index]``.

        Refractive indices are recovered by replaying the sorted hits from the
        start while tracking which objects the ray is inside of. Objects are
        compared by identity.

        Args:
            xs: Sorted intersections for ``ray``.
            index: Index of the hit being shaded.
            ray: The ray that produced ``xs``.

        Returns:
            The populated shading frame.
        """
        hit = xs[index]
        n1 = n2 = 1.0
        containers: list[SceneObject] = []

        for position, intersection in enumerate(xs):
            is_target = position == index
            if is_target and containers:
                n1 = containers[-1].material.refractive_index

            obj = intersection.object
            for slot, container in enumerate(containers):
                if container is obj:
                    del containers[slot]
                    break
            else:
                containers.append(obj)

            if is_target:
                if containers:
                    n2 = containers[-1].material.refractive_index
                break

        point = ray.position(hit.t)
        eye = -ray.direction
        normal = hit.object.normal_at(point, hit)
        inside = False
        if normal.dot(eye) < 0.0:
            inside = True
            normal = -normal

        offset = normal * EPSILON
        return cls(
            t=hit.t,
            object=hit.object,
            point=point,
            eye=eye,
            normal=normal,
            inside=inside,
            reflect=ray.direction.reflect(normal),
            over_point=point + offset,
            under_point=point - offset,
            n1=n1,
            n2=n2,
            cos_i=normal.dot(eye),
        )

    def schlick(self) -> float:
        """Schlick approximation of the Fresnel reflectance at this hit.

        Returns:
            Fraction of light reflected, 1.0 under total internal reflection.
        """
        cos = self.cos_i
        if self.n1 > self.n2:
            ratio = self.n1 / self.n2
            sin2_t = ratio * ratio * (1.0 - cos * cos)
            if sin2_t > 1.0:
                return 1.0
            cos = math.sqrt(1.0 - sin2_t)

        r0 = ((self.n1 - self.n2) / (self.n1 + self.n2)) ** 2
        return r0 + (1.0 - r0) * (1.0 - cos) ** 5
