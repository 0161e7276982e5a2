"""The world: objects, lights and the recursive shading algorithm.

``color_at`` finds the nearest hit along a ray, shades it with every light and
adds mirror reflection and refraction by recursing on secondary rays. Each
recursive call decrements ``remaining``; a contribution whose remaining depth is
exhausted, or whose material weight is zero, is black. Surfaces that both
reflect and refract blend the two with the Schlick approximation.

Statistics are never global: pass a :class:`RenderStats` to count rays and
intersection tests.

Example:
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.tuples import Point, Vector
    >>> from src.whitted.scene.presets import default_world
    >>> world = default_world()
    >>> world.color_at(Ray(Point(0, 0, -5), Vector(0, 0, 1)))
    Color(0.38066..., 0.47583..., 0.2855...)
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from src.whitted.core.color import BLACK, Color
from src.whitted.core.intersection import (
    IntersectionCollector,
    Intersections,
    IntersectionState,
    RenderStats,
)
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Point, approx_eq
from src.whitted.scene.lights import Light
from src.whitted.scene.object import SceneObject

logger = logging.getLogger(__name__)

DEFAULT_RECURSION_LIMIT = 4


class World:
    """A read-only collection of objects and lights.

    Args:
        objects: Top-level objects (groups included).
        lights: Light sources.
        recursion_limit: Depth limit for reflection and refraction rays,
            clamped to at least 1.
    """

    def __init__(
        self,
        objects: Iterable[SceneObject] = (),
        lights: Iterable[Light] = (),
        recursion_limit: int = DEFAULT_RECURSION_LIMIT,
    ) -> None:
        self.objects = tuple(objects)
        self.lights = tuple(lights)
        self.recursion_limit = max(1, int(recursion_limit))
        logger.debug(
            "World with %d objects, %d lights, recursion limit %d",
            len(self.objects), len(self.lights), self.recursion_limit,
        )

    def __repr__(self) -> str:
        return (
            f"World(objects={len(self.objects)}, lights={len(self.lights)}, "
            f"recursion_limit={self.recursion_limit})"
        )

    def with_recursion_limit(self, limit: int) -> World:
        return World(self.objects, self.lights, limit)

    def with_objects(self, objects: Iterable[SceneObject]) -> World:
        return World(objects, self.lights, self.recursion_limit)

    def with_lights(self, lights: Iterable[Light]) -> World:
        return World(self.objects, lights, self.recursion_limit)

    # =========================================================================
    # Intersection
    # =========================================================================

    def _collect(self, ray: Ray, stats: RenderStats | None) -> IntersectionCollector:
        collector = IntersectionCollector()
        for obj in self.objects:
            obj.intersect(ray, collector)
        if stats is not None:
            stats.rays += 1
            stats.intersection_tests += collector.tests
        return collector

    def intersects(self, ray: Ray, stats: RenderStats | None = None) -> Intersections:
        """All intersections of ``ray`` with the world, sorted by ``t``."""
        return self._collect(ray, stats).intersections()

    def is_shadowed(
        self, light_position: Point, point: Point, stats: RenderStats | None = None
    ) -> bool:
        """Whether a shadow-casting object lies between ``point`` and the light.

        Args:
            light_position: Position of the light (or light sample).
            point: Point being tested, normally an over point.
            stats: Optional counters to update.

        Returns:
            True if any object with ``has_shadow`` is hit at
            ``0 <= t < distance``.
        """
        to_light = light_position - point
        distance = to_light.magnitude()
        ray = Ray(point, to_light.normalize())

        for intersection in self._collect(ray, stats).entries:
            if 0.0 <= intersection.t < distance and intersection.object.has_shadow:
                return True
        return False

    # =========================================================================
    # Shading
    # =========================================================================

    def color_at(
        self, ray: Ray, remaining: int | None = None, stats: RenderStats | None = None
    ) -> Color:
        """Color seen along ``ray``; black when nothing is hit.

        Args:
            ray: World-space ray.
            remaining: Remaining recursion depth, defaults to ``recursion_limit``.
            stats: Optional counters to update.
        """
        if remaining is None:
            remaining = self.recursion_limit

        xs = self.intersects(ray, stats)
        index = xs.hit_index()
        if index is None:
            return BLACK

        state = IntersectionState.prepare(xs, index, ray)
        return self.shade_hit(state, remaining, stats)

    def shade_hit(
        self, state: IntersectionState, remaining: int, stats: RenderStats | None = None
    ) -> Color:
        """Surface color from every light plus reflection and refraction."""
        obj = state.object
        material = obj.material

        surface = BLACK
        for light in self.lights:
            intensity = light.intensity_at(self, state.over_point, stats)
            surface = surface + material.lighting(
                obj, light, state.over_point, state.eye, state.normal, intensity
            )

        reflected = self.reflected_color(state, remaining, stats)
        refracted = self.refracted_color(state, remaining, stats)

        if material.reflective > 0.0 and material.transparency > 0.0:
            reflectance = state.schlick()
            return surface + reflected * reflectance + refracted * (1.0 - reflectance)
        return surface + reflected + refracted

    def reflected_color(
        self, state: IntersectionState, remaining: int, stats: RenderStats | None = None
    ) -> Color:
        """Mirror contribution; black once the depth or reflectivity is zero."""
        reflective = state.object.material.reflective
        if remaining <= 0 or approx_eq(reflective, 0.0):
            return BLACK

        reflect_ray = Ray(state.over_point, state.reflect)
        return self.color_at(reflect_ray, remaining - 1, stats) * reflective

    def refracted_color(
        self, state: IntersectionState, remaining: int, stats: RenderStats | None = None
    ) -> Color:
        """Refraction contribution following Snell's law.

        Black once the depth or transparency is zero, and under total
        internal reflection, without casting a ray.
        """
        transparency = state.object.material.transparency
        if remaining <= 0 or approx_eq(transparency, 0.0):
            return BLACK

        n_ratio = state.n1 / state.n2
        cos_i = state.cos_i
        sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
        if sin2_t > 1.0:
            return BLACK

        cos_t = math.sqrt(1.0 - sin2_t)
        direction = state.normal * (n_ratio * cos_i - cos_t) - state.eye * n_ratio
        refract_ray = Ray(state.under_point, direction)
        return self.color_at(refract_ray, remaining - 1, stats) * transparency
