"""Ready-made scenes.

``default_world`` is the canonical two-sphere world used throughout the test
suite. ``create_showcase_scene`` builds a small scene exercising every
primitive, pattern and light type, used by the example renderer when no scene
file is given.

Example:
    >>> from src.whitted.scene.presets import ShowcaseParams, create_showcase_scene
    >>> world, camera = create_showcase_scene(ShowcaseParams(width=160, height=90))
    >>> canvas = camera.render(world)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.whitted.camera.pinhole import Camera
from src.whitted.core.color import Color
from src.whitted.core.transform import view_transform
from src.whitted.core.tuples import Point, Vector
from src.whitted.geometry.cube import Cube
from src.whitted.geometry.cylinder import Cone, Cylinder
from src.whitted.geometry.group import GroupBuilder
from src.whitted.geometry.plane import Plane
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import GLASS, Material
from src.whitted.materials.pattern import Pattern
from src.whitted.scene.lights import AreaLight, PointLight
from src.whitted.scene.object import SceneObject
from src.whitted.scene.world import DEFAULT_RECURSION_LIMIT, World

# =============================================================================
# Default world
# =============================================================================

DEFAULT_LIGHT_POSITION = Point(-10.0, 10.0, -10.0)
DEFAULT_OUTER_MATERIAL = Material(diffuse=0.7, specular=0.2).with_color(Color(0.8, 1.0, 0.6))


def default_world(recursion_limit: int = DEFAULT_RECURSION_LIMIT) -> World:
    """Two concentric spheres lit by a white point light at (-10, 10, -10).

    The outer sphere has radius 1 and a green-yellow material; the inner one
    is a default-material sphere scaled by 0.5.
    """
    outer = SceneObject(Sphere(), DEFAULT_OUTER_MATERIAL)
    inner = SceneObject(Sphere()).scale(0.5, 0.5, 0.5)
    light = PointLight(DEFAULT_LIGHT_POSITION, Color(1.0, 1.0, 1.0))
    return World([outer, inner], [light], recursion_limit)


# =============================================================================
# Showcase scene
# =============================================================================


@dataclass
class ShowcaseParams:
    """Parameters for :func:`create_showcase_scene`.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Horizontal field of view in radians.
        soft_shadows: Use a 4x4 area light instead of a point light.
        light_color: Light intensity (r, g, b).
        floor_reflective: Reflectivity of the checkered floor.
    """

    width: int = 320
    height: int = 180
    field_of_view: float = math.pi / 3.0
    soft_shadows: bool = False
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    floor_reflective: float = 0.2


def _hexagon_edge() -> GroupBuilder:
    corner = SceneObject(Sphere()).scale(0.25, 0.25, 0.25).translate(0, 0, -1)
    edge = (
        SceneObject(Cylinder(0.0, 1.0))
        .scale(0.25, 1, 0.25)
        .rotate_z(-math.pi / 2)
        .rotate_y(-math.pi / 6)
        .translate(0, 0, -1)
    )
    return GroupBuilder([corner, edge])


def _hexagon() -> GroupBuilder:
    hexagon = GroupBuilder()
    for n in range(6):
        hexagon.add(_hexagon_edge().rotate_y(n * math.pi / 3))
    return hexagon


def create_showcase_scene(params: ShowcaseParams | None = None) -> tuple[World, Camera]:
    """Create a scene with every shape, pattern and light type.

    Args:
        params: Scene parameters; defaults to :class:`ShowcaseParams`.

    Returns:
        ``(world, camera)`` ready for :meth:`Camera.render`.
    """
    if params is None:
        params = ShowcaseParams()

    light_color = Color(*params.light_color)

    floor = SceneObject(
        Plane(),
        Material(specular=0.0, reflective=params.floor_reflective).with_pattern(
            Pattern.checker(Color(0.35, 0.35, 0.35), Color(0.65, 0.65, 0.65))
        ),
    )
    back_wall = SceneObject(
        Plane(),
        Material(specular=0.0).with_pattern(
            Pattern.stripe(Color(0.45, 0.55, 0.75), Color(0.55, 0.65, 0.85)).rotate_y(math.pi / 2)
        ),
    ).rotate_x(math.pi / 2).translate(0, 0, 10)

    glass_ball = SceneObject(
        Sphere(),
        Material(
            ambient=0.0, diffuse=0.1, specular=1.0, shininess=300.0,
            reflective=0.9, transparency=0.9, refractive_index=GLASS,
        ).with_color(Color(0.1, 0.1, 0.1)),
        has_shadow=False,
    ).translate(0, 1, 0.5)

    ringed_ball = SceneObject(
        Sphere(),
        Material(diffuse=0.7, specular=0.3).with_pattern(
            Pattern.ring(Color(0.9, 0.3, 0.2), Color(1.0, 0.8, 0.3)).scale(0.2, 0.2, 0.2)
        ),
    ).scale(0.6, 0.6, 0.6).translate(-2.2, 0.6, 1.5)

    cube = SceneObject(
        Cube(),
        Material(diffuse=0.8, specular=0.1).with_pattern(
            Pattern.gradient(Color(0.2, 0.6, 0.3), Color(0.8, 0.9, 0.2))
            .scale(2, 1, 1)
            .translate(-1, 0, 0)
        ),
    ).scale(0.5, 0.5, 0.5).rotate_y(math.pi / 5).translate(2.2, 0.5, 1.2)

    cylinder = SceneObject(
        Cylinder(0.0, 1.5, closed=True), Material(reflective=0.3).with_color(Color(0.3, 0.3, 0.9))
    ).scale(0.4, 1, 0.4).translate(1.2, 0, 3.5)

    cone = SceneObject(
        Cone(-1.0, 0.0, closed=True), Material(specular=0.6).with_color(Color(0.9, 0.5, 0.1))
    ).scale(0.5, 1.2, 0.5).translate(-0.9, 1.2, 3.8)

    hexagon = (
        _hexagon()
        .scale(0.6, 0.6, 0.6)
        .rotate_x(-math.pi / 6)
        .translate(0, 2.6, 4.5)
    )
    hexagon.material = Material(diffuse=0.6, reflective=0.1).with_color(Color(0.7, 0.2, 0.7))

    if params.soft_shadows:
        light = AreaLight(
            Point(-5.5, 9.5, -6.0), Vector(2, 0, 0), 4, Vector(0, 1, 0), 4, light_color, jitter=True
        )
    else:
        light = PointLight(Point(-4.5, 10.5, -5.0), light_color)

    world = World(
        [floor, back_wall, glass_ball, ringed_ball, cube, cylinder, cone, hexagon.build()],
        [light],
    )

    camera = Camera(params.width, params.height, params.field_of_view).with_transform(
        view_transform(Point(0, 2.5, -6.0), Point(0, 1, 1.5), Vector(0, 1, 0))
    )
    return world, camera
