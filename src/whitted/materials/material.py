"""Phong surface material and the local lighting model.

Example:
    >>> from src.whitted.core.color import Color
    >>> from src.whitted.materials.material import Material
    >>> glass = Material(transparency=1.0, refractive_index=1.5)
    >>> red = Material().with_color(Color(1, 0, 0))
    >>> red.pattern.colors
    (Color(1.0, 0.0, 0.0),)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from src.whitted.core.color import BLACK, Color
from src.whitted.core.tuples import Point, Vector, approx_eq
from src.whitted.materials.pattern import Pattern

if TYPE_CHECKING:
    from src.whitted.scene.lights import Light
    from src.whitted.scene.object import SceneObject

# Refractive indices of common media
VACUUM = 1.0
AIR = 1.00029
WATER = 1.333
GLASS = 1.52
DIAMOND = 2.417


@dataclass(frozen=True)
class Material:
    """Surface properties shared by value between objects.

    Attributes:
        ambient: Fraction of light reflected regardless of lights (0..1).
        diffuse: Weight of Lambertian reflection (0..1).
        specular: Weight of the Phong highlight (0..1).
        shininess: Phong exponent; larger values give smaller highlights.
        reflective: Mirror reflection weight, 0 disables reflection rays.
        transparency: Refraction weight, 0 disables refraction rays.
        refractive_index: Index of refraction of the material's interior.
        pattern: Color function evaluated at each shaded point.
    """

    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    transparency: float = 0.0
    refractive_index: float = VACUUM
    pattern: Pattern = field(default_factory=Pattern.plain)

    def with_color(self, color: Color) -> Material:
        return dataclasses.replace(self, pattern=Pattern.plain(color))

    def with_pattern(self, pattern: Pattern) -> Material:
        return dataclasses.replace(self, pattern=pattern)

    def lighting(
        self,
        obj: SceneObject,
        light: Light,
        point: Point,
        eye: Vector,
        normal: Vector,
        intensity: float,
    ) -> Color:
        """Phong shading of one point under one light.

        The diffuse and specular terms are averaged over the light's sample
        positions (one for a point light) and scaled by ``intensity``, the
        unoccluded fraction reported by the light.

        Args:
            obj: The object being shaded, used to sample the pattern.
            light: The light source.
            point: World-space point being shaded.
            eye: Unit vector toward the eye.
            normal: Unit surface normal.
            intensity: Light visibility in [0, 1]; 0 means fully in shadow.

        Returns:
            The shaded color (unclamped).
        """
        effective = self.pattern.pattern_at_object(obj, point) * light.intensity
        ambient = effective * self.ambient

        if approx_eq(intensity, 0.0):
            return ambient

        total = BLACK
        positions = light.sample_positions()
        for position in positions:
            light_v = (position - point).normalize()
            light_dot_normal = light_v.dot(normal)
            if light_dot_normal < 0.0:
                continue

            total = total + effective * (self.diffuse * light_dot_normal)

            reflect_dot_eye = (-light_v).reflect(normal).dot(eye)
            if reflect_dot_eye > 0.0:
                factor = reflect_dot_eye ** self.shininess
                total = total + light.intensity * (self.specular * factor)

        return ambient + total * (intensity / len(positions))
