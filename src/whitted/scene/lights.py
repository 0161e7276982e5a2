"""Point and area light sources.

Each light reports how visible it is from a point (``intensity_at``) and the
positions the shading model samples for diffuse and specular terms
(``sample_positions``).

Area lights are rectangles divided into ``usteps x vsteps`` cells. Visibility
is the fraction of cells whose sample point is not in shadow, which produces
soft penumbrae. Sample points sit at cell centres unless jitter is enabled,
in which case every evaluation draws fresh offsets within each cell from a
local random generator.

Example:
    >>> from src.whitted.core.color import Color
    >>> from src.whitted.core.tuples import Point, Vector
    >>> from src.whitted.scene.lights import AreaLight
    >>> light = AreaLight(Point(0, 0, 0), Vector(2, 0, 0), 4, Vector(0, 0, 1), 2, Color(1, 1, 1))
    >>> light.uvec, light.samples, light.position
    (Vector(0.5, 0.0, 0.0), 8, Point(1.0, 0.0, 0.5))
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Sequence, Union

import numpy as np

from src.whitted.core.color import WHITE, Color
from src.whitted.core.tuples import Point, Vector

if TYPE_CHECKING:
    from src.whitted.core.intersection import RenderStats
    from src.whitted.scene.world import World


@dataclass(frozen=True)
class PointLight:
    """Light emitted from a single point.

    Attributes:
        position: World-space position.
        intensity: Emitted color.
    """

    position: Point
    intensity: Color = WHITE

    def sample_positions(self) -> tuple[Point, ...]:
        return (self.position,)

    def intensity_at(self, world: World, point: Point, stats: RenderStats | None = None) -> float:
        """1.0 if ``point`` sees the light, 0.0 if it is in shadow."""
        return 0.0 if world.is_shadowed(self.position, point, stats) else 1.0


class AreaLight:
    """Rectangular light spanned by two edge vectors from a corner.

    Args:
        corner: One corner of the rectangle.
        full_uvec: Edge vector along the u axis.
        usteps: Number of cells along u.
        full_vvec: Edge vector along the v axis.
        vsteps: Number of cells along v.
        intensity: Emitted color.
        jitter: ``False`` samples cell centres; ``True`` draws random offsets
            on every evaluation; a sequence of floats in [0, 1) is cycled
            through as the offsets, restarting on each evaluation.

    Raises:
        ValueError: If either step count is not positive.
    """

    def __init__(
        self,
        corner: Point,
        full_uvec: Vector,
        usteps: int,
        full_vvec: Vector,
        vsteps: int,
        intensity: Color = WHITE,
        jitter: bool | Sequence[float] = False,
    ) -> None:
        if usteps <= 0 or vsteps <= 0:
            raise ValueError(f"Area light steps must be positive, got {usteps}x{vsteps}")

        self.corner = corner
        self.uvec = full_uvec / usteps
        self.usteps = usteps
        self.vvec = full_vvec / vsteps
        self.vsteps = vsteps
        self.intensity = intensity
        self.samples = usteps * vsteps
        self.position = corner + (full_uvec + full_vvec) / 2.0
        self.jitter = jitter if isinstance(jitter, bool) else tuple(jitter)

        self._positions = tuple(
            self.point_on(u, v) for v in range(vsteps) for u in range(usteps)
        )

    def __repr__(self) -> str:
        return (
            f"AreaLight(corner={self.corner!r}, uvec={self.uvec!r} x {self.usteps}, "
            f"vvec={self.vvec!r} x {self.vsteps})"
        )

    def point_on(self, u: int, v: int, ju: float = 0.5, jv: float = 0.5) -> Point:
        """Sample point in cell ``(u, v)`` at offset ``(ju, jv)`` within the cell."""
        return self.corner + self.uvec * (u + ju) + self.vvec * (v + jv)

    def sample_positions(self) -> tuple[Point, ...]:
        return self._positions

    def _offsets(self) -> Iterator[float]:
        if self.jitter is False:
            return itertools.repeat(0.5)
        if self.jitter is True:
            rng = np.random.default_rng()
            return iter(rng.random(2 * self.samples).tolist())
        return itertools.cycle(self.jitter)

    def intensity_at(self, world: World, point: Point, stats: RenderStats | None = None) -> float:
        """Fraction of sample points visible from ``point``."""
        offsets = self._offsets()
        visible = 0
        for v in range(self.vsteps):
            for u in range(self.usteps):
                sample = self.point_on(u, v, next(offsets), next(offsets))
                if not world.is_shadowed(sample, point, stats):
                    visible += 1
        return visible / self.samples


Light = Union[PointLight, AreaLight]
