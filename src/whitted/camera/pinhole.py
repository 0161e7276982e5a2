"""Pinhole camera: pixel-to-ray mapping and image rendering.

The camera sits at the origin of its own space looking down -z at a canvas
one unit away. Its transform is the world-to-eye view transform (see
:func:`src.whitted.core.transform.view_transform`); primary rays are produced
by un-projecting canvas points through its inverse.

Rendering is a pure function of pixel coordinates, so rows can be rendered in
any order or in any process. Parallel rendering splits the image into bands of
rows, renders them in a :class:`multiprocessing.Pool` and reassembles them in
row-major order, which gives output identical to sequential rendering.

Example:
    >>> import math
    >>> from src.whitted.camera.pinhole import Camera
    >>> from src.whitted.core.transform import view_transform
    >>> from src.whitted.core.tuples import Point, Vector
    >>> from src.whitted.scene.presets import default_world
    >>> camera = Camera(11, 11, math.pi / 2).with_transform(
    ...     view_transform(Point(0, 0, -5), Point(0, 0, 0), Vector(0, 1, 0)))
    >>> canvas = camera.render(default_world(), workers=2)
    >>> canvas.pixel_at(5, 5)
    Color(0.38066..., 0.47583..., 0.2855...)
"""

from __future__ import annotations

import logging
import math
import multiprocessing
import time
from typing import TYPE_CHECKING, Iterable

from src.whitted.core.canvas import Canvas
from src.whitted.core.color import BLACK, Color
from src.whitted.core.intersection import RenderStats
from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.ray import Ray
from src.whitted.core.transform import Transformable
from src.whitted.core.tuples import Point

if TYPE_CHECKING:
    from src.whitted.scene.world import World

logger = logging.getLogger(__name__)

# Sub-pixel offsets per axis for each supersampling level
ANTI_ALIASING_OFFSETS: dict[int, tuple[float, ...]] = {
    1: (0.5,),
    2: (-0.5, 0.5),
    3: (-0.5, 0.0, 0.5),
    4: (-0.5, -0.25, 0.25, 0.5),
    5: (-0.5, -0.25, 0.0, 0.25, 0.5),
}

DEFAULT_BAND_SIZE = 10


# =============================================================================
# Camera
# =============================================================================


class Camera(Transformable):
    """Perspective camera.

    Args:
        hsize: Canvas width in pixels.
        vsize: Canvas height in pixels.
        field_of_view: Angle covered by the wider canvas side, in radians.
        transform: World-to-eye transform.
        anti_aliasing: Supersampling level, 1 (pixel centre only) to 5.

    Raises:
        ValueError: On non-positive sizes, a field of view outside (0, pi)
            or an unsupported supersampling level.
        NonInvertibleMatrixError: If ``transform`` is singular.
    """

    def __init__(
        self,
        hsize: int = 100,
        vsize: int = 100,
        field_of_view: float = math.pi / 2.0,
        transform: Matrix = IDENTITY,
        anti_aliasing: int = 1,
    ) -> None:
        if hsize <= 0 or vsize <= 0:
            raise ValueError(f"Camera size must be positive, got {hsize}x{vsize}")
        if not 0.0 < field_of_view < math.pi:
            raise ValueError(f"Field of view must be in (0, pi), got {field_of_view}")
        if anti_aliasing not in ANTI_ALIASING_OFFSETS:
            raise ValueError(
                f"Anti-aliasing level must be one of {sorted(ANTI_ALIASING_OFFSETS)}, "
                f"got {anti_aliasing}"
            )

        self.hsize = hsize
        self.vsize = vsize
        self.field_of_view = field_of_view
        self.transform = transform
        self.inverse = transform.inverse()
        self.anti_aliasing = anti_aliasing
        self.offsets = ANTI_ALIASING_OFFSETS[anti_aliasing]

        half_view = math.tan(field_of_view / 2.0)
        aspect = hsize / vsize
        if aspect >= 1.0:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = self.half_width * 2.0 / hsize

    def __repr__(self) -> str:
        return (
            f"Camera({self.hsize}x{self.vsize}, fov={self.field_of_view:.4f}, "
            f"anti_aliasing={self.anti_aliasing})"
        )

    def with_transform(self, transform: Matrix) -> Camera:
        """Replace the view transform."""
        return Camera(self.hsize, self.vsize, self.field_of_view, transform, self.anti_aliasing)

    def transformed(self, matrix: Matrix) -> Camera:
        return self.with_transform(matrix * self.transform)

    def with_size(self, hsize: int, vsize: int) -> Camera:
        return Camera(hsize, vsize, self.field_of_view, self.transform, self.anti_aliasing)

    def with_anti_aliasing(self, level: int) -> Camera:
        return Camera(self.hsize, self.vsize, self.field_of_view, self.transform, level)

    # -------------------------------------------------------------------------
    # Ray generation
    # -------------------------------------------------------------------------

    def ray_for_pixel(
        self, px: int, py: int, x_offset: float = 0.5, y_offset: float = 0.5
    ) -> Ray:
        """World-space ray through canvas pixel ``(px, py)``.

        Args:
            px: Column, 0 at the left.
            py: Row, 0 at the top.
            x_offset: Horizontal position within the pixel, 0.5 is the centre.
            y_offset: Vertical position within the pixel, 0.5 is the centre.
        """
        world_x = self.half_width - (px + x_offset) * self.pixel_size
        world_y = self.half_height - (py + y_offset) * self.pixel_size

        pixel = self.inverse * Point(world_x, world_y, -1.0)
        origin = self.inverse * Point(0.0, 0.0, 0.0)
        return Ray(origin, (pixel - origin).normalize())

    def pixel_color(
        self, world: World, px: int, py: int, stats: RenderStats | None = None
    ) -> Color:
        """Color of one pixel, averaged over the supersampling grid."""
        offsets = self.offsets
        if len(offsets) == 1:
            return world.color_at(self.ray_for_pixel(px, py, offsets[0], offsets[0]), stats=stats)

        total = BLACK
        for x_offset in offsets:
            for y_offset in offsets:
                ray = self.ray_for_pixel(px, py, x_offset, y_offset)
                total = total + world.color_at(ray, stats=stats)
        return total / (len(offsets) * len(offsets))

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render_rows(
        self, world: World, rows: Iterable[int], stats: RenderStats | None = None
    ) -> list[Color]:
        """Render whole rows, returned in row-major order."""
        return [
            self.pixel_color(world, px, py, stats)
            for py in rows
            for px in range(self.hsize)
        ]

    def render(
        self,
        world: World,
        *,
        workers: int | None = None,
        band_size: int = DEFAULT_BAND_SIZE,
        stats: RenderStats | None = None,
    ) -> Canvas:
        """Render the world into a canvas.

        Args:
            world: Scene to render; treated as read-only.
            workers: Number of worker processes. None, 0 or 1 renders in the
                calling process.
            band_size: Rows per work item for parallel rendering.
            stats: Optional counters, updated with totals from all workers.

        Returns:
            A ``hsize x vsize`` canvas of linear, unclamped colors.

        Raises:
            ValueError: If ``band_size`` is not positive.
        """
        if band_size <= 0:
            raise ValueError(f"band_size must be positive, got {band_size}")

        start = time.perf_counter()
        totals = RenderStats()

        if not workers or workers <= 1:
            logger.info("Rendering %dx%d sequentially", self.hsize, self.vsize)
            pixels = self.render_rows(world, range(self.vsize), totals)
        else:
            logger.info(
                "Rendering %dx%d with %d workers, %d rows per band",
                self.hsize, self.vsize, workers, band_size,
            )
            pixels = self._render_parallel(world, workers, band_size, totals)

        elapsed = time.perf_counter() - start
        logger.info(
            "Rendered %d pixels in %.2fs (%d rays, %d intersection tests)",
            len(pixels), elapsed, totals.rays, totals.intersection_tests,
        )
        if stats is not None:
            stats.merge(totals)
        return Canvas.from_pixels(self.hsize, self.vsize, pixels)

    def _render_parallel(
        self, world: World, workers: int, band_size: int, totals: RenderStats
    ) -> list[Color]:
        bands = [
            range(top, min(top + band_size, self.vsize))
            for top in range(0, self.vsize, band_size)
        ]
        pixels: list[Color] = []
        with multiprocessing.Pool(
            processes=workers, initializer=_init_worker, initargs=(self, world)
        ) as pool:
            # imap yields in submission order, so bands arrive top to bottom
            for colors, band_stats in pool.imap(_render_band, bands):
                pixels.extend(colors)
                totals.merge(band_stats)
        return pixels


# =============================================================================
# Worker process state
# =============================================================================

_worker_data: dict = {}


def _init_worker(camera: Camera, world: World) -> None:
    _worker_data["camera"] = camera
    _worker_data["world"] = world


def _render_band(rows: range) -> tuple[list[Color], RenderStats]:
    stats = RenderStats()
    colors = _worker_data["camera"].render_rows(_worker_data["world"], rows, stats)
    return colors, stats
