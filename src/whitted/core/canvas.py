"""Render target holding linear colors in row-major order."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import numpy.typing as npt

from src.whitted.core.color import BLACK, Color


class Canvas:
    """A width x height grid of colors stored as a flat row-major list.

    Args:
        width: Number of columns.
        height: Number of rows.
        fill: Initial color of every pixel.

    Raises:
        ValueError: If either dimension is not positive.
    """

    def __init__(self, width: int, height: int, fill: Color = BLACK) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels: list[Color] = [fill] * (width * height)

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Iterable[Color]) -> Canvas:
        canvas = cls(width, height)
        pixels = list(pixels)
        if len(pixels) != width * height:
            raise ValueError(
                f"Expected {width * height} pixels for a {width}x{height} canvas, got {len(pixels)}"
            )
        canvas.pixels = pixels
        return canvas

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} canvas")
        return y * self.width + x

    def pixel_at(self, x: int, y: int) -> Color:
        return self.pixels[self._offset(x, y)]

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        self.pixels[self._offset(x, y)] = color

    def row(self, y: int) -> list[Color]:
        start = y * self.width
        return self.pixels[start : start + self.width]

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return the canvas as a (height, width, 3) float64 array."""
        flat = np.array([(c.r, c.g, c.b) for c in self.pixels], dtype=np.float64)
        return flat.reshape(self.height, self.width, 3)
