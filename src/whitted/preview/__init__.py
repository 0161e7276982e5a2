"""Output and visualization.

Components:
    export: 8-bit quantisation (Taichi kernel), PNG and PPM writers
    display: Matplotlib-based preview window

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.preview import save_image, show_preview
    >>> canvas = camera.render(world)
    >>> save_image(canvas, "output.png", gamma=2.2)
    >>> show_preview(canvas)
"""

from .display import apply_gamma, show_preview
from .export import (
    canvas_to_ppm,
    canvas_to_uint8,
    compute_rmse,
    image_to_uint8,
    save_image,
    save_png,
    save_ppm,
)

__all__ = [
    # Export
    "canvas_to_uint8",
    "image_to_uint8",
    "canvas_to_ppm",
    "save_png",
    "save_ppm",
    "save_image",
    "compute_rmse",
    # Display
    "apply_gamma",
    "show_preview",
]
