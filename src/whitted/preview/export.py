"""Image export for rendered canvases.

Canvases hold linear, unclamped colors. Export clamps every channel to
[0, 1], optionally gamma-encodes it and quantises it to 8 bits. Quantisation
runs as a Taichi kernel over the whole image buffer.

Supported formats:
    - PNG and anything else Pillow can write, chosen by file extension
    - Plain-text PPM (P3)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.preview.export import save_image
    >>> canvas = camera.render(world)
    >>> save_image(canvas, "output.png", gamma=2.2)
"""

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
import taichi as ti
from PIL import Image as PILImage

from src.whitted.core.canvas import Canvas

logger = logging.getLogger(__name__)

# Maximum line length of a plain PPM file
PPM_LINE_WIDTH = 70


@ti.kernel
def _quantize_kernel(
    image: ti.types.ndarray(dtype=ti.f32, ndim=3),
    out: ti.types.ndarray(dtype=ti.u8, ndim=3),
    inv_gamma: ti.f32,
):
    for i, j, c in ti.ndrange(image.shape[0], image.shape[1], image.shape[2]):
        v = ti.min(ti.max(image[i, j, c], 0.0), 1.0)
        if inv_gamma != 1.0:
            v = v**inv_gamma
        out[i, j, c] = ti.cast(ti.round(v * 255.0), ti.u8)


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Clamp, gamma-encode and quantise a linear float image.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Display gamma; 1.0 leaves values linear.

    Returns:
        8-bit image array of shape (H, W, 3).

    Raises:
        ValueError: If the array is not (H, W, 3) or gamma is not positive.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")

    source = np.ascontiguousarray(image, dtype=np.float32)
    result = np.zeros(source.shape, dtype=np.uint8)
    _quantize_kernel(source, result, 1.0 / gamma)
    return result


def canvas_to_uint8(canvas: Canvas, *, gamma: float = 1.0) -> npt.NDArray[np.uint8]:
    """Quantise a canvas to an (H, W, 3) uint8 array."""
    return image_to_uint8(canvas.to_numpy(), gamma=gamma)


def save_png(canvas: Canvas, filepath: str | Path, *, gamma: float = 1.0) -> None:
    """Save a canvas through Pillow; the format follows the file extension.

    Args:
        canvas: Rendered canvas.
        filepath: Output path, e.g. ``render.png``.
        gamma: Display gamma applied before quantisation.
    """
    pixels = canvas_to_uint8(canvas, gamma=gamma)
    PILImage.fromarray(pixels).save(filepath)
    logger.info("Saved %dx%d image to %s", canvas.width, canvas.height, filepath)


def canvas_to_ppm(canvas: Canvas, *, gamma: float = 1.0) -> str:
    """Encode a canvas as plain PPM text.

    Lines never exceed 70 characters and the text ends with a newline.
    """
    pixels = canvas_to_uint8(canvas, gamma=gamma)
    lines = ["P3", f"{canvas.width} {canvas.height}", "255"]

    for row in pixels:
        line = ""
        for value in row.reshape(-1):
            token = str(int(value))
            if line and len(line) + 1 + len(token) > PPM_LINE_WIDTH:
                lines.append(line)
                line = token
            else:
                line = f"{line} {token}" if line else token
        lines.append(line)

    return "\n".join(lines) + "\n"


def save_ppm(canvas: Canvas, filepath: str | Path, *, gamma: float = 1.0) -> None:
    Path(filepath).write_text(canvas_to_ppm(canvas, gamma=gamma), encoding="ascii")
    logger.info("Saved %dx%d PPM to %s", canvas.width, canvas.height, filepath)


def save_image(canvas: Canvas, filepath: str | Path, *, gamma: float = 1.0) -> None:
    """Save as PPM for ``.ppm`` paths, otherwise through Pillow."""
    if Path(filepath).suffix.lower() == ".ppm":
        save_ppm(canvas, filepath, gamma=gamma)
    else:
        save_png(canvas, filepath, gamma=gamma)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
