"""Matplotlib-based preview display for rendered canvases.

Example:
    >>> from src.whitted.preview.display import show_preview
    >>> canvas = camera.render(world)
    >>> show_preview(canvas, gamma=2.2)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.whitted.core.canvas import Canvas


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Clamp to [0, 1] and gamma-encode for display.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (2.2 approximates sRGB, 1.0 only clamps).

    Returns:
        Display-ready image in [0, 1].

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")

    # Clamp first; negative values would turn into NaN under the power
    result = np.clip(image, 0.0, 1.0)
    if gamma != 1.0:
        result = np.power(result, 1.0 / gamma)
    return result.astype(np.float32)


def show_preview(
    canvas: Canvas,
    *,
    gamma: float = 2.2,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a canvas in a Matplotlib window.

    Args:
        canvas: Rendered canvas.
        gamma: Display gamma.
        title: Window title; defaults to the canvas size.
        figsize: Figure size in inches (width, height).
        block: Whether to block until the window is closed.
    """
    import matplotlib.pyplot as plt

    display_image = apply_gamma(canvas.to_numpy(), gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render Preview - {canvas.width}x{canvas.height}")

    plt.tight_layout()
    plt.show(block=block)
