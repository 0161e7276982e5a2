#!/usr/bin/env python3
"""Render a YAML scene file, or the built-in showcase scene.

Render settings come from ``WHITTED_*`` environment variables first; any
command-line option given overrides them.

Usage:
    python -m examples.render_scene [scene.yaml] [options]

Options:
    --output OUTPUT          Output file, .png or .ppm (default: render.png)
    --width WIDTH            Override the camera width in pixels
    --height HEIGHT          Override the camera height in pixels
    --workers N              Worker processes (default: sequential)
    --band-size ROWS         Rows per work item when rendering in parallel
    --recursion-limit N      Reflection/refraction depth
    --anti-aliasing N        Samples per pixel side (1-5)
    --gamma GAMMA            Output gamma encoding
    --divide THRESHOLD       Subdivide groups into bounding-volume trees
    --soft-shadows           Use an area light in the showcase scene
    --preview                Show the result in a Matplotlib window
    --verbose                Log debug messages

Example:
    python -m examples.render_scene examples/scenes/showcase.yaml --workers 4 --gamma 2.2
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("examples.render_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a YAML scene with the Whitted ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        nargs="?",
        type=Path,
        help="YAML scene file (default: built-in showcase scene)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("render.png"),
        help="Output file path, .png or .ppm (default: render.png)",
    )
    parser.add_argument("--width", type=int, help="Override the camera width in pixels")
    parser.add_argument("--height", type=int, help="Override the camera height in pixels")
    parser.add_argument("--workers", type=int, help="Number of worker processes")
    parser.add_argument("--band-size", type=int, help="Rows per parallel work item")
    parser.add_argument("--recursion-limit", type=int, help="Reflection/refraction depth")
    parser.add_argument("--anti-aliasing", type=int, help="Samples per pixel side (1-5)")
    parser.add_argument("--gamma", type=float, help="Output gamma encoding")
    parser.add_argument(
        "--divide",
        type=int,
        metavar="THRESHOLD",
        help="Subdivide groups holding at least THRESHOLD children",
    )
    parser.add_argument(
        "--soft-shadows",
        action="store_true",
        help="Use an area light in the showcase scene",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the rendered image in a window",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages",
    )
    return parser.parse_args(argv)


def render_scene(args: argparse.Namespace) -> Path:
    """Load or build the scene, render it and save the image.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized before any kernel is touched
    from src.whitted.config import RenderSettings
    from src.whitted.core.intersection import RenderStats
    from src.whitted.preview.display import show_preview
    from src.whitted.preview.export import save_image
    from src.whitted.scene.loader import load_scene
    from src.whitted.scene.presets import ShowcaseParams, create_showcase_scene

    settings = RenderSettings.from_env().override(
        recursion_limit=args.recursion_limit,
        workers=args.workers,
        band_size=args.band_size,
        anti_aliasing=args.anti_aliasing,
        gamma=args.gamma,
    )
    logger.debug("Render settings: %s", settings)

    if args.scene is not None:
        scene = load_scene(
            args.scene,
            recursion_limit=settings.recursion_limit,
            divide_threshold=args.divide,
        )
        world, camera = scene.world, scene.camera
    else:
        logger.info("No scene file given, rendering the showcase scene")
        world, camera = create_showcase_scene(ShowcaseParams(soft_shadows=args.soft_shadows))
        world = world.with_recursion_limit(settings.recursion_limit)
        if args.divide is not None:
            world = world.with_objects([obj.divide(args.divide) for obj in world.objects])

    if args.width is not None or args.height is not None:
        camera = camera.with_size(args.width or camera.hsize, args.height or camera.vsize)
    camera = camera.with_anti_aliasing(settings.anti_aliasing)

    stats = RenderStats()
    canvas = camera.render(
        world, workers=settings.workers, band_size=settings.band_size, stats=stats
    )

    save_image(canvas, args.output, gamma=settings.gamma)
    logger.info(
        "Saved %s (%d rays, %d intersection tests)",
        args.output.absolute(), stats.rays, stats.intersection_tests,
    )

    if args.preview:
        show_preview(canvas, gamma=settings.gamma)
    return args.output


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ti.init(arch=ti.cpu)

    from src.whitted.scene.errors import SceneError

    try:
        render_scene(args)
        return 0
    except (SceneError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
