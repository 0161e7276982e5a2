"""Pytest configuration for ray tracer tests.

Provides Taichi initialization (needed by the export kernel) once per session
and shared scene fixtures.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def default_world():
    """The canonical two-sphere world lit from (-10, 10, -10)."""
    from src.whitted.scene.presets import default_world

    return default_world()


@pytest.fixture
def front_camera():
    """11x11 camera at (0, 0, -5) looking at the origin."""
    import math

    from src.whitted.camera.pinhole import Camera
    from src.whitted.core.transform import view_transform
    from src.whitted.core.tuples import Point, Vector

    return Camera(11, 11, math.pi / 2).with_transform(
        view_transform(Point(0, 0, -5), Point(0, 0, 0), Vector(0, 1, 0))
    )
