"""Tests for the pinhole camera and rendering.

Tests cover:
- Pixel size for horizontal and vertical canvases
- Primary rays through the centre and corner of the canvas
- Rays from a transformed camera
- Rendering the default world, sequentially and in worker processes
- Supersampling and argument validation
"""

import math

import pytest


class TestCameraGeometry:
    """Tests for camera construction and ray generation."""

    def test_construction(self):
        from src.whitted.camera.pinhole import Camera
        from src.whitted.core.matrix import IDENTITY

        camera = Camera(160, 120, math.pi / 2)
        assert camera.hsize == 160
        assert camera.vsize == 120
        assert camera.field_of_view == math.pi / 2
        assert camera.transform == IDENTITY

    @pytest.mark.parametrize("hsize,vsize", [(200, 125), (125, 200)])
    def test_pixel_size(self, hsize, vsize):
        from src.whitted.camera.pinhole import Camera

        camera = Camera(hsize, vsize, math.pi / 2)
        assert abs(camera.pixel_size - 0.01) < 1e-9

    def test_ray_through_centre(self):
        from src.whitted.camera.pinhole import Camera
        from src.whitted.core.tuples import Point, Vector

        ray = Camera(201, 101, math.pi / 2).ray_for_pixel(100, 50)
        assert ray.origin.isclose(Point(0, 0, 0))
        assert ray.direction.isclose(Vector(0, 0, -1))

    def test_ray_through_corner(self):
        from src.whitted.camera.pinhole import Camera
        from src.whitted.core.tuples import Point, Vector

        ray = Camera(201, 101, math.pi / 2).ray_for_pixel(0, 0)
        assert ray.origin.isclose(Point(0, 0, 0))
        assert ray.direction.isclose(Vector(0.66519, 0.33259, -0.66851))

    def test_ray_when_camera_is_transformed(self):
        from src.whitted.camera.pinhole import Camera
        from src.whitted.core.transform import rotation_y, translation
        from src.whitted.core.tuples import Point, Vector

        camera = Camera(201, 101, math.pi / 2).with_transform(
            rotation_y(math.pi / 4) * translation(0, -2, 5)
        )
        ray = camera.ray_for_pixel(100, 50)
        half = math.sqrt(2) / 2
        assert ray.origin.isclose(Point(0, 2, -5))
        assert ray.direction.isclose(Vector(half, 0, -half))

    def test_with_helpers_keep_other_settings(self, front_camera):
        resized = front_camera.with_size(22, 44)
        assert (resized.hsize, resized.vsize) == (22, 44)
        assert resized.transform == front_camera.transform

        smooth = front_camera.with_anti_aliasing(3)
        assert smooth.anti_aliasing == 3
        assert smooth.hsize == front_camera.hsize

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"hsize": 0},
            {"vsize": -1},
            {"field_of_view": 0.0},
            {"field_of_view": math.pi},
            {"anti_aliasing": 6},
        ],
    )
    def test_invalid_arguments(self, kwargs):
        from src.whitted.camera.pinhole import Camera

        with pytest.raises(ValueError):
            Camera(**kwargs)

    def test_singular_view_transform(self):
        from src.whitted.camera.pinhole import Camera
        from src.whitted.core.matrix import NonInvertibleMatrixError
        from src.whitted.core.transform import scaling

        with pytest.raises(NonInvertibleMatrixError):
            Camera(10, 10, math.pi / 2, scaling(1, 0, 1))


class TestRender:
    """Tests for rendering worlds into canvases."""

    def test_render_default_world(self, default_world, front_camera):
        from src.whitted.core.color import Color

        canvas = front_camera.render(default_world)
        assert canvas.width == 11
        assert canvas.height == 11
        assert canvas.pixel_at(5, 5).isclose(Color(0.38066, 0.47583, 0.2855))

    def test_render_is_row_major(self, default_world, front_camera):
        canvas = front_camera.render(default_world)
        assert len(canvas.pixels) == 121
        assert canvas.pixels[5 * 11 + 5] == canvas.pixel_at(5, 5)

    def test_parallel_matches_sequential(self, default_world, front_camera):
        """Worker processes produce a bit-identical image."""
        sequential = front_camera.render(default_world)
        parallel = front_camera.render(default_world, workers=2, band_size=3)
        assert parallel.pixels == sequential.pixels

    def test_render_collects_statistics(self, default_world, front_camera):
        from src.whitted.core.intersection import RenderStats

        stats = RenderStats()
        front_camera.render(default_world, stats=stats)
        assert stats.rays >= 121
        assert stats.intersection_tests >= 2 * 121

    def test_parallel_statistics_match(self, default_world, front_camera):
        from src.whitted.core.intersection import RenderStats

        sequential = RenderStats()
        parallel = RenderStats()
        front_camera.render(default_world, stats=sequential)
        front_camera.render(default_world, workers=2, band_size=4, stats=parallel)
        assert sequential == parallel

    def test_invalid_band_size(self, default_world, front_camera):
        with pytest.raises(ValueError):
            front_camera.render(default_world, band_size=0)

    def test_supersampling_averages_samples(self):
        """A uniformly lit background gives the same color at any sample level."""
        from src.whitted.camera.pinhole import Camera
        from src.whitted.core.color import BLACK
        from src.whitted.scene.world import World

        camera = Camera(4, 4, math.pi / 2, anti_aliasing=3)
        canvas = camera.render(World())
        assert all(pixel == BLACK for pixel in canvas.pixels)

    def test_supersampled_edges_are_blended(self, default_world, front_camera):
        """Pixels on the sphere's silhouette mix hit and background samples."""
        plain = front_camera.render(default_world)
        smooth = front_camera.with_anti_aliasing(4).render(default_world)

        assert len(smooth.pixels) == len(plain.pixels)
        assert any(a != b for a, b in zip(plain.pixels, smooth.pixels))
