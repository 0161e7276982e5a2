"""Transformation builders and the chained-transform mixin.

Composing a transform onto an existing one left-multiplies it, so the most
recently applied operation is the first one a point goes through::

    sphere.scale(2, 2, 2).translate(0, 1, 0)   # transform = T * S

Rotation angles are in radians.
"""

from __future__ import annotations

import math

from src.whitted.core.matrix import Matrix
from src.whitted.core.tuples import Point, Vector


def translation(x: float, y: float, z: float) -> Matrix:
    return Matrix([[1, 0, 0, x], [0, 1, 0, y], [0, 0, 1, z], [0, 0, 0, 1]])


def scaling(x: float, y: float, z: float) -> Matrix:
    return Matrix([[x, 0, 0, 0], [0, y, 0, 0], [0, 0, z, 0], [0, 0, 0, 1]])


def rotation_x(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix([[1, 0, 0, 0], [0, c, -s, 0], [0, s, c, 0], [0, 0, 0, 1]])


def rotation_y(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix([[c, 0, s, 0], [0, 1, 0, 0], [-s, 0, c, 0], [0, 0, 0, 1]])


def rotation_z(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix([[c, -s, 0, 0], [s, c, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix:
    """Shear each coordinate in proportion to the other two.

    ``xy`` moves x in proportion to y, ``xz`` moves x in proportion to z, etc.
    """
    return Matrix([[1, xy, xz, 0], [yx, 1, yz, 0], [zx, zy, 1, 0], [0, 0, 0, 1]])


def view_transform(from_point: Point, to: Point, up: Vector) -> Matrix:
    """Build the world-to-eye transform for a camera.

    Args:
        from_point: Eye position.
        to: Point the eye looks at.
        up: Approximate up direction; need not be normalized or orthogonal.

    Returns:
        A matrix that moves the world so the eye sits at the origin looking
        down -z with +y up.
    """
    forward = (to - from_point).normalize()
    left = forward.cross(up.normalize())
    true_up = left.cross(forward)
    orientation = Matrix(
        [
            [left.x, left.y, left.z, 0],
            [true_up.x, true_up.y, true_up.z, 0],
            [-forward.x, -forward.y, -forward.z, 0],
            [0, 0, 0, 1],
        ]
    )
    return orientation * translation(-from_point.x, -from_point.y, -from_point.z)


class Transformable:
    """Chained transform helpers for entities carrying a transform.

    Subclasses implement :meth:`transformed`, returning a copy of the entity
    with ``matrix`` left-multiplied onto its current transform.
    """

    __slots__ = ()

    def transformed(self, matrix: Matrix):
        raise NotImplementedError

    def translate(self, x: float, y: float, z: float):
        return self.transformed(translation(x, y, z))

    def scale(self, x: float, y: float, z: float):
        return self.transformed(scaling(x, y, z))

    def rotate_x(self, radians: float):
        return self.transformed(rotation_x(radians))

    def rotate_y(self, radians: float):
        return self.transformed(rotation_y(radians))

    def rotate_z(self, radians: float):
        return self.transformed(rotation_z(radians))

    def shear(self, xy: float, xz: float, yx: float, yz: float, zx: float, zy: float):
        return self.transformed(shearing(xy, xz, yx, yz, zx, zy))
