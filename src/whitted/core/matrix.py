"""4x4 transformation matrices backed by NumPy.

The matrix data lives in a read-only ``float64`` array so that composition,
transposition and inversion go through NumPy. Transforming a single point or
vector is the hot path of every intersection test, so each matrix also keeps
its rows as plain Python tuples and applies them without touching NumPy.

Example:
    >>> from src.whitted.core.matrix import Matrix
    >>> from src.whitted.core.tuples import Point
    >>> m = Matrix([[1, 0, 0, 5], [0, 1, 0, -3], [0, 0, 1, 2], [0, 0, 0, 1]])
    >>> m * Point(-3.0, 4.0, 5.0)
    Point(2.0, 1.0, 7.0)
    >>> m.inverse() * Point(2.0, 1.0, 7.0)
    Point(-3.0, 4.0, 5.0)
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import numpy.typing as npt

from src.whitted.core.tuples import EPSILON, Point, Tuple, Vector


class NonInvertibleMatrixError(ValueError):
    """Raised when a transform with a (near) zero determinant is inverted."""


class Matrix:
    """An immutable 4x4 matrix.

    Args:
        rows: Four rows of four numbers, or a (4, 4) array.

    Raises:
        ValueError: If the input is not 4x4.
    """

    __slots__ = ("_data", "_rows")

    def __init__(self, rows: Sequence[Sequence[float]] | npt.NDArray[np.float64]) -> None:
        data = np.array(rows, dtype=np.float64)
        if data.shape != (4, 4):
            raise ValueError(f"Matrix must be 4x4, got shape {data.shape}")
        data.flags.writeable = False
        self._data = data
        self._rows = tuple(tuple(float(v) for v in row) for row in data)

    @classmethod
    def identity(cls) -> Matrix:
        return IDENTITY

    @property
    def data(self) -> npt.NDArray[np.float64]:
        """Read-only view of the underlying array."""
        return self._data

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        return self._rows[row][col]

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return Matrix(self._data @ other._data)
        if isinstance(other, Tuple):
            (a0, a1, a2, a3), (b0, b1, b2, b3), (c0, c1, c2, c3), _ = self._rows
            x, y, z = other.x, other.y, other.z
            if type(other) is Point:
                return Point(
                    a0 * x + a1 * y + a2 * z + a3,
                    b0 * x + b1 * y + b2 * z + b3,
                    c0 * x + c1 * y + c2 * z + c3,
                )
            return Vector(
                a0 * x + a1 * y + a2 * z,
                b0 * x + b1 * y + b2 * z,
                c0 * x + c1 * y + c2 * z,
            )
        return NotImplemented

    def transpose(self) -> Matrix:
        return Matrix(self._data.T)

    def determinant(self) -> float:
        return float(np.linalg.det(self._data))

    def is_invertible(self) -> bool:
        return abs(self.determinant()) >= EPSILON

    def inverse(self) -> Matrix:
        """Return the inverse matrix.

        Raises:
            NonInvertibleMatrixError: If the determinant is within EPSILON of 0.
        """
        det = self.determinant()
        if abs(det) < EPSILON:
            raise NonInvertibleMatrixError(
                f"Matrix is not invertible (determinant {det:.3g}):\n{self._data}"
            )
        return Matrix(np.linalg.inv(self._data))

    def isclose(self, other: Matrix, epsilon: float = EPSILON) -> bool:
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=epsilon))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __reduce__(self):
        return (Matrix, (self._rows,))

    def __repr__(self) -> str:
        return f"Matrix({[list(r) for r in self._rows]})"


IDENTITY = Matrix(np.eye(4))
