"""Pinhole camera with sequential and multi-process rendering."""

from .pinhole import ANTI_ALIASING_OFFSETS, DEFAULT_BAND_SIZE, Camera

__all__ = [
    "Camera",
    "ANTI_ALIASING_OFFSETS",
    "DEFAULT_BAND_SIZE",
]
