"""Surface appearance.

Components:
    pattern: Plain, stripe, ring, gradient and checker color functions
    material: Phong material and the local lighting model
"""

from .material import AIR, DIAMOND, GLASS, VACUUM, WATER, Material
from .pattern import Pattern, PatternKind

__all__ = [
    "Material",
    "Pattern",
    "PatternKind",
    "VACUUM",
    "AIR",
    "WATER",
    "GLASS",
    "DIAMOND",
]
