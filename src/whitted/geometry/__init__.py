"""Shape primitives and bounding volumes.

Components:
    sphere: Unit sphere and the shared quadratic solver
    plane: The xz plane
    cube: Axis-aligned cube spanning [-1, 1]
    cylinder: Truncated, optionally capped cylinders and double cones
    triangle: Flat and smooth triangles
    probe: Recording shape used to test object and group plumbing
    bounds: Axis-aligned bounding boxes
    group: Groups with bounding-box pruning and subdivision

Every shape works in its own object space and implements:
    local_intersect(ray, collector): push hits onto the collector
    local_normal_at(point, hit): object-space normal
    bounds(): object-space bounding box
"""

from .bounds import BoundingBox
from .cube import Cube
from .cylinder import Cone, Cylinder
from .group import Group, GroupBuilder
from .plane import Plane
from .probe import ProbeShape
from .sphere import Sphere, solve_quadratic
from .triangle import SmoothTriangle, Triangle

__all__ = [
    "BoundingBox",
    "Sphere",
    "solve_quadratic",
    "Plane",
    "Cube",
    "Cylinder",
    "Cone",
    "Triangle",
    "SmoothTriangle",
    "ProbeShape",
    "Group",
    "GroupBuilder",
]
