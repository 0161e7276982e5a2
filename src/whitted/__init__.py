"""Recursive Whitted-style ray tracer.

Primary rays are cast from a pinhole camera; every hit is shaded with the
Phong model against point and area lights, with shadow rays for visibility
and recursive reflection and refraction rays weighted by Fresnel reflectance.

Subpackages:
    core: Tuples, colors, matrices, transforms, rays, intersections, canvas
    geometry: Shape primitives, bounding boxes and groups
    materials: Patterns and the Phong material
    scene: Objects, lights, worlds, preset scenes and scene file loaders
    camera: Pinhole camera and (parallel) rendering
    preview: Image export and Matplotlib preview
"""

__version__ = "0.1.0"
