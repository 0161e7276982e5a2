"""Scene composition.

Components:
    object: Shapes bound to a material, transform and shadow flag
    lights: Point and area lights
    world: Objects and lights, and the recursive shading entry points
    presets: The default two-sphere world and a showcase scene
    loader: YAML scene descriptions
    mesh: Wavefront OBJ import
    errors: Scene description errors
"""

from .errors import ObjParseError, SceneError
from .lights import AreaLight, Light, PointLight
from .loader import Scene, SceneLoader, load_scene, load_scene_from_string
from .mesh import ObjData, load_obj, parse_obj, parse_obj_data
from .object import SHAPE_TYPES, SceneObject, Shape
from .presets import ShowcaseParams, create_showcase_scene, default_world
from .world import DEFAULT_RECURSION_LIMIT, World

__all__ = [
    # Objects
    "SceneObject",
    "Shape",
    "SHAPE_TYPES",
    # Lights
    "Light",
    "PointLight",
    "AreaLight",
    # World
    "World",
    "DEFAULT_RECURSION_LIMIT",
    "default_world",
    "ShowcaseParams",
    "create_showcase_scene",
    # Scene files
    "Scene",
    "SceneLoader",
    "SceneError",
    "load_scene",
    "load_scene_from_string",
    "ObjData",
    "ObjParseError",
    "parse_obj",
    "parse_obj_data",
    "load_obj",
]
