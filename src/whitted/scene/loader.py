"""YAML scene description loader.

A scene file is a YAML list. Each item either defines a reusable value or
adds something to the scene:

.. code-block:: yaml

    - define: white-material
      value: {color: [1, 1, 1], diffuse: 0.7, ambient: 0.1}

    - define: blue-material
      extend: white-material
      value: {color: [0.537, 0.831, 0.914]}

    - define: standard-transform
      value:
        - [translate, 1, -1, 1]
        - [scale, 0.5, 0.5, 0.5]

    - add: camera
      width: 100
      height: 100
      field-of-view: 0.785
      from: [-6, 6, -10]
      to: [6, 0, 6]
      up: [-0.45, 1, 0]

    - add: light
      at: [50, 100, -50]
      intensity: [1, 1, 1]

    - add: cube
      material: blue-material
      transform:
        - standard-transform
        - [translate, 4, 0, 0]

Definitions are collected before anything is added, so an item may refer to
a definition that appears later in the file. Transforms apply in list order.

Example:
    >>> from src.whitted.scene.loader import load_scene
    >>> scene = load_scene("examples/scenes/showcase.yaml")
    >>> canvas = scene.camera.render(scene.world)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import yaml

from src.whitted.camera.pinhole import Camera
from src.whitted.core.color import WHITE, Color
from src.whitted.core.matrix import IDENTITY, Matrix, NonInvertibleMatrixError
from src.whitted.core.transform import (
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    translation,
    view_transform,
)
from src.whitted.core.tuples import Point, Vector
from src.whitted.geometry.cube import Cube
from src.whitted.geometry.cylinder import Cone, Cylinder
from src.whitted.geometry.group import GroupBuilder
from src.whitted.geometry.plane import Plane
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import Material
from src.whitted.materials.pattern import Pattern
from src.whitted.scene.errors import SceneError
from src.whitted.scene.lights import AreaLight, Light, PointLight
from src.whitted.scene.mesh import load_obj
from src.whitted.scene.object import SceneObject
from src.whitted.scene.world import DEFAULT_RECURSION_LIMIT, World

logger = logging.getLogger(__name__)

# Transform name -> (constructor, number of arguments)
TRANSFORMS: dict[str, tuple[Callable[..., Matrix], int]] = {
    "translate": (translation, 3),
    "scale": (scaling, 3),
    "rotate-x": (rotation_x, 1),
    "rotate-y": (rotation_y, 1),
    "rotate-z": (rotation_z, 1),
    "shear": (shearing, 6),
}

MATERIAL_KEYS = {
    "ambient": "ambient",
    "diffuse": "diffuse",
    "specular": "specular",
    "shininess": "shininess",
    "reflective": "reflective",
    "transparency": "transparency",
    "refractive-index": "refractive_index",
}

PRIMITIVES = {"sphere": Sphere, "plane": Plane, "cube": Cube}

PATTERNS: dict[str, Callable[..., Pattern]] = {
    "stripes": Pattern.stripe,
    "ring": Pattern.ring,
    "gradient": Pattern.gradient,
    "checkers": Pattern.checker,
}


@dataclass
class Scene:
    """A loaded scene.

    Attributes:
        world: Objects, lights and recursion limit.
        camera: Camera described by the file.
    """

    world: World
    camera: Camera


# =============================================================================
# Scalar conversions
# =============================================================================


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneError(f"Expected a number for {what}, got {value!r}")
    return float(value)


def _integer(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SceneError(f"Expected an integer for {what}, got {value!r}")
    return value


def _boolean(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise SceneError(f"Expected true or false for {what}, got {value!r}")
    return value


def _triple(value: Any, what: str) -> tuple[float, float, float]:
    if not isinstance(value, list) or len(value) != 3:
        raise SceneError(f"Expected a list of three numbers for {what}, got {value!r}")
    x, y, z = (_number(v, what) for v in value)
    return x, y, z


def _required(item: dict, key: str, what: str) -> Any:
    if key not in item:
        raise SceneError(f"Missing '{key}' in {what}")
    return item[key]


# =============================================================================
# Loader
# =============================================================================


class SceneLoader:
    """Turns a parsed YAML document into a :class:`Scene`.

    Args:
        base_dir: Directory used to resolve relative ``obj`` file paths.
        recursion_limit: Recursion limit of the resulting world.
        divide_threshold: If given, every group is subdivided with
            :meth:`SceneObject.divide` using this threshold.
    """

    def __init__(
        self,
        base_dir: str | Path | None = None,
        recursion_limit: int = DEFAULT_RECURSION_LIMIT,
        divide_threshold: int | None = None,
    ) -> None:
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.recursion_limit = recursion_limit
        self.divide_threshold = divide_threshold
        self.definitions: dict[str, Any] = {}

    def load(self, document: Any) -> Scene:
        """Build the scene from a parsed document.

        Raises:
            SceneError: On any malformed item, unknown name or missing camera.
        """
        if not isinstance(document, list):
            raise SceneError("A scene file must contain a list of items")

        for index, item in enumerate(document):
            if not isinstance(item, dict):
                raise SceneError(f"Item {index} is not a mapping: {item!r}")
            if "define" in item:
                self._define(item)

        objects: list[SceneObject] = []
        lights: list[Light] = []
        camera: Camera | None = None

        for index, item in enumerate(document):
            if "define" in item:
                continue
            if "add" not in item:
                raise SceneError(f"Item {index} has neither 'add' nor 'define': {item!r}")

            kind = item["add"]
            if not isinstance(kind, str):
                raise SceneError(f"Item {index} has a non-string 'add': {kind!r}")
            logger.debug("Item %d: adding %s", index, kind)
            try:
                if kind == "camera":
                    if camera is not None:
                        logger.warning("Item %d replaces a previously defined camera", index)
                    camera = self.camera(item)
                elif kind == "light":
                    lights.append(self.light(item))
                else:
                    objects.append(self.object(item))
            except NonInvertibleMatrixError as err:
                raise SceneError(f"Item {index} ({kind}) has a singular transform") from err
            except SceneError as err:
                raise SceneError(f"Item {index} ({kind}): {err}") from err

        if camera is None:
            raise SceneError("Scene has no camera")

        if self.divide_threshold is not None:
            objects = [obj.divide(self.divide_threshold) for obj in objects]

        logger.info("Loaded scene: %d objects, %d lights", len(objects), len(lights))
        return Scene(World(objects, lights, self.recursion_limit), camera)

    # -------------------------------------------------------------------------
    # Definitions
    # -------------------------------------------------------------------------

    def _define(self, item: dict) -> None:
        name = item["define"]
        if not isinstance(name, str):
            raise SceneError(f"Definition names must be strings, got {name!r}")
        value = _required(item, "value", f"definition '{name}'")

        if "extend" in item:
            parent = self.resolve(item["extend"], dict, f"definition '{name}'")
            if not isinstance(value, dict):
                raise SceneError(f"Definition '{name}' extends '{item['extend']}' but is not a mapping")
            value = {**parent, **value}

        self.definitions[name] = value

    def resolve(self, value: Any, expected: type, what: str) -> Any:
        """Return ``value`` itself, or the definition it names."""
        if isinstance(value, str):
            if value not in self.definitions:
                raise SceneError(f"Unknown definition '{value}' in {what}")
            value = self.definitions[value]
        if not isinstance(value, expected):
            raise SceneError(f"Expected a {expected.__name__} for {what}, got {value!r}")
        return value

    # -------------------------------------------------------------------------
    # Transforms
    # -------------------------------------------------------------------------

    def transform(self, value: Any) -> Matrix:
        """Compose a transform list; the first entry is applied first."""
        matrix = IDENTITY
        for step in self._transform_steps(value):
            matrix = step * matrix
        return matrix

    def _transform_steps(self, value: Any, resolving: frozenset[str] = frozenset()) -> list[Matrix]:
        if isinstance(value, str):
            if value in resolving:
                raise SceneError(f"Transform definition '{value}' refers to itself")
            resolving = resolving | {value}

        steps: list[Matrix] = []
        for entry in self.resolve(value, list, "transform"):
            if isinstance(entry, str):
                steps.extend(self._transform_steps(entry, resolving))
                continue
            if not isinstance(entry, list) or not entry:
                raise SceneError(f"Invalid transform entry {entry!r}")

            name, *args = entry
            if name not in TRANSFORMS:
                raise SceneError(f"Unknown transform '{name}'")
            build, arity = TRANSFORMS[name]
            if len(args) != arity:
                raise SceneError(f"Transform '{name}' takes {arity} arguments, got {len(args)}")
            steps.append(build(*(_number(arg, name) for arg in args)))
        return steps

    # -------------------------------------------------------------------------
    # Materials
    # -------------------------------------------------------------------------

    def material(self, value: Any) -> Material:
        desc = self.resolve(value, dict, "material")

        fields: dict[str, Any] = {}
        for key, entry in desc.items():
            if key in MATERIAL_KEYS:
                fields[MATERIAL_KEYS[key]] = _number(entry, key)
            elif key == "color":
                fields["pattern"] = Pattern.plain(Color(*_triple(entry, "color")))
            elif key == "pattern":
                fields["pattern"] = self.pattern(entry)
            else:
                raise SceneError(f"Unknown material property '{key}'")
        return Material(**fields)

    def pattern(self, value: Any) -> Pattern:
        desc = self.resolve(value, dict, "pattern")
        kind = _required(desc, "type", "pattern")
        colors = [
            Color(*_triple(c, "pattern color"))
            for c in self.resolve(_required(desc, "colors", "pattern"), list, "pattern colors")
        ]

        if not isinstance(kind, str) or kind not in PATTERNS:
            raise SceneError(f"Unknown pattern type '{kind}'")
        try:
            pattern = PATTERNS[kind](*colors)
        except TypeError as err:
            raise SceneError(f"Pattern '{kind}' takes two colors, got {len(colors)}") from err
        except ValueError as err:
            raise SceneError(str(err)) from err

        if "transform" in desc:
            pattern = pattern.transformed(self.transform(desc["transform"]))
        return pattern

    # -------------------------------------------------------------------------
    # Scene items
    # -------------------------------------------------------------------------

    def camera(self, item: dict) -> Camera:
        width = _integer(_required(item, "width", "camera"), "width")
        height = _integer(_required(item, "height", "camera"), "height")
        fov = _number(_required(item, "field-of-view", "camera"), "field-of-view")
        view = view_transform(
            Point(*_triple(_required(item, "from", "camera"), "from")),
            Point(*_triple(_required(item, "to", "camera"), "to")),
            Vector(*_triple(_required(item, "up", "camera"), "up")),
        )
        try:
            return Camera(width, height, fov, view)
        except NonInvertibleMatrixError:
            raise
        except ValueError as err:
            raise SceneError(str(err)) from err

    def light(self, item: dict) -> Light:
        intensity = Color(*_triple(item["intensity"], "intensity")) if "intensity" in item else WHITE

        if "corner" in item:
            usteps = _integer(_required(item, "usteps", "area light"), "usteps")
            vsteps = _integer(_required(item, "vsteps", "area light"), "vsteps")
            if usteps <= 0 or vsteps <= 0:
                raise SceneError(f"Area light steps must be positive, got {usteps}x{vsteps}")
            return AreaLight(
                Point(*_triple(item["corner"], "corner")),
                Vector(*_triple(_required(item, "uvec", "area light"), "uvec")),
                usteps,
                Vector(*_triple(_required(item, "vvec", "area light"), "vvec")),
                vsteps,
                intensity,
                jitter=_boolean(item.get("jitter", False), "jitter"),
            )
        if "at" in item:
            return PointLight(Point(*_triple(item["at"], "at")), intensity)
        raise SceneError("A light needs either 'at' or 'corner'")

    def object(self, item: dict) -> SceneObject:
        """Build a primitive, group or OBJ model from an ``add`` item."""
        kind = item["add"]
        transform = self.transform(item["transform"]) if "transform" in item else IDENTITY
        material = self.material(item["material"]) if "material" in item else None
        has_shadow = _boolean(item["shadow"], "shadow") if "shadow" in item else None

        if kind == "group":
            children = self.resolve(_required(item, "children", "group"), list, "group children")
            built = [self._child(child) for child in children]
            return GroupBuilder(built, transform, material, has_shadow).build()

        if kind == "obj":
            path = self.base_dir / str(_required(item, "file", "obj"))
            try:
                model = load_obj(path)
            except OSError as err:
                raise SceneError(f"Cannot read OBJ file {path}: {err}") from err
            return GroupBuilder([model], transform, material, has_shadow).build()

        if kind in ("cylinder", "cone"):
            shape_type = Cylinder if kind == "cylinder" else Cone
            shape = shape_type(
                _number(item.get("min", float("-inf")), "min"),
                _number(item.get("max", float("inf")), "max"),
                _boolean(item.get("closed", False), "closed"),
            )
        elif kind in PRIMITIVES:
            shape = PRIMITIVES[kind]()
        else:
            raise SceneError(f"Unknown item type '{kind}'")

        return SceneObject(
            shape, material, transform, has_shadow if has_shadow is not None else True
        )

    def _child(self, child: Any) -> SceneObject:
        if not isinstance(child, dict) or "add" not in child or not isinstance(child["add"], str):
            raise SceneError(f"Group children must be 'add' items, got {child!r}")
        if child["add"] in ("camera", "light"):
            raise SceneError(f"A group cannot contain a {child['add']}")
        return self.object(child)


# =============================================================================
# Entry points
# =============================================================================


def load_scene_from_string(
    text: str,
    base_dir: str | Path | None = None,
    *,
    recursion_limit: int = DEFAULT_RECURSION_LIMIT,
    divide_threshold: int | None = None,
) -> Scene:
    """Parse a YAML scene description.

    Raises:
        SceneError: If the text is not valid YAML or describes an invalid scene.
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise SceneError(f"Invalid YAML: {err}") from err
    return SceneLoader(base_dir, recursion_limit, divide_threshold).load(document)


def load_scene(
    path: str | Path,
    *,
    recursion_limit: int = DEFAULT_RECURSION_LIMIT,
    divide_threshold: int | None = None,
) -> Scene:
    """Read a YAML scene file; OBJ paths inside it are relative to its directory."""
    path = Path(path)
    logger.info("Loading scene from %s", path)
    return load_scene_from_string(
        path.read_text(),
        path.parent,
        recursion_limit=recursion_limit,
        divide_threshold=divide_threshold,
    )
