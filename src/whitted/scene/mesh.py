"""Wavefront OBJ import.

Only the geometric subset is understood:

    - ``v x y z``: vertex
    - ``vn x y z``: vertex normal
    - ``f a b c ...``: face, each entry ``i``, ``i/j``, ``i/j/k`` or ``i//k``
      (1-based; texture indices are ignored)
    - ``g name``: subsequent faces belong to the named group

Any other line, blank lines included, is counted as ignored. Faces with more
than three vertices are fan-triangulated from their first vertex. Faces whose
vertices all carry normals become smooth triangles. Vertices are rescaled so
the model fits the [-1, 1] box, centred on the origin.

Example:
    >>> from src.whitted.scene.mesh import parse_obj
    >>> teapot = parse_obj(open("teapot.obj").read())
    >>> teapot.bounding_box()
    BoundingBox(Point(-1.0, ...), Point(1.0, ...))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from src.whitted.core.tuples import Point, Vector
from src.whitted.geometry.bounds import BoundingBox
from src.whitted.geometry.group import Group
from src.whitted.geometry.triangle import SmoothTriangle, Triangle
from src.whitted.scene.errors import ObjParseError
from src.whitted.scene.object import SceneObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FaceVertex:
    vertex: int
    normal: int | None = None


@dataclass
class Face:
    vertices: list[FaceVertex]
    group: str | None = None

    def has_normals(self) -> bool:
        return all(fv.normal is not None for fv in self.vertices)


@dataclass
class ObjData:
    """Raw records read from an OBJ file.

    Vertices and normals are stored 0-based; face entries keep the file's
    1-based indices and are validated against them as faces are read.

    Attributes:
        ignored: Number of lines that were not understood.
        vertices: Vertex positions in file order.
        normals: Vertex normals in file order.
        faces: Faces in file order with their group name.
    """

    ignored: int = 0
    vertices: list[Point] = field(default_factory=list)
    normals: list[Vector] = field(default_factory=list)
    faces: list[Face] = field(default_factory=list)

    def vertex(self, index: int) -> Point:
        """Vertex by 1-based index."""
        return self.vertices[index - 1]

    def normal(self, index: int) -> Vector:
        """Normal by 1-based index."""
        return self.normals[index - 1]

    def group_names(self) -> list[str]:
        names: list[str] = []
        for face in self.faces:
            if face.group is not None and face.group not in names:
                names.append(face.group)
        return names

    def normalized(self) -> ObjData:
        """Copy with vertices centred on the origin and scaled into [-1, 1]."""
        if not self.vertices:
            return self

        box = BoundingBox.empty()
        for p in self.vertices:
            box.add_point(p)
        extent = box.max - box.min
        scale = max(extent.x, extent.y, extent.z) / 2.0
        if scale == 0.0:
            return self

        center = box.min + extent / 2.0
        vertices = [
            Point((p.x - center.x) / scale, (p.y - center.y) / scale, (p.z - center.z) / scale)
            for p in self.vertices
        ]
        return ObjData(self.ignored, vertices, list(self.normals), list(self.faces))

    def triangles(self, face: Face) -> list[SceneObject]:
        """Fan-triangulate a face."""
        first = face.vertices[0]
        smooth = face.has_normals()
        result = []
        for a, b in zip(face.vertices[1:-1], face.vertices[2:]):
            if smooth:
                shape = SmoothTriangle.from_points(
                    self.vertex(first.vertex), self.vertex(a.vertex), self.vertex(b.vertex),
                    self.normal(first.normal), self.normal(a.normal), self.normal(b.normal),
                )
            else:
                shape = Triangle(
                    self.vertex(first.vertex), self.vertex(a.vertex), self.vertex(b.vertex)
                )
            result.append(SceneObject(shape))
        return result

    def to_group(self) -> SceneObject:
        """Build a group of all faces.

        Unnamed faces become direct children. When the file names groups,
        each named group becomes a sub-group, in order of first appearance.
        """
        anonymous: list[SceneObject] = []
        named: dict[str, list[SceneObject]] = {}
        for face in self.faces:
            triangles = self.triangles(face)
            if face.group is None:
                anonymous.extend(triangles)
            else:
                named.setdefault(face.group, []).extend(triangles)

        children = list(anonymous)
        children.extend(SceneObject(Group(tuple(members))) for members in named.values())
        return SceneObject(Group(tuple(children)))


# =============================================================================
# Parsing
# =============================================================================


def _parse_xyz(fields: list[str], kind: str, line: str, line_number: int) -> tuple[float, ...]:
    if len(fields) != 4:
        raise ObjParseError(f"Invalid {kind} `{line.strip()}` at line {line_number}")
    try:
        return tuple(float(value) for value in fields[1:])
    except ValueError as err:
        raise ObjParseError(f"Invalid {kind} `{line.strip()}` at line {line_number}") from err


def _parse_face(fields: list[str], line: str, line_number: int, data: ObjData) -> list[FaceVertex]:
    message = f"Invalid face `{line.strip()}` at line {line_number}"
    if len(fields) < 4:
        raise ObjParseError(message)

    vertices = []
    for entry in fields[1:]:
        parts = entry.split("/")
        if len(parts) > 3:
            raise ObjParseError(message)
        try:
            vertex = int(parts[0])
            normal = int(parts[2]) if len(parts) == 3 and parts[2] else None
        except ValueError as err:
            raise ObjParseError(message) from err

        if not 1 <= vertex <= len(data.vertices):
            raise ObjParseError(message)
        if normal is not None and not 1 <= normal <= len(data.normals):
            raise ObjParseError(message)
        vertices.append(FaceVertex(vertex, normal))
    return vertices


def parse_obj_data(text: str) -> ObjData:
    """Read OBJ records without building any geometry.

    Raises:
        ObjParseError: On a malformed vertex, normal, face or group line.
    """
    data = ObjData()
    group: str | None = None

    for line_number, line in enumerate(text.splitlines(), start=1):
        fields = line.split()
        if not fields:
            data.ignored += 1
            continue

        keyword = fields[0]
        if keyword == "v":
            data.vertices.append(Point(*_parse_xyz(fields, "vertex", line, line_number)))
        elif keyword == "vn":
            data.normals.append(Vector(*_parse_xyz(fields, "normal", line, line_number)))
        elif keyword == "f":
            data.faces.append(Face(_parse_face(fields, line, line_number, data), group))
        elif keyword == "g":
            if len(fields) != 2:
                raise ObjParseError(f"Invalid group `{line.strip()}` at line {line_number}")
            group = fields[1]
        else:
            data.ignored += 1

    return data


def parse_obj(text: str) -> SceneObject:
    """Parse OBJ text into a normalised group object."""
    data = parse_obj_data(text)
    logger.debug(
        "Parsed OBJ: %d vertices, %d normals, %d faces, %d ignored lines",
        len(data.vertices), len(data.normals), len(data.faces), data.ignored,
    )
    return data.normalized().to_group()


def load_obj(path: str | Path) -> SceneObject:
    """Read and parse an OBJ file.

    Raises:
        OSError: If the file cannot be read.
        ObjParseError: If its content is malformed.
    """
    return parse_obj(Path(path).read_text())
