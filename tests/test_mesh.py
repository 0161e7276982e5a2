"""Tests for Wavefront OBJ import.

Tests cover:
- Ignoring unrecognised lines
- Vertex, normal and face records
- Fan triangulation of polygons
- Named groups
- Smooth triangles from faces with normals
- Normalisation into the [-1, 1] box
- Error messages for malformed records
"""

import textwrap

import pytest


def _obj(text):
    return textwrap.dedent(text).lstrip("\n")


class TestParseRecords:
    """Tests for reading raw OBJ records."""

    def test_ignores_unrecognised_lines(self):
        from src.whitted.scene.mesh import parse_obj_data

        text = _obj(
            """
            There was a young lady named Bright
            who traveled much faster than light.
            She set out one day
            in a relative way,
            and came back the previous night.
            """
        )
        data = parse_obj_data(text)
        assert data.ignored == 5
        assert data.vertices == []
        assert data.faces == []

    def test_blank_lines_are_ignored(self):
        from src.whitted.scene.mesh import parse_obj_data

        assert parse_obj_data("\n\nv 1 2 3\n").ignored == 2

    def test_vertex_records(self):
        from src.whitted.core.tuples import Point
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data(
            _obj(
                """
                v -1 1 0
                v -1.0000 0.5000 0.0000
                v 1 0 0
                v 1 1 0
                """
            )
        )
        assert data.vertex(1) == Point(-1, 1, 0)
        assert data.vertex(2) == Point(-1, 0.5, 0)
        assert data.vertex(3) == Point(1, 0, 0)
        assert data.vertex(4) == Point(1, 1, 0)

    def test_normal_records(self):
        from src.whitted.core.tuples import Vector
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data("vn 0 0 1\nvn 0.707 0 -0.707\nvn 1 2 3\n")
        assert data.normal(1) == Vector(0, 0, 1)
        assert data.normal(2) == Vector(0.707, 0, -0.707)
        assert data.normal(3) == Vector(1, 2, 3)

    def test_face_entry_forms(self):
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data(
            _obj(
                """
                v 0 1 0
                v -1 0 0
                v 1 0 0
                vn -1 0 0
                vn 1 0 0
                vn 0 1 0
                f 1 2 3
                f 1/0 2/0 3/0
                f 1//3 2//1 3//2
                f 1/0/3 2/102/1 3/14/2
                """
            )
        )
        assert len(data.faces) == 4
        assert [fv.vertex for fv in data.faces[0].vertices] == [1, 2, 3]
        assert not data.faces[1].has_normals()
        assert [fv.normal for fv in data.faces[2].vertices] == [3, 1, 2]
        assert [fv.normal for fv in data.faces[3].vertices] == [3, 1, 2]

    def test_named_groups(self):
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data(
            _obj(
                """
                v -1 1 0
                v -1 0 0
                v 1 0 0
                v 1 1 0
                g FirstGroup
                f 1 2 3
                g SecondGroup
                f 1 3 4
                """
            )
        )
        assert [face.group for face in data.faces] == ["FirstGroup", "SecondGroup"]
        assert data.group_names() == ["FirstGroup", "SecondGroup"]


class TestParseErrors:
    """Tests for malformed OBJ records."""

    @pytest.mark.parametrize(
        "text,message",
        [
            ("v 1 2\n", "Invalid vertex `v 1 2` at line 1"),
            ("v 1 2 x\n", "Invalid vertex `v 1 2 x` at line 1"),
            ("\nvn 1 2 3 4\n", "Invalid normal `vn 1 2 3 4` at line 2"),
            ("v 0 0 0\nv 1 0 0\nf 1 2\n", "Invalid face `f 1 2` at line 3"),
            ("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 4\n", "Invalid face `f 1 2 4` at line 4"),
            ("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1//1 2 3\n", "Invalid face `f 1//1 2 3` at line 4"),
            ("v 0 0 0\nv 1 0 0\nv 0 1 0\nf a b c\n", "Invalid face `f a b c` at line 4"),
            ("g\n", "Invalid group `g` at line 1"),
        ],
    )
    def test_error_messages(self, text, message):
        from src.whitted.scene.errors import ObjParseError
        from src.whitted.scene.mesh import parse_obj_data

        with pytest.raises(ObjParseError) as excinfo:
            parse_obj_data(text)
        assert str(excinfo.value) == message


class TestBuildGeometry:
    """Tests for turning records into triangles and groups."""

    def test_triangle_faces(self):
        from src.whitted.core.tuples import Point
        from src.whitted.geometry.triangle import Triangle
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data(
            _obj(
                """
                v -1 1 0
                v -1 0 0
                v 1 0 0
                v 1 1 0
                f 1 2 3
                f 1 3 4
                """
            )
        )
        group = data.to_group()
        t1, t2 = (child.shape for child in group.shape.children)
        assert isinstance(t1, Triangle)
        assert (t1.p1, t1.p2, t1.p3) == (Point(-1, 1, 0), Point(-1, 0, 0), Point(1, 0, 0))
        assert (t2.p1, t2.p2, t2.p3) == (Point(-1, 1, 0), Point(1, 0, 0), Point(1, 1, 0))

    def test_polygon_fan_triangulation(self):
        from src.whitted.core.tuples import Point
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data(
            _obj(
                """
                v -1 1 0
                v -1 0 0
                v 1 0 0
                v 1 1 0
                v 0 2 0
                f 1 2 3 4 5
                """
            )
        )
        triangles = [child.shape for child in data.to_group().shape.children]
        assert len(triangles) == 3
        assert [(t.p2, t.p3) for t in triangles] == [
            (Point(-1, 0, 0), Point(1, 0, 0)),
            (Point(1, 0, 0), Point(1, 1, 0)),
            (Point(1, 1, 0), Point(0, 2, 0)),
        ]
        assert all(t.p1 == Point(-1, 1, 0) for t in triangles)

    def test_named_groups_become_subgroups(self):
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data(
            _obj(
                """
                v -1 1 0
                v -1 0 0
                v 1 0 0
                v 1 1 0
                f 1 2 4
                g FirstGroup
                f 1 2 3
                g SecondGroup
                f 1 3 4
                f 2 3 4
                """
            )
        )
        children = data.to_group().shape.children
        assert len(children) == 3
        assert not children[0].is_group()
        assert children[1].is_group()
        assert len(children[1].shape.children) == 1
        assert len(children[2].shape.children) == 2

    def test_faces_with_normals_are_smooth(self):
        from src.whitted.core.tuples import Vector
        from src.whitted.geometry.triangle import SmoothTriangle
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data(
            _obj(
                """
                v 0 1 0
                v -1 0 0
                v 1 0 0
                vn -1 0 0
                vn 1 0 0
                vn 0 1 0
                f 1//3 2//1 3//2
                f 1/0/3 2/102/1 3/14/2
                """
            )
        )
        for child in data.to_group().shape.children:
            shape = child.shape
            assert isinstance(shape, SmoothTriangle)
            assert shape.n1 == Vector(0, 1, 0)
            assert shape.n2 == Vector(-1, 0, 0)
            assert shape.n3 == Vector(1, 0, 0)

    def test_smooth_triangle_normal_is_interpolated(self):
        """A hit's (u, v) weights the three vertex normals."""
        from src.whitted.core.intersection import Intersection
        from src.whitted.core.tuples import Point, Vector
        from src.whitted.scene.mesh import parse_obj_data

        data = parse_obj_data(
            _obj(
                """
                v 0 1 0
                v -1 0 0
                v 1 0 0
                vn 0 1 0
                vn -1 0 0
                vn 1 0 0
                f 1//1 2//2 3//3
                """
            )
        )
        (child,) = data.to_group().shape.children
        hit = Intersection(1, child, 0.45, 0.25)
        normal = child.normal_at(Point(0, 0, 0), hit)
        assert normal.isclose(Vector(-0.5547, 0.83205, 0), 1e-4)

    def test_parse_normalises_model(self):
        """Parsed models are centred and scaled into [-1, 1]."""
        from src.whitted.core.tuples import Point
        from src.whitted.scene.mesh import parse_obj

        model = parse_obj(
            _obj(
                """
                v 2 2 2
                v 6 2 2
                v 2 4 2
                v 2 2 3
                f 1 2 3
                f 1 2 4
                """
            )
        )
        box = model.bounding_box()
        assert box.min.isclose(Point(-1, -0.5, -0.25))
        assert box.max.isclose(Point(1, 0.5, 0.25))

    def test_normalise_degenerate_input(self):
        from src.whitted.scene.mesh import ObjData

        empty = ObjData()
        assert empty.normalized() is empty

    def test_load_obj(self, tmp_path):
        from src.whitted.scene.mesh import load_obj

        path = tmp_path / "quad.obj"
        path.write_text("v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\nf 1 2 3 4\n")
        model = load_obj(path)
        assert model.is_group()
        assert len(model.shape.children) == 2
