"""Tests for bounding boxes and groups.

Tests cover:
- Empty boxes, growing, unions and containment
- Transforming and splitting boxes
- Slab tests against boxes
- Flattening nested group transforms at build time
- Bounding-box pruning, observed through a probe shape
- Partitioning and subdividing groups
"""

import math

import pytest


def _box(lo, hi):
    from src.whitted.core.tuples import Point
    from src.whitted.geometry.bounds import BoundingBox

    return BoundingBox(Point(*lo), Point(*hi))


def _ray(origin, direction):
    from src.whitted.core.ray import Ray
    from src.whitted.core.tuples import Point, Vector

    return Ray(Point(*origin), Vector(*direction).normalize())


class TestBoundingBox:
    """Tests for axis-aligned bounding boxes."""

    def test_empty_box(self):
        from src.whitted.geometry.bounds import BoundingBox

        box = BoundingBox.empty()
        assert box.is_empty()
        assert box.min.x == math.inf
        assert box.max.x == -math.inf

    def test_adding_points_grows_box(self):
        from src.whitted.core.tuples import Point
        from src.whitted.geometry.bounds import BoundingBox

        box = BoundingBox.empty()
        box.add_point(Point(-5, 2, 0))
        box.add_point(Point(7, 0, -3))
        assert box.min == Point(-5, 0, -3)
        assert box.max == Point(7, 2, 0)
        assert not box.is_empty()

    def test_union(self):
        box = _box((-5, -2, 0), (7, 4, 4)) + _box((8, -7, -2), (14, 2, 8))
        assert box == _box((-5, -7, -2), (14, 4, 8))

    def test_union_with_empty_is_identity(self):
        from src.whitted.geometry.bounds import BoundingBox

        box = _box((-1, -1, -1), (1, 1, 1))
        assert BoundingBox.empty() + box == box

    @pytest.mark.parametrize(
        "point,expected",
        [
            ((5, -2, 0), True),
            ((11, 4, 7), True),
            ((8, 1, 3), True),
            ((3, 0, 3), False),
            ((8, -4, 3), False),
            ((8, 1, -1), False),
            ((13, 1, 3), False),
            ((8, 5, 3), False),
            ((8, 1, 8), False),
        ],
    )
    def test_contains_point(self, point, expected):
        from src.whitted.core.tuples import Point

        box = _box((5, -2, 0), (11, 4, 7))
        assert box.contains_point(Point(*point)) is expected

    @pytest.mark.parametrize(
        "lo,hi,expected",
        [
            ((5, -2, 0), (11, 4, 7), True),
            ((6, -1, 1), (10, 3, 6), True),
            ((4, -3, -1), (10, 3, 6), False),
            ((6, -1, 1), (12, 5, 8), False),
        ],
    )
    def test_contains_box(self, lo, hi, expected):
        box = _box((5, -2, 0), (11, 4, 7))
        assert box.contains_box(_box(lo, hi)) is expected

    def test_transform(self):
        """The result encloses all eight transformed corners."""
        from src.whitted.core.transform import rotation_x, rotation_y
        from src.whitted.core.tuples import Point

        box = _box((-1, -1, -1), (1, 1, 1))
        result = box.transform(rotation_x(math.pi / 4) * rotation_y(math.pi / 4))
        assert result.min.isclose(Point(-1.4142, -1.7071, -1.7071))
        assert result.max.isclose(Point(1.4142, 1.7071, 1.7071))

    def test_transform_keeps_empty_and_infinite(self):
        from src.whitted.core.transform import translation
        from src.whitted.geometry.bounds import BoundingBox

        assert BoundingBox.empty().transform(translation(1, 2, 3)).is_empty()
        plane_box = _box((-math.inf, 0, -math.inf), (math.inf, 0, math.inf))
        assert plane_box.transform(translation(0, 1, 0)) == BoundingBox.infinite()

    @pytest.mark.parametrize(
        "origin,direction,expected",
        [
            ((15, 1, 2), (-1, 0, 0), True),
            ((-5, -1, 4), (1, 0, 0), True),
            ((7, 6, 5), (0, -1, 0), True),
            ((9, -5, 6), (0, 1, 0), True),
            ((8, 2, 12), (0, 0, -1), True),
            ((6, 0, -5), (0, 0, 1), True),
            ((8, 1, 3.5), (0, 0, 1), True),
            ((9, -1, -8), (2, 4, 6), False),
            ((8, 3, -4), (6, 2, 4), False),
            ((9, -1, -2), (4, 6, 2), False),
            ((4, 0, 9), (6, 2, -6), False),
            ((8, 6, -1), (2, 4, 6), False),
            ((12, 5, 4), (6, 8, 2), False),
        ],
    )
    def test_ray_against_non_cubic_box(self, origin, direction, expected):
        box = _box((5, -2, 0), (11, 4, 7))
        assert box.is_intersected(_ray(origin, direction)) is expected

    def test_box_behind_ray_is_missed(self):
        box = _box((-1, -1, -1), (1, 1, 1))
        assert not box.is_intersected(_ray((0, 0, 5), (0, 0, 1)))

    def test_empty_box_is_never_hit(self):
        from src.whitted.geometry.bounds import BoundingBox

        assert not BoundingBox.empty().is_intersected(_ray((0, 0, -5), (0, 0, 1)))

    def test_split_perfect_cube_along_x(self):
        from src.whitted.core.tuples import Point

        left, right = _box((-1, -4, -5), (9, 6, 5)).split()
        assert left.min == Point(-1, -4, -5)
        assert left.max == Point(4, 6, 5)
        assert right.min == Point(4, -4, -5)
        assert right.max == Point(9, 6, 5)

    @pytest.mark.parametrize(
        "lo,hi,left_max,right_min",
        [
            ((-1, -2, -3), (9, 5.5, 3), (4, 5.5, 3), (4, -2, -3)),
            ((-1, -2, -3), (5, 8, 3), (5, 3, 3), (-1, 3, -3)),
            ((-1, -2, -3), (5, 3, 7), (5, 3, 2), (-1, -2, 2)),
        ],
    )
    def test_split_longest_axis(self, lo, hi, left_max, right_min):
        from src.whitted.core.tuples import Point

        box = _box(lo, hi)
        left, right = box.split()
        assert left.min == box.min
        assert left.max == Point(*left_max)
        assert right.min == Point(*right_min)
        assert right.max == box.max

    def test_split_halves_reconstruct_box(self):
        box = _box((-1, -2, -3), (5, 3, 7))
        left, right = box.split()
        assert left + right == box


class TestShapeBounds:
    """Tests for per-shape and per-object bounding boxes."""

    def test_primitive_bounds(self):
        from src.whitted.core.tuples import Point
        from src.whitted.geometry.cube import Cube
        from src.whitted.geometry.cylinder import Cone, Cylinder
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.geometry.triangle import Triangle

        assert Sphere().bounds() == _box((-1, -1, -1), (1, 1, 1))
        assert Cube().bounds() == _box((-1, -1, -1), (1, 1, 1))
        assert Cylinder(-5.0, 3.0).bounds() == _box((-1, -5, -1), (1, 3, 1))
        assert Cone(-5.0, 3.0).bounds() == _box((-5, -5, -5), (5, 3, 5))
        tri = Triangle(Point(-3, 7, 2), Point(6, 2, -4), Point(2, -1, -1))
        assert tri.bounds() == _box((-3, -1, -4), (6, 7, 2))

    def test_object_bounds_are_in_world_space(self):
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        ball = SceneObject(Sphere()).scale(2, 2, 2).translate(0, 2, 0)
        assert ball.bounding_box() == _box((-2, 0, -2), (2, 4, 2))

    def test_group_bounds_cover_children(self):
        from src.whitted.geometry.cylinder import Cylinder
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        s = SceneObject(Sphere()).scale(2, 2, 2).translate(2, 5, -3)
        c = SceneObject(Cylinder(-2.0, 2.0)).scale(0.5, 1, 0.5).translate(-4, -1, 4)
        group = SceneObject(Group((s, c)))
        box = group.bounding_box()
        assert box.min.isclose(_box((-4.5, -3, -5), (4, 7, 4.5)).min)
        assert box.max.isclose(_box((-4.5, -3, -5), (4, 7, 4.5)).max)


class TestGroupBuilder:
    """Tests for flattening group transforms into leaf objects."""

    def test_builder_flattens_transforms(self):
        """Each leaf ends up with the ordered product of ancestor transforms."""
        from src.whitted.core.transform import rotation_y, scaling, translation
        from src.whitted.geometry.group import GroupBuilder
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        leaf = SceneObject(Sphere()).translate(5, 0, 0)
        inner = GroupBuilder([leaf], scaling(1, 2, 3))
        outer = GroupBuilder([inner], rotation_y(math.pi / 2))

        built = outer.build()
        resolved = built.shape.children[0].shape.children[0]
        expected = rotation_y(math.pi / 2) * scaling(1, 2, 3) * translation(5, 0, 0)
        assert resolved.transform.isclose(expected)

    def test_nested_and_flat_groups_agree(self):
        from src.whitted.core.transform import rotation_x, scaling, translation
        from src.whitted.geometry.group import GroupBuilder
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        t1 = translation(1, 2, 3)
        t2 = rotation_x(0.7)
        t3 = scaling(2, 0.5, 1)
        leaf = SceneObject(Sphere()).translate(0, 0, 4)

        nested = GroupBuilder([GroupBuilder([GroupBuilder([leaf], t3)], t2)], t1).build()
        flat = GroupBuilder([leaf], t1 * t2 * t3).build()

        deep = nested.shape.children[0].shape.children[0].shape.children[0]
        shallow = flat.shape.children[0]
        assert deep.transform.isclose(shallow.transform)
        assert deep.transform.isclose(t1 * t2 * t3 * translation(0, 0, 4))

    def test_fluent_transforms_on_builder(self):
        from src.whitted.core.transform import scaling, translation
        from src.whitted.geometry.group import GroupBuilder
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        built = GroupBuilder([SceneObject(Sphere())]).scale(2, 2, 2).translate(1, 0, 0).build()
        assert built.shape.children[0].transform.isclose(translation(1, 0, 0) * scaling(2, 2, 2))

    def test_builder_material_and_shadow_apply_to_leaves(self):
        from src.whitted.geometry.group import GroupBuilder
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.materials.material import Material
        from src.whitted.scene.object import SceneObject

        shiny = Material(reflective=0.7)
        built = GroupBuilder(
            [SceneObject(Sphere()), GroupBuilder([SceneObject(Sphere())])],
            material=shiny,
            has_shadow=False,
        ).build()

        first = built.shape.children[0]
        nested = built.shape.children[1].shape.children[0]
        for leaf in (first, nested):
            assert leaf.material == shiny
            assert leaf.has_shadow is False

    def test_empty_subgroups_are_dropped(self):
        from src.whitted.geometry.group import GroupBuilder
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        built = GroupBuilder([GroupBuilder(), SceneObject(Sphere())]).build()
        assert len(built.shape.children) == 1
        assert not built.shape.children[0].is_group()

    def test_group_object_rejects_transform(self):
        from src.whitted.core.transform import translation
        from src.whitted.geometry.group import Group
        from src.whitted.scene.object import SceneObject

        with pytest.raises(ValueError):
            SceneObject(Group(), transform=translation(1, 0, 0))


class TestGroupIntersection:
    """Tests for intersecting groups."""

    def test_empty_group_is_missed(self):
        from src.whitted.geometry.group import Group
        from src.whitted.scene.object import SceneObject

        group = SceneObject(Group())
        assert len(group.intersects(_ray((0, 0, 0), (0, 0, 1)))) == 0

    def test_nonempty_group(self):
        """Hits come back sorted and refer to the shared child objects."""
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        s1 = SceneObject(Sphere())
        s2 = SceneObject(Sphere()).translate(0, 0, -3)
        s3 = SceneObject(Sphere()).translate(5, 0, 0)
        group = SceneObject(Group((s1, s2, s3)))

        xs = group.intersects(_ray((0, 0, -5), (0, 0, 1)))
        assert len(xs) == 4
        assert [x.object for x in xs] == [s2, s2, s1, s1]
        assert xs[0].object is s2
        assert xs[3].object is s1

    def test_transformed_group(self):
        from src.whitted.geometry.group import GroupBuilder
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        group = GroupBuilder([SceneObject(Sphere()).translate(5, 0, 0)]).scale(2, 2, 2).build()
        xs = group.intersects(_ray((10, 0, -10), (0, 0, 1)))
        assert len(xs) == 2

    def test_normal_of_nested_child(self):
        """Normals come from the child's flattened transform."""
        from src.whitted.core.tuples import Point, Vector
        from src.whitted.geometry.group import GroupBuilder
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        inner = GroupBuilder([SceneObject(Sphere()).translate(5, 0, 0)]).scale(1, 2, 3)
        group = GroupBuilder([inner]).rotate_y(math.pi / 2).build()
        leaf = group.shape.children[0].shape.children[0]

        n = leaf.normal_at(Point(1.7321, 1.1547, -5.5774))
        assert n.isclose(Vector(0.2857, 0.4286, -0.8571), 1e-3)

    def test_group_has_no_normal(self):
        from src.whitted.core.tuples import Point
        from src.whitted.geometry.group import Group
        from src.whitted.scene.object import SceneObject

        with pytest.raises(TypeError):
            SceneObject(Group()).normal_at(Point(0, 0, 0))

    def test_missed_box_skips_children(self):
        """A ray missing the group's box never reaches the child shape."""
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.probe import ProbeShape
        from src.whitted.scene.object import SceneObject

        probe = ProbeShape()
        group = SceneObject(Group((SceneObject(probe),)))

        xs = group.intersects(_ray((0, 0, -5), (0, 1, 0)))
        assert len(xs) == 0
        assert probe.calls == 0
        assert probe.last_ray is None

    def test_hit_box_tests_children(self):
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.probe import ProbeShape
        from src.whitted.scene.object import SceneObject

        probe = ProbeShape()
        group = SceneObject(Group((SceneObject(probe),)))

        group.intersects(_ray((0, 0, -5), (0, 0, 1)))
        assert probe.calls == 1
        assert probe.last_ray is not None

    def test_probe_sees_local_ray(self):
        """The probe records the ray after the object's inverse transform."""
        from src.whitted.core.tuples import Point, Vector
        from src.whitted.geometry.probe import ProbeShape
        from src.whitted.scene.object import SceneObject

        probe = ProbeShape()
        obj = SceneObject(probe).scale(2, 2, 2)
        obj.intersects(_ray((0, 0, -5), (0, 0, 1)))
        assert probe.last_ray.origin == Point(0, 0, -2.5)
        assert probe.last_ray.direction == Vector(0, 0, 0.5)

    def test_collector_counts_tests(self):
        """Every object and group visited counts as one test."""
        from src.whitted.core.intersection import IntersectionCollector
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        group = SceneObject(Group((SceneObject(Sphere()), SceneObject(Sphere()))))
        collector = IntersectionCollector()
        group.intersect(_ray((0, 0, -5), (0, 0, 1)), collector)
        assert collector.tests == 3
        assert len(collector.entries) == 4


class TestGroupDivision:
    """Tests for partitioning and subdividing groups."""

    def test_partition_children(self):
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        s1 = SceneObject(Sphere()).translate(-2, 0, 0)
        s2 = SceneObject(Sphere()).translate(2, 0, 0)
        s3 = SceneObject(Sphere())
        left, right, remaining = Group((s1, s2, s3)).partition()
        assert left == [s1]
        assert right == [s2]
        assert remaining == [s3]

    def test_divide_builds_subgroups(self):
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        s1 = SceneObject(Sphere()).translate(-2, -2, 0)
        s2 = SceneObject(Sphere()).translate(-2, 2, 0)
        s3 = SceneObject(Sphere()).scale(4, 4, 4)
        divided = SceneObject(Group((s1, s2, s3))).divide(1)

        children = divided.shape.children
        assert children[0] is s3
        subgroup = children[1]
        assert subgroup.is_group()
        assert len(subgroup.shape.children) == 2
        assert subgroup.shape.children[0].shape.children == (s1,)
        assert subgroup.shape.children[1].shape.children == (s2,)

    def test_divide_with_too_few_children(self):
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        s1 = SceneObject(Sphere()).translate(-2, 0, 0)
        s2 = SceneObject(Sphere()).translate(2, 1, 0)
        s3 = SceneObject(Sphere()).translate(2, -1, 0)
        s4 = SceneObject(Sphere())
        subgroup = SceneObject(Group((s1, s2, s3)))
        divided = SceneObject(Group((subgroup, s4))).divide(3)

        children = divided.shape.children
        assert children[1] is s4
        inner = children[0].shape.children
        assert len(inner) == 2
        assert inner[0].shape.children == (s1,)
        assert inner[1].shape.children == (s2, s3)

    def test_divide_leaves_original_unchanged(self):
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        s1 = SceneObject(Sphere()).translate(-2, 0, 0)
        s2 = SceneObject(Sphere()).translate(2, 0, 0)
        group = Group((s1, s2))
        group.divide(1)
        assert group.children == (s1, s2)

    def test_divide_preserves_hits(self):
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        spheres = tuple(
            SceneObject(Sphere()).scale(0.4, 0.4, 0.4).translate(x, 0, 0) for x in range(-4, 5)
        )
        group = SceneObject(Group(spheres))
        divided = group.divide(2)

        for x in range(-4, 5):
            ray = _ray((x, 0, -5), (0, 0, 1))
            before = [round(i.t, 6) for i in group.intersects(ray)]
            after = [round(i.t, 6) for i in divided.intersects(ray)]
            assert before == after

    def test_divide_coincident_degenerate_children(self):
        """Children whose boxes are the same single point stay together."""
        from src.whitted.core.tuples import Point
        from src.whitted.geometry.group import GroupBuilder
        from src.whitted.geometry.triangle import Triangle
        from src.whitted.scene.object import SceneObject

        p = Point(1, 2, 3)
        group = GroupBuilder([SceneObject(Triangle(p, p, p)) for _ in range(3)]).build()

        divided = group.divide(2)

        assert len(divided.shape.children) == 3
        assert not any(child.is_group() for child in divided.shape.children)
        assert len(divided.intersects(_ray((1, 2, -5), (0, 0, 1)))) == 0

    def test_divide_single_degenerate_face(self):
        from src.whitted.scene.mesh import parse_obj_data

        model = parse_obj_data("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 1 1\n").to_group()

        divided = model.divide(1)

        assert len(divided.shape.children) == 1
        assert not divided.shape.children[0].is_group()

    def test_divide_splits_at_threshold(self):
        """A group holding exactly ``threshold`` children is split."""
        from src.whitted.geometry.group import Group
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.object import SceneObject

        s1 = SceneObject(Sphere()).translate(-2, 0, 0)
        s2 = SceneObject(Sphere()).translate(2, 0, 0)

        divided = Group((s1, s2)).divide(2)

        assert [child.shape.children for child in divided.children] == [(s1,), (s2,)]
