import pytest
from sdfmodeler import sphere, box, cylinder, torus, SDFNode, X, Y, Z
from sdfmodeler.core import (
    Sphere, Box, Cylinder, Torus, Union, Subtract, Intersect,
    Translate, Rotate, Mirror, Color, OPERATIONS,
)

@pytest.fixture
def shapes():
    return sphere(radius=1.0), box(1.0, 1.0, 1.0)

def test_primitive_constructors_yield_leaves():
    assert sphere(2.0).op == Sphere(2.0)
    assert box(1, 2, 3).op == Box((1.0, 2.0, 3.0))
    assert box(0.5).op == Box((0.5, 0.5, 0.5))
    assert box((1, 2, 3)).op == Box((1.0, 2.0, 3.0))
    assert cylinder(0.5, 2.0).op == Cylinder(0.5, 2.0)
    assert torus(1.0, 0.25).op == Torus(1.0, 0.25)
    for leaf in (sphere(), box(), cylinder(), torus()):
        assert leaf.children() == ()
        assert leaf.depth() == 1

def test_degenerate_sizes_are_accepted():
    assert box(1, 0, 1).op == Box((1.0, 0.0, 1.0))
    assert sphere(0.0).op == Sphere(0.0)
    assert torus(1.0, -0.1).op == Torus(1.0, -0.1)
    assert cylinder(-0.5, 1.0).op == Cylinder(-0.5, 1.0)

@pytest.mark.parametrize("build", [
    lambda: sphere(float('nan')),
    lambda: box(1.0, float('inf'), 1.0),
    lambda: cylinder(0.5, float('-inf')),
    lambda: torus(float('nan'), 0.25),
    lambda: box((1.0, 2.0)),
    lambda: sphere(1.0).translate(float('nan'), 0, 0),
    lambda: sphere(1.0).rotate_x(float('inf')),
    lambda: sphere(1.0).color(1.0, float('nan'), 0.0),
    lambda: sphere(1.0).smooth_union(box(1.0), float('inf')),
])
def test_non_finite_values_rejected(build):
    with pytest.raises(ValueError):
        build()

def test_nodes_are_immutable(shapes):
    s, _ = shapes
    with pytest.raises(AttributeError):
        s.op = Sphere(2.0)
    with pytest.raises(AttributeError):
        s.op.radius = 2.0

def test_builders_do_not_modify_receiver(shapes):
    s, b = shapes
    before = s
    moved = s.translate(1, 0, 0)
    joined = s.union(b)
    assert s == before
    assert s.op == Sphere(1.0)
    assert moved.op.target == s
    assert joined.op.a == s and joined.op.b == b

def test_combinator_builders(shapes):
    s, b = shapes
    assert s.union(b).op == Union(s, b, 0.0)
    assert s.smooth_union(b, 0.3).op == Union(s, b, 0.3)
    assert s.subtract(b).op == Subtract(s, b, 0.0)
    assert s.smooth_subtract(b, 0.2).op == Subtract(s, b, 0.2)
    assert s.intersect(b).op == Intersect(s, b, 0.0)
    assert s.add(b) == s.union(b)
    assert s.sub(b) == s.subtract(b)
    assert (s | b) == s.union(b)
    assert (s - b) == s.subtract(b)
    assert (s & b) == s.intersect(b)

def test_negative_smoothing_rejected(shapes):
    s, b = shapes
    with pytest.raises(ValueError):
        s.smooth_union(b, -0.1)
    with pytest.raises(ValueError):
        s.smooth_subtract(b, -1.0)

def test_combinator_requires_node(shapes):
    s, _ = shapes
    with pytest.raises(TypeError):
        s.union(1.0)

def test_transform_builders(shapes):
    s, _ = shapes
    assert s.translate(1, 2, 3).op == Translate(s, (1.0, 2.0, 3.0))
    assert s.translate((1, 2, 3)) == s.translate(1, 2, 3)
    assert s.move(1, 2, 3) == s.translate(1, 2, 3)
    assert (s + (1, 2, 3)) == s.translate(1, 2, 3)
    assert s.rotate_x(90).op == Rotate(s, X, 90.0)
    assert s.rotate_y(45).op == Rotate(s, Y, 45.0)
    assert s.rotate_z(30).op == Rotate(s, Z, 30.0)
    assert s.rotate('y', 45) == s.rotate_y(45)
    assert s.mirror_x().op == Mirror(s, (1.0, 0.0, 0.0))
    assert s.mirror_z().op == Mirror(s, (0.0, 0.0, 1.0))
    assert s.mirror(x=True, z=True).op == Mirror(s, (1.0, 0.0, 1.0))

def test_rotate_rejects_unknown_axis_name(shapes):
    s, _ = shapes
    with pytest.raises(ValueError):
        s.rotate('w', 10)

def test_color_builder(shapes):
    s, _ = shapes
    assert s.color(1, 0, 0).op == Color(s, (1.0, 0.0, 0.0))
    assert s.color((0.2, 0.4, 0.6)) == s.color(0.2, 0.4, 0.6)

def test_walk_and_depth(shapes):
    s, b = shapes
    tree = s.union(b.translate(1, 0, 0)).color(1, 0, 0)
    ops = [type(n.op) for n in tree.walk()]
    assert ops == [Color, Union, Sphere, Translate, Box]
    assert tree.depth() == 4

def test_operation_set_is_closed():
    assert set(OPERATIONS) == {
        Sphere, Box, Cylinder, Torus, Union, Subtract, Intersect,
        Translate, Rotate, Mirror, Color,
    }

def test_nodes_compare_by_value():
    a = sphere(1.0).translate(1, 0, 0).color(1, 0, 0)
    b = sphere(1.0).translate(1, 0, 0).color(1, 0, 0)
    assert a == b
    assert hash(a) == hash(b)
    assert isinstance(a, SDFNode)

def test_different_operations_never_compare_equal(shapes):
    s, b = shapes
    assert s.union(b) != s.subtract(b)
    assert s.subtract(b) != s.intersect(b)
    assert cylinder(0.5, 1.0) != torus(0.5, 1.0)
    assert len({s.union(b), s.subtract(b), s.union(b)}) == 2
    assert s.union(b.translate(1, 0, 0)) != s.union(b.move(1, 0, 0).mirror_x())

def test_walk_and_depth_handle_deep_trees():
    tree = sphere(1.0)
    for _ in range(3000):
        tree = tree.union(box(0.5))
    assert tree.depth() == 3001
    assert sum(1 for _ in tree.walk()) == 6001
