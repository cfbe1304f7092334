import pytest
from yed_graphml.core.resolver import CoordinateResolver
from yed_graphml.exceptions import CyclicReferenceError
from yed_graphml.models import PolyLineEdge, ShapeNode

@pytest.fixture
def resolver():
    """Provides a fresh, non-memoizing resolver for each test"""
    return CoordinateResolver()

@pytest.fixture
def chain():
    """Three nodes, each relative to the previous one"""
    root = ShapeNode(id="root", x=10, y=20)
    middle = ShapeNode(id="middle", x=5, y=-5, relative=root)
    leaf = ShapeNode(id="leaf", x=1, y=2, relative=middle)
    return root, middle, leaf

def test_absolute_node_keeps_its_position(resolver):
    """A node without relative is already absolute"""
    node = ShapeNode(id=1, x=42.5, y=-3)
    assert resolver.absolute_x(node) == 42.5
    assert resolver.absolute_y(node) == -3

def test_relative_chain_accumulates(resolver, chain):
    """Absolute position is the node's offset plus its relative's absolute position"""
    root, middle, leaf = chain
    assert resolver.absolute_position(middle) == (15, 15)
    assert resolver.absolute_position(leaf) == (16, 17)
    assert resolver.absolute_x(leaf) == leaf.x + resolver.absolute_x(middle)

def test_moving_a_node_moves_its_dependents(resolver, chain):
    root, _, leaf = chain
    root.x = 100
    assert resolver.absolute_x(leaf) == 106

def test_absolute_center(resolver, chain):
    _, middle, _ = chain
    middle.set_properties(width=20, height=40)
    assert resolver.absolute_center(middle) == (25, 35)

def test_cycle_is_detected_for_every_member(resolver):
    """A -> B -> C -> A fails for each node of the loop"""
    a = ShapeNode(id="A")
    b = ShapeNode(id="B")
    c = ShapeNode(id="C")
    a.relative = b
    b.relative = c
    c.relative = a

    for node in (a, b, c):
        with pytest.raises(CyclicReferenceError) as exc_info:
            resolver.absolute_x(node)
        assert exc_info.value.hops == 3
        assert exc_info.value.element_id == node.id
        with pytest.raises(CyclicReferenceError):
            resolver.absolute_y(node)

def test_chain_into_a_foreign_loop_fails(resolver):
    """A node outside a loop whose chain runs into the loop fails as well"""
    a = ShapeNode(id="A")
    b = ShapeNode(id="B", relative=a)
    a.relative = b
    outsider = ShapeNode(id="X", relative=a)

    with pytest.raises(CyclicReferenceError) as exc_info:
        resolver.absolute_position(outsider)
    assert "'A'" in str(exc_info.value) or "'B'" in str(exc_info.value)

def test_memoized_positions_until_cleared(chain):
    """A memoizing resolver keeps positions, clear() forgets them"""
    root, _, leaf = chain
    resolver = CoordinateResolver(memoize=True)
    assert resolver.absolute_position(leaf) == (16, 17)

    root.x = 1000
    assert resolver.absolute_position(leaf) == (16, 17)

    resolver.clear()
    assert resolver.absolute_position(leaf) == (1006, 17)

def test_absolute_waypoints_are_verbatim(resolver):
    a = ShapeNode(id="a", x=300, y=300)
    b = ShapeNode(id="b")
    edge = PolyLineEdge(id="e", source=a, target=b, waypoints=[(5, 5), (10, 10)])
    assert resolver.waypoints(edge) == [(5, 5), (10, 10)]

def test_relative_waypoints_start_at_source_anchor(resolver):
    """Relative waypoints chain from the source center moved by (sx, sy)"""
    # center at (100, 100)
    source = ShapeNode(id="s", x=85, y=85, width=30, height=30)
    target = ShapeNode(id="t")
    edge = PolyLineEdge(
        id="e", source=source, target=target,
        relative_waypoints=True, waypoints=[(0, 50), (50, 0)],
    )
    assert resolver.waypoints(edge) == [(100, 150), (150, 150)]

    edge.set_properties(sx=10, sy=-10)
    assert resolver.waypoints(edge) == [(110, 140), (160, 140)]

def test_relative_waypoints_follow_relative_source(resolver):
    anchor = ShapeNode(id="anchor", x=50, y=50)
    source = ShapeNode(id="s", x=35, y=35, relative=anchor)
    edge = PolyLineEdge(
        id="e", source=source, target=anchor,
        relative_waypoints=True, waypoints=[(0, 50)],
    )
    assert resolver.waypoints(edge) == [(100, 150)]
