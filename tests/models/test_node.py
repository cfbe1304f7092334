import pytest
from lxml import etree as ET
from pydantic import ValidationError
from yed_graphml.core.resolver import CoordinateResolver
from yed_graphml.exceptions import (
    CyclicReferenceError,
    TypeMismatchError,
    UninitializedReferenceError,
)
from yed_graphml.models import EdgeLabel, GenericNode, Node, NodeLabel, ShapeNode
from yed_graphml.utils.xml import NSMAP

NS = {"g": NSMAP[None], "y": NSMAP["y"]}

@pytest.fixture
def node():
    """Provides a labelled shape node"""
    node = ShapeNode(id="n1", x=10, y=20, width=60, height=40, shape="ellipse")
    node.add_new_label("Hello")
    return node

def build(node):
    """Serialize a single node and return its <node> element"""
    graph = ET.Element(f"{{{NS['g']}}}graph", nsmap=NSMAP)
    return node.build_element(graph, CoordinateResolver())

def test_defaults():
    node = ShapeNode(id=1)
    assert (node.x, node.y, node.width, node.height, node.layer) == (0, 0, 30, 30, 0)
    assert node.relative is None
    assert node.fill_color == "#ffcc00"
    assert node.border_color == "#000000"

def test_id_is_mandatory():
    with pytest.raises(UninitializedReferenceError):
        ShapeNode(x=5)

def test_id_is_immutable(node):
    with pytest.raises(ValidationError):
        node.id = "other"

def test_base_node_is_abstract():
    with pytest.raises(TypeError):
        Node(id=1)

def test_invalid_properties_are_rejected(node):
    """Malformed values fail at construction and on assignment"""
    with pytest.raises(ValidationError):
        ShapeNode(id=2, width=-1)
    with pytest.raises(ValidationError):
        node.fill_color = "yellow"
    with pytest.raises(ValidationError):
        node.shape = "blob"
    with pytest.raises(ValidationError):
        node.layer = -1

def test_color_without_hash_is_accepted(node):
    node.fill_color = "a0b0c0"
    assert node.fill_color == "#a0b0c0"

def test_relative_must_be_a_node(node):
    with pytest.raises(TypeMismatchError):
        node.relative = "n2"
    with pytest.raises(TypeMismatchError):
        ShapeNode(id=2, relative=42)

def test_relative_to_itself_fails_immediately(node):
    with pytest.raises(CyclicReferenceError):
        node.relative = node
    assert node.relative is None

def test_relative_can_be_cleared(node):
    other = ShapeNode(id="n2")
    node.relative = other
    node.relative = None
    assert node.relative is None

def test_identity_semantics():
    """Nodes with equal properties are still different nodes"""
    a = ShapeNode(id=1)
    b = ShapeNode(id=1)
    assert a != b
    assert len({a, b, a}) == 2

def test_properties_by_name(node):
    node.set_properties(x=1, layer=3)
    assert node.get_properties()["layer"] == 3
    assert node.has_properties(x=1, layer=3)
    assert not node.has_properties(x=2)
    assert not node.has_properties(colour="red")
    with pytest.raises(AttributeError):
        node.set_properties(colour="red")

def test_labels(node):
    assert node.get_labels_by_properties(text="Hello")[0].position == "c"
    with pytest.raises(TypeMismatchError):
        node.add_label(EdgeLabel(text="wrong kind"))
    node.add_label(NodeLabel(text="second", position="t"))
    assert [label.text for label in node.labels] == ["Hello", "second"]
    node.clear_labels()
    assert node.labels == []

def test_copy_is_independent(node):
    relative = ShapeNode(id="r")
    node.relative = relative
    copy = node.copy("n2", x=99)

    assert copy.id == "n2"
    assert copy.x == 99
    assert copy.shape == node.shape
    assert copy.relative is relative
    assert copy.labels[0] is not node.labels[0]

    copy.labels[0].text = "changed"
    assert node.labels[0].text == "Hello"

def test_build_element_order(node):
    """Geometry, Fill, BorderStyle, labels and then the shape"""
    element = build(node)
    assert element.get("id") == "n1"
    assert [d.get("key") for d in element.findall("g:data", NS)] == ["d4", "d5", "d6"]

    shape_node = element.find("g:data[@key='d6']/y:ShapeNode", NS)
    tags = [ET.QName(child).localname for child in shape_node]
    assert tags == ["Geometry", "Fill", "BorderStyle", "NodeLabel", "Shape"]

    geometry = shape_node.find("y:Geometry", NS)
    assert dict(geometry.attrib) == {"height": "40.0", "width": "60.0", "x": "10.0", "y": "20.0"}
    assert shape_node.find("y:Shape", NS).get("type") == "ellipse"
    assert shape_node.find("y:NodeLabel", NS).text == "Hello"

def test_geometry_is_absolute(node):
    node.relative = ShapeNode(id="r", x=100, y=200)
    geometry = build(node).find(".//y:Geometry", NS)
    assert (geometry.get("x"), geometry.get("y")) == ("110.0", "220.0")

def test_colorless_fill_and_border(node):
    node.set_properties(fill_color="none", border_color="none")
    element = build(node)
    fill = element.find(".//y:Fill", NS)
    border = element.find(".//y:BorderStyle", NS)
    assert fill.get("hasColor") == "false"
    assert fill.get("color") is None
    assert border.get("hasColor") == "false"

def test_second_fill_color(node):
    node.fill_color2 = "#ffffff"
    assert build(node).find(".//y:Fill", NS).get("color2") == "#ffffff"

def test_generic_node_configuration():
    with pytest.raises(ValidationError):
        GenericNode(id=1, configuration="com.yworks.flowchart.unknown")

    node = GenericNode(id=1, configuration="com.yworks.flowchart.decision")
    generic = build(node).find(".//y:GenericNode", NS)
    assert generic.get("configuration") == "com.yworks.flowchart.decision"

def test_generic_node_java_style():
    node = GenericNode(id=1, configuration="BevelNode")
    assert node.get_java_style("ModernNodeRadius") == "10.0"

    node.set_java_style(ModernNodeRadius="5.0")
    assert node.get_java_style("ModernNodeRadius") == "5.0"

    with pytest.raises(ValidationError):
        node.set_java_style(ModernNodeRadius="round")
    with pytest.raises(ValidationError):
        node.set_java_style(Unknown="1")
    with pytest.raises(KeyError):
        node.get_java_style("Unknown")

def test_generic_node_hides_default_properties():
    """Properties with a hide pattern are left out while they match it"""
    node = GenericNode(id=1, configuration="BevelNode")
    properties = build(node).findall(".//y:StyleProperties/y:Property", NS)
    assert [p.get("name") for p in properties] == ["ModernNodeRadius"]

    node.set_java_style(ModernNodeShadow="true")
    properties = build(node).findall(".//y:StyleProperties/y:Property", NS)
    assert {p.get("name"): p.get("value") for p in properties} == {
        "ModernNodeRadius": "10.0",
        "ModernNodeShadow": "true",
    }
    assert properties[0].get("class") == "java.lang.Double"
