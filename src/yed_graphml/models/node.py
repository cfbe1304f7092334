"""
Node types of a yEd document.

A node is a positionable entity with geometry, fill, border and any number of
labels. Its x and y describe the upper left corner of the surrounding
rectangle; if the node is relative to another node they are offsets from that
node's absolute position.

Supported node types:
- ShapeNode: basic geometric shapes
- GenericNode: the configurable nodes of yEd's "Modern Nodes", "Flowchart" and
  "Entity Relationship" palettes
"""

import re
from abc import abstractmethod
from typing import Any, Dict, List, Optional

from lxml import etree as ET
from pydantic import (
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    field_validator,
)

from yed_graphml.core.resolver import CoordinateResolver, Point
from yed_graphml.exceptions.reference import (
    CyclicReferenceError,
    TypeMismatchError,
    UninitializedReferenceError,
)
from yed_graphml.models.label import NodeLabel
from yed_graphml.models.properties import (
    ElementId,
    LineType,
    PropertyBasedModel,
    ShapeType,
    validate_color,
)
from yed_graphml.utils.xml import graphml, sub_element, y

NODE_DATA_KEYS = ("d4", "d5")
NODE_ROOT_KEY = "d6"


class Entity(PropertyBasedModel):
    """Base class for nodes and edges.

    Entities have identity semantics: two nodes with equal properties are still
    different nodes, so equality and hashing use object identity.
    """

    id: ElementId = Field(frozen=True)

    def __init__(self, **data: Any):
        # entities can't be created without an id
        if data.get("id") is None:
            raise UninitializedReferenceError(
                f"{type(self).__name__} id missing for creation", field_name="id"
            )
        super().__init__(**data)

    @field_validator("id")
    @classmethod
    def validate_id_format(cls, v):
        """Ensure string ids are not empty"""
        if isinstance(v, str) and not v.strip():
            raise ValueError("ID cannot be empty")
        return v

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    def __repr_args__(self):
        # referenced entities are shown by id, relative chains may loop
        for name, value in super().__repr_args__():
            if isinstance(value, Entity):
                yield name, value.id
            else:
                yield name, value


class Node(Entity):
    """Base class for all node types. Only the subclasses can be instantiated."""

    x: float = 0.0
    y: float = 0.0
    width: NonNegativeFloat = 30.0
    height: NonNegativeFloat = 30.0
    layer: NonNegativeInt = 0
    relative: Optional["Node"] = None
    labels: List[NodeLabel] = Field(default_factory=list)
    fill_color: str = "#ffcc00"
    fill_color2: str = "none"
    border_color: str = "#000000"
    border_type: LineType = LineType.LINE
    border_width: NonNegativeFloat = 1.0

    @field_validator("relative", mode="before")
    @classmethod
    def validate_relative(cls, v):
        """Only nodes (or None to erase the relation) can be relation partners"""
        if v is not None and not isinstance(v, Node):
            raise TypeMismatchError("Node (or None)", v)
        return v

    @field_validator("fill_color", "fill_color2", "border_color")
    @classmethod
    def validate_color_format(cls, v):
        return validate_color(v)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "relative" and value is self:
            raise CyclicReferenceError(
                "A node can't be relative to itself", self.id, hops=1
            )
        super().__setattr__(name, value)

    # absolute coordinates

    def abs_x(self) -> float:
        """Absolute x, equals x unless the node is relative to another node."""
        return CoordinateResolver().absolute_x(self)

    def abs_y(self) -> float:
        """Absolute y, equals y unless the node is relative to another node."""
        return CoordinateResolver().absolute_y(self)

    def abs_center(self) -> Point:
        """Absolute center (x, y) of the rectangle surrounding this node."""
        return CoordinateResolver().absolute_center(self)

    # labels

    def add_label(self, label: NodeLabel) -> None:
        if not isinstance(label, NodeLabel):
            raise TypeMismatchError("NodeLabel", label, self.id)
        self.labels.append(label)

    def add_new_label(self, text: str, **properties) -> NodeLabel:
        """Create a NodeLabel from text and properties, attach and return it."""
        label = NodeLabel(text=text, **properties)
        self.add_label(label)
        return label

    def clear_labels(self) -> None:
        self.labels = []

    def get_labels_by_properties(self, **properties) -> List[NodeLabel]:
        return [label for label in self.labels if label.has_properties(**properties)]

    def copy(self, new_id: ElementId, **overrides) -> "Node":
        """Return a copy of this node under a new id.

        Labels are copied as well. A copy of a relative node stays relative to
        the same node unless relative is overridden.
        """
        data = self.get_properties()
        data.pop("id")
        data["labels"] = [label.copy() for label in self.labels]
        data.update(overrides)
        return type(self)(id=new_id, **data)

    # serialization

    def build_element(self, parent: ET._Element, resolver: CoordinateResolver) -> ET._Element:
        """Append the <node> element for this node to parent and return it.

        The type element holds, in this order: Geometry, Fill, BorderStyle,
        the labels and the type specific elements.
        """
        node = sub_element(parent, graphml("node"), {"id": self.id})
        for key in NODE_DATA_KEYS:
            sub_element(node, graphml("data"), {"key": key})
        root = sub_element(node, graphml("data"), {"key": NODE_ROOT_KEY})
        type_element = self._add_type_element(root)
        self._add_geometry_element(type_element, resolver)
        self._add_fill_element(type_element)
        self._add_border_element(type_element)
        for label in self.labels:
            label.build_element(type_element)
        self._add_additional_elements(type_element)
        return node

    @abstractmethod
    def _add_type_element(self, root: ET._Element) -> ET._Element:
        """Add and return the type element, e.g. <y:ShapeNode>"""

    def _add_geometry_element(self, element: ET._Element, resolver: CoordinateResolver) -> None:
        x, y_ = resolver.absolute_position(self)
        sub_element(
            element,
            y("Geometry"),
            {"height": self.height, "width": self.width, "x": x, "y": y_},
        )

    def _add_fill_element(self, element: ET._Element) -> None:
        if self.fill_color == "none":
            attributes = {"hasColor": False}
        else:
            attributes = {"color": self.fill_color}
            if self.fill_color2 != "none":
                attributes["color2"] = self.fill_color2
        attributes["transparent"] = False
        sub_element(element, y("Fill"), attributes)

    def _add_border_element(self, element: ET._Element) -> None:
        if self.border_color == "none":
            attributes = {"hasColor": False}
        else:
            attributes = {"color": self.border_color}
        attributes["type"] = self.border_type
        attributes["width"] = self.border_width
        sub_element(element, y("BorderStyle"), attributes)

    def _add_additional_elements(self, element: ET._Element) -> None:
        """Add type specific elements (none by default)"""


class ShapeNode(Node):
    """A node with one of the basic geometric shapes"""

    shape: ShapeType = ShapeType.RECTANGLE

    def _add_type_element(self, root: ET._Element) -> ET._Element:
        return sub_element(root, y("ShapeNode"))

    def _add_additional_elements(self, element: ET._Element) -> None:
        sub_element(element, y("Shape"), {"type": self.shape})


# Java style properties understood by GenericNode configurations. Properties
# with a hide pattern are only written when their value doesn't match it.
STYLE_PROPERTIES: Dict[str, Dict[str, str]] = {
    "ModernNodeShadow": {
        "class": "java.lang.Boolean",
        "match": r"^(?:true|false)$",
        "default": "false",
        "hide": r"^false$",
    },
    "ModernNodeRadius": {
        "class": "java.lang.Double",
        "match": r"^\d+(?:\.\d+)?$",
        "default": "10.0",
    },
    "y.view.ShadowNodePainter.SHADOW_PAINTING": {
        "class": "java.lang.Boolean",
        "match": r"^(?:true|false)$",
        "default": "false",
    },
    "com.yworks.flowchart.style.orientation": {
        "class": "java.lang.Byte",
        "match": r"^[01234]$",
        "default": "0",
    },
    "doubleBorder": {
        "class": "java.lang.Boolean",
        "match": r"^(?:true|false)$",
        "default": "false",
        "hide": r"^false$",
    },
}

_MODERN = ("ModernNodeRadius", "ModernNodeShadow")
_SHADOW = ("y.view.ShadowNodePainter.SHADOW_PAINTING",)
_DOUBLE_BORDER = _SHADOW + ("doubleBorder",)

CONFIGURATIONS: Dict[str, tuple] = {
    **{
        name: _MODERN
        for name in (
            "BevelNode",
            "BevelNode2",
            "BevelNode3",
            "BevelNodeWithShadow",
            "ShinyPlateNode",
            "ShinyPlateNode2",
            "ShinyPlateNode3",
            "ShinyPlateNodeWithShadow",
        )
    },
    **{
        f"com.yworks.flowchart.{name}": _SHADOW
        for name in (
            "start1",
            "start2",
            "terminator",
            "process",
            "predefinedProcess",
            "decision",
            "loopLimit",
            "loopLimitEnd",
            "document",
            "data",
            "directData",
            "storedData",
            "sequentialData",
            "dataBase",
            "internalStorage",
            "manualInput",
            "card",
            "paperType",
            "cloud",
            "delay",
            "display",
            "manualOperation",
            "preparation",
            "onPageReference",
            "offPageReference",
            "userMessage",
            "networkMessage",
        )
    },
    "com.yworks.flowchart.annotation": _SHADOW + ("com.yworks.flowchart.style.orientation",),
    "com.yworks.entityRelationship.big_entity": _SHADOW,
    "com.yworks.entityRelationship.small_entity": _DOUBLE_BORDER,
    "com.yworks.entityRelationship.relationship": _DOUBLE_BORDER,
    "com.yworks.entityRelationship.attribute": _DOUBLE_BORDER,
}


class GenericNode(Node):
    """A node whose shape is chosen by its configuration.

    Special configurations are tuned with java style properties, see
    set_java_style and get_java_style.
    """

    configuration: str = "com.yworks.flowchart.cloud"
    java_style: Dict[str, str] = Field(default_factory=dict)

    @field_validator("configuration")
    @classmethod
    def validate_configuration(cls, v):
        if v not in CONFIGURATIONS:
            raise ValueError(f"Unknown GenericNode configuration '{v}'")
        return v

    @field_validator("java_style")
    @classmethod
    def validate_java_style(cls, v):
        for name, value in v.items():
            if name not in STYLE_PROPERTIES:
                raise ValueError(f"No such java style property: {name}")
            pattern = STYLE_PROPERTIES[name]["match"]
            if not re.match(pattern, value):
                raise ValueError(
                    f"Value for java style property {name} doesn't match {pattern} (given value: {value})"
                )
        return v

    def set_java_style(self, **properties: str) -> None:
        """Set java style properties, e.g. set_java_style(ModernNodeRadius="5.0")."""
        self.java_style = {**self.java_style, **properties}

    def get_java_style(self, name: str) -> str:
        """Current value of a java style property, or its default."""
        if name not in STYLE_PROPERTIES:
            raise KeyError(f"No such java style property: {name}")
        return self.java_style.get(name, STYLE_PROPERTIES[name]["default"])

    def _add_type_element(self, root: ET._Element) -> ET._Element:
        return sub_element(root, y("GenericNode"), {"configuration": self.configuration})

    def _add_additional_elements(self, element: ET._Element) -> None:
        visible = []
        for name in CONFIGURATIONS[self.configuration]:
            hide = STYLE_PROPERTIES[name].get("hide")
            if hide and re.match(hide, self.get_java_style(name)):
                continue
            visible.append(name)
        if visible:
            styles = sub_element(element, y("StyleProperties"))
            for name in visible:
                sub_element(
                    styles,
                    y("Property"),
                    {
                        "class": STYLE_PROPERTIES[name]["class"],
                        "name": name,
                        "value": self.get_java_style(name),
                    },
                )


NODE_TYPES = {
    "ShapeNode": ShapeNode,
    "GenericNode": GenericNode,
}
