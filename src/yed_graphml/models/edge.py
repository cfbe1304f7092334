"""
Edge types of a yEd document.

An edge connects a source and a target node. Anchor offsets (sx, sy) and
(tx, ty) move the attachment point away from the center of the respective
node. Waypoints are intermediate points ordered from source to target; they are
absolute coordinates unless relative_waypoints is set, in which case every
waypoint is an offset from the previous one, the first one being an offset
from the source anchor.
"""

from abc import abstractmethod
from typing import Any, List, Optional, Tuple

from lxml import etree as ET
from pydantic import (
    Field,
    NonNegativeFloat,
    PrivateAttr,
    field_validator,
)

from yed_graphml.core.resolver import CoordinateResolver, Point
from yed_graphml.exceptions.reference import (
    TypeMismatchError,
    UninitializedReferenceError,
)
from yed_graphml.models.label import EdgeLabel
from yed_graphml.models.node import Entity, Node
from yed_graphml.models.properties import (
    ArrowType,
    ElementId,
    LineType,
    validate_color,
)
from yed_graphml.utils.xml import graphml, sub_element, y

EDGE_DATA_KEYS = ("d8", "d9")
EDGE_ROOT_KEY = "d10"


class Edge(Entity):
    """Base class for all edge types. Only the subclasses can be instantiated.

    Attributes:
        source: Node the edge starts at
        target: Node the edge ends at
        waypoints: Intermediate points, absolute unless relative_waypoints
    """

    source: Node
    target: Node
    sx: float = 0.0
    sy: float = 0.0
    tx: float = 0.0
    ty: float = 0.0
    line_color: str = "#000000"
    line_type: LineType = LineType.LINE
    line_width: NonNegativeFloat = 1.0
    source_arrow: ArrowType = ArrowType.NONE
    target_arrow: ArrowType = ArrowType.NONE
    relative_waypoints: bool = False
    waypoints: List[Tuple[float, float]] = Field(default_factory=list)
    labels: List[EdgeLabel] = Field(default_factory=list)

    # document the edge is registered in, told about endpoint changes
    _registry: Optional[Any] = PrivateAttr(default=None)

    def __init__(self, **data: Any):
        # edges need both a source and a target node from the start
        for field_name in ("source", "target"):
            if data.get(field_name) is None:
                raise UninitializedReferenceError(
                    f"{type(self).__name__} has no {field_name}, provide a source and target node for edge creation",
                    data.get("id"),
                    field_name,
                )
        super().__init__(**data)

    @field_validator("source", "target", mode="before")
    @classmethod
    def validate_endpoint(cls, v):
        if not isinstance(v, Node):
            raise TypeMismatchError("Node", v)
        return v

    @field_validator("line_color")
    @classmethod
    def validate_color_format(cls, v):
        return validate_color(v)

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in ("source", "target") and self._registry is not None:
            self._registry._reindex_edge(self)

    def get_nodes(self) -> List[Node]:
        """The connected nodes: source and target, or just one node for a self loop."""
        if self.source is self.target:
            return [self.source]
        return [self.source, self.target]

    # waypoints

    def add_waypoint(self, x: float, y: float) -> None:
        """Append a waypoint. Waypoint order is source to target."""
        self.waypoints = [*self.waypoints, (x, y)]

    def clear_waypoints(self) -> None:
        self.waypoints = []

    def abs_waypoints(self) -> List[Point]:
        """Waypoints in absolute coordinates, see CoordinateResolver.waypoints"""
        return CoordinateResolver().waypoints(self)

    # labels

    def add_label(self, label: EdgeLabel) -> None:
        if not isinstance(label, EdgeLabel):
            raise TypeMismatchError("EdgeLabel", label, self.id)
        self.labels.append(label)

    def add_new_label(self, text: str, **properties) -> EdgeLabel:
        """Create an EdgeLabel from text and properties, attach and return it."""
        label = EdgeLabel(text=text, **properties)
        self.add_label(label)
        return label

    def clear_labels(self) -> None:
        self.labels = []

    def get_labels_by_properties(self, **properties) -> List[EdgeLabel]:
        return [label for label in self.labels if label.has_properties(**properties)]

    def copy(self, new_id: ElementId, source: Node, target: Node, **overrides) -> "Edge":
        """Return a copy of this edge under a new id, connecting source and target.

        Labels and waypoints are copied too, so unless relative_waypoints is
        set you will most likely want to call clear_waypoints() on the copy.
        """
        data = self.get_properties()
        for name in ("id", "source", "target"):
            data.pop(name)
        data["labels"] = [label.copy() for label in self.labels]
        data["waypoints"] = list(self.waypoints)
        data.update(overrides)
        return type(self)(id=new_id, source=source, target=target, **data)

    # serialization

    def build_element(self, parent: ET._Element, resolver: CoordinateResolver) -> ET._Element:
        """Append the <edge> element for this edge to parent and return it.

        The type element holds, in this order: Path, LineStyle, Arrows, the
        labels and the type specific elements.
        """
        edge = sub_element(
            parent,
            graphml("edge"),
            {"id": self.id, "source": self.source.id, "target": self.target.id},
        )
        for key in EDGE_DATA_KEYS:
            sub_element(edge, graphml("data"), {"key": key})
        root = sub_element(edge, graphml("data"), {"key": EDGE_ROOT_KEY})
        type_element = self._add_type_element(root)
        self._add_path_element(type_element, resolver)
        self._add_line_style_element(type_element)
        self._add_arrows_element(type_element)
        for label in self.labels:
            label.build_element(type_element)
        self._add_additional_elements(type_element)
        return edge

    @abstractmethod
    def _add_type_element(self, root: ET._Element) -> ET._Element:
        """Add and return the type element, e.g. <y:PolyLineEdge>"""

    def _add_path_element(self, element: ET._Element, resolver: CoordinateResolver) -> None:
        path = sub_element(
            element,
            y("Path"),
            {"sx": self.sx, "sy": self.sy, "tx": self.tx, "ty": self.ty},
        )
        for x, y_ in resolver.waypoints(self):
            sub_element(path, y("Point"), {"x": x, "y": y_})

    def _add_line_style_element(self, element: ET._Element) -> None:
        # yEd has no colorless edge lines
        color = "#000000" if self.line_color == "none" else self.line_color
        sub_element(
            element,
            y("LineStyle"),
            {"color": color, "type": self.line_type, "width": self.line_width},
        )

    def _add_arrows_element(self, element: ET._Element) -> None:
        sub_element(
            element,
            y("Arrows"),
            {"source": self.source_arrow, "target": self.target_arrow},
        )

    def _add_additional_elements(self, element: ET._Element) -> None:
        """Add type specific elements (none by default)"""


class ArcEdge(Edge):
    """An edge drawn as a single arc"""

    arc_type: str = Field(default="fixedRatio", pattern=r"^(?:fixedRatio|fixedHeight)$")
    arc_height: float = 0.0
    arc_ratio: float = 1.0

    def _add_type_element(self, root: ET._Element) -> ET._Element:
        return sub_element(root, y("ArcEdge"))

    def _add_additional_elements(self, element: ET._Element) -> None:
        sub_element(
            element,
            y("Arc"),
            {"height": self.arc_height, "ratio": self.arc_ratio, "type": self.arc_type},
        )


class BezierEdge(Edge):
    """A bezier curve, waypoints act as control points"""

    def _add_type_element(self, root: ET._Element) -> ET._Element:
        return sub_element(root, y("BezierEdge"))


class GenericEdge(Edge):
    """An edge whose look is chosen by its configuration"""

    configuration: str = Field(default="com.yworks.edge.framed", min_length=1)

    def _add_type_element(self, root: ET._Element) -> ET._Element:
        return sub_element(root, y("GenericEdge"), {"configuration": self.configuration})


class PolyLineEdge(Edge):
    """Straight segments between the waypoints, optionally with smoothed bends"""

    smoothed: bool = False

    def _add_type_element(self, root: ET._Element) -> ET._Element:
        return sub_element(root, y("PolyLineEdge"))

    def _add_additional_elements(self, element: ET._Element) -> None:
        sub_element(element, y("BendStyle"), {"smoothed": self.smoothed})


class QuadCurveEdge(Edge):
    """A quadratic curve through the waypoints"""

    straightness: float = Field(default=0.1, ge=0.0, le=1.0)

    def _add_type_element(self, root: ET._Element) -> ET._Element:
        return sub_element(root, y("QuadCurveEdge"), {"straightness": self.straightness})


class SplineEdge(Edge):
    """A spline through the waypoints"""

    def _add_type_element(self, root: ET._Element) -> ET._Element:
        return sub_element(root, y("SplineEdge"))


EDGE_TYPES = {
    "ArcEdge": ArcEdge,
    "BezierEdge": BezierEdge,
    "GenericEdge": GenericEdge,
    "PolyLineEdge": PolyLineEdge,
    "QuadCurveEdge": QuadCurveEdge,
    "SplineEdge": SplineEdge,
}
