from yed_graphml.models.edge import (
    ArcEdge,
    BezierEdge,
    Edge,
    GenericEdge,
    PolyLineEdge,
    QuadCurveEdge,
    SplineEdge,
)
from yed_graphml.models.label import EdgeLabel, Label, NodeLabel
from yed_graphml.models.node import GenericNode, Node, ShapeNode

__all__ = [
    "Node",
    "ShapeNode",
    "GenericNode",
    "Edge",
    "ArcEdge",
    "BezierEdge",
    "GenericEdge",
    "PolyLineEdge",
    "QuadCurveEdge",
    "SplineEdge",
    "Label",
    "NodeLabel",
    "EdgeLabel",
]
