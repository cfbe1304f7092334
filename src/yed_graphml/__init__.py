"""Build yEd compatible GraphML documents from Python."""

from yed_graphml.core.document import Document
from yed_graphml.models import (
    ArcEdge,
    BezierEdge,
    EdgeLabel,
    GenericEdge,
    GenericNode,
    NodeLabel,
    PolyLineEdge,
    QuadCurveEdge,
    ShapeNode,
    SplineEdge,
)
from yed_graphml.settings import BuilderSettings
from yed_graphml.utils.validation import ValidationLevel

__version__ = "0.1.0"

__all__ = [
    "Document",
    "BuilderSettings",
    "ValidationLevel",
    "ShapeNode",
    "GenericNode",
    "ArcEdge",
    "BezierEdge",
    "GenericEdge",
    "PolyLineEdge",
    "QuadCurveEdge",
    "SplineEdge",
    "NodeLabel",
    "EdgeLabel",
]
