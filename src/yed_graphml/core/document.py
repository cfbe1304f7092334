"""
The document: registry of all nodes and edges of one yEd diagram.

The document owns its nodes and edges by id, hands out free ids, keeps an
index of which edges are incident to which node, manages templates and builds
the GraphML output. Relative positioning is resolved at build time, so nodes
can be moved, re-parented or removed in any order before building.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import networkx as nx

from yed_graphml.core.builder import DocumentBuilder
from yed_graphml.core.resolver import CoordinateResolver
from yed_graphml.exceptions.document import DuplicateIdError, TemplateNotFoundError
from yed_graphml.exceptions.reference import (
    TypeMismatchError,
    UninitializedReferenceError,
)
from yed_graphml.models.edge import EDGE_TYPES, Edge
from yed_graphml.models.label import LABEL_TYPES, Label
from yed_graphml.models.node import NODE_TYPES, Node, ShapeNode
from yed_graphml.models.properties import ElementId
from yed_graphml.settings import BuilderSettings
from yed_graphml.utils.validation import ValidationCollector, ValidationLevel

logger = logging.getLogger(__name__)

# id of stored template prototypes, they are never registered
TEMPLATE_ID = "noid"


class Document:
    """Registry and builder for a yEd document.

    Example:
        >>> doc = Document()
        >>> a = doc.add_new_node("ShapeNode", x=0, y=0)
        >>> b = doc.add_new_node("ShapeNode", x=100, y=0, relative=a)
        >>> doc.add_new_edge("PolyLineEdge", a, b)
        >>> xml = doc.build_document("diagram")  # writes diagram.graphml
    """

    def __init__(self, settings: Optional[BuilderSettings] = None):
        self.settings = settings or BuilderSettings()
        self._node_templates: Dict[str, Node] = {}
        self._edge_templates: Dict[str, Edge] = {}
        self._label_templates: Dict[str, Label] = {}
        # endpoint of stored edge templates
        self._placeholder_node = ShapeNode(id=TEMPLATE_ID)
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}
        self.reset_document()

    def reset_document(self) -> None:
        """Remove all nodes and edges and restart id assignment.

        Templates are kept.
        """
        for edge in self._edges.values():
            edge._registry = None
        self._nodes = {}
        self._edges = {}
        # node id -> node id, keyed by edge id, all in their written (str) form
        self._incidence = nx.MultiDiGraph()
        self._endpoints: Dict[str, Tuple[str, str]] = {}
        self._last_id = 0

    def build_document(self, filename: Union[str, Path, None] = None) -> str:
        """Build the GraphML document and return it as a string.

        If a filename is given, the document is also written to
        '<filename>.graphml'.
        """
        return DocumentBuilder(self.settings).build(self, filename)

    def check_integrity(
        self, validation_level: ValidationLevel = ValidationLevel.NORMAL
    ) -> ValidationCollector:
        """Collect every issue that would make a build fail, without building."""
        from yed_graphml.core.integrity import check_document

        collector = ValidationCollector(validation_level)
        check_document(self, collector)
        return collector

    # ids and layers

    def get_free_id(self) -> int:
        """Return the next integer id not used by any node or edge.

        The counter only moves forward, so ids freed by removal are reused
        only once the counter reaches them again.
        """
        candidate = self._last_id
        while True:
            candidate += 1
            if not (self.has_node_id(candidate) or self.has_edge_id(candidate)):
                break
        self._last_id = candidate
        return candidate

    def get_front_layer(self) -> int:
        """Highest layer used by any node, 0 for an empty document."""
        return max((node.layer for node in self._nodes.values()), default=0)

    # nodes

    def add_new_node(self, node_type: str, **properties) -> Node:
        """Create a node of the named type with a free id, register and return it."""
        node = _lookup_type(NODE_TYPES, node_type, "node type")(
            id=self.get_free_id(), **properties
        )
        self.add_node(node)
        return node

    def add_node(self, node: Node) -> None:
        if not isinstance(node, Node):
            raise TypeMismatchError("Node", node)
        if self.has_node_id(node.id):
            raise DuplicateIdError("Node ids must be unique", node.id)
        self._nodes[_key(node.id)] = node
        logger.debug(f"Added {type(node).__name__} {node.id!r}")

    def get_nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def get_nodes_by_properties(self, **properties) -> List[Node]:
        """All nodes whose properties match, e.g. get_nodes_by_properties(layer=2)."""
        return [node for node in self._nodes.values() if node.has_properties(**properties)]

    def has_node_id(self, node_id: ElementId) -> bool:
        if node_id is None:
            raise UninitializedReferenceError("No node id provided")
        return _key(node_id) in self._nodes

    def get_node_by_id(self, node_id: ElementId) -> Optional[Node]:
        if node_id is None:
            raise UninitializedReferenceError("No node id provided")
        return self._nodes.get(_key(node_id))

    def contains_node(self, node: Node) -> bool:
        """True if this very node object is registered."""
        return self._nodes.get(_key(node.id)) is node

    def incident_edges(self, node: Node) -> List[Edge]:
        """Registered edges having the node as source or target."""
        node_key = _key(node.id)
        if node_key not in self._incidence:
            return []
        keys = [key for _, _, key in self._incidence.out_edges(node_key, keys=True)]
        keys += [key for _, _, key in self._incidence.in_edges(node_key, keys=True)]
        # a self loop shows up as both an out and an in edge
        return [self._edges[key] for key in dict.fromkeys(keys)]

    def dependent_nodes(self, node: Node) -> List[Node]:
        """Registered nodes that are directly relative to the given node."""
        return [n for n in self._nodes.values() if n.relative is node]

    def remove_node(self, node: Node, keep_relative: bool = False) -> None:
        """Remove a node, all its edges and all nodes relative to it.

        With keep_relative the nodes relative to the removed node stay in
        the document: they are made absolute at their current position.
        Removing a node that isn't registered does nothing. If a position
        can't be resolved the document is left unchanged.
        """
        if not isinstance(node, Node):
            raise TypeMismatchError("Node", node)
        if not self.contains_node(node):
            return
        dependents = self.dependent_nodes(node)
        frozen = []
        if keep_relative:
            # resolve all positions before anything is removed
            resolver = CoordinateResolver()
            frozen = [(dependent, resolver.absolute_position(dependent)) for dependent in dependents]

        del self._nodes[_key(node.id)]
        for edge in self.incident_edges(node):
            self.remove_edge(edge)
        self._drop_index_node(_key(node.id))
        logger.debug(f"Removed node {node.id!r}")

        for dependent, (x, y) in frozen:
            dependent.set_properties(x=x, y=y, relative=None)
            logger.debug(f"Node {dependent.id!r} made absolute at ({x}, {y})")
        if not keep_relative:
            for dependent in dependents:
                self.remove_node(dependent)

    # edges

    def add_new_edge(self, edge_type: str, source: Node, target: Node, **properties) -> Edge:
        """Create an edge of the named type with a free id, register and return it."""
        edge = _lookup_type(EDGE_TYPES, edge_type, "edge type")(
            id=self.get_free_id(), source=source, target=target, **properties
        )
        self.add_edge(edge)
        return edge

    def add_edge(self, edge: Edge) -> None:
        if not isinstance(edge, Edge):
            raise TypeMismatchError("Edge", edge)
        if self.has_edge_id(edge.id):
            raise DuplicateIdError("Edge ids must be unique", edge.id)
        self._edges[_key(edge.id)] = edge
        self._index_edge(edge)
        edge._registry = self
        logger.debug(f"Added {type(edge).__name__} {edge.id!r} ({edge.source.id!r} -> {edge.target.id!r})")

    def get_edges(self) -> List[Edge]:
        return list(self._edges.values())

    def get_edges_by_properties(self, **properties) -> List[Edge]:
        """All edges whose properties match, e.g. get_edges_by_properties(source=node)."""
        return [edge for edge in self._edges.values() if edge.has_properties(**properties)]

    def has_edge_id(self, edge_id: ElementId) -> bool:
        if edge_id is None:
            raise UninitializedReferenceError("No edge id provided")
        return _key(edge_id) in self._edges

    def get_edge_by_id(self, edge_id: ElementId) -> Optional[Edge]:
        if edge_id is None:
            raise UninitializedReferenceError("No edge id provided")
        return self._edges.get(_key(edge_id))

    def contains_edge(self, edge: Edge) -> bool:
        """True if this very edge object is registered."""
        return self._edges.get(_key(edge.id)) is edge

    def remove_edge(self, edge: Edge) -> None:
        """Remove an edge. Removing an edge that isn't registered does nothing."""
        if not isinstance(edge, Edge):
            raise TypeMismatchError("Edge", edge)
        if not self.contains_edge(edge):
            return
        self._unindex_edge(edge.id)
        del self._edges[_key(edge.id)]
        edge._registry = None
        logger.debug(f"Removed edge {edge.id!r}")

    # incidence index

    def _index_edge(self, edge: Edge) -> None:
        endpoints = (_key(edge.source.id), _key(edge.target.id))
        self._incidence.add_edge(*endpoints, key=_key(edge.id))
        self._endpoints[_key(edge.id)] = endpoints

    def _unindex_edge(self, edge_id: ElementId) -> None:
        source_id, target_id = self._endpoints.pop(_key(edge_id))
        self._incidence.remove_edge(source_id, target_id, key=_key(edge_id))
        for node_id in (source_id, target_id):
            if node_id not in self._nodes:
                self._drop_index_node(node_id)

    def _reindex_edge(self, edge: Edge) -> None:
        """Called by a registered edge whose source or target changed."""
        if not self.contains_edge(edge):
            return
        self._unindex_edge(edge.id)
        self._index_edge(edge)
        logger.debug(f"Edge {edge.id!r} now connects {edge.source.id!r} -> {edge.target.id!r}")

    def _drop_index_node(self, node_id: str) -> None:
        if node_id in self._incidence and self._incidence.degree(node_id) == 0:
            self._incidence.remove_node(node_id)

    # relations

    def relation_graph(self) -> nx.DiGraph:
        """Directed graph of relative references, from each node to its relative."""
        graph = nx.DiGraph()
        for node in self._nodes.values():
            graph.add_node(node.id)
            if node.relative is not None:
                graph.add_edge(node.id, node.relative.id)
        return graph

    # templates

    def add_node_template(self, name: str, node: Node, **overrides) -> None:
        """Store a private copy of a node (and its labels) as named template."""
        if not isinstance(node, Node):
            raise TypeMismatchError("Node", node)
        self._node_templates[name] = node.copy(TEMPLATE_ID, **overrides)

    def add_new_node_template(self, name: str, node_type: str, **properties) -> None:
        """Store a new node of the named type as template."""
        node = _lookup_type(NODE_TYPES, node_type, "node type")(id=TEMPLATE_ID, **properties)
        self.add_node_template(name, node)

    def get_template_node(self, name: str, **overrides) -> Node:
        """Return a fresh copy of a node template with a free id, not registered."""
        template = _lookup_template(self._node_templates, name, "node")
        return template.copy(self.get_free_id(), **overrides)

    def add_template_node(self, name: str, **overrides) -> Node:
        """Like get_template_node, but also registers the new node."""
        node = self.get_template_node(name, **overrides)
        self.add_node(node)
        return node

    def add_edge_template(self, name: str, edge: Edge, **overrides) -> None:
        """Store a private copy of an edge (labels and waypoints included) as named template."""
        if not isinstance(edge, Edge):
            raise TypeMismatchError("Edge", edge)
        self._edge_templates[name] = edge.copy(
            TEMPLATE_ID, self._placeholder_node, self._placeholder_node, **overrides
        )

    def add_new_edge_template(self, name: str, edge_type: str, **properties) -> None:
        """Store a new edge of the named type as template."""
        edge = _lookup_type(EDGE_TYPES, edge_type, "edge type")(
            id=TEMPLATE_ID,
            source=self._placeholder_node,
            target=self._placeholder_node,
            **properties,
        )
        self.add_edge_template(name, edge)

    def get_template_edge(self, name: str, source: Node, target: Node, **overrides) -> Edge:
        """Return a fresh copy of an edge template connecting source and target, not registered."""
        template = _lookup_template(self._edge_templates, name, "edge")
        return template.copy(self.get_free_id(), source, target, **overrides)

    def add_template_edge(self, name: str, source: Node, target: Node, **overrides) -> Edge:
        """Like get_template_edge, but also registers the new edge."""
        edge = self.get_template_edge(name, source, target, **overrides)
        self.add_edge(edge)
        return edge

    def add_label_template(self, name: str, label: Label, **overrides) -> None:
        if not isinstance(label, Label):
            raise TypeMismatchError("Label", label)
        self._label_templates[name] = label.copy(**overrides)

    def add_new_label_template(self, name: str, label_type: str, text: str, **properties) -> None:
        label = _lookup_type(LABEL_TYPES, label_type, "label type")(text=text, **properties)
        self.add_label_template(name, label)

    def get_template_label(self, name: str, **overrides) -> Label:
        """Return a fresh copy of a label template."""
        return _lookup_template(self._label_templates, name, "label").copy(**overrides)


def _lookup_type(types: dict, name: str, kind: str):
    if name not in types:
        raise TypeMismatchError(f"{kind} ({', '.join(types)})", name)
    return types[name]


def _lookup_template(templates: dict, name: str, kind: str):
    if name not in templates:
        raise TemplateNotFoundError(kind, name)
    return templates[name]


def _key(element_id: ElementId) -> str:
    """Registry key of an id. Ids are written as str, so 7 and "7" are the same id."""
    return str(element_id)
