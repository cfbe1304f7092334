"""
Serialization of a document into yEd flavoured GraphML.

Nodes are emitted back to front by layer, then all edges. Every reference is
checked right before the entity that holds it is emitted, and the output is
only written to disk once the whole XML string has been assembled, so a failed
build never leaves a partial file behind.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from lxml import etree as ET

from yed_graphml.core.resolver import CoordinateResolver
from yed_graphml.exceptions.document import DanglingReferenceError, DocumentWriteError
from yed_graphml.settings import BuilderSettings
from yed_graphml.utils.xml import (
    NSMAP,
    SCHEMA_LOCATION,
    XSI_NS,
    graphml,
    sub_element,
    y,
)

if TYPE_CHECKING:
    from yed_graphml.core.document import Document
    from yed_graphml.models.edge import Edge
    from yed_graphml.models.node import Node

logger = logging.getLogger(__name__)

# Keys declaring the typed data columns yEd expects. d3 is not used by yEd 3.13.
DOCUMENT_KEYS = (
    ("d0", {"for": "graph", "attr.type": "string", "attr.name": "Description"}),
    ("d1", {"for": "port", "yfiles.type": "portgraphics"}),
    ("d2", {"for": "port", "yfiles.type": "portgeometry"}),
    ("d4", {"for": "node", "attr.type": "string", "attr.name": "url"}),
    ("d5", {"for": "node", "attr.type": "string", "attr.name": "description"}),
    ("d6", {"for": "node", "yfiles.type": "nodegraphics"}),
    ("d7", {"for": "graphml", "yfiles.type": "resources"}),
    ("d8", {"for": "edge", "attr.type": "string", "attr.name": "url"}),
    ("d9", {"for": "edge", "attr.type": "string", "attr.name": "description"}),
    ("d10", {"for": "edge", "yfiles.type": "edgegraphics"}),
)


class DocumentBuilder:
    """Builds the GraphML string for the current state of a document."""

    def __init__(self, settings: Optional[BuilderSettings] = None):
        self.settings = settings or BuilderSettings()

    def build(self, document: "Document", filename: Union[str, Path, None] = None) -> str:
        """Serialize the document, optionally writing it to '<filename><suffix>'.

        Args:
            document: The document to build
            filename: Base filename; the configured suffix (".graphml") is appended

        Returns:
            The XML document as a string

        Raises:
            DanglingReferenceError: If a node's relative or an edge's endpoint
                is not registered in the document
            CyclicReferenceError: If a node's relative chain loops
            DocumentWriteError: If the file could not be written
        """
        # one resolver per build, memoized positions must not outlive it
        resolver = CoordinateResolver(memoize=self.settings.memoize_coordinates)

        root = ET.Element(graphml("graphml"), nsmap=NSMAP)
        root.set(f"{{{XSI_NS}}}schemaLocation", SCHEMA_LOCATION)
        for key_id, attributes in DOCUMENT_KEYS:
            sub_element(root, graphml("key"), {"id": key_id, **attributes})

        graph = sub_element(root, graphml("graph"), {"edgedefault": "directed", "id": "G"})
        sub_element(graph, graphml("data"), {"key": "d0"})

        front_layer = document.get_front_layer()
        for layer in range(front_layer + 1):
            for node in document.get_nodes_by_properties(layer=layer):
                self._check_node_references(document, node)
                node.build_element(graph, resolver)

        for edge in document.get_edges():
            self._check_edge_references(document, edge)
            edge.build_element(graph, resolver)

        resources = sub_element(root, graphml("data"), {"key": "d7"})
        sub_element(resources, y("Resources"))

        output = self._serialize(root)
        logger.info(
            f"Built document with {len(document.get_nodes())} nodes on "
            f"{front_layer + 1} layers and {len(document.get_edges())} edges"
        )

        if filename:
            self._write(output, filename)
        return output

    @staticmethod
    def _check_node_references(document: "Document", node: "Node") -> None:
        relative = node.relative
        if relative is not None and not document.contains_node(relative):
            raise DanglingReferenceError(
                f"Node '{relative.id}' as referenced by relative node '{node.id}' is not part of this document",
                node.id,
                relative.id,
            )

    @staticmethod
    def _check_edge_references(document: "Document", edge: "Edge") -> None:
        for node in edge.get_nodes():
            if not document.contains_node(node):
                raise DanglingReferenceError(
                    f"Node '{node.id}' as referenced by edge '{edge.id}' is not part of this document",
                    edge.id,
                    node.id,
                )

    def _serialize(self, root: ET._Element) -> str:
        encoding = self.settings.encoding
        data = ET.tostring(
            root,
            xml_declaration=True,
            encoding=encoding,
            standalone=False,
            pretty_print=self.settings.pretty_print,
        )
        return data.decode(encoding)

    def _write(self, output: str, filename: Union[str, Path]) -> Path:
        """Write the finished output, replacing the target file in one step."""
        path = Path(f"{filename}{self.settings.file_suffix}")
        partial = path.with_name(path.name + ".part")
        try:
            with open(partial, "w", encoding=self.settings.encoding) as f:
                f.write(output)
            partial.replace(path)
        except OSError as e:
            partial.unlink(missing_ok=True)
            raise DocumentWriteError(path, str(e)) from e
        logger.info(f"Wrote document to {path}")
        return path
