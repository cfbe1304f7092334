"""
Integrity checks run on a document without building it.

A build stops at the first broken reference. check_document reports every
issue to a ValidationCollector instead, which decides by its validation level
whether to raise or just collect.
"""

import logging
from typing import TYPE_CHECKING

import networkx as nx

from yed_graphml.utils.validation import ValidationCollector, ValidationSeverity

if TYPE_CHECKING:
    from yed_graphml.core.document import Document

logger = logging.getLogger(__name__)


def check_document(document: "Document", collector: ValidationCollector) -> None:
    """Report dangling references, relative cycles and degenerate nodes.

    Args:
        document: The document to check
        collector: Receives one result per issue

    Raises:
        DocumentIntegrityError: If the collector's validation level requires it
    """
    for node in document.get_nodes():
        relative = node.relative
        if relative is not None and not document.contains_node(relative):
            collector.add_result(
                severity=ValidationSeverity.ERROR,
                message=f"Node '{node.id}' is relative to node '{relative.id}' which is not part of this document",
                element_id=node.id,
                element_type="Node",
                field_name="relative",
            )
        for field_name in ("width", "height"):
            if getattr(node, field_name) == 0:
                collector.add_result(
                    severity=ValidationSeverity.WARNING,
                    message=f"Node '{node.id}' has zero {field_name} and won't be visible",
                    element_id=node.id,
                    element_type="Node",
                    field_name=field_name,
                )

    for edge in document.get_edges():
        for field_name in ("source", "target"):
            endpoint = getattr(edge, field_name)
            if not document.contains_node(endpoint):
                collector.add_result(
                    severity=ValidationSeverity.ERROR,
                    message=f"Edge '{edge.id}' has {field_name} '{endpoint.id}' which is not part of this document",
                    element_id=edge.id,
                    element_type="Edge",
                    field_name=field_name,
                )

    # every node has at most one relative, so each cycle is reported once
    for cycle in nx.simple_cycles(document.relation_graph()):
        path = " -> ".join(str(node_id) for node_id in [*cycle, cycle[0]])
        collector.add_result(
            severity=ValidationSeverity.CRITICAL,
            message=f"Relative positioning loops over {len(cycle)} nodes: {path}",
            element_id=cycle[0],
            element_type="Node",
            field_name="relative",
        )

    logger.info(f"Integrity check found {len(collector.results)} issues")
