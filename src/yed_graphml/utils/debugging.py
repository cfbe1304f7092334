from collections import Counter
from pathlib import Path
from typing import IO, Optional, Union
from lxml import etree as ET
import logging

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import networkx as nx

from yed_graphml.core.document import Document
from yed_graphml.utils.logging import LOG_FORMAT

logger = logging.getLogger(__name__)

DEBUG_HANDLER_NAME = "yed_graphml.debug"

def setup_debug_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Echo the package's own log records to a console stream.

    DEBUG shows every registry change: added and removed nodes and edges,
    cascades and re-indexed edge endpoints. INFO shows written files,
    integrity summaries and saved visualizations.

    Only the "yed_graphml" logger is configured, the root logger is left to
    the host application. Calling it again replaces the earlier handler.
    """
    package_logger = logging.getLogger("yed_graphml")
    for handler in list(package_logger.handlers):
        if handler.get_name() == DEBUG_HANDLER_NAME:
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.set_name(DEBUG_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger

def print_xml_structure(element: ET._Element, level: int = 0, max_depth: Optional[int] = None):
    """Print a built GraphML tree, one element per line, indented by depth.

    Names keep the prefixes of the written document (y:ShapeNode, y:Geometry)
    and attributes are shown inline. Label text follows on its own line.
    With max_depth only that many levels below the element are shown,
    e.g. max_depth=1 lists a node's data keys but not their content.
    """
    indent = "  " * level
    name = ET.QName(element).localname
    if element.prefix:
        name = f"{element.prefix}:{name}"
    attributes = " ".join(
        f'{ET.QName(key).localname}="{value}"' for key, value in element.attrib.items()
    )
    print(f"{indent}{name} [{attributes}]" if attributes else f"{indent}{name}")

    if element.text and element.text.strip():
        print(f'{indent}  "{element.text.strip()}"')

    if max_depth is not None and level >= max_depth:
        return
    for child in element.iterchildren(ET.Element):
        print_xml_structure(child, level + 1, max_depth)

def inspect_document(document: Document):
    """Print a summary of the document"""
    nodes = document.get_nodes()
    edges = document.get_edges()
    print("\n=== Document Summary ===")
    print(f"Total nodes: {len(nodes)}")
    print(f"Total edges: {len(edges)}")
    print(f"Front layer: {document.get_front_layer()}")

    print("\n=== Amount of Node Types ===")
    for node_type, count in Counter(type(n).__name__ for n in nodes).items():
        print(f"{node_type}: {count}")

    print("\n=== Amount of Edge Types ===")
    for edge_type, count in Counter(type(e).__name__ for e in edges).items():
        print(f"{edge_type}: {count}")

    print("\n=== Nodes per Layer ===")
    for layer, count in sorted(Counter(n.layer for n in nodes).items()):
        print(f"{layer}: {count}")

    relative = [n.id for n in nodes if n.relative is not None]
    print(f"\nRelative nodes: {relative}")

def visualize_document(document: Document, output_path: Union[str, Path]) -> Path:
    """Draw nodes at their absolute centers and edges as straight lines to an image.

    yEd's y axis points down, so the drawing is flipped to match what yEd shows.
    """
    graph = nx.MultiDiGraph()
    positions = {}
    for node in document.get_nodes():
        graph.add_node(node.id)
        cx, cy = node.abs_center()
        positions[node.id] = (cx, -cy)
    for edge in document.get_edges():
        # dangling edges have no position to draw from
        if not all(document.contains_node(n) for n in edge.get_nodes()):
            continue
        graph.add_edge(edge.source.id, edge.target.id, key=edge.id)

    labels = {
        node.id: node.labels[0].text if node.labels else str(node.id)
        for node in document.get_nodes()
    }

    fig, ax = plt.subplots(figsize=(10, 8))
    nx.draw_networkx(graph, pos=positions, labels=labels, ax=ax, node_color="#ffcc00")
    ax.set_axis_off()

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path)
    plt.close(fig)
    logger.info(f"Saved document visualization to {output_path}")
    return output_path
