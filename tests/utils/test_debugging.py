import io
import logging
import pytest
from lxml import etree as ET
from yed_graphml.core.document import Document
from yed_graphml.models import ShapeNode
from yed_graphml.utils.debugging import (
    inspect_document,
    print_xml_structure,
    setup_debug_logging,
    visualize_document,
)
from yed_graphml.utils.logging import setup_logger

@pytest.fixture
def document():
    """Two layers, one relative node, one edge"""
    document = Document()
    a = document.add_new_node("ShapeNode", x=0, y=0)
    a.add_new_label("start")
    b = document.add_new_node("GenericNode", x=100, y=0, relative=a, layer=1)
    document.add_new_edge("PolyLineEdge", a, b)
    return document

def test_inspect_document(document, capsys):
    inspect_document(document)
    out = capsys.readouterr().out
    assert "Total nodes: 2" in out
    assert "Total edges: 1" in out
    assert "ShapeNode: 1" in out
    assert "GenericNode: 1" in out
    assert "PolyLineEdge: 1" in out
    assert "Relative nodes: [2]" in out

def test_print_xml_structure(document, capsys):
    root = ET.fromstring(document.build_document().encode("UTF-8"))
    node = root.find(".//{http://graphml.graphdrawing.org/xmlns}node")
    print_xml_structure(node)
    out = capsys.readouterr().out
    assert out.startswith('node [id="1"]')
    assert '  data [key="d6"]' in out
    assert "    y:ShapeNode" in out
    assert '"start"' in out

    print_xml_structure(node, max_depth=1)
    out = capsys.readouterr().out
    assert '  data [key="d6"]' in out
    assert "y:ShapeNode" not in out

def test_visualize_document(document, tmp_path):
    # a dangling edge is skipped rather than drawn
    document.add_edge(document.get_edges()[0].copy(99, ShapeNode(id="gone"), document.get_nodes()[0]))
    path = visualize_document(document, tmp_path / "out" / "document.png")
    assert path.exists()
    assert path.stat().st_size > 0

def test_setup_debug_logging():
    """Registry changes reach the debug stream exactly once, even after a second setup"""
    stream = io.StringIO()
    logger = setup_debug_logging(logging.DEBUG, stream=stream)
    try:
        assert logger.name == "yed_graphml"
        assert setup_debug_logging(logging.DEBUG, stream=stream) is logger
        assert len(logger.handlers) == 1

        Document().add_new_node("ShapeNode")
        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert "yed_graphml.core.document - DEBUG - Added ShapeNode 1" in lines[0]
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)

def test_setup_logger(tmp_path):
    logger = setup_logger("yed_graphml.test", log_dir=tmp_path / "logs", level=logging.INFO)
    assert len(logger.handlers) == 2
    assert setup_logger("yed_graphml.test", log_dir=tmp_path / "logs", level=logging.INFO) is logger
    assert len(logger.handlers) == 2

    logger.info("written")
    for handler in logger.handlers:
        handler.flush()
    assert "written" in (tmp_path / "logs" / "graphml.log").read_text(encoding="utf-8")

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
