import pytest
from yed_graphml.core.document import Document
from yed_graphml.exceptions import DocumentIntegrityError
from yed_graphml.models import ShapeNode
from yed_graphml.utils.validation import (
    ValidationCollector,
    ValidationLevel,
    ValidationSeverity,
)

@pytest.fixture
def broken_document():
    """A document with one issue of each severity

    - node 1 has zero width (WARNING)
    - edge 3 points at a node that isn't registered (ERROR)
    """
    document = Document()
    a = document.add_new_node("ShapeNode", width=0)
    outsider = ShapeNode(id="outsider")
    document.add_new_node("ShapeNode")
    document.add_new_edge("PolyLineEdge", a, outsider)
    return document

@pytest.fixture
def cyclic_document():
    document = Document()
    a = document.add_new_node("ShapeNode")
    b = document.add_new_node("ShapeNode", relative=a)
    a.relative = b
    return document

def test_clean_document_is_valid():
    document = Document()
    a = document.add_new_node("ShapeNode")
    document.add_new_node("ShapeNode", relative=a)
    collector = document.check_integrity(ValidationLevel.STRICT)
    assert collector.results == []
    assert collector.is_valid

def test_lenient_collects_everything(broken_document):
    collector = broken_document.check_integrity(ValidationLevel.LENIENT)

    warnings = collector.get_results_by_severity(ValidationSeverity.WARNING)
    errors = collector.get_results_by_severity(ValidationSeverity.ERROR)
    assert [(r.element_id, r.field_name) for r in warnings] == [(1, "width")]
    assert [(r.element_id, r.field_name) for r in errors] == [(3, "target")]
    assert errors[0].element_type == "Edge"
    assert not collector.is_valid
    assert not collector.has_critical_issues

def test_normal_tolerates_errors(broken_document):
    collector = broken_document.check_integrity()
    assert collector.validation_level == ValidationLevel.NORMAL
    assert len(collector.results) == 2

def test_strict_raises_on_errors(broken_document):
    with pytest.raises(DocumentIntegrityError) as exc_info:
        broken_document.check_integrity(ValidationLevel.STRICT)
    assert exc_info.value.element_id == 3

def test_cycles_are_critical(cyclic_document):
    with pytest.raises(DocumentIntegrityError):
        cyclic_document.check_integrity(ValidationLevel.NORMAL)

    collector = cyclic_document.check_integrity(ValidationLevel.LENIENT)
    critical = collector.get_results_by_severity(ValidationSeverity.CRITICAL)
    assert len(critical) == 1
    assert critical[0].field_name == "relative"
    assert collector.has_critical_issues

def test_dangling_relative_is_an_error():
    document = Document()
    node = document.add_new_node("ShapeNode", relative=ShapeNode(id="gone"))
    collector = document.check_integrity(ValidationLevel.LENIENT)
    assert [(r.element_id, r.field_name) for r in collector.results] == [(node.id, "relative")]

def test_save_report(broken_document, tmp_path):
    collector = broken_document.check_integrity(ValidationLevel.LENIENT)
    report = tmp_path / "reports" / "integrity.txt"
    collector.save_report(report)

    content = report.read_text(encoding="utf-8")
    assert content.startswith("Document Integrity Report")
    assert "Validation Level: LENIENT" in content
    assert "Total Issues: 2" in content
    assert "ERROR: 1 issues" in content
    assert "Critical issues were found" not in content

def test_collector_levels():
    """Each level raises for different severities"""
    lenient = ValidationCollector(ValidationLevel.LENIENT)
    lenient.add_result(ValidationSeverity.CRITICAL, "bad")

    normal = ValidationCollector(ValidationLevel.NORMAL)
    normal.add_result(ValidationSeverity.ERROR, "bad")
    with pytest.raises(DocumentIntegrityError):
        normal.add_result(ValidationSeverity.CRITICAL, "worse")

    strict = ValidationCollector(ValidationLevel.STRICT)
    strict.add_result(ValidationSeverity.WARNING, "odd")
    with pytest.raises(DocumentIntegrityError):
        strict.add_result(ValidationSeverity.ERROR, "bad")
