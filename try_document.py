import logging
from pathlib import Path
from yed_graphml import Document, ValidationLevel
from yed_graphml.utils.debugging import setup_debug_logging, inspect_document, visualize_document


def build_flowchart() -> Document:
    """Small flowchart: a decision with two outcomes placed relative to it"""
    doc = Document()
    doc.add_new_node_template("step", "GenericNode", configuration="com.yworks.flowchart.process", width=120, height=40)
    doc.add_new_edge_template("flow", "PolyLineEdge", target_arrow="standard")

    start = doc.add_new_node("GenericNode", configuration="com.yworks.flowchart.start1", x=100, y=0, width=60, height=40)
    start.add_new_label("Start")
    decision = doc.add_new_node("GenericNode", configuration="com.yworks.flowchart.decision", x=-20, y=100, width=100, height=60, relative=start)
    decision.add_new_label("Fever?")

    yes = doc.add_template_node("step", x=-120, y=120, relative=decision)
    yes.add_new_label("Measure temperature")
    no = doc.add_template_node("step", x=100, y=120, relative=decision)
    no.add_new_label("Continue")

    doc.add_template_edge("flow", start, decision)
    doc.add_template_edge("flow", decision, yes).add_new_label("yes", position="head")
    doc.add_template_edge("flow", decision, no).add_new_label("no", position="head")
    return doc


if __name__ == "__main__":
    setup_debug_logging(logging.INFO)
    output_dir = Path("debug_output")

    doc = build_flowchart()
    inspect_document(doc)

    collector = doc.check_integrity(ValidationLevel.LENIENT)
    collector.save_report(output_dir / "integrity_report.txt")

    doc.build_document(output_dir / "flowchart")
    visualize_document(doc, output_dir / "flowchart.png")

    print('reached end of code')
