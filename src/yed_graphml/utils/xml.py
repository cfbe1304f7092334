"""
Namespace constants and small lxml helpers for writing yEd flavoured GraphML.

All element names are created fully qualified, so the prefixes in the output
are the ones declared in NSMAP on the document root.
"""
from enum import Enum
from typing import Any, Dict, Optional

from lxml import etree as ET

GRAPHML_NS = "http://graphml.graphdrawing.org/xmlns"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
Y_NS = "http://www.yworks.com/xml/graphml"
YED_NS = "http://www.yworks.com/xml/yed/3"

NSMAP = {
    None: GRAPHML_NS,
    "xsi": XSI_NS,
    "y": Y_NS,
    "yed": YED_NS,
}

SCHEMA_LOCATION = (
    "http://graphml.graphdrawing.org/xmlns "
    "http://www.yworks.com/xml/schema/graphml/1.1/ygraphml.xsd"
)


def graphml(tag: str) -> str:
    """Qualified name of a plain GraphML element"""
    return f"{{{GRAPHML_NS}}}{tag}"


def y(tag: str) -> str:
    """Qualified name of a yFiles extension element (y:*)"""
    return f"{{{Y_NS}}}{tag}"


def format_value(value: Any) -> str:
    """Render a property value the way yEd writes attribute values."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def sub_element(
    parent: ET._Element,
    tag: str,
    attributes: Optional[Dict[str, Any]] = None,
    text: Optional[str] = None,
) -> ET._Element:
    """Append a child element with formatted attributes and optional text.

    Attributes whose value is None are skipped.
    """
    element = ET.SubElement(parent, tag)
    for name, value in (attributes or {}).items():
        if value is not None:
            element.set(name, format_value(value))
    if text is not None:
        element.text = text
    return element
