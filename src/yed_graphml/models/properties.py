"""
Typed properties shared by nodes, edges and labels.

Every entity is a pydantic model with assignment validation switched on, so a
malformed value is rejected with a pydantic ValidationError both at
construction and on later assignment.
"""

import re
from enum import Enum
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict

ElementId = Union[int, str]

COLOR_PATTERN = re.compile(r"^(?:#[0-9a-fA-F]{6}(?:[0-9a-fA-F]{2})?|none)$")


def validate_color(value: str) -> str:
    """java.awt.Color hex form ('#rrggbb' or '#rrggbbaa') or 'none'"""
    if value != "none" and not value.startswith("#"):
        value = f"#{value}"
    if not COLOR_PATTERN.match(value):
        raise ValueError(f"'{value}' is not a color of the form '#rrggbb', '#rrggbbaa' or 'none'")
    return value


class LineType(str, Enum):
    """Line styles for node borders and edges"""

    LINE = "line"
    DOTTED = "dotted"
    DASHED = "dashed"
    DASHED_DOTTED = "dashed_dotted"


class ArrowType(str, Enum):
    """Arrow heads available on either end of an edge"""

    STANDARD = "standard"
    DELTA = "delta"
    WHITE_DELTA = "white_delta"
    DIAMOND = "diamond"
    WHITE_DIAMOND = "white_diamond"
    SHORT = "short"
    PLAIN = "plain"
    CONCAVE = "concave"
    CONVEX = "convex"
    CIRCLE = "circle"
    TRANSPARENT_CIRCLE = "transparent_circle"
    DASH = "dash"
    SKEWED_DASH = "skewed_dash"
    T_SHAPE = "t_shape"
    CROWS_FOOT_ONE_MANDATORY = "crows_foot_one_mandatory"
    CROWS_FOOT_MANY_MANDATORY = "crows_foot_many_mandatory"
    CROWS_FOOT_ONE_OPTIONAL = "crows_foot_one_optional"
    CROWS_FOOT_MANY_OPTIONAL = "crows_foot_many_optional"
    CROWS_FOOT_ONE = "crows_foot_one"
    CROWS_FOOT_MANY = "crows_foot_many"
    CROWS_FOOT_OPTIONAL = "crows_foot_optional"
    NONE = "none"


class ShapeType(str, Enum):
    """Shapes a ShapeNode can take"""

    RECTANGLE = "rectangle"
    ROUNDRECTANGLE = "roundrectangle"
    ELLIPSE = "ellipse"
    PARALLELOGRAM = "parallelogram"
    HEXAGON = "hexagon"
    OCTAGON = "octagon"
    DIAMOND = "diamond"
    TRIANGLE = "triangle"
    TRAPEZOID = "trapezoid"
    TRAPEZOID2 = "trapezoid2"
    RECTANGLE3D = "rectangle3d"
    STAR5 = "star5"
    STAR6 = "star6"
    STAR8 = "star8"
    FATARROW = "fatarrow"
    FATARROW2 = "fatarrow2"


class FontStyle(str, Enum):
    PLAIN = "plain"
    BOLD = "bold"
    ITALIC = "italic"
    BOLDITALIC = "bolditalic"


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class PropertyBasedModel(BaseModel):
    """Base class for all property bearing objects (nodes, edges, labels).

    Properties can be set, read and matched by name, which is what the
    document uses to select entities by their properties.
    """

    model_config = ConfigDict(validate_assignment=True)

    def set_properties(self, **properties: Any) -> None:
        """Set several properties at once, in the given order."""
        self._check_property_names(properties)
        for name, value in properties.items():
            setattr(self, name, value)

    def _check_property_names(self, properties: Dict[str, Any]) -> None:
        unknown = [name for name in properties if name not in type(self).model_fields]
        if unknown:
            raise AttributeError(f"{type(self).__name__} has no properties {unknown}")

    def get_properties(self) -> Dict[str, Any]:
        """Current value of every property, keyed by property name."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def has_properties(self, **properties: Any) -> bool:
        """Check whether all given properties match.

        Model valued properties (e.g. a node's relative) are compared by identity.
        Unknown property names never match.
        """
        for name, expected in properties.items():
            if name not in type(self).model_fields:
                return False
            current = getattr(self, name)
            if isinstance(expected, BaseModel) or isinstance(current, BaseModel):
                if current is not expected:
                    return False
            elif current != expected:
                return False
        return True
