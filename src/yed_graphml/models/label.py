"""
Labels attached to nodes and edges.

A node or edge may carry any number of labels; yEd renders all of them.
Where a label is drawn is decided by its positioning model and a position
valid for that model.
"""

from typing import Any, ClassVar, Dict, FrozenSet

from lxml import etree as ET
from pydantic import (
    ConfigDict,
    Field,
    PositiveInt,
    ValidationError,
    field_validator,
    model_validator,
)

from yed_graphml.models.properties import (
    Alignment,
    FontStyle,
    PropertyBasedModel,
    validate_color,
)
from yed_graphml.utils.xml import sub_element, y

NODE_LABEL_POSITIONS: Dict[str, FrozenSet[str]] = {
    "internal": frozenset({"c", "t", "b", "l", "r", "tl", "tr", "bl", "br"}),
    "corners": frozenset({"nw", "ne", "sw", "se"}),
    "sandwich": frozenset({"n", "s"}),
    "sides": frozenset({"n", "e", "s", "w"}),
    "eight_pos": frozenset({"n", "e", "s", "w", "nw", "ne", "sw", "se"}),
    "free": frozenset({"anywhere"}),
}

EDGE_LABEL_POSITIONS: Dict[str, FrozenSet[str]] = {
    "two_pos": frozenset({"head", "tail"}),
    "centered": frozenset({"center"}),
    "six_pos": frozenset({"shead", "thead", "head", "stail", "ttail", "tail"}),
    "three_center": frozenset({"center", "scentr", "tcentr"}),
    "free": frozenset({"anywhere"}),
}


class Label(PropertyBasedModel):
    """Common text and font properties of node and edge labels"""

    # model_name is a yEd term, not a pydantic one
    model_config = ConfigDict(protected_namespaces=())

    positions: ClassVar[Dict[str, FrozenSet[str]]] = {}
    type_tag: ClassVar[str] = "Label"

    text: str
    visible: bool = True
    alignment: Alignment = Alignment.CENTER
    font_family: str = "Dialog"
    font_size: PositiveInt = 12
    font_style: FontStyle = FontStyle.PLAIN
    underlined_text: bool = False
    text_color: str = "#000000"
    background_color: str = "none"
    line_color: str = "none"
    model_name: str
    position: str

    @field_validator("text_color", "background_color", "line_color")
    @classmethod
    def validate_color_format(cls, v):
        return validate_color(v)

    @field_validator("model_name")
    @classmethod
    def validate_model_name(cls, v):
        """Ensure the positioning model is known for this label type"""
        if v not in cls.positions:
            raise ValueError(
                f"Unknown label model '{v}', expected one of {sorted(cls.positions)}"
            )
        return v

    @model_validator(mode="after")
    def validate_position(self):
        """Ensure the position is valid for the positioning model.

        Runs on construction and on every assignment, so changing either
        model_name or position alone can't leave an invalid pair behind.
        """
        if self.position not in self.positions[self.model_name]:
            raise ValueError(
                f"Position '{self.position}' is not valid for label model '{self.model_name}'"
            )
        return self

    def __setattr__(self, name, value):
        previous = self.__dict__.get(name)
        try:
            super().__setattr__(name, value)
        except ValidationError:
            # the pair check runs after the value is stored
            if name in type(self).model_fields:
                self.__dict__[name] = previous
            raise

    def set_properties(self, **properties: Any) -> None:
        """Set several properties at once.

        The result is validated as a whole, so model_name and position can
        be changed together, e.g. set_properties(model_name="corners", position="ne").
        """
        self._check_property_names(properties)
        checked = self.model_validate({**self.get_properties(), **properties})
        for name in properties:
            self.__dict__[name] = getattr(checked, name)

    def copy(self, **overrides) -> "Label":
        """Return an independent copy, optionally with changed properties."""
        data = self.get_properties()
        data.update(overrides)
        return type(self)(**data)

    def build_element(self, parent: ET._Element) -> ET._Element:
        """Append this label's y:*Label element to the given type element."""
        attributes = {
            "alignment": self.alignment,
            "autoSizePolicy": "content",
            "fontFamily": self.font_family,
            "fontSize": self.font_size,
            "fontStyle": self.font_style,
            "textColor": self.text_color,
            "visible": self.visible,
            "modelName": self.model_name,
            "modelPosition": self.position,
        }
        if self.background_color == "none":
            attributes["hasBackgroundColor"] = False
        else:
            attributes["backgroundColor"] = self.background_color
        if self.line_color == "none":
            attributes["hasLineColor"] = False
        else:
            attributes["lineColor"] = self.line_color
        if self.underlined_text:
            attributes["underlinedText"] = True
        attributes.update(self._model_attributes())
        return sub_element(parent, y(self.type_tag), attributes, text=self.text)

    def _model_attributes(self) -> dict:
        return {}


class NodeLabel(Label):
    """A label placed on a node, centered inside it by default"""

    positions: ClassVar[Dict[str, FrozenSet[str]]] = NODE_LABEL_POSITIONS
    type_tag: ClassVar[str] = "NodeLabel"

    model_name: str = "internal"
    position: str = "c"


class EdgeLabel(Label):
    """A label placed along an edge"""

    positions: ClassVar[Dict[str, FrozenSet[str]]] = EDGE_LABEL_POSITIONS
    type_tag: ClassVar[str] = "EdgeLabel"

    model_name: str = "six_pos"
    position: str = "tail"
    distance: float = Field(default=2.0, description="Distance between label and edge")
    ratio: float = Field(default=0.5, ge=0.0, le=1.0)

    def _model_attributes(self) -> dict:
        return {
            "distance": self.distance,
            "ratio": self.ratio,
            "preferredPlacement": "anywhere",
        }


LABEL_TYPES = {
    "NodeLabel": NodeLabel,
    "EdgeLabel": EdgeLabel,
}
