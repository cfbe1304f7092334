"""
Settings for building documents.

Settings can be loaded from a JSON file. If no path is given, a file named
"settings.json" next to this module is used when present; otherwise the
defaults apply.
"""

import codecs
import json
import logging
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)


class BuilderSettings(BaseModel):
    """How the document builder serializes and persists documents.

    Attributes:
        pretty_print: Indent the XML output
        encoding: Encoding of the XML declaration and of written files
        file_suffix: Appended to the base filename given to build_document
        memoize_coordinates: Remember absolute node positions during one build
    """

    model_config = ConfigDict(frozen=True)

    pretty_print: bool = True
    encoding: str = "UTF-8"
    file_suffix: str = ".graphml"
    memoize_coordinates: bool = True

    @field_validator("file_suffix")
    @classmethod
    def validate_suffix_format(cls, v):
        """Make sure a non-empty suffix starts with a dot"""
        if v and not v.startswith("."):
            v = f".{v}"
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v):
        """Only encodings Python knows can be written"""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding '{v}'") from e
        return v

    @classmethod
    def from_file(cls, config_path: Union[str, Path, None] = None) -> "BuilderSettings":
        """Load settings from a JSON file.

        Args:
            config_path: Path to the settings file. If None, looks for
                        "settings.json" in the module's directory.

        Returns:
            The loaded settings, or the defaults if the file doesn't exist
            or can't be read
        """
        if config_path is None:
            config_path = Path(__file__).parent / "settings.json"
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Error loading builder settings from {config_path}: {e}. Using defaults.")
            return cls()

        return cls.model_validate(config)
