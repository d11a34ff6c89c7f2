"""
Configuration File Formats.

Selects the serialization format from the configuration file path and
provides the matching stringify/parse pair:
- JSON via the standard library, indented with JSON_INDENT spaces.
- YAML via PyYAML (safe dumper/loader), indented with YAML_INDENT spaces.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from configstore.errors import (
    ConfigDecodeError,
    ConfigEncodeError,
    InternalInvariantError,
)


JSON_INDENT = 3
YAML_INDENT = 2


class ConfigFormat(Enum):
    """Serialization syntax of a configuration file."""

    JSON = "json"
    YAML = "yaml"


_SUFFIX_FORMATS = {
    ".json": ConfigFormat.JSON,
    ".yaml": ConfigFormat.YAML,
    ".yml": ConfigFormat.YAML,
}


def select_format(path: str | Path) -> ConfigFormat:
    """
    Pick the file format from the path suffix (case-insensitive).

    Unknown or missing suffixes fall back to JSON.

    Examples:
        settings.json -> JSON
        settings.YML  -> YAML
        settings      -> JSON
    """
    suffix = Path(path).suffix.lower()
    return _SUFFIX_FORMATS.get(suffix, ConfigFormat.JSON)


class Codec:
    """
    Serializer/deserializer pair for a single ConfigFormat.

    Attributes:
        format: The format this codec reads and writes.
    """

    def __init__(self, fmt: ConfigFormat) -> None:
        self.format = fmt

    def serialize(self, obj: Any) -> str:
        """
        Render a configuration object as text.

        Raises:
            ConfigEncodeError: If the object has no representation in the format.
            InternalInvariantError: If the codec holds an unknown format.
        """
        try:
            if self.format is ConfigFormat.JSON:
                return json.dumps(obj, indent=JSON_INDENT, allow_nan=False)
            if self.format is ConfigFormat.YAML:
                return yaml.safe_dump(
                    obj,
                    indent=YAML_INDENT,
                    sort_keys=False,
                    default_flow_style=False,
                    allow_unicode=True,
                )
        except (TypeError, ValueError, yaml.YAMLError) as e:
            raise ConfigEncodeError(
                f"Cannot serialize configuration as {self.format.value}: {e}"
            ) from e
        raise InternalInvariantError(f"Unknown configuration format: {self.format!r}")

    def deserialize(self, text: str) -> Any:
        """
        Parse configuration text back into an object.

        Raises:
            ConfigDecodeError: If the text is not valid for the format.
            InternalInvariantError: If the codec holds an unknown format.
        """
        try:
            if self.format is ConfigFormat.JSON:
                return json.loads(text)
            if self.format is ConfigFormat.YAML:
                return yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            logger.error(f"Failed to parse {self.format.value} configuration: {e}")
            raise ConfigDecodeError(
                f"Failed to parse {self.format.value} configuration: {e}"
            ) from e
        raise InternalInvariantError(f"Unknown configuration format: {self.format!r}")

    def __repr__(self) -> str:
        return f"Codec({self.format.value})"
