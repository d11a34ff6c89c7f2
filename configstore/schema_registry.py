"""
Schema Registry Module.

Manages JSON schemas for configuration structure checks. Schemas are loaded
from disk and validated with jsonschema (Draft 7). SchemaStructureCheck turns
a schema into the predicate a ConfigStore is constructed with.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import jsonschema
from loguru import logger

from configstore.errors import ConfigurationError


def iter_errors(data: Any, schema: Dict[str, Any]) -> List[str]:
    """
    Validate data against a schema and describe every violation.

    Returns:
        One "[path] message" line per error, ordered by location.
        Empty when the data is valid.
    """
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path)))
    messages = []
    for error in errors:
        path = " -> ".join(str(p) for p in error.absolute_path) or "(root)"
        messages.append(f"[{path}] {error.message}")
    return messages


class SchemaRegistry:
    """
    Registry for JSON schemas stored as ``<name>.json`` files.

    Schemas are loaded lazily and cached for subsequent lookups.

    Attributes:
        schema_dir: Directory containing JSON schema files.
    """

    def __init__(self, schema_dir: str | Path) -> None:
        self.schema_dir = Path(schema_dir)
        self._schemas: Dict[str, Dict[str, Any]] = {}
        logger.debug(f"SchemaRegistry initialized, schema_dir={self.schema_dir}")

    def get_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Retrieve a JSON schema by name, loading from disk if not cached.

        Args:
            schema_name: Schema identifier (filename without .json extension).

        Raises:
            FileNotFoundError: If the schema file does not exist.
            ConfigurationError: If the schema file cannot be parsed.
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self.schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(
                f"Schema not found: {schema_name} (expected at {schema_path})"
            )

        try:
            schema = json.loads(schema_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load schema {schema_name}: {e}") from e

        self._schemas[schema_name] = schema
        logger.debug(f"Schema loaded: {schema_name}")
        return schema


class SchemaStructureCheck:
    """
    Structure check backed by a JSON schema.

    Instances are callables returning True/False, so they can be passed to
    ConfigStore directly. The violations found by the last failing call are
    kept in ``last_errors`` and reported by the store.

    Usage::

        check = SchemaStructureCheck.from_registry(SchemaRegistry("schemas"), "app")
        store = ConfigStore("app.yaml", check, default_app_config)
    """

    def __init__(self, schema: Dict[str, Any], name: str = "schema") -> None:
        jsonschema.Draft7Validator.check_schema(schema)
        self.schema = schema
        self.name = name
        self.last_errors: List[str] = []

    @classmethod
    def from_registry(cls, registry: SchemaRegistry, schema_name: str) -> SchemaStructureCheck:
        """Build a check from a schema stored in a registry."""
        return cls(registry.get_schema(schema_name), name=schema_name)

    def __call__(self, data: Any) -> bool:
        self.last_errors = iter_errors(data, self.schema)
        if self.last_errors:
            logger.debug(
                f"Structure check '{self.name}' failed with {len(self.last_errors)} error(s)"
            )
            return False
        return True
