"""
configstore - single-file configuration persistence.

Loads one configuration object from a JSON or YAML file, checks its
structure, creates a default on first run and publishes every read and
write to subscribers.
"""

from configstore.errors import (
    ConfigDecodeError,
    ConfigEncodeError,
    ConfigStructureError,
    ConfigurationError,
    ConfigWriteError,
    InternalInvariantError,
    ReadStructureError,
    WriteStructureError,
)
from configstore.formats import Codec, ConfigFormat, select_format
from configstore.persistence import ConfigFile
from configstore.schema_registry import SchemaRegistry, SchemaStructureCheck
from configstore.store import ConfigStore
from configstore.stream import MappedStream, ReplayStream, StreamView, Subscription

__version__ = "0.1.0"

__all__ = [
    "Codec",
    "ConfigDecodeError",
    "ConfigEncodeError",
    "ConfigFile",
    "ConfigFormat",
    "ConfigStore",
    "ConfigStructureError",
    "ConfigurationError",
    "ConfigWriteError",
    "InternalInvariantError",
    "MappedStream",
    "ReadStructureError",
    "ReplayStream",
    "SchemaRegistry",
    "SchemaStructureCheck",
    "StreamView",
    "Subscription",
    "WriteStructureError",
    "select_format",
]
