"""
Configuration Store Errors.

All recoverable failures raised by the store derive from ConfigurationError.
InternalInvariantError is reserved for defects in the store itself.
"""

from __future__ import annotations

from typing import List, Optional


class ConfigurationError(Exception):
    """Raised when a configuration cannot be read, validated or written."""

    pass


class ConfigStructureError(ConfigurationError):
    """Raised when a configuration object fails the structure check."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        if errors:
            message = message + ":\n" + "\n".join(f"  {e}" for e in errors)
        super().__init__(message)
        self.errors = errors or []


class ReadStructureError(ConfigStructureError):
    """The decoded (or freshly initialized) configuration was rejected."""

    def __init__(self, errors: Optional[List[str]] = None) -> None:
        super().__init__(
            "decoded configuration does not match expected structure", errors
        )


class WriteStructureError(ConfigStructureError):
    """The configuration about to be written was rejected."""

    def __init__(self, errors: Optional[List[str]] = None) -> None:
        super().__init__(
            "configuration to be written does not match expected structure", errors
        )


class ConfigDecodeError(ConfigurationError):
    """Raised when stored configuration text cannot be parsed."""

    pass


class ConfigEncodeError(ConfigurationError):
    """Raised when a configuration object cannot be represented in the file format."""

    pass


class ConfigWriteError(ConfigurationError):
    """Raised when the configuration file cannot be written."""

    pass


class InternalInvariantError(RuntimeError):
    """Raised on a broken internal invariant. Indicates a bug in configstore."""

    pass
