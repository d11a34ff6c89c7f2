"""
Test helpers shared across test modules.
"""

from __future__ import annotations

from typing import Any, Dict


class RecordingInitializer:
    """Initializer returning a copy of a default config and counting calls."""

    def __init__(self, default: Dict[str, Any]) -> None:
        self.default = default
        self.calls = 0

    def __call__(self) -> Dict[str, Any]:
        self.calls += 1
        return dict(self.default)


def has_numeric_retries(config: Any) -> bool:
    """Accept any mapping with a numeric ``retries`` field."""
    return (
        isinstance(config, dict)
        and isinstance(config.get("retries"), (int, float))
        and not isinstance(config.get("retries"), bool)
    )
