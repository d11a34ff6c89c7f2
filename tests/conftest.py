"""
Root conftest.py, shared pytest fixtures.

Provides fixtures for:
- Temporary configuration file paths (JSON and YAML).
- A sample configuration.
- A recording initializer that counts its calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest

from tests.helpers import RecordingInitializer


# ---------------------------------------------------------------------------
# Path Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def json_path(tmp_path: Path) -> Path:
    """Return a not-yet-existing JSON config path."""
    return tmp_path / "cfg.json"


@pytest.fixture
def yaml_path(tmp_path: Path) -> Path:
    """Return a not-yet-existing YAML config path."""
    return tmp_path / "cfg.yaml"


# ---------------------------------------------------------------------------
# Configuration Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Return a valid configuration with nested values."""
    return {
        "retries": 3,
        "service": {
            "name": "ingest",
            "endpoints": ["http://a.local", "http://b.local"],
            "timeout_sec": 2.5,
        },
        "enabled": True,
        "owner": None,
    }


@pytest.fixture
def initializer() -> RecordingInitializer:
    """Return an initializer producing {"retries": 3}."""
    return RecordingInitializer({"retries": 3})


@pytest.fixture
def received() -> List[Any]:
    """Collector list for stream listeners."""
    return []
