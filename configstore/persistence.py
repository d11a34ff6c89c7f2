"""
Configuration File Persistence.

Reads and writes the single configuration file. Reading never fails: any
read error is reported as "absent" so that the store re-initializes the
configuration. Write errors are propagated as ConfigWriteError.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from loguru import logger

from configstore.errors import ConfigWriteError


DEFAULT_ENCODING = "utf-8"


class ConfigFile:
    """
    A configuration file on disk.

    Blocking file access runs in a worker thread so callers on the event
    loop only suspend while the I/O is in flight.

    Attributes:
        path: Location of the configuration file.
        encoding: Text encoding used for reading and writing.
    """

    def __init__(self, path: str | Path, encoding: str = DEFAULT_ENCODING) -> None:
        self.path = Path(path)
        self.encoding = encoding

    def exists(self) -> bool:
        """Return True if the configuration file is present."""
        return self.path.is_file()

    async def load(self) -> Optional[str]:
        """
        Read the configuration text.

        Returns:
            The file contents, or None if the file could not be read for any
            reason (missing, unreadable, not decodable).
        """
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding=self.encoding)
        except FileNotFoundError:
            logger.debug(f"Configuration file not found: {self.path}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            # Treated like a missing file; the caller will overwrite it.
            logger.warning(f"Configuration file {self.path} unreadable, treating as absent: {e}")
            return None

        logger.debug(f"Loaded configuration file: {self.path} ({len(text)} chars)")
        return text

    async def store(self, text: str) -> None:
        """
        Write the configuration text, creating parent directories as needed.

        Raises:
            ConfigWriteError: If the file cannot be written.
        """
        try:
            await asyncio.to_thread(self._write, text)
        except OSError as e:
            logger.error(f"Failed to write configuration file {self.path}: {e}")
            raise ConfigWriteError(f"Failed to write file {self.path}: {e}") from e

    def _write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding=self.encoding)

    def __repr__(self) -> str:
        return f"ConfigFile({str(self.path)!r})"
