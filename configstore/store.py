"""
Configuration Store Module.

ConfigStore persists a single configuration object in a JSON or YAML file:
- Loads and validates the stored configuration.
- Creates and saves a default configuration when none is stored yet.
- Validates every configuration before it is written.
- Publishes the persisted text (and the decoded object) to subscribers.

The store does no locking. Concurrent modify_config() calls race and the
last write wins; callers needing atomic read-modify-write must serialize
their calls.
"""

from __future__ import annotations

import inspect
from pathlib import Path
from typing import Any, Awaitable, Callable, Generic, Optional, Type, TypeVar, Union

from loguru import logger

from configstore.errors import ConfigStructureError, ReadStructureError, WriteStructureError
from configstore.formats import Codec, ConfigFormat, select_format
from configstore.persistence import DEFAULT_ENCODING, ConfigFile
from configstore.stream import MappedStream, ReplayStream, StreamView


CONF = TypeVar("CONF")

StructureCheck = Callable[[Any], bool]
ConfigInitializer = Callable[[], Union[CONF, Awaitable[CONF]]]
# Returning None means "keep the (possibly mutated) object that was passed in".
ConfigModifier = Callable[[CONF], Union[Optional[CONF], Awaitable[Optional[CONF]]]]


async def _resolve(result: Any) -> Any:
    """Await the result of a callback if it is awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result


class ConfigStore(Generic[CONF]):
    """
    Single-file configuration store with change notifications.

    Attributes:
        file: The backing configuration file.
        format: Serialization format, chosen from the file suffix.
        codec: Serializer/deserializer for ``format``.
        structure_check: Predicate every read and written configuration must pass.
        initializer: Factory for the default configuration (may be async).
        text_updates: Read-only stream of persisted configuration text; replays
            the latest value and skips consecutive duplicates.
        config_updates: Decoded configuration objects derived from ``text_updates``.
    """

    def __init__(
        self,
        config_path: str | Path,
        structure_check: StructureCheck,
        initializer: ConfigInitializer,
        *,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        """
        Initialize the configuration store.

        Args:
            config_path: Path of the configuration file. A ``.yaml``/``.yml``
                suffix selects YAML, anything else JSON.
            structure_check: Returns True if an object has the expected structure.
            initializer: Called when no configuration is stored yet.
            encoding: Text encoding of the configuration file.
        """
        self.file = ConfigFile(config_path, encoding=encoding)
        self.format: ConfigFormat = select_format(config_path)
        self.codec = Codec(self.format)
        self.structure_check = structure_check
        self.initializer = initializer

        self._text_subject: ReplayStream[str] = ReplayStream(name=f"config:{self.file.path.name}")
        self.text_updates: StreamView[str] = self._text_subject.as_view()
        self.config_updates: MappedStream[CONF] = self.text_updates.map(self.codec.deserialize)

        logger.info(f"ConfigStore initialized: {self.file.path} (format={self.format.value})")

    @property
    def config_path(self) -> Path:
        return self.file.path

    async def read_config(self) -> CONF:
        """
        Read the stored configuration, initializing it if none is stored.

        Returns:
            The decoded (or freshly initialized) configuration.

        Raises:
            ReadStructureError: If the configuration fails the structure check.
            WriteStructureError: If the initialized default fails the structure check.
            ConfigDecodeError: If the stored text cannot be parsed.
            ConfigWriteError: If the initialized default cannot be saved.
        """
        text = await self.file.load()
        if text is None:
            logger.info(f"No stored configuration at {self.file.path}, initializing defaults")
            config = await _resolve(self.initializer())
            text = await self._persist(config)
        else:
            config = self.codec.deserialize(text)

        self._check(config, ReadStructureError)
        self._text_subject.publish(text)
        return config

    async def write_config(self, config: CONF) -> None:
        """
        Validate and save a configuration, then publish it.

        Raises:
            WriteStructureError: If the configuration fails the structure check.
                Nothing is written in that case.
            ConfigEncodeError: If the configuration cannot be serialized.
            ConfigWriteError: If the file cannot be written.
        """
        await self._persist(config)

    async def modify_config(self, modifier: ConfigModifier) -> CONF:
        """
        Read the configuration, pass it through ``modifier`` and write the result.

        The modifier may return a replacement object, or modify its argument
        in place and return None. It may be a coroutine function.

        Returns:
            The configuration that was written.
        """
        config = await self.read_config()
        modified = await _resolve(modifier(config))
        if modified is None:
            modified = config
        await self.write_config(modified)
        return modified

    async def _persist(self, config: CONF) -> str:
        self._check(config, WriteStructureError)
        text = self.codec.serialize(config)
        await self.file.store(text)
        logger.info(f"Configuration saved: {self.file.path}")
        self._text_subject.publish(text)
        return text

    def _check(self, config: Any, error_cls: Type[ConfigStructureError]) -> None:
        if self.structure_check(config):
            return
        errors = list(getattr(self.structure_check, "last_errors", None) or [])
        logger.error(
            f"Configuration structure check failed for {self.file.path}: "
            f"{errors or 'rejected'}"
        )
        raise error_cls(errors)

    def __repr__(self) -> str:
        return f"ConfigStore({str(self.file.path)!r}, format={self.format.value})"
