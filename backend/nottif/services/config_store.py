"""
Configuration store.

Holds the persisted webhook URL and cron jobs in memory, guards them with a
single reader/writer lock, and writes them back to the JSON config file.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from loguru import logger
from pydantic import ValidationError

from nottif.config import NottifConfig, atomic_write_file
from nottif.utils.errors import ConfigParseError, ConfigReadError, ConfigWriteError
from nottif.utils.locks import AsyncReadWriteLock


class ConfigStore:
    """
    Owner of the process-wide NottifConfig.

    All reads of ``config`` go through ``read_lock()`` and all mutations
    through ``write_lock()``; ``save()`` is called from inside the write lock
    so the file and memory converge before the lock is released.
    """

    def __init__(self, path: Path, config: Optional[NottifConfig] = None):
        self.path = Path(path)
        self.config = config or NottifConfig()
        self._lock = AsyncReadWriteLock()

    @classmethod
    def load(cls, path: Path) -> "ConfigStore":
        """
        Load config from disk.

        An absent or empty file yields an empty config which is immediately
        persisted as the on-disk baseline.

        Raises:
            ConfigReadError: file exists but cannot be read
            ConfigParseError: file is not a valid config document
            ConfigWriteError: baseline could not be written
        """
        path = Path(path)
        store = cls(path)

        if not path.exists():
            logger.info(f"Config file {path} not found - creating empty config")
            store.save()
            return store

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigReadError(f"failed to read config file {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise ConfigParseError(f"config file {path} is not valid UTF-8: {e}") from e

        if not raw.strip():
            logger.info(f"Config file {path} is empty - initializing")
            store.save()
            return store

        try:
            store.config = NottifConfig.model_validate_json(raw)
        except ValidationError as e:
            raise ConfigParseError(f"invalid config file {path}: {e}") from e

        logger.info(f"Loaded config from {path} ({len(store.config.cron_jobs)} cron jobs)")
        return store

    def save(self):
        """
        Serialize the full config and atomically replace the file.

        Raises:
            ConfigWriteError: the filesystem rejected the write; the file is unchanged
        """
        content = self.config.model_dump_json(indent=2) + "\n"
        try:
            atomic_write_file(self.path, content)
        except OSError as e:
            logger.error(f"Failed to write config file {self.path}: {e}")
            raise ConfigWriteError(f"failed to write config file {self.path}: {e}") from e
        logger.debug(f"Config saved to {self.path}")

    @asynccontextmanager
    async def read_lock(self) -> AsyncIterator[NottifConfig]:
        """Shared access; yields the config, which must not be mutated."""
        async with self._lock.read():
            yield self.config

    @asynccontextmanager
    async def write_lock(self) -> AsyncIterator[NottifConfig]:
        """Exclusive access for mutation followed by ``save()``."""
        async with self._lock.write():
            yield self.config
