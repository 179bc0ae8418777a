"""File-backed configuration provider (JSON, YAML, TOML)."""

import asyncio
import copy
import json
import os
import tempfile
import tomllib
from pathlib import Path
from typing import Any

import yaml

from cascade.exceptions import ConfigurationError
from cascade.models.enums import FileFormat
from cascade.observability.logging import get_logger
from cascade.providers.base import ConfigurationProvider

logger = get_logger(__name__)


def infer_format(path: Path) -> FileFormat:
    """Guess the file format from its suffix, defaulting to JSON."""
    suffix = path.suffix.lower().lstrip(".")
    try:
        return FileFormat(suffix)
    except ValueError:
        return FileFormat.JSON


class FileConfigurationProvider(ConfigurationProvider):
    """Load configuration from a local file.

    A missing file loads as an empty configuration but reports itself as
    unavailable. Parsed content is cached against the file's modification
    time, so an unchanged file is not re-read.
    """

    def __init__(
        self,
        name: str,
        path: str | Path,
        format: FileFormat | str | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            name: Provider name
            path: Path to the configuration file
            format: json, yaml, yml or toml (inferred from suffix if None)
        """
        self._name = name
        self._path = Path(path)
        self._format = FileFormat(format) if format else infer_format(self._path)
        self._cache: dict[str, Any] | None = None
        self._cached_stamp: tuple[int, int] | None = None

    @property
    def path(self) -> Path:
        """Path of the backing file."""
        return self._path

    @property
    def format(self) -> FileFormat:
        """Serialization format."""
        return self._format

    def get_name(self) -> str:
        """Get provider name."""
        return self._name

    async def load(self) -> dict[str, Any]:
        """Load configuration from file."""
        return await asyncio.to_thread(self._load_sync)

    async def save(self, config: dict[str, Any]) -> None:
        """Write configuration to file, creating parent directories."""
        await asyncio.to_thread(self._save_sync, config)

    async def is_available(self) -> bool:
        """Check the file exists and is readable."""
        try:
            return self._path.is_file() and os.access(self._path, os.R_OK)
        except OSError:
            return False

    def clear_cache(self) -> None:
        """Forget the cached parse."""
        self._cache = None
        self._cached_stamp = None

    def _load_sync(self) -> dict[str, Any]:
        try:
            stat = self._path.stat()
        except FileNotFoundError:
            logger.debug("config_file_missing", source=self._name, path=str(self._path))
            return {}
        except OSError as e:
            raise ConfigurationError(
                f"Cannot stat {self._path}: {e}", source=self._name, cause=e
            ) from e

        if self._cache is not None and self._cached_stamp == (stat.st_mtime_ns, stat.st_size):
            return copy.deepcopy(self._cache)

        try:
            content = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read {self._path}: {e}", source=self._name, cause=e
            ) from e

        config = self._parse(content)
        self._cache = config
        self._cached_stamp = (stat.st_mtime_ns, stat.st_size)
        logger.debug("config_file_loaded", source=self._name, path=str(self._path))
        return copy.deepcopy(config)

    def _parse(self, content: str) -> dict[str, Any]:
        try:
            if self._format is FileFormat.JSON:
                data = json.loads(content) if content.strip() else {}
            elif self._format in (FileFormat.YAML, FileFormat.YML):
                data = yaml.safe_load(content)
            else:
                data = tomllib.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(
                f"Malformed {self._format.value} in {self._path}: {e}",
                source=self._name,
                cause=e,
                retryable=False,
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Top level of {self._path} must be a mapping, got {type(data).__name__}",
                source=self._name,
                retryable=False,
            )
        return data

    def _serialize(self, config: dict[str, Any]) -> str:
        if self._format is FileFormat.JSON:
            return json.dumps(config, indent=2, default=str)
        if self._format in (FileFormat.YAML, FileFormat.YML):
            return yaml.safe_dump(config, sort_keys=False)
        raise ConfigurationError(
            "Saving TOML configuration is not supported",
            source=self._name,
            retryable=False,
        )

    def _save_sync(self, config: dict[str, Any]) -> None:
        content = self._serialize(config)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self._path)
        except OSError as e:
            raise ConfigurationError(
                f"Failed to save configuration to {self._path}: {e}",
                source=self._name,
                cause=e,
            ) from e

        self._cache = copy.deepcopy(config)
        stat = self._path.stat()
        self._cached_stamp = (stat.st_mtime_ns, stat.st_size)
        logger.info("config_file_saved", source=self._name, path=str(self._path))
