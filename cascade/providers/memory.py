"""In-memory implementation of ConfigurationProvider."""

import copy
from typing import Any

from cascade.exceptions import ConfigurationError
from cascade.providers.base import ConfigurationProvider


class InMemoryConfigurationProvider(ConfigurationProvider):
    """In-memory provider for testing and programmatic configuration."""

    def __init__(
        self,
        name: str,
        data: dict[str, Any] | None = None,
        *,
        available: bool = True,
    ) -> None:
        """Initialize with optional starting data."""
        self._name = name
        self._data: dict[str, Any] = copy.deepcopy(data or {})
        self._available = available
        self._failure: Exception | None = None
        self.load_count = 0
        self.save_count = 0

    def get_name(self) -> str:
        """Get provider name."""
        return self._name

    async def load(self) -> dict[str, Any]:
        """Return a copy of the stored configuration."""
        self.load_count += 1
        if self._failure is not None:
            raise ConfigurationError(
                str(self._failure), source=self._name, cause=self._failure
            )
        return copy.deepcopy(self._data)

    async def save(self, config: dict[str, Any]) -> None:
        """Replace the stored configuration."""
        self.save_count += 1
        self._data = copy.deepcopy(config)

    async def is_available(self) -> bool:
        """Report the configured availability."""
        return self._available

    def set_data(self, data: dict[str, Any]) -> None:
        """Replace stored data without counting a save."""
        self._data = copy.deepcopy(data)

    def fail_with(self, error: Exception | None) -> None:
        """Make subsequent loads fail with error (None restores loading)."""
        self._failure = error

    def set_available(self, available: bool) -> None:
        """Toggle availability."""
        self._available = available
