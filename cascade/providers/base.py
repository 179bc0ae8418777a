"""ConfigurationProvider abstract interface."""

from abc import ABC, abstractmethod
from typing import Any


class ConfigurationProvider(ABC):
    """Abstract interface for a configuration source.

    Providers load raw configuration as a plain dict, optionally save it
    back, and report whether the source can be used right now. Failures
    surface as ConfigurationError carrying the provider name.
    """

    @abstractmethod
    def get_name(self) -> str:
        """Get the provider's unique name."""
        pass

    @abstractmethod
    async def load(self) -> dict[str, Any]:
        """Load configuration from the source."""
        pass

    @abstractmethod
    async def save(self, config: dict[str, Any]) -> None:
        """Save configuration to the source."""
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if the source can be used. Must not raise."""
        pass

    def clear_cache(self) -> None:
        """Drop any provider-level cached data."""
        return None

    async def aclose(self) -> None:
        """Release resources held by the provider."""
        return None

    @property
    def name(self) -> str:
        """Provider name."""
        return self.get_name()
