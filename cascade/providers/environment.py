"""Environment-variable configuration provider.

The provider never reads process state itself: it is handed a mapping at
construction time. Pass ``os.environ`` at the application's outer seam and
a plain dict in tests.
"""

import json
from collections.abc import Mapping
from typing import Any

from cascade.exceptions import ConfigurationError
from cascade.providers.base import ConfigurationProvider


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite constant {name}")


def coerce_value(raw: str) -> Any:
    """Convert an environment string to a typed value.

    JSON literals (numbers, objects, arrays, true/false/null) are decoded;
    case-insensitive true/false become booleans; anything else stays a string.
    NaN and Infinity stay strings.
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        pass

    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return raw


class EnvironmentConfigurationProvider(ConfigurationProvider):
    """Build nested configuration from prefixed environment variables.

    ``APP_DATABASE_HOST=db`` with prefix ``APP_`` becomes
    ``{"database": {"host": "db"}}``. Use ``separator="__"`` to keep single
    underscores inside key names (``APP_API__BASE_URL`` ->
    ``{"api": {"base_url": ...}}``).
    """

    def __init__(
        self,
        name: str,
        environ: Mapping[str, str],
        prefix: str = "",
        separator: str = "_",
    ) -> None:
        """Initialize the provider.

        Args:
            name: Provider name
            environ: Variables to read (injected, e.g. os.environ)
            prefix: Only variables starting with this prefix are used
            separator: Splits the remaining name into nested keys
        """
        if not separator:
            raise ConfigurationError("Environment key separator must not be empty", source=name)
        self._name = name
        self._environ = environ
        self._prefix = prefix
        self._separator = separator

    def get_name(self) -> str:
        """Get provider name."""
        return self._name

    async def load(self) -> dict[str, Any]:
        """Load configuration from the injected environment."""
        config: dict[str, Any] = {}

        # Sorted so that conflicting shapes (A_B=1 and A_B_C=2) resolve
        # the same way on every run
        for key in sorted(self._environ):
            if self._prefix and not key.startswith(self._prefix):
                continue

            config_key = key[len(self._prefix):] if self._prefix else key
            segments = [s.lower() for s in config_key.split(self._separator) if s]
            if not segments:
                continue

            self._set_nested(config, segments, coerce_value(self._environ[key]))

        return config

    async def save(self, config: dict[str, Any]) -> None:
        """Saving to environment variables is not supported."""
        raise ConfigurationError(
            "Saving to environment variables is not supported",
            source=self._name,
            retryable=False,
        )

    async def is_available(self) -> bool:
        """Environment variables are always available."""
        return True

    @staticmethod
    def _set_nested(config: dict[str, Any], segments: list[str], value: Any) -> None:
        current = config
        for segment in segments[:-1]:
            child = current.get(segment)
            if not isinstance(child, dict):
                child = {}
                current[segment] = child
            current = child

        leaf = segments[-1]
        if isinstance(current.get(leaf), dict) and not isinstance(value, dict):
            # A deeper variable already claimed this key as a section
            return
        current[leaf] = value
