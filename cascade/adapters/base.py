"""EnvironmentAdapter abstract interface."""

import copy
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from cascade.models.enums import EnvironmentType
from cascade.models.sources import SourceDescriptor
from cascade.models.validation import ValidationResult


class EnvironmentAdapter(ABC):
    """Strategy supplying an environment's sources, transform and validation.

    Adapters are pure with respect to the engine: they receive data and
    return data. transform_configuration must not mutate its input.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        config_dir: str | Path = "config",
    ) -> None:
        """Initialize the adapter.

        Args:
            environ: Environment variables used to build sources (injected)
            config_dir: Directory holding the environment's config files
        """
        self.environ: Mapping[str, str] = dict(environ or {})
        self.config_dir = Path(config_dir)

    @abstractmethod
    def get_environment(self) -> EnvironmentType:
        """Get the environment this adapter serves."""
        pass

    @abstractmethod
    def get_configuration_sources(self) -> list[SourceDescriptor]:
        """Get the ordered source list; later sources take precedence."""
        pass

    def transform_configuration(self, config: dict[str, Any]) -> dict[str, Any]:
        """Return a transformed copy of the merged configuration."""
        result = copy.deepcopy(config)
        self.apply_defaults(result)
        return result

    @abstractmethod
    def apply_defaults(self, config: dict[str, Any]) -> None:
        """Fill environment defaults into a working copy, in place."""
        pass

    @abstractmethod
    def validate_configuration(self, config: dict[str, Any]) -> ValidationResult:
        """Validate a transformed configuration."""
        pass
