"""Cascade: configuration resolution and caching engine.

Resolves application configuration from ordered providers (files,
environment variables, remote HTTP endpoints, encrypted storage), merges
them under an environment adapter and exposes one read/write surface with
caching, change notification and validation.
"""

from cascade.adapters import EnvironmentAdapter, create_environment_adapter
from cascade.config.models.manager import ManagerOptions
from cascade.engine import ConfigurationManager, HotReloadScheduler, create_provider
from cascade.exceptions import (
    AllProvidersUnavailableError,
    CascadeError,
    ConfigurationError,
    ConfigurationTransformError,
    DuplicateSourceError,
    FetchRetryExhaustedError,
    IntegrityError,
    SourceNotFoundError,
    UnknownEnvironmentError,
)
from cascade.models import (
    ChangeEvent,
    ConfigurationSnapshot,
    EnvironmentType,
    ManagerStatus,
    SourceDescriptor,
    SourceType,
    ValidationResult,
)

__version__ = "0.1.0"

__all__ = [
    "AllProvidersUnavailableError",
    "CascadeError",
    "ChangeEvent",
    "ConfigurationError",
    "ConfigurationManager",
    "ConfigurationSnapshot",
    "ConfigurationTransformError",
    "DuplicateSourceError",
    "EnvironmentAdapter",
    "EnvironmentType",
    "FetchRetryExhaustedError",
    "HotReloadScheduler",
    "IntegrityError",
    "ManagerOptions",
    "ManagerStatus",
    "SourceDescriptor",
    "SourceNotFoundError",
    "SourceType",
    "UnknownEnvironmentError",
    "ValidationResult",
    "create_environment_adapter",
    "create_provider",
]
