"""Configuration data model.

Snapshots, source descriptors, validation results, change events and
manager status.
"""

from cascade.models.enums import EnvironmentType, FileFormat, SourceType
from cascade.models.events import ChangeEvent
from cascade.models.snapshot import ConfigurationSnapshot
from cascade.models.sources import ProviderDescriptor, SourceDescriptor
from cascade.models.status import CacheStats, ManagerStatus
from cascade.models.validation import ValidationResult

__all__ = [
    "CacheStats",
    "ChangeEvent",
    "ConfigurationSnapshot",
    "EnvironmentType",
    "FileFormat",
    "ManagerStatus",
    "ProviderDescriptor",
    "SourceDescriptor",
    "SourceType",
    "ValidationResult",
]
