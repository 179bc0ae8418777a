"""Source and provider descriptors."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from cascade.models.enums import SourceType

if TYPE_CHECKING:
    from cascade.providers.base import ConfigurationProvider


class SourceDescriptor(BaseModel):
    """Declarative description of a configuration source.

    Options are source-specific:
    - file: path, format
    - environment: prefix, separator
    - remote: url, headers, auth_token, timeout, cache_ttl, retries,
      retry_delay, backoff, max_delay
    - secure-storage: namespace, storage_path, key, key_env
    - memory: data
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Unique source name")
    type: SourceType = Field(..., description="Source kind")
    options: dict[str, Any] = Field(default_factory=dict, description="Source options")


@dataclass(frozen=True)
class ProviderDescriptor:
    """A registered provider and the descriptor it was created from."""

    name: str
    source_type: SourceType
    provider: "ConfigurationProvider"
    options: dict[str, Any] = field(default_factory=dict)
