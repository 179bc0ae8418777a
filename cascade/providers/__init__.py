"""Configuration providers: file, environment, remote HTTP, secure storage.

Each provider implements the ConfigurationProvider contract. Retry,
caching and merging are applied around them by the fetcher and the
manager.
"""

from cascade.providers.base import ConfigurationProvider
from cascade.providers.environment import EnvironmentConfigurationProvider
from cascade.providers.file import FileConfigurationProvider
from cascade.providers.memory import InMemoryConfigurationProvider
from cascade.providers.remote import RemoteConfigurationProvider
from cascade.providers.secure_storage import SecureStorageConfigurationProvider

__all__ = [
    "ConfigurationProvider",
    "EnvironmentConfigurationProvider",
    "FileConfigurationProvider",
    "InMemoryConfigurationProvider",
    "RemoteConfigurationProvider",
    "SecureStorageConfigurationProvider",
]
