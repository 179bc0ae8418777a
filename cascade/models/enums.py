"""Enums for environments and configuration sources."""

from enum import Enum


class EnvironmentType(str, Enum):
    """Deployment environment an adapter serves."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: "str | EnvironmentType") -> "EnvironmentType | None":
        """Map a name or common alias to an EnvironmentType.

        Returns None when the value is not recognized.
        """
        if isinstance(value, EnvironmentType):
            return value
        if not isinstance(value, str):
            return None
        return _ENVIRONMENT_ALIASES.get(value.strip().lower())


_ENVIRONMENT_ALIASES: dict[str, EnvironmentType] = {
    "development": EnvironmentType.DEVELOPMENT,
    "dev": EnvironmentType.DEVELOPMENT,
    "local": EnvironmentType.DEVELOPMENT,
    "testing": EnvironmentType.TESTING,
    "test": EnvironmentType.TESTING,
    "staging": EnvironmentType.STAGING,
    "stage": EnvironmentType.STAGING,
    "production": EnvironmentType.PRODUCTION,
    "prod": EnvironmentType.PRODUCTION,
}


class SourceType(str, Enum):
    """Kind of configuration source."""

    FILE = "file"
    ENVIRONMENT = "environment"
    REMOTE = "remote"
    SECURE_STORAGE = "secure-storage"
    MEMORY = "memory"


class FileFormat(str, Enum):
    """Serialization format of a file source."""

    JSON = "json"
    YAML = "yaml"
    YML = "yml"
    TOML = "toml"
