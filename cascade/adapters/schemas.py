"""Structural validation models used by environment adapters.

Adapters validate the shape of a configuration with these pydantic models
and turn pydantic errors into ValidationResult messages. Unknown keys are
allowed everywhere; only the sections an environment cares about are
described.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

LogLevel = Literal["debug", "info", "warn", "warning", "error"]


class _Section(BaseModel):
    model_config = ConfigDict(extra="allow")


class LoggingSection(_Section):
    """Logging section."""

    level: LogLevel = "info"
    format: str | None = None


class ApiSection(_Section):
    """API section with a required base URL."""

    base_url: str

    @field_validator("base_url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class SecureApiSection(ApiSection):
    """API section that must be served over HTTPS."""

    @field_validator("base_url")
    @classmethod
    def _https_only(cls, value: str) -> str:
        if not value.startswith("https://"):
            raise ValueError("must use HTTPS")
        return value


class CorsSection(_Section):
    """CORS settings."""

    enabled: bool = False
    origins: list[str] = []


class SecuritySection(_Section):
    """Security settings; SSL is mandatory where this section is required."""

    ssl: Literal[True]
    cors: CorsSection | None = None


class MonitoringSection(_Section):
    """Monitoring settings."""

    enabled: bool = False
    level: str | None = None


class DatabaseSection(_Section):
    """Database settings."""

    type: str
    filename: str | None = None


class DevelopmentSchema(_Section):
    """Development: everything optional, only types are checked."""

    logging: LoggingSection | None = None


class TestingSchema(_Section):
    """Testing: test mode on, database and logging present."""

    test_mode: Literal[True]
    database: DatabaseSection
    logging: LoggingSection


class StagingSchema(_Section):
    """Staging: API base URL and logging required."""

    api: ApiSection
    logging: LoggingSection
    monitoring: MonitoringSection | None = None


class ProductionSchema(_Section):
    """Production: HTTPS API, SSL, logging and enabled monitoring."""

    api: SecureApiSection
    security: SecuritySection
    logging: LoggingSection
    monitoring: MonitoringSection | None = None

    @field_validator("monitoring")
    @classmethod
    def _monitoring_enabled(cls, value: MonitoringSection | None) -> MonitoringSection | None:
        if value is not None and not value.enabled:
            raise ValueError("monitoring must be enabled")
        return value


def schema_errors(schema: type[BaseModel], config: dict[str, Any]) -> list[str]:
    """Validate config against schema, returning readable error messages.

    Returns:
        One message per pydantic error, formatted as "dotted.path: message"
    """
    try:
        schema.model_validate(config)
    except ValidationError as e:
        messages = []
        for error in e.errors():
            path = ".".join(str(part) for part in error["loc"]) or "<root>"
            messages.append(f"{path}: {error['msg']}")
        return messages
    return []
