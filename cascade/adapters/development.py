"""Development environment adapter."""

from typing import Any

from cascade.adapters.base import EnvironmentAdapter
from cascade.adapters.schemas import DevelopmentSchema, schema_errors
from cascade.models.enums import EnvironmentType, FileFormat, SourceType
from cascade.models.sources import SourceDescriptor
from cascade.models.validation import ValidationResult

DEFAULT_BASE_URL = "http://localhost:3000"


class DevelopmentEnvironmentAdapter(EnvironmentAdapter):
    """Local files, then APP_* variables. Permissive validation."""

    def get_environment(self) -> EnvironmentType:
        return EnvironmentType.DEVELOPMENT

    def get_configuration_sources(self) -> list[SourceDescriptor]:
        return [
            SourceDescriptor(
                name="local-config",
                type=SourceType.FILE,
                options={"path": str(self.config_dir / "development.json"), "format": FileFormat.JSON},
            ),
            SourceDescriptor(
                name="local-config-yaml",
                type=SourceType.FILE,
                options={"path": str(self.config_dir / "development.yaml"), "format": FileFormat.YAML},
            ),
            SourceDescriptor(
                name="environment-variables",
                type=SourceType.ENVIRONMENT,
                options={"prefix": "APP_", "separator": "__"},
            ),
        ]

    def apply_defaults(self, config: dict[str, Any]) -> None:
        config.setdefault("debug", True)
        config.setdefault("logging", {"level": "debug", "format": "pretty"})
        config.setdefault("hot_reload", True)
        if isinstance(config.get("api"), dict):
            config["api"].setdefault("base_url", DEFAULT_BASE_URL)

    def validate_configuration(self, config: dict[str, Any]) -> ValidationResult:
        # Everything is a warning in development
        warnings = schema_errors(DevelopmentSchema, config)
        api = config.get("api")
        if not isinstance(api, dict) or not api.get("base_url"):
            warnings.append("API base URL not configured, using default development URL")
        return ValidationResult.from_messages(warnings=warnings)
