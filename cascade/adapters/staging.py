"""Staging environment adapter."""

from typing import Any

from cascade.adapters.base import EnvironmentAdapter
from cascade.adapters.schemas import StagingSchema, schema_errors
from cascade.models.enums import EnvironmentType, FileFormat, SourceType
from cascade.models.sources import SourceDescriptor
from cascade.models.validation import ValidationResult


class StagingEnvironmentAdapter(EnvironmentAdapter):
    """Staging file, STAGING_* variables, then the remote service if configured."""

    def get_environment(self) -> EnvironmentType:
        return EnvironmentType.STAGING

    def get_configuration_sources(self) -> list[SourceDescriptor]:
        sources = [
            SourceDescriptor(
                name="staging-config",
                type=SourceType.FILE,
                options={"path": str(self.config_dir / "staging.json"), "format": FileFormat.JSON},
            ),
            SourceDescriptor(
                name="staging-environment-variables",
                type=SourceType.ENVIRONMENT,
                options={"prefix": "STAGING_", "separator": "__"},
            ),
        ]

        url = self.environ.get("STAGING_CONFIG_URL")
        if url:
            sources.append(
                SourceDescriptor(
                    name="remote-staging-config",
                    type=SourceType.REMOTE,
                    options={
                        "url": url,
                        "auth_token": self.environ.get("STAGING_CONFIG_TOKEN"),
                    },
                )
            )
        return sources

    def apply_defaults(self, config: dict[str, Any]) -> None:
        config["hot_reload"] = False
        config.setdefault("debug", False)
        config.setdefault("logging", {"level": "info", "format": "json"})
        config.setdefault("monitoring", {"enabled": True, "level": "detailed"})
        if isinstance(config.get("api"), dict):
            config["api"].setdefault(
                "base_url",
                self.environ.get("STAGING_API_URL", "https://api-staging.example.com"),
            )

    def validate_configuration(self, config: dict[str, Any]) -> ValidationResult:
        errors = schema_errors(StagingSchema, config)
        warnings: list[str] = []

        base_url = (config.get("api") or {}).get("base_url")
        if isinstance(base_url, str) and base_url and not base_url.startswith("https://"):
            warnings.append("API base URL should use HTTPS in staging environment")

        level = (config.get("logging") or {}).get("level")
        if level == "debug":
            warnings.append(f"Logging level should be info, warn, or error in staging: {level}")

        monitoring = config.get("monitoring")
        if isinstance(monitoring, dict) and monitoring.get("enabled") is not True:
            warnings.append("Monitoring should be enabled in staging environment")

        return ValidationResult.from_messages(errors, warnings)
