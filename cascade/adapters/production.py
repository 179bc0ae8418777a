"""Production environment adapter."""

from typing import Any

from cascade.adapters.base import EnvironmentAdapter
from cascade.adapters.schemas import ProductionSchema, schema_errors
from cascade.models.enums import EnvironmentType, SourceType
from cascade.models.sources import SourceDescriptor
from cascade.models.validation import ValidationResult

SECURE_KEY_ENV = "PROD_CONFIG_KEY"


class ProductionEnvironmentAdapter(EnvironmentAdapter):
    """Secure storage, PROD_* variables, then the remote service.

    Secure storage is used when PROD_CONFIG_KEY is present and the remote
    source when PROD_CONFIG_URL is present. Debugging and hot reload are
    always forced off.
    """

    def get_environment(self) -> EnvironmentType:
        return EnvironmentType.PRODUCTION

    def get_configuration_sources(self) -> list[SourceDescriptor]:
        sources: list[SourceDescriptor] = []

        if self.environ.get(SECURE_KEY_ENV):
            sources.append(
                SourceDescriptor(
                    name="secure-storage",
                    type=SourceType.SECURE_STORAGE,
                    options={
                        "namespace": "production-config",
                        "storage_path": str(self.config_dir / "secure"),
                        "key_env": SECURE_KEY_ENV,
                    },
                )
            )

        sources.append(
            SourceDescriptor(
                name="production-environment-variables",
                type=SourceType.ENVIRONMENT,
                options={"prefix": "PROD_", "separator": "__"},
            )
        )

        url = self.environ.get("PROD_CONFIG_URL")
        if url:
            sources.append(
                SourceDescriptor(
                    name="remote-production-config",
                    type=SourceType.REMOTE,
                    options={
                        "url": url,
                        "auth_token": self.environ.get("PROD_CONFIG_TOKEN"),
                        "timeout": 5.0,
                    },
                )
            )
        return sources

    def apply_defaults(self, config: dict[str, Any]) -> None:
        config["debug"] = False
        config["hot_reload"] = False
        config.setdefault("logging", {"level": "warn", "format": "json"})
        config.setdefault("monitoring", {"enabled": True, "level": "production"})
        config.setdefault(
            "security",
            {"ssl": True, "cors": {"enabled": True, "origins": ["https://example.com"]}},
        )
        if isinstance(config.get("api"), dict):
            config["api"].setdefault(
                "base_url", self.environ.get("PROD_API_URL", "https://api.example.com")
            )

    def validate_configuration(self, config: dict[str, Any]) -> ValidationResult:
        errors = schema_errors(ProductionSchema, config)
        warnings: list[str] = []

        security = config.get("security")
        cors = security.get("cors") if isinstance(security, dict) else None
        if isinstance(cors, dict) and cors.get("enabled") is not True:
            warnings.append("CORS should be enabled in production environment")

        level = (config.get("logging") or {}).get("level")
        if level is not None and level not in ("warn", "warning", "error"):
            warnings.append(f"Logging level should be warn or error in production: {level}")

        return ValidationResult.from_messages(errors, warnings)
