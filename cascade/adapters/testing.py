"""Testing environment adapter."""

from typing import Any

from cascade.adapters.base import EnvironmentAdapter
from cascade.adapters.schemas import TestingSchema, schema_errors
from cascade.models.enums import EnvironmentType, FileFormat, SourceType
from cascade.models.sources import SourceDescriptor
from cascade.models.validation import ValidationResult

IN_MEMORY_DATABASE = ":memory:"


class TestingEnvironmentAdapter(EnvironmentAdapter):
    """Test fixtures file, then TEST_* variables. Forces test mode."""

    __test__ = False  # not a pytest test class

    def get_environment(self) -> EnvironmentType:
        return EnvironmentType.TESTING

    def get_configuration_sources(self) -> list[SourceDescriptor]:
        return [
            SourceDescriptor(
                name="test-config",
                type=SourceType.FILE,
                options={"path": str(self.config_dir / "testing.json"), "format": FileFormat.JSON},
            ),
            SourceDescriptor(
                name="test-environment-variables",
                type=SourceType.ENVIRONMENT,
                options={"prefix": "TEST_", "separator": "__"},
            ),
        ]

    def apply_defaults(self, config: dict[str, Any]) -> None:
        config["debug"] = False
        config["hot_reload"] = False
        config["test_mode"] = True
        config.setdefault("logging", {"level": "error", "format": "json"})
        config.setdefault("database", {"type": "sqlite", "filename": IN_MEMORY_DATABASE})
        if isinstance(config.get("api"), dict):
            config["api"].setdefault("base_url", "http://localhost:3001")

    def validate_configuration(self, config: dict[str, Any]) -> ValidationResult:
        errors = schema_errors(TestingSchema, config)
        warnings: list[str] = []
        database = config.get("database")
        if isinstance(database, dict) and database.get("filename") != IN_MEMORY_DATABASE:
            warnings.append("Database should use in-memory storage for testing")
        return ValidationResult.from_messages(errors, warnings)
