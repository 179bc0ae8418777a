"""Root settings model for the engine."""

from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cascade.config.loader import load_config
from cascade.config.models.fetch import FetchConfig
from cascade.config.models.manager import ManagerConfig
from cascade.config.models.observability import ObservabilityConfig


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source reading config/default.toml and config/{CASCADE_ENV}.toml."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._config = load_config()

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        """Get field value from TOML config."""
        value = self._config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        """Return the TOML config values."""
        return dict(self._config)


class Settings(BaseSettings):
    """Engine settings.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml
    3. config/{CASCADE_ENV}.toml
    4. CASCADE_* environment variables (e.g. CASCADE_MANAGER__CACHE_TTL)
    """

    model_config = SettingsConfigDict(
        env_prefix="CASCADE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    manager: ManagerConfig = Field(
        default_factory=ManagerConfig,
        description="Configuration manager defaults",
    )
    fetch: FetchConfig = Field(
        default_factory=FetchConfig,
        description="Remote fetch retry defaults",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include TOML config.

        Priority order (highest to lowest):
        1. init_settings (constructor arguments)
        2. env_settings (CASCADE_* environment variables)
        3. toml_settings (config/*.toml files)
        4. (defaults from model)
        """
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )
