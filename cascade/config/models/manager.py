"""Configuration manager settings and options."""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from cascade.models.sources import SourceDescriptor

if TYPE_CHECKING:
    from cascade.config.settings import Settings


class ManagerConfig(BaseModel):
    """Manager section of the engine settings."""

    environment: str = Field(default="development", description="Active environment name")
    enable_cache: bool = Field(default=True, description="Memoize get() lookups per snapshot")
    cache_ttl: float = Field(
        default=60.0,
        ge=0,
        description="Default TTL in seconds for remote sources",
    )
    enable_hot_reload: bool = Field(default=False, description="Reload on a fixed interval")
    hot_reload_interval: float = Field(
        default=5.0,
        gt=0,
        description="Seconds between hot reloads",
    )


class ManagerOptions(BaseModel):
    """Options passed to ConfigurationManager.initialize().

    Attributes:
        environment: Environment name or alias; None uses the engine settings
        sources: Explicit source list replacing the adapter's
        config_dir: Directory the adapter reads its files from
    """

    environment: str | None = Field(default=None, description="Environment name or alias")
    sources: list[SourceDescriptor] | None = Field(
        default=None, description="Override the adapter's sources"
    )
    config_dir: str = Field(default="config", description="Adapter configuration directory")
    enable_cache: bool = Field(default=True, description="Memoize get() lookups per snapshot")
    cache_ttl: float = Field(default=60.0, ge=0, description="Default remote cache TTL")
    enable_hot_reload: bool = Field(default=False, description="Start the hot reload scheduler")
    hot_reload_interval: float = Field(default=5.0, gt=0, description="Hot reload interval")

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides: Any) -> "ManagerOptions":
        """Build options from engine settings, applying keyword overrides."""
        values: dict[str, Any] = settings.manager.model_dump()
        values.update(overrides)
        return cls(**values)
