"""Manager status models."""

from datetime import datetime

from pydantic import BaseModel, Field


class CacheStats(BaseModel):
    """Lookup cache statistics."""

    enabled: bool = Field(default=False, description="Whether lookup caching is on")
    size: int = Field(default=0, ge=0, description="Cached lookups for the current snapshot")
    hits: int = Field(default=0, ge=0, description="Lookups served from cache")
    misses: int = Field(default=0, ge=0, description="Lookups resolved against the snapshot")


class ManagerStatus(BaseModel):
    """Read-only view of engine state, recomputed on every request."""

    loaded: bool = Field(..., description="Whether a snapshot has been published")
    last_load_timestamp: datetime | None = Field(
        default=None, description="When the current snapshot was published"
    )
    source_names: list[str] = Field(default_factory=list, description="Providers in merge order")
    cache_stats: CacheStats = Field(default_factory=CacheStats, description="Lookup cache stats")
    error_count: int = Field(default=0, ge=0, description="Provider and pass failures so far")
    version: int = Field(default=0, ge=0, description="Version of the current snapshot")
    environment: str | None = Field(default=None, description="Active environment")
    hot_reload_running: bool = Field(default=False, description="Whether hot reload is active")
