"""Settings for the configuration engine itself.

Usage:
    from cascade.config import get_settings

    interval = get_settings().manager.hot_reload_interval
"""

from functools import lru_cache

from cascade.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings instance.

    Call ``get_settings.cache_clear()`` to pick up changed files or
    environment variables.
    """
    return Settings()


__all__ = ["get_settings", "Settings"]
