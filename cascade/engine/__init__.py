"""Resolution engine: manager, hot reload scheduler and provider factory."""

from cascade.engine.factory import create_provider
from cascade.engine.manager import ChangeListener, ConfigurationManager
from cascade.engine.scheduler import HotReloadScheduler

__all__ = [
    "ChangeListener",
    "ConfigurationManager",
    "HotReloadScheduler",
    "create_provider",
]
