"""Engine settings sections."""

from cascade.config.models.fetch import FetchConfig
from cascade.config.models.manager import ManagerConfig, ManagerOptions
from cascade.config.models.observability import ObservabilityConfig

__all__ = ["FetchConfig", "ManagerConfig", "ManagerOptions", "ObservabilityConfig"]
