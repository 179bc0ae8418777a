"""Environment adapters: per-environment sources, defaults and validation."""

from cascade.adapters.base import EnvironmentAdapter
from cascade.adapters.development import DevelopmentEnvironmentAdapter
from cascade.adapters.production import ProductionEnvironmentAdapter
from cascade.adapters.registry import create_environment_adapter
from cascade.adapters.staging import StagingEnvironmentAdapter
from cascade.adapters.testing import TestingEnvironmentAdapter

__all__ = [
    "DevelopmentEnvironmentAdapter",
    "EnvironmentAdapter",
    "ProductionEnvironmentAdapter",
    "StagingEnvironmentAdapter",
    "TestingEnvironmentAdapter",
    "create_environment_adapter",
]
