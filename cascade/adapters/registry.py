"""Environment adapter registry."""

from collections.abc import Mapping
from pathlib import Path

from cascade.adapters.base import EnvironmentAdapter
from cascade.adapters.development import DevelopmentEnvironmentAdapter
from cascade.adapters.production import ProductionEnvironmentAdapter
from cascade.adapters.staging import StagingEnvironmentAdapter
from cascade.adapters.testing import TestingEnvironmentAdapter
from cascade.exceptions import UnknownEnvironmentError
from cascade.models.enums import EnvironmentType
from cascade.observability.logging import get_logger

logger = get_logger(__name__)

ADAPTERS: dict[EnvironmentType, type[EnvironmentAdapter]] = {
    EnvironmentType.DEVELOPMENT: DevelopmentEnvironmentAdapter,
    EnvironmentType.TESTING: TestingEnvironmentAdapter,
    EnvironmentType.STAGING: StagingEnvironmentAdapter,
    EnvironmentType.PRODUCTION: ProductionEnvironmentAdapter,
}


def create_environment_adapter(
    environment: str | EnvironmentType,
    environ: Mapping[str, str] | None = None,
    config_dir: str | Path = "config",
) -> EnvironmentAdapter:
    """Create the adapter for an environment name or alias.

    Args:
        environment: Environment name ("production", "prod", ...)
        environ: Environment variables handed to the adapter
        config_dir: Directory holding the environment's config files

    Returns:
        Adapter instance for the environment

    Raises:
        UnknownEnvironmentError: If the name is not recognized
    """
    env_type = EnvironmentType.parse(environment)
    if env_type is None:
        raise UnknownEnvironmentError(str(environment))

    logger.debug("creating_environment_adapter", environment=env_type.value)
    return ADAPTERS[env_type](environ=environ, config_dir=config_dir)
