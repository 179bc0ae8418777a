"""Provider factory.

Maps a SourceDescriptor to a ConfigurationProvider instance. The process
environment is read here, at the outer seam, and handed to providers that
need it; providers themselves never touch os.environ.
"""

import os
from collections.abc import Mapping

from cascade.config.models.fetch import FetchConfig
from cascade.exceptions import ConfigurationError
from cascade.fetch.retry import RetryPolicy
from cascade.models.enums import SourceType
from cascade.models.sources import SourceDescriptor
from cascade.observability.logging import get_logger
from cascade.providers.base import ConfigurationProvider
from cascade.providers.environment import EnvironmentConfigurationProvider
from cascade.providers.file import FileConfigurationProvider
from cascade.providers.memory import InMemoryConfigurationProvider
from cascade.providers.remote import RemoteConfigurationProvider
from cascade.providers.secure_storage import SecureStorageConfigurationProvider

logger = get_logger(__name__)


def create_provider(
    descriptor: SourceDescriptor,
    *,
    environ: Mapping[str, str] | None = None,
    fetch_settings: FetchConfig | None = None,
    default_cache_ttl: float = 60.0,
) -> ConfigurationProvider:
    """Create a provider for a source descriptor.

    Args:
        descriptor: Source to build a provider for
        environ: Environment mapping (defaults to os.environ)
        fetch_settings: Retry defaults for remote sources
        default_cache_ttl: TTL for remote sources without their own

    Returns:
        Configured provider named after the descriptor

    Raises:
        ConfigurationError: If the type is unsupported or options are invalid
    """
    env = os.environ if environ is None else environ
    options = descriptor.options
    name = descriptor.name

    if descriptor.type is SourceType.FILE:
        if "path" not in options:
            raise ConfigurationError("File source requires a 'path' option", source=name)
        logger.debug("creating_provider", source=name, type="file", path=str(options["path"]))
        return FileConfigurationProvider(name, options["path"], options.get("format"))

    elif descriptor.type is SourceType.ENVIRONMENT:
        logger.debug("creating_provider", source=name, type="environment")
        return EnvironmentConfigurationProvider(
            name,
            env,
            prefix=options.get("prefix", ""),
            separator=options.get("separator", "_"),
        )

    elif descriptor.type is SourceType.REMOTE:
        if not options.get("url"):
            raise ConfigurationError("Remote source requires a 'url' option", source=name)
        policy = _remote_policy(options, fetch_settings or FetchConfig(), name)
        logger.debug("creating_provider", source=name, type="remote", url=options["url"])
        return RemoteConfigurationProvider(
            name,
            options["url"],
            headers=options.get("headers"),
            auth_token=options.get("auth_token"),
            cache_ttl=float(options.get("cache_ttl", default_cache_ttl)),
            policy=policy,
        )

    elif descriptor.type is SourceType.SECURE_STORAGE:
        key = options.get("key")
        if not key and options.get("key_env"):
            key = env.get(options["key_env"])
        if not key:
            raise ConfigurationError(
                "Secure storage source requires a 'key' or a populated 'key_env'",
                source=name,
                retryable=False,
            )
        logger.debug("creating_provider", source=name, type="secure-storage")
        return SecureStorageConfigurationProvider(
            name,
            namespace=options.get("namespace", name),
            key=key,
            storage_path=options.get("storage_path", ".config"),
        )

    elif descriptor.type is SourceType.MEMORY:
        logger.debug("creating_provider", source=name, type="memory")
        return InMemoryConfigurationProvider(name, options.get("data"))

    raise ConfigurationError(
        f"Unsupported source type: {descriptor.type}", source=name, retryable=False
    )


def _remote_policy(options: dict, defaults: FetchConfig, name: str) -> RetryPolicy:
    try:
        return RetryPolicy(
            retries=options.get("retries", defaults.retries),
            base_delay=options.get("retry_delay", defaults.retry_delay),
            max_delay=options.get("max_delay", defaults.max_delay),
            backoff=options.get("backoff", defaults.backoff),
            timeout=options.get("timeout", defaults.timeout),
        )
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid retry options: {e}", source=name, cause=e, retryable=False
        ) from e
