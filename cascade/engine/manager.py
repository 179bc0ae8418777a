"""ConfigurationManager: the resolution engine.

One orchestration pass loads every provider, merges the results in
registration order, runs the adapter's transform and validation, publishes
the new snapshot with a single reference assignment and notifies change
listeners with the key paths that differ from the previous snapshot.
"""

import asyncio
import copy
import os
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Any

from cascade.adapters.base import EnvironmentAdapter
from cascade.adapters.registry import create_environment_adapter
from cascade.config import get_settings
from cascade.config.models.manager import ManagerOptions
from cascade.config.settings import Settings
from cascade.engine.factory import create_provider
from cascade.engine.scheduler import HotReloadScheduler
from cascade.exceptions import (
    AllProvidersUnavailableError,
    ConfigurationError,
    ConfigurationTransformError,
    DuplicateSourceError,
)
from cascade.merge import diff_paths, merge_all
from cascade.models.enums import SourceType
from cascade.models.events import ChangeEvent
from cascade.models.snapshot import ConfigurationSnapshot
from cascade.models.sources import ProviderDescriptor
from cascade.models.status import CacheStats, ManagerStatus
from cascade.models.validation import ValidationResult
from cascade.observability.logging import get_logger
from cascade.observability.metrics import (
    CHANGE_EVENTS,
    LOAD_COUNT,
    LOAD_LATENCY,
    PROVIDER_FAILURES,
    SNAPSHOT_VERSION,
)
from cascade.providers.base import ConfigurationProvider
from cascade.providers.environment import EnvironmentConfigurationProvider
from cascade.providers.file import FileConfigurationProvider
from cascade.providers.remote import RemoteConfigurationProvider
from cascade.providers.secure_storage import SecureStorageConfigurationProvider

logger = get_logger(__name__)

ChangeListener = Callable[[ChangeEvent], None]

_MISSING = object()
_UNAVAILABLE = "source is unavailable"


@dataclass(frozen=True)
class _Published:
    """Current snapshot and the lookup memo that belongs to it.

    Swapped as one reference so a reader never pairs a snapshot with
    another snapshot's memo.
    """

    snapshot: ConfigurationSnapshot
    lookups: dict[str, Any] = field(default_factory=dict)


class ConfigurationManager:
    """Resolve configuration from ordered providers under an environment adapter.

    Example:
        async with ConfigurationManager() as manager:
            await manager.initialize(ManagerOptions(environment="staging"))
            host = manager.get("database.host", "localhost")

    Providers may be passed explicitly for programmatic use; otherwise they
    are built from the adapter's sources (or ManagerOptions.sources).
    """

    def __init__(
        self,
        providers: Sequence[ConfigurationProvider] | None = None,
        *,
        adapter: EnvironmentAdapter | None = None,
        environ: Mapping[str, str] | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Create an uninitialized manager.

        Args:
            providers: Explicit providers in precedence order (last wins)
            adapter: Environment adapter; inferred from the environment if None
            environ: Environment variables for adapters and providers
                (defaults to os.environ)
            settings: Engine settings (defaults to get_settings())
        """
        self._explicit_providers = list(providers) if providers is not None else None
        self._adapter = adapter
        self._environ: Mapping[str, str] = os.environ if environ is None else environ
        self._settings = settings

        self._options: ManagerOptions | None = None
        self._environment: str | None = None
        self._providers: list[ProviderDescriptor] = []
        self._current = _Published(ConfigurationSnapshot.empty())
        self._loaded = False
        self._last_load_at: datetime | None = None
        self._listeners: list[ChangeListener] = []
        self._pending_keys: set[str] = set()
        self._provider_warnings: tuple[str, ...] = ()
        self._error_count = 0
        self._cache_hits = 0
        self._cache_misses = 0
        self._inflight: asyncio.Task[ValidationResult] | None = None
        self._scheduler: HotReloadScheduler | None = None

    # Lifecycle

    async def initialize(self, options: ManagerOptions | None = None) -> ValidationResult:
        """Bind environment, adapter and providers, then perform the first load.

        Args:
            options: Manager options (defaults come from engine settings)

        Returns:
            Validation result of the initial load

        Raises:
            UnknownEnvironmentError: If no adapter was given and the
                environment name is not recognized
            DuplicateSourceError: If two providers share a name
            AllProvidersUnavailableError: If the initial load got nothing
        """
        if self._options is not None:
            raise ConfigurationError("Configuration manager is already initialized")

        settings = self._settings or get_settings()
        if options is None:
            options = ManagerOptions.from_settings(settings)

        if self._adapter is None:
            environment = options.environment or settings.manager.environment
            self._adapter = create_environment_adapter(
                environment, environ=self._environ, config_dir=options.config_dir
            )
        self._environment = self._adapter.get_environment().value

        self._providers = self._build_providers(options, settings)
        if not self._providers:
            raise ConfigurationError("No configuration sources configured", retryable=False)
        self._options = options

        logger.info(
            "configuration_manager_initializing",
            environment=self._environment,
            sources=[d.name for d in self._providers],
            enable_cache=options.enable_cache,
            enable_hot_reload=options.enable_hot_reload,
        )

        result = await self.load()

        if options.enable_hot_reload:
            self._scheduler = HotReloadScheduler(
                partial(self._run_pass, "hot-reload"), options.hot_reload_interval
            )
            self._scheduler.start()

        return result

    async def close(self) -> None:
        """Stop hot reload and release provider resources."""
        if self._scheduler is not None:
            await self._scheduler.stop()
            self._scheduler = None

        inflight = self._inflight
        if inflight is not None and not inflight.done():
            # Let the running pass finish before its clients are closed
            await asyncio.wait({inflight})

        for descriptor in self._providers:
            try:
                await descriptor.provider.aclose()
            except Exception as e:
                logger.warning("provider_close_failed", source=descriptor.name, error=str(e))

        logger.debug("configuration_manager_closed")

    async def __aenter__(self) -> "ConfigurationManager":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # Orchestration

    async def load(self) -> ValidationResult:
        """Run an orchestration pass and publish the result.

        Returns:
            Validation result of the new snapshot, including warnings for
            providers that failed during the pass
        """
        return await self._run_pass("load")

    async def reload(self) -> ValidationResult:
        """Re-run the orchestration pass, notifying listeners of differences.

        Raises:
            AllProvidersUnavailableError: If no provider produced data; the
                current snapshot is kept
        """
        return await self._run_pass("reload")

    async def _run_pass(self, operation: str) -> ValidationResult:
        self._require_initialized()

        inflight = self._inflight
        if inflight is not None and not inflight.done():
            # Join the pass already running instead of interleaving a second one
            logger.debug("configuration_pass_coalesced", operation=operation)
            return await asyncio.shield(inflight)

        task = asyncio.create_task(self._execute_pass(operation))
        self._inflight = task
        task.add_done_callback(self._pass_finished)
        return await asyncio.shield(task)

    def _pass_finished(self, task: asyncio.Task[ValidationResult]) -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled():
            # Retrieve so an unawaited failure is not reported as lost
            task.exception()

    async def _execute_pass(self, operation: str) -> ValidationResult:
        assert self._adapter is not None
        start = time.perf_counter()

        outcomes = await asyncio.gather(*(self._load_source(d) for d in self._providers))

        layers: list[dict[str, Any]] = []
        contributors: list[str] = []
        failures: dict[str, str] = {}
        for descriptor, (data, error) in zip(self._providers, outcomes, strict=True):
            if error is None:
                layers.append(data)
                contributors.append(descriptor.name)
            else:
                failures[descriptor.name] = error

        failed = list(failures)
        self._error_count += len(failed)

        if not layers:
            LOAD_COUNT.labels(operation=operation, outcome="failure").inc()
            logger.error(
                "configuration_pass_failed",
                operation=operation,
                reason="all_providers_unavailable",
                failures=failures,
            )
            raise AllProvidersUnavailableError(failures)

        merged = merge_all(layers)

        try:
            transformed = self._adapter.transform_configuration(merged)
        except Exception as e:
            self._error_count += 1
            LOAD_COUNT.labels(operation=operation, outcome="failure").inc()
            logger.error(
                "configuration_transform_failed",
                operation=operation,
                environment=self._environment,
                error=str(e),
            )
            raise ConfigurationTransformError(
                f"Failed to transform configuration: {e}", cause=e, retryable=False
            ) from e

        warnings = [
            f"Configuration source '{name}' failed to load: {failures[name]}" for name in failed
        ]
        result = self._adapter.validate_configuration(copy.deepcopy(transformed))
        result = result.with_warnings(warnings)

        previous = self._current.snapshot
        notify = self._loaded
        snapshot = ConfigurationSnapshot(
            transformed,
            version=previous.version + 1,
            source_names=tuple(contributors),
        )
        changed = sorted(set(diff_paths(previous.to_dict(), transformed)) | self._pending_keys)

        # Publish: one reference swap replaces snapshot and memo together
        self._current = _Published(snapshot)
        self._pending_keys = set()
        self._provider_warnings = tuple(warnings)
        self._loaded = True
        self._last_load_at = snapshot.created_at

        elapsed = time.perf_counter() - start
        LOAD_COUNT.labels(operation=operation, outcome="success").inc()
        LOAD_LATENCY.labels(operation=operation).observe(elapsed)
        SNAPSHOT_VERSION.set(snapshot.version)

        logger.info(
            "configuration_loaded",
            operation=operation,
            environment=self._environment,
            version=snapshot.version,
            sources=contributors,
            failed_sources=failed,
            changed_keys=len(changed),
            valid=result.valid,
            duration_ms=round(elapsed * 1000, 2),
        )
        if not result.valid:
            logger.warning(
                "configuration_validation_failed",
                environment=self._environment,
                errors=list(result.errors),
            )

        if notify and changed:
            self._notify(
                ChangeEvent(
                    changed_key_paths=tuple(changed),
                    source_name=operation,
                    version=snapshot.version,
                )
            )

        return result

    async def _load_source(
        self, descriptor: ProviderDescriptor
    ) -> tuple[dict[str, Any], None] | tuple[None, str]:
        """Load one provider, converting failure into an error message.

        Remote sources skip the availability probe: their fetcher decides
        between a cached result, a retried fetch and a failure.
        """
        provider = descriptor.provider
        probe = descriptor.source_type is not SourceType.REMOTE
        try:
            if probe and not await provider.is_available():
                error = _UNAVAILABLE
            else:
                data = await provider.load()
                if isinstance(data, dict):
                    return data, None
                error = f"Provider returned {type(data).__name__}, expected a mapping"
        except ConfigurationError as e:
            error = str(e)
        except Exception as e:
            error = f"{type(e).__name__}: {e}"

        PROVIDER_FAILURES.labels(source=descriptor.name).inc()
        logger.warning("provider_load_failed", source=descriptor.name, error=error)
        return None, error

    # Reads and writes

    def get(self, key: str, default: Any = None) -> Any:
        """Resolve a dot-notation key against the current snapshot.

        Never raises: returns default when the key is empty, absent, or
        nothing has been loaded yet. Containers are returned as copies.
        """
        if not key or not isinstance(key, str):
            return default

        current = self._current
        try:
            if self._options is not None and self._options.enable_cache:
                value = current.lookups.get(key, _MISSING)
                if value is _MISSING:
                    self._cache_misses += 1
                    value = current.snapshot.get(key, _MISSING)
                    current.lookups[key] = value
                else:
                    self._cache_hits += 1
                if isinstance(value, (dict, list)):
                    value = copy.deepcopy(value)
            else:
                value = current.snapshot.get(key, _MISSING)
        except Exception as e:
            logger.warning("configuration_lookup_failed", key=key, error=str(e))
            return default

        return default if value is _MISSING else value

    def set(self, key: str, value: Any) -> None:
        """Override a value in the current snapshot (in memory only).

        The override is not persisted and is replaced by the next load or
        reload. The key is reported in the next change event.

        Raises:
            ConfigurationError: If the key is empty or malformed
        """
        snapshot = self._current.snapshot.with_value(key, value)
        self._current = _Published(snapshot)
        self._pending_keys.add(key)
        logger.debug("configuration_override_set", key=key)

    async def save(self, source_name: str, config: dict[str, Any]) -> None:
        """Persist configuration through a named provider.

        Raises:
            ConfigurationError: If the source is unknown or the save fails
        """
        descriptor = next((d for d in self._providers if d.name == source_name), None)
        if descriptor is None:
            raise ConfigurationError(
                f"Unknown configuration source: {source_name}",
                source=source_name,
                retryable=False,
            )

        try:
            await descriptor.provider.save(config)
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to save configuration: {e}", source=source_name, cause=e
            ) from e
        logger.info("configuration_saved", source=source_name)

    def validate(self) -> ValidationResult:
        """Validate the current snapshot without changing any state."""
        if self._adapter is None:
            return ValidationResult.from_messages(["Configuration manager is not initialized"])
        result = self._adapter.validate_configuration(self._current.snapshot.to_dict())
        return result.with_warnings(list(self._provider_warnings))

    @property
    def snapshot(self) -> ConfigurationSnapshot:
        """The currently published snapshot."""
        return self._current.snapshot

    # Notification

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener.

        Listeners are called synchronously in registration order, once per
        pass that changes at least one key path.

        Returns:
            Callable that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: ChangeEvent) -> None:
        CHANGE_EVENTS.labels(source=event.source_name).inc()
        logger.info(
            "configuration_changed",
            operation=event.source_name,
            version=event.version,
            changed_keys=list(event.changed_key_paths),
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.exception(
                    "change_listener_failed",
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e),
                )

    # Status and caches

    def get_status(self) -> ManagerStatus:
        """Compute the manager's current status."""
        current = self._current
        enabled = self._options is not None and self._options.enable_cache
        return ManagerStatus(
            loaded=self._loaded,
            last_load_timestamp=self._last_load_at,
            source_names=[d.name for d in self._providers],
            cache_stats=CacheStats(
                enabled=enabled,
                size=len(current.lookups),
                hits=self._cache_hits,
                misses=self._cache_misses,
            ),
            error_count=self._error_count,
            version=current.snapshot.version,
            environment=self._environment,
            hot_reload_running=self._scheduler is not None and self._scheduler.running,
        )

    def clear_cache(self) -> None:
        """Drop memoized lookups and every provider-level cache."""
        self._current = _Published(self._current.snapshot)
        for descriptor in self._providers:
            descriptor.provider.clear_cache()
        logger.debug("configuration_cache_cleared")

    # Internals

    def _require_initialized(self) -> None:
        if self._options is None:
            raise ConfigurationError("Configuration manager is not initialized")

    def _build_providers(
        self, options: ManagerOptions, settings: Settings
    ) -> list[ProviderDescriptor]:
        descriptors: list[ProviderDescriptor] = []
        seen: set[str] = set()

        if self._explicit_providers is not None:
            for provider in self._explicit_providers:
                name = provider.get_name()
                if name in seen:
                    raise DuplicateSourceError(name)
                seen.add(name)
                descriptors.append(
                    ProviderDescriptor(
                        name=name, source_type=_source_type_of(provider), provider=provider
                    )
                )
            return descriptors

        assert self._adapter is not None
        sources = options.sources
        if sources is None:
            sources = self._adapter.get_configuration_sources()

        for source in sources:
            if source.name in seen:
                raise DuplicateSourceError(source.name)
            seen.add(source.name)
            provider = create_provider(
                source,
                environ=self._environ,
                fetch_settings=settings.fetch,
                default_cache_ttl=options.cache_ttl,
            )
            descriptors.append(
                ProviderDescriptor(
                    name=source.name,
                    source_type=source.type,
                    provider=provider,
                    options=dict(source.options),
                )
            )
        return descriptors


_PROVIDER_TYPES: tuple[tuple[type[ConfigurationProvider], SourceType], ...] = (
    (FileConfigurationProvider, SourceType.FILE),
    (EnvironmentConfigurationProvider, SourceType.ENVIRONMENT),
    (RemoteConfigurationProvider, SourceType.REMOTE),
    (SecureStorageConfigurationProvider, SourceType.SECURE_STORAGE),
)


def _source_type_of(provider: ConfigurationProvider) -> SourceType:
    for provider_cls, source_type in _PROVIDER_TYPES:
        if isinstance(provider, provider_cls):
            return source_type
    return SourceType.MEMORY
