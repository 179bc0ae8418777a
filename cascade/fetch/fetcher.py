"""Retrying fetcher for unreliable configuration sources.

Wraps a single logical "fetch raw configuration" operation with:
- bounded retry with fixed or exponential backoff
- a per-attempt timeout
- a per-source TTL cache with integrity tags
- single-flight per source, so concurrent fetches of one source converge
  on one result

The fetcher knows nothing about transports. An operation is any coroutine
function returning a FetchResult; it raises SourceNotFoundError when the
source has no configuration, which is a successful empty result.
"""

import asyncio
import copy
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from cascade.exceptions import (
    ConfigurationError,
    FetchRetryExhaustedError,
    SourceNotFoundError,
)
from cascade.fetch.cache import FetchCache
from cascade.fetch.retry import RetryPolicy
from cascade.observability.logging import get_logger
from cascade.observability.metrics import FETCH_ATTEMPTS, FETCH_CACHE_LOOKUPS

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class FetchResult:
    """Payload returned by a fetch operation."""

    data: dict[str, Any]
    integrity_tag: str | None = None


FetchOperation = Callable[[], Awaitable[FetchResult]]
PushOperation = Callable[[], Awaitable[None]]


class RetryingFetcher:
    """Execute fetch operations under a retry policy with caching.

    Example:
        fetcher = RetryingFetcher(RetryPolicy(retries=3, base_delay=1.0))
        data = await fetcher.fetch("remote-config", fetch_remote, ttl=60.0)
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        cache: FetchCache | None = None,
        *,
        sleep: SleepFunc = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the fetcher.

        Args:
            policy: Retry policy (defaults to RetryPolicy())
            cache: Cache to read and populate (created if None)
            sleep: Coroutine used to wait between attempts
            clock: Clock for a cache created here
        """
        self._policy = policy or RetryPolicy()
        self._cache = cache if cache is not None else FetchCache(clock=clock)
        self._sleep = sleep
        self._key_locks: dict[str, asyncio.Lock] = {}

    @property
    def policy(self) -> RetryPolicy:
        """Retry policy applied to every operation."""
        return self._policy

    @property
    def cache(self) -> FetchCache:
        """Cache backing this fetcher."""
        return self._cache

    async def fetch(
        self,
        key: str,
        operation: FetchOperation,
        *,
        ttl: float | None = None,
    ) -> dict[str, Any]:
        """Fetch configuration for a source, serving from cache within ttl.

        Args:
            key: Source identity used as cache key
            operation: Coroutine function performing one network call
            ttl: Cache lifetime in seconds; None or 0 disables caching

        Returns:
            Configuration mapping (a copy; safe to mutate)

        Raises:
            FetchRetryExhaustedError: Every attempt failed
            ConfigurationError: A non-retryable failure occurred
        """
        if not ttl:
            result = await self._attempt_all(key, operation)
            return result.data

        cached = self._cached(key, ttl)
        if cached is not None:
            return cached

        async with self._lock_for(key):
            # Another caller may have populated the cache while we waited
            cached = self._cached(key, ttl, record_miss=False)
            if cached is not None:
                return cached

            result = await self._attempt_all(key, operation)
            self._cache.put(key, result.data, result.integrity_tag)
            return copy.deepcopy(result.data)

    async def push(self, key: str, operation: PushOperation) -> None:
        """Run a write operation under the retry policy, bypassing the cache.

        On success the cache entry for key is invalidated, so the next
        fetch goes to the source.
        """

        async def _run() -> FetchResult:
            await operation()
            return FetchResult(data={})

        async with self._lock_for(key):
            await self._attempt_all(key, _run, treat_not_found_as_empty=False)
            self._cache.invalidate(key)
        logger.debug("fetch_cache_invalidated_after_push", source=key)

    def invalidate(self, key: str) -> None:
        """Drop the cached entry for a source."""
        self._cache.invalidate(key)

    def _cached(self, key: str, ttl: float, record_miss: bool = True) -> dict[str, Any] | None:
        entry = self._cache.get(key, ttl, record=record_miss)
        if entry is not None:
            FETCH_CACHE_LOOKUPS.labels(source=key, result="hit").inc()
            logger.debug("fetch_cache_hit", source=key)
            return entry.data
        if record_miss:
            FETCH_CACHE_LOOKUPS.labels(source=key, result="miss").inc()
        return None

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._key_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._key_locks[key] = lock
        return lock

    async def _attempt_all(
        self,
        key: str,
        operation: FetchOperation,
        treat_not_found_as_empty: bool = True,
    ) -> FetchResult:
        policy = self._policy
        last_error: BaseException | None = None

        for attempt in range(policy.max_attempts):
            try:
                if policy.timeout is not None:
                    result = await asyncio.wait_for(operation(), timeout=policy.timeout)
                else:
                    result = await operation()
                FETCH_ATTEMPTS.labels(source=key, outcome="success").inc()
                if attempt:
                    logger.info("fetch_recovered", source=key, attempts=attempt + 1)
                return result

            except SourceNotFoundError:
                if not treat_not_found_as_empty:
                    raise
                FETCH_ATTEMPTS.labels(source=key, outcome="not_found").inc()
                logger.info("fetch_source_not_found", source=key)
                return FetchResult(data={})

            except TimeoutError as e:
                last_error = ConfigurationError(
                    f"Attempt timed out after {policy.timeout}s", source=key, cause=e
                )
                FETCH_ATTEMPTS.labels(source=key, outcome="timeout").inc()

            except ConfigurationError as e:
                FETCH_ATTEMPTS.labels(source=key, outcome="error").inc()
                if not e.retryable:
                    logger.warning("fetch_failed_not_retryable", source=key, error=str(e))
                    raise
                last_error = e

            except Exception as e:
                FETCH_ATTEMPTS.labels(source=key, outcome="error").inc()
                last_error = e

            if attempt + 1 < policy.max_attempts:
                delay = policy.delay(attempt)
                logger.warning(
                    "fetch_attempt_failed",
                    source=key,
                    attempt=attempt + 1,
                    max_attempts=policy.max_attempts,
                    retry_in=delay,
                    error=str(last_error),
                )
                await self._sleep(delay)

        assert last_error is not None
        logger.error(
            "fetch_retries_exhausted",
            source=key,
            attempts=policy.max_attempts,
            error=str(last_error),
        )
        raise FetchRetryExhaustedError(key, policy.max_attempts, last_error)
