"""Remote HTTP configuration provider.

Loads configuration with GET, saves it with POST and probes availability
with HEAD. Every network call runs through a RetryingFetcher, so transient
failures are retried with backoff and successful loads are cached for the
source's TTL.
"""

from typing import Any

import httpx

from cascade.exceptions import ConfigurationError, IntegrityError, SourceNotFoundError
from cascade.fetch.cache import FetchCache
from cascade.fetch.fetcher import FetchResult, RetryingFetcher, SleepFunc
from cascade.fetch.integrity import compute_integrity_tag
from cascade.fetch.retry import RetryPolicy
from cascade.observability.logging import get_logger
from cascade.providers.base import ConfigurationProvider

logger = get_logger(__name__)

CHECKSUM_HEADER = "X-Config-Checksum"

# Client errors worth retrying: request timeout and rate limiting
RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


class RemoteConfigurationProvider(ConfigurationProvider):
    """Fetch configuration from an HTTP endpoint.

    Attributes:
        url: Endpoint serving the configuration document
        cache_ttl: Seconds a successful load is served from cache
    """

    def __init__(
        self,
        name: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        auth_token: str | None = None,
        cache_ttl: float = 60.0,
        policy: RetryPolicy | None = None,
        client: httpx.AsyncClient | None = None,
        cache: FetchCache | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            name: Provider name, also the cache key
            url: Configuration endpoint
            headers: Extra request headers
            auth_token: Bearer token sent as Authorization header
            cache_ttl: Cache lifetime in seconds (0 disables caching)
            policy: Retry policy; its timeout bounds each attempt
            client: HTTP client to use (created and owned if None)
            cache: Fetch cache (created if None)
            sleep: Override for the wait between attempts
        """
        self._name = name
        self.url = url
        self.cache_ttl = cache_ttl
        self._headers = dict(headers or {})
        if auth_token:
            self._headers.setdefault("Authorization", f"Bearer {auth_token}")

        self._policy = policy or RetryPolicy()
        self._owns_client = client is None
        self._client = client
        fetcher_kwargs: dict[str, Any] = {}
        if sleep is not None:
            fetcher_kwargs["sleep"] = sleep
        self._fetcher = RetryingFetcher(self._policy, cache, **fetcher_kwargs)

    @property
    def fetcher(self) -> RetryingFetcher:
        """Fetcher wrapping this provider's network calls."""
        return self._fetcher

    def get_name(self) -> str:
        """Get provider name."""
        return self._name

    async def load(self) -> dict[str, Any]:
        """Load configuration from the remote source."""
        return await self._fetcher.fetch(self._name, self._get, ttl=self.cache_ttl)

    async def save(self, config: dict[str, Any]) -> None:
        """Push configuration to the remote source.

        Bypasses the cache and invalidates it on success so the next load
        re-fetches.
        """

        async def _post() -> None:
            client = self._ensure_client()
            try:
                response = await client.post(
                    self.url,
                    json=config,
                    headers={"Content-Type": "application/json", **self._headers},
                )
            except httpx.TimeoutException as e:
                raise ConfigurationError("Save request timed out", source=self._name, cause=e) from e
            except httpx.HTTPError as e:
                raise ConfigurationError(
                    f"Failed to save remote configuration: {e}", source=self._name, cause=e
                ) from e
            if response.status_code not in (200, 201, 204):
                raise self._status_error(response)

        await self._fetcher.push(self._name, _post)
        logger.info("remote_config_saved", source=self._name, url=self.url)

    async def is_available(self) -> bool:
        """Probe the endpoint with a HEAD request."""
        try:
            client = self._ensure_client()
            response = await client.head(self.url, headers=self._headers)
        except httpx.HTTPError as e:
            logger.debug("remote_config_unavailable", source=self._name, error=str(e))
            return False
        # A missing document is a valid (empty) remote configuration
        return response.status_code in (200, 204, 404)

    def clear_cache(self) -> None:
        """Drop the cached fetch result."""
        self._fetcher.invalidate(self._name)

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._policy.timeout)
        return self._client

    async def _get(self) -> FetchResult:
        client = self._ensure_client()
        try:
            response = await client.get(self.url, headers=self._headers)
        except httpx.TimeoutException as e:
            raise ConfigurationError(
                f"Remote configuration request timed out: {e}", source=self._name, cause=e
            ) from e
        except httpx.HTTPError as e:
            raise ConfigurationError(
                f"Failed to load remote configuration: {e}", source=self._name, cause=e
            ) from e

        if response.status_code == 404:
            raise SourceNotFoundError(f"No configuration at {self.url}", source=self._name)
        if response.status_code != 200:
            raise self._status_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise ConfigurationError(
                f"Remote configuration is not valid JSON: {e}", source=self._name, cause=e
            ) from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Remote configuration must be a JSON object, got {type(data).__name__}",
                source=self._name,
                retryable=False,
            )

        tag = compute_integrity_tag(data)
        expected = response.headers.get(CHECKSUM_HEADER)
        if expected and expected.strip().lower() != tag:
            raise IntegrityError(
                "Remote configuration checksum mismatch", source=self._name
            )

        logger.debug("remote_config_fetched", source=self._name, status=response.status_code)
        return FetchResult(data=data, integrity_tag=tag)

    def _status_error(self, response: httpx.Response) -> ConfigurationError:
        status = response.status_code
        retryable = status >= 500 or status in RETRYABLE_CLIENT_STATUSES
        return ConfigurationError(
            f"Remote configuration service error: {status} {response.reason_phrase}",
            source=self._name,
            retryable=retryable,
        )
