"""Generic retry and cache policy for remote configuration fetches."""

from cascade.fetch.cache import CacheEntry, FetchCache, FetchCacheStats
from cascade.fetch.fetcher import FetchResult, RetryingFetcher
from cascade.fetch.integrity import compute_integrity_tag, verify_integrity_tag
from cascade.fetch.retry import BackoffMode, RetryPolicy

__all__ = [
    "BackoffMode",
    "CacheEntry",
    "FetchCache",
    "FetchCacheStats",
    "FetchResult",
    "RetryPolicy",
    "RetryingFetcher",
    "compute_integrity_tag",
    "verify_integrity_tag",
]
