"""Exception hierarchy for configuration resolution.

All errors raised by the engine inherit from ConfigurationError, which
carries the name of the source that failed (when known) so failures can be
attributed in logs and in validation warnings.
"""

from typing import Any


class CascadeError(Exception):
    """Base exception for all cascade errors."""

    pass


class ConfigurationError(CascadeError):
    """Raised when configuration cannot be loaded, saved or resolved.

    Attributes:
        message: Human readable description
        source: Name of the source the failure is attributed to
        cause: Underlying exception, if any
        retryable: Whether a retry may succeed
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        cause: BaseException | None = None,
        retryable: bool = True,
    ) -> None:
        self.message = message
        self.source = source
        self.cause = cause
        self.retryable = retryable
        super().__init__(message)

    def __str__(self) -> str:
        if self.source:
            return f"[{self.source}] {self.message}"
        return self.message


class DuplicateSourceError(ConfigurationError):
    """Raised when two providers share a name within one manager."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate configuration source name: {name}", source=name)


class UnknownEnvironmentError(ConfigurationError):
    """Raised when an environment name cannot be mapped to an adapter."""

    def __init__(self, environment: str | None) -> None:
        super().__init__(f"Unknown environment: {environment!r}")
        self.environment = environment


class ConfigurationTransformError(ConfigurationError):
    """Raised when the environment adapter fails to transform configuration."""

    pass


class IntegrityError(ConfigurationError):
    """Raised when cached or stored configuration fails verification."""

    pass


class SourceNotFoundError(ConfigurationError):
    """Raised by a fetch operation when the remote has no configuration.

    The retrying fetcher treats this as a successful empty result.
    """

    def __init__(self, message: str = "Configuration not found", source: str | None = None) -> None:
        super().__init__(message, source=source, retryable=False)


class FetchRetryExhaustedError(ConfigurationError):
    """Raised when every fetch attempt failed."""

    def __init__(self, source: str, attempts: int, last_error: BaseException) -> None:
        super().__init__(
            f"Fetch failed after {attempts} attempt(s): {last_error}",
            source=source,
            cause=last_error,
            retryable=False,
        )
        self.attempts = attempts
        self.last_error = last_error


class AllProvidersUnavailableError(ConfigurationError):
    """Raised when every provider failed during one orchestration pass."""

    def __init__(self, failures: dict[str, Any]) -> None:
        names = ", ".join(failures) or "<none>"
        super().__init__(f"All configuration providers failed: {names}", retryable=True)
        self.failures = failures
