"""Retry policy for unreliable fetch operations."""

from enum import Enum

from pydantic import BaseModel, Field


class BackoffMode(str, Enum):
    """How the delay between attempts grows."""

    FIXED = "fixed"
    EXPONENTIAL = "exponential"


class RetryPolicy(BaseModel):
    """Bounded retry with fixed or exponential backoff.

    A fetch is attempted at most ``retries + 1`` times. Attempt numbering
    starts at 0, so under exponential backoff the waits after the first,
    second and third failures are ``base``, ``2*base`` and ``4*base``.
    """

    retries: int = Field(default=3, ge=0, description="Additional attempts after the first")
    base_delay: float = Field(default=1.0, ge=0, description="Base delay in seconds")
    max_delay: float = Field(default=30.0, ge=0, description="Upper bound on any single delay")
    backoff: BackoffMode = Field(default=BackoffMode.EXPONENTIAL, description="Backoff mode")
    timeout: float | None = Field(
        default=10.0,
        gt=0,
        description="Per-attempt timeout in seconds (None disables)",
    )

    model_config = {"frozen": True}

    @property
    def max_attempts(self) -> int:
        """Total number of attempts including the first."""
        return self.retries + 1

    def delay(self, attempt: int) -> float:
        """Delay to wait after the given (0-based) failed attempt."""
        if self.backoff is BackoffMode.EXPONENTIAL:
            return min(self.max_delay, self.base_delay * (2**attempt))
        return min(self.max_delay, self.base_delay)
