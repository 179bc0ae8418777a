"""Remote fetch settings."""

from pydantic import BaseModel, Field

from cascade.fetch.retry import BackoffMode, RetryPolicy


class FetchConfig(BaseModel):
    """Default retry settings for remote sources.

    Individual remote sources may override any of these in their options.
    """

    retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    retry_delay: float = Field(default=1.0, ge=0, description="Base backoff delay in seconds")
    max_delay: float = Field(default=30.0, ge=0, description="Maximum backoff delay in seconds")
    backoff: BackoffMode = Field(default=BackoffMode.EXPONENTIAL, description="Backoff mode")
    timeout: float = Field(default=10.0, gt=0, description="Per-attempt timeout in seconds")

    def to_policy(self) -> RetryPolicy:
        """Build the RetryPolicy these settings describe."""
        return RetryPolicy(
            retries=self.retries,
            base_delay=self.retry_delay,
            max_delay=self.max_delay,
            backoff=self.backoff,
            timeout=self.timeout,
        )
