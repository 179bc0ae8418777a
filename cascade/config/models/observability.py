"""Observability configuration models."""

from typing import Literal

from pydantic import BaseModel, Field


class ObservabilityConfig(BaseModel):
    """Logging and metrics configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log output format")
    redact_secrets: bool = Field(default=True, description="Redact credentials in logs")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")
