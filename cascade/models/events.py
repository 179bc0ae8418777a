"""Change notification model."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class ChangeEvent(BaseModel):
    """Key paths that changed between two consecutive snapshots."""

    model_config = ConfigDict(frozen=True)

    changed_key_paths: tuple[str, ...] = Field(..., description="Dot-paths that changed")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the change was published",
    )
    source_name: str = Field(..., description="Operation that produced the change")
    version: int = Field(default=0, ge=0, description="Version of the new snapshot")
