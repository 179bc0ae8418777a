"""Validation result model."""

from pydantic import BaseModel, ConfigDict, Field


class ValidationResult(BaseModel):
    """Outcome of validating a configuration.

    Produced fresh on every validation and never mutated afterwards;
    combinators return new instances.
    """

    model_config = ConfigDict(frozen=True)

    valid: bool = Field(default=True, description="Whether validation passed")
    errors: tuple[str, ...] = Field(default=(), description="Validation errors")
    warnings: tuple[str, ...] = Field(default=(), description="Validation warnings")

    @classmethod
    def from_messages(
        cls,
        errors: list[str] | None = None,
        warnings: list[str] | None = None,
    ) -> "ValidationResult":
        """Build a result whose validity is derived from the error list."""
        errors = errors or []
        return cls(valid=not errors, errors=tuple(errors), warnings=tuple(warnings or []))

    def with_warnings(self, warnings: list[str]) -> "ValidationResult":
        """Return a copy with extra warnings appended."""
        if not warnings:
            return self
        return self.model_copy(update={"warnings": self.warnings + tuple(warnings)})

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Combine two results; valid only if both are."""
        return ValidationResult(
            valid=self.valid and other.valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )
