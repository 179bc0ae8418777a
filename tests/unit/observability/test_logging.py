"""Tests for structured logging."""

import pytest
import structlog

from cascade.observability.logging import (
    SecretRedactor,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_json_format(self) -> None:
        """Should configure JSON format for production."""
        setup_logging(level="INFO", format="json", redact_secrets=False)
        logger = get_logger("test")
        # Should not raise
        logger.info("test_message")

    def test_setup_console_format(self) -> None:
        """Should configure console format for development."""
        setup_logging(level="DEBUG", format="console", redact_secrets=False)
        get_logger("test").debug("test_message")

    def test_bind_context(self) -> None:
        """Should accept bound context and secret fields."""
        setup_logging(level="INFO", format="json", redact_secrets=True)
        logger = get_logger("test")

        structlog.contextvars.bind_contextvars(environment="staging", source="remote")
        logger.info("remote_config_fetched", auth_token="abc123")

        # Clear context for other tests
        structlog.contextvars.clear_contextvars()


class TestSecretRedactor:
    """Tests for SecretRedactor processor."""

    @pytest.fixture
    def redactor(self) -> SecretRedactor:
        """Create a SecretRedactor instance."""
        return SecretRedactor()

    def test_sensitive_keys_redacted(self, redactor: SecretRedactor) -> None:
        """Known secret keys are replaced regardless of case."""
        result = redactor(None, "info", {"Password": "x", "token": "y", "host": "db"})

        assert result == {"Password": "[REDACTED]", "token": "[REDACTED]", "host": "db"}

    def test_nested_structures(self, redactor: SecretRedactor) -> None:
        """Nested dicts and lists are redacted recursively."""
        result = redactor(
            None,
            "info",
            {"config": {"db": {"secret": "s"}}, "headers": ["Bearer abc.def"]},
        )

        assert result["config"]["db"]["secret"] == "[REDACTED]"
        assert result["headers"] == ["Bearer [REDACTED]"]

    def test_url_credentials(self, redactor: SecretRedactor) -> None:
        """Credentials embedded in URLs are removed."""
        result = redactor(None, "info", {"url": "postgres://admin:hunter2@db:5432/app"})

        assert result["url"] == "postgres://[REDACTED]@db:5432/app"
