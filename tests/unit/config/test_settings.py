"""Tests for engine settings."""

import pytest
from pydantic import ValidationError

from cascade.config import get_settings
from cascade.config.models.fetch import FetchConfig
from cascade.config.models.manager import ManagerOptions
from cascade.config.settings import Settings
from cascade.fetch.retry import BackoffMode


class TestDefaults:
    """Tests for default settings."""

    def test_manager_defaults(self) -> None:
        """Manager defaults match the documented values."""
        settings = get_settings()

        assert settings.manager.environment == "development"
        assert settings.manager.cache_ttl == 60.0
        assert settings.manager.enable_hot_reload is False
        assert settings.manager.hot_reload_interval == 5.0

    def test_fetch_defaults(self) -> None:
        """Fetch defaults describe three exponential retries."""
        policy = get_settings().fetch.to_policy()

        assert policy.retries == 3
        assert policy.base_delay == 1.0
        assert policy.max_delay == 30.0
        assert policy.backoff is BackoffMode.EXPONENTIAL
        assert policy.timeout == 10.0

    def test_settings_cached(self) -> None:
        """get_settings returns the same instance until the cache is cleared."""
        first = get_settings()
        assert get_settings() is first

        get_settings.cache_clear()
        assert get_settings() is not first


class TestSources:
    """Tests for settings source precedence."""

    def test_toml_values(self, mock_toml_files) -> None:
        """TOML files populate settings."""
        mock_toml_files({"default.toml": "[manager]\ncache_ttl = 15\n\n[fetch]\nretries = 1"})

        settings = get_settings()

        assert settings.manager.cache_ttl == 15
        assert settings.fetch.retries == 1

    def test_env_overrides_toml(self, mock_toml_files, monkeypatch: pytest.MonkeyPatch) -> None:
        """CASCADE_* variables override TOML values."""
        mock_toml_files({"default.toml": "[manager]\nenvironment = 'staging'"})
        monkeypatch.setenv("CASCADE_MANAGER__ENVIRONMENT", "production")

        assert get_settings().manager.environment == "production"

    def test_invalid_value_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Invalid values fail validation."""
        monkeypatch.setenv("CASCADE_MANAGER__HOT_RELOAD_INTERVAL", "0")

        with pytest.raises(ValidationError):
            Settings()


class TestManagerOptions:
    """Tests for ManagerOptions."""

    def test_from_settings(self, mock_toml_files) -> None:
        """Options are taken from settings with overrides applied."""
        mock_toml_files({"default.toml": "[manager]\ncache_ttl = 15\nenable_hot_reload = true"})

        options = ManagerOptions.from_settings(get_settings(), environment="prod")

        assert options.cache_ttl == 15
        assert options.enable_hot_reload is True
        assert options.environment == "prod"
        assert options.sources is None

    def test_fetch_config_to_policy(self) -> None:
        """FetchConfig converts to a RetryPolicy."""
        policy = FetchConfig(retries=0, retry_delay=2.0, backoff="fixed").to_policy()

        assert policy.max_attempts == 1
        assert policy.delay(3) == 2.0
