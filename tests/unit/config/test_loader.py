"""Unit tests for the engine settings loader."""

import tomllib
from pathlib import Path

import pytest

from cascade.config.loader import load_config


class TestLoadConfig:
    """Tests for load_config function."""

    def test_no_files_is_empty(self) -> None:
        """Without TOML files the configuration is empty."""
        assert load_config() == {}

    def test_missing_config_dir_is_empty(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A config dir that does not exist yields no settings."""
        monkeypatch.setenv("CASCADE_CONFIG_DIR", str(tmp_path / "missing"))

        assert load_config() == {}

    def test_loads_default_config(self, mock_toml_files, monkeypatch) -> None:
        """Loads default.toml configuration."""
        mock_toml_files({"default.toml": "[manager]\ncache_ttl = 30"})
        monkeypatch.setenv("CASCADE_ENV", "nonexistent")

        assert load_config() == {"manager": {"cache_ttl": 30}}

    def test_development_is_default_environment(self, mock_toml_files) -> None:
        """Without CASCADE_ENV the development file is read."""
        mock_toml_files({"development.toml": "[manager]\nenable_hot_reload = true"})

        assert load_config() == {"manager": {"enable_hot_reload": True}}

    def test_merges_environment_config(self, mock_toml_files, monkeypatch) -> None:
        """Environment config deep-merges over default config."""
        mock_toml_files(
            {
                "default.toml": "[manager]\ncache_ttl = 30\nenable_cache = true",
                "staging.toml": "[manager]\ncache_ttl = 5",
            }
        )
        monkeypatch.setenv("CASCADE_ENV", "staging")

        assert load_config() == {"manager": {"cache_ttl": 5, "enable_cache": True}}

    def test_environment_file_without_default(self, mock_toml_files, monkeypatch) -> None:
        """The environment file alone is enough."""
        mock_toml_files({"production.toml": "[fetch]\nretries = 1"})
        monkeypatch.setenv("CASCADE_ENV", "production")

        assert load_config() == {"fetch": {"retries": 1}}

    def test_invalid_toml_raises(self, mock_toml_files) -> None:
        """Invalid TOML syntax raises error."""
        mock_toml_files({"default.toml": "invalid = [unclosed"})

        with pytest.raises(tomllib.TOMLDecodeError):
            load_config()
