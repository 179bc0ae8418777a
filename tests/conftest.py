"""Shared test fixtures for the cascade test suite."""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from cascade.adapters.base import EnvironmentAdapter
from cascade.models.enums import EnvironmentType
from cascade.models.sources import SourceDescriptor
from cascade.models.validation import ValidationResult


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "[manager]\\ncache_ttl = 30",
                "development.toml": "[fetch]\\nretries = 1",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


@pytest.fixture(autouse=True)
def isolated_settings(
    test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Point engine settings at an empty config dir and clear the cache.

    This ensures test isolation for anything that reads engine settings.
    """
    from cascade.config import get_settings

    monkeypatch.setenv("CASCADE_CONFIG_DIR", str(test_config_dir))
    monkeypatch.delenv("CASCADE_ENV", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class PassthroughAdapter(EnvironmentAdapter):
    """Adapter with no sources, no defaults and optional fixed validation."""

    def __init__(
        self,
        errors: list[str] | None = None,
        environment: EnvironmentType = EnvironmentType.TESTING,
    ) -> None:
        super().__init__()
        self.errors = errors or []
        self.environment = environment
        self.transform_calls = 0

    def get_environment(self) -> EnvironmentType:
        return self.environment

    def get_configuration_sources(self) -> list[SourceDescriptor]:
        return []

    def transform_configuration(self, config: dict[str, Any]) -> dict[str, Any]:
        self.transform_calls += 1
        return super().transform_configuration(config)

    def apply_defaults(self, config: dict[str, Any]) -> None:
        return None

    def validate_configuration(self, config: dict[str, Any]) -> ValidationResult:
        return ValidationResult.from_messages(list(self.errors))


@pytest.fixture
def passthrough_adapter() -> PassthroughAdapter:
    """Adapter that leaves merged configuration untouched."""
    return PassthroughAdapter()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep that returns immediately and records delays."""
    return RecordingSleep()


@pytest.fixture
def make_adapter() -> type[PassthroughAdapter]:
    """Class for building passthrough adapters with custom validation."""
    return PassthroughAdapter
