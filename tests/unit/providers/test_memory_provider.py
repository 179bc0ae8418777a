"""Tests for InMemoryConfigurationProvider."""

import pytest

from cascade.exceptions import ConfigurationError
from cascade.providers.memory import InMemoryConfigurationProvider


class TestInMemoryProvider:
    """Tests for the in-memory provider."""

    @pytest.mark.asyncio
    async def test_load_returns_copy(self) -> None:
        """Loaded data is isolated from the stored data."""
        provider = InMemoryConfigurationProvider("memory", {"a": {"b": 1}})
        data = await provider.load()
        data["a"]["b"] = 2

        assert await provider.load() == {"a": {"b": 1}}
        assert provider.load_count == 2

    @pytest.mark.asyncio
    async def test_save_replaces(self) -> None:
        """save replaces the stored data."""
        provider = InMemoryConfigurationProvider("memory", {"a": 1})
        await provider.save({"b": 2})

        assert await provider.load() == {"b": 2}
        assert provider.save_count == 1

    @pytest.mark.asyncio
    async def test_fail_with(self) -> None:
        """Configured failures surface as ConfigurationError with the source."""
        provider = InMemoryConfigurationProvider("memory")
        provider.fail_with(RuntimeError("disk on fire"))

        with pytest.raises(ConfigurationError) as exc_info:
            await provider.load()
        assert exc_info.value.source == "memory"

        provider.fail_with(None)
        assert await provider.load() == {}

    @pytest.mark.asyncio
    async def test_availability_toggle(self) -> None:
        """Availability follows set_available."""
        provider = InMemoryConfigurationProvider("memory", available=False)
        assert not await provider.is_available()
        provider.set_available(True)
        assert await provider.is_available()
