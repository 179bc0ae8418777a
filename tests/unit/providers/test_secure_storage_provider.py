"""Tests for SecureStorageConfigurationProvider."""

from pathlib import Path

import pytest

from cascade.exceptions import ConfigurationError, IntegrityError
from cascade.providers.secure_storage import (
    SecureStorageConfigurationProvider,
    generate_key,
)


@pytest.fixture
def key() -> str:
    return generate_key()


@pytest.fixture
def provider(tmp_path: Path, key: str) -> SecureStorageConfigurationProvider:
    return SecureStorageConfigurationProvider("secure", "prod", key, tmp_path / "secure")


class TestSecureStorage:
    """Tests for encrypted storage."""

    @pytest.mark.asyncio
    async def test_round_trip(self, provider) -> None:
        """Saved configuration loads back unchanged."""
        await provider.save({"db": {"password": "hunter2"}})
        assert await provider.load() == {"db": {"password": "hunter2"}}

    @pytest.mark.asyncio
    async def test_file_is_encrypted(self, provider) -> None:
        """Plaintext values do not appear on disk."""
        await provider.save({"db": {"password": "hunter2"}})

        assert provider.file_path.name == "prod-config.enc"
        assert b"hunter2" not in provider.file_path.read_bytes()

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, provider) -> None:
        """Nothing stored loads as empty."""
        assert await provider.load() == {}

    @pytest.mark.asyncio
    async def test_tampered_file_fails_integrity(self, provider) -> None:
        """A modified ciphertext is an integrity failure."""
        await provider.save({"a": 1})
        token = bytearray(provider.file_path.read_bytes())
        token[-5] = ord("A") if token[-5] != ord("A") else ord("B")
        provider.file_path.write_bytes(bytes(token))

        with pytest.raises(IntegrityError):
            await provider.load()

    @pytest.mark.asyncio
    async def test_wrong_key_fails_integrity(self, tmp_path: Path, provider) -> None:
        """Data sealed with another key cannot be read."""
        await provider.save({"a": 1})
        other = SecureStorageConfigurationProvider(
            "secure", "prod", generate_key(), tmp_path / "secure"
        )

        with pytest.raises(IntegrityError):
            await other.load()

    @pytest.mark.asyncio
    async def test_clear(self, provider) -> None:
        """clear removes the stored configuration."""
        await provider.save({"a": 1})
        await provider.clear()
        assert not provider.file_path.exists()
        assert await provider.load() == {}

    @pytest.mark.asyncio
    async def test_available(self, provider) -> None:
        """A writable directory with a valid key is available."""
        assert await provider.is_available()

    def test_invalid_key_rejected(self, tmp_path: Path) -> None:
        """Keys that are not Fernet keys are rejected at construction."""
        with pytest.raises(ConfigurationError, match="Invalid encryption key"):
            SecureStorageConfigurationProvider("secure", "prod", "short", tmp_path)
