"""Encrypted on-disk configuration provider.

Configuration is serialized to JSON and sealed with Fernet (AES-CBC with an
HMAC-SHA256 tag), so a tampered or foreign file fails authentication
instead of decrypting to garbage.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from cascade.exceptions import ConfigurationError, IntegrityError
from cascade.observability.logging import get_logger
from cascade.providers.base import ConfigurationProvider

logger = get_logger(__name__)


def generate_key() -> str:
    """Create a new urlsafe base64 Fernet key."""
    return Fernet.generate_key().decode("ascii")


class SecureStorageConfigurationProvider(ConfigurationProvider):
    """Store configuration encrypted at ``<storage_path>/<namespace>-config.enc``."""

    def __init__(
        self,
        name: str,
        namespace: str,
        key: str | bytes,
        storage_path: str | Path,
    ) -> None:
        """Initialize the provider.

        Args:
            name: Provider name
            namespace: Distinguishes stores sharing one directory
            key: Fernet key (urlsafe base64, 32 bytes decoded)
            storage_path: Directory holding the encrypted file

        Raises:
            ConfigurationError: If the key is not a valid Fernet key
        """
        self._name = name
        self._namespace = namespace
        self._storage_path = Path(storage_path)
        try:
            self._fernet = Fernet(key)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid encryption key: {e}", source=name, cause=e, retryable=False
            ) from e

    @property
    def file_path(self) -> Path:
        """Location of the encrypted configuration."""
        safe_namespace = "".join(c if c.isalnum() or c in "-_" else "_" for c in self._namespace)
        return self._storage_path / f"{safe_namespace}-config.enc"

    def get_name(self) -> str:
        """Get provider name."""
        return self._name

    async def load(self) -> dict[str, Any]:
        """Decrypt and return the stored configuration ({} if none)."""
        return await asyncio.to_thread(self._load_sync)

    async def save(self, config: dict[str, Any]) -> None:
        """Encrypt and persist configuration."""
        await asyncio.to_thread(self._save_sync, config)

    async def is_available(self) -> bool:
        """Check the storage directory is usable and the key round-trips."""
        try:
            probe = self._fernet.encrypt(b"probe")
            if self._fernet.decrypt(probe) != b"probe":
                return False
            self._storage_path.mkdir(parents=True, exist_ok=True)
            return os.access(self._storage_path, os.R_OK | os.W_OK)
        except (OSError, InvalidToken):
            return False

    async def clear(self) -> None:
        """Remove the stored configuration."""
        try:
            self.file_path.unlink(missing_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Failed to clear secure configuration: {e}", source=self._name, cause=e
            ) from e

    def _load_sync(self) -> dict[str, Any]:
        try:
            token = self.file_path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read secure configuration: {e}", source=self._name, cause=e
            ) from e

        try:
            plaintext = self._fernet.decrypt(token)
        except InvalidToken as e:
            logger.error("secure_config_integrity_failed", source=self._name)
            raise IntegrityError(
                "Configuration integrity verification failed",
                source=self._name,
                cause=e,
                retryable=False,
            ) from e

        try:
            data = json.loads(plaintext.decode("utf-8"))
        except ValueError as e:
            raise ConfigurationError(
                f"Decrypted configuration is not valid JSON: {e}",
                source=self._name,
                cause=e,
                retryable=False,
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Decrypted configuration must be a JSON object", source=self._name, retryable=False
            )
        return data

    def _save_sync(self, config: dict[str, Any]) -> None:
        token = self._fernet.encrypt(json.dumps(config, default=str).encode("utf-8"))
        target = self.file_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(token)
            os.replace(tmp_name, target)
        except OSError as e:
            raise ConfigurationError(
                f"Failed to save secure configuration: {e}", source=self._name, cause=e
            ) from e
        logger.info("secure_config_saved", source=self._name, namespace=self._namespace)
