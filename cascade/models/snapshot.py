"""Immutable configuration snapshot."""

import copy
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from cascade.fetch.integrity import compute_integrity_tag
from cascade.merge import flatten, get_path, has_path, set_path


class ConfigurationSnapshot:
    """The merged, transformed configuration at a point in time.

    A snapshot owns a private deep copy of its data. Reads return copies of
    nested containers, and writes go through with_value(), which returns a
    new snapshot. Nothing holding a snapshot can change what other holders
    see.
    """

    __slots__ = ("_data", "_version", "_created_at", "_source_names", "_checksum")

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        version: int = 0,
        created_at: datetime | None = None,
        source_names: tuple[str, ...] = (),
    ) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data or {}))
        self._version = version
        self._created_at = created_at or datetime.now(UTC)
        self._source_names = tuple(source_names)
        self._checksum: str | None = None

    @classmethod
    def empty(cls) -> "ConfigurationSnapshot":
        """Snapshot with no data, used before the first load."""
        return cls({}, version=0)

    @property
    def version(self) -> int:
        """Monotonic pass counter; 0 before the first load."""
        return self._version

    @property
    def created_at(self) -> datetime:
        """When the snapshot was published."""
        return self._created_at

    @property
    def source_names(self) -> tuple[str, ...]:
        """Providers that contributed to this snapshot, in merge order."""
        return self._source_names

    @property
    def checksum(self) -> str:
        """SHA-256 of the canonical JSON form of the data."""
        if self._checksum is None:
            self._checksum = compute_integrity_tag(self._data)
        return self._checksum

    def get(self, path: str, default: Any = None) -> Any:
        """Resolve a dot-notation path; containers are returned as copies."""
        value = get_path(self._data, path, default)
        if isinstance(value, (dict, list)):
            return copy.deepcopy(value)
        return value

    def has(self, path: str) -> bool:
        """Return True if path resolves to a value."""
        return has_path(self._data, path)

    def to_dict(self) -> dict[str, Any]:
        """Deep copy of the full configuration."""
        return copy.deepcopy(self._data)

    def flatten(self) -> dict[str, Any]:
        """Dot-path -> leaf view of the configuration."""
        return copy.deepcopy(flatten(self._data))

    def with_value(self, path: str, value: Any) -> "ConfigurationSnapshot":
        """Return a new snapshot with value written at path.

        The version and sources are kept; the override is not a new pass.
        """
        return ConfigurationSnapshot(
            set_path(self._data, path, value),
            version=self._version,
            source_names=self._source_names,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigurationSnapshot):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self.checksum)

    def __repr__(self) -> str:
        return (
            f"ConfigurationSnapshot(version={self._version}, "
            f"keys={sorted(self._data)}, sources={list(self._source_names)})"
        )
