"""Deep merge, dot-path access and snapshot diffing.

These are the pure algorithms the engine builds on. None of them mutate
their inputs: every write returns a new mapping.
"""

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from cascade.exceptions import ConfigurationError

PATH_SEPARATOR = "."

_MISSING = object()


def split_path(path: str) -> list[str]:
    """Split a dot-notation path into its segments.

    Returns an empty list for empty paths or paths with empty segments
    (``"a..b"``, ``".a"``), which callers treat as unresolvable.
    """
    if not isinstance(path, str) or not path:
        return []
    segments = path.split(PATH_SEPARATOR)
    if any(not segment for segment in segments):
        return []
    return segments


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    For nested dictionaries, values are merged recursively.
    For other values (scalars, lists), override replaces base wholesale.

    Args:
        base: Base dictionary
        override: Override dictionary (takes precedence)

    Returns:
        Merged dictionary; neither input is modified
    """
    result: dict[str, Any] = {key: copy.deepcopy(value) for key, value in base.items()}

    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], Mapping)
            and isinstance(value, Mapping)
        ):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)

    return result


def merge_all(layers: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Fold deep_merge over layers in order, later layers winning."""
    merged: dict[str, Any] = {}
    for layer in layers:
        merged = deep_merge(merged, layer)
    return merged


def get_path(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Resolve a dot-notation path, returning default when absent."""
    segments = split_path(path)
    if not segments:
        return default

    current: Any = data
    for segment in segments:
        if isinstance(current, Mapping) and segment in current:
            current = current[segment]
        else:
            return default
    return current


def has_path(data: Mapping[str, Any], path: str) -> bool:
    """Return True if the dot-notation path resolves to a value."""
    return get_path(data, path, _MISSING) is not _MISSING


def set_path(data: Mapping[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Return a copy of data with value written at path.

    Intermediate mappings are created as needed; a non-mapping value in the
    way is replaced by a mapping.

    Raises:
        ConfigurationError: If the path is empty or malformed
    """
    segments = split_path(path)
    if not segments:
        raise ConfigurationError(f"Invalid configuration key: {path!r}", retryable=False)

    result = copy.deepcopy(dict(data))
    current = result
    for segment in segments[:-1]:
        child = current.get(segment)
        if not isinstance(child, dict):
            child = {}
            current[segment] = child
        current = child
    current[segments[-1]] = copy.deepcopy(value)
    return result


def flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into a dot-path -> leaf value dict.

    Empty nested mappings are kept as leaves so they are not lost.
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            flat.update(flatten(value, path))
        else:
            flat[path] = value
    return flat


def diff_paths(old: Mapping[str, Any], new: Mapping[str, Any]) -> list[str]:
    """Compute the deepest dot-paths whose values differ between two mappings.

    Keys present on one side only are reported at their own path. Lists are
    compared as whole values.

    Returns:
        Sorted list of changed paths (empty when equal)
    """
    changed: list[str] = []
    _collect_diff(old, new, "", changed)
    return sorted(changed)


def _collect_diff(
    old: Mapping[str, Any], new: Mapping[str, Any], prefix: str, changed: list[str]
) -> None:
    for key in set(old) | set(new):
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else str(key)
        old_value = old.get(key, _MISSING)
        new_value = new.get(key, _MISSING)

        if isinstance(old_value, Mapping) and isinstance(new_value, Mapping):
            _collect_diff(old_value, new_value, path, changed)
        elif old_value is _MISSING or new_value is _MISSING:
            changed.append(path)
        elif type(old_value) is not type(new_value) or old_value != new_value:
            changed.append(path)
