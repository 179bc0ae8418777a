"""TOML files behind the engine's own settings."""

import os
import tomllib
from pathlib import Path
from typing import Any

from cascade.merge import deep_merge


def load_config() -> dict[str, Any]:
    """Load engine settings from TOML files.

    Reads ``default.toml`` then ``{CASCADE_ENV}.toml`` (default
    ``development``) from ``CASCADE_CONFIG_DIR`` (default ``config/``).
    Both files are optional; the environment file deep-merges over the
    default one.

    Raises:
        tomllib.TOMLDecodeError: If a file exists but is not valid TOML
    """
    config_dir = Path(os.environ.get("CASCADE_CONFIG_DIR", "config"))
    env = os.environ.get("CASCADE_ENV", "development")

    config: dict[str, Any] = {}
    for path in (config_dir / "default.toml", config_dir / f"{env}.toml"):
        if path.is_file():
            with path.open("rb") as f:
                config = deep_merge(config, tomllib.load(f))
    return config
