from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.toml")
CONFIG_PATH_ENV = "KEYBOT_CONFIG"


def config_path() -> Path:
    """Return the config file path (``$KEYBOT_CONFIG`` or ``./config.toml``)."""
    override = os.getenv(CONFIG_PATH_ENV)
    return Path(override) if override else DEFAULT_CONFIG_PATH


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the keybot TOML config.

    A missing file yields an empty dict so every section falls back to
    environment variables and defaults. A file that exists but fails to parse
    raises ``tomllib.TOMLDecodeError``.
    """
    target = Path(path) if path is not None else config_path()
    if not target.is_file():
        if path is not None or os.getenv(CONFIG_PATH_ENV):
            logger.warning("Config file %s not found; using environment only", target)
        return {}

    with target.open("rb") as handle:
        return tomllib.load(handle)


__all__ = ["CONFIG_PATH_ENV", "DEFAULT_CONFIG_PATH", "config_path", "load_raw_config"]
