"""Configuration loading for logdeck.

Usage:
    from logdeck.core.config import load_config

    config = load_config(Path("logdeck.yaml"))
    config = load_config({"history_limit": 5000})
    config = load_config()  # defaults

A YAML file may hold the settings at top level or under an ``engine:`` key.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from logdeck.core.config.models import (
    DEFAULT_ENGINE_CONFIG,
    LEAN_ENGINE_CONFIG,
    EngineConfig,
)
from logdeck.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "LEAN_ENGINE_CONFIG",
    "load_config",
]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # Empty file parses as None
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_config(source: Path | str | dict[str, Any] | None = None) -> EngineConfig:
    """Load engine configuration.

    Args:
        source: YAML file path, a settings dict, or None for defaults.

    Returns:
        Validated EngineConfig.

    Raises:
        ConfigError: If the file cannot be read or the values are invalid.

    """
    if source is None:
        return DEFAULT_ENGINE_CONFIG

    if isinstance(source, dict):
        data = source
    else:
        data = _read_yaml(Path(source))
        logger.debug("Loaded config file %s", source)

    section = data.get("engine", data)
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ConfigError("'engine' section must be a mapping")

    try:
        return EngineConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid engine configuration: {e}") from e
