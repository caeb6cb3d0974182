"""Configuration models."""

from logdeck.core.config.models.engine import (
    DEFAULT_ENGINE_CONFIG,
    LEAN_ENGINE_CONFIG,
    EngineConfig,
)

__all__ = ["DEFAULT_ENGINE_CONFIG", "EngineConfig", "LEAN_ENGINE_CONFIG"]
