"""Runtime services: telemetry and configuration."""

from .config import ConfigError, EngineConfig

__all__ = ["ConfigError", "EngineConfig"]
