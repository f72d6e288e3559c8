"""Environment-driven engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

ENV_PREFIX = "NOTE_ENGINE_"

STORAGE_BACKENDS = ("memory", "local", "remote")


class ConfigError(ValueError):
    """Raised when an environment variable or CLI flag holds an invalid value."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


@dataclass(slots=True)
class EngineConfig:
    storage: str = "local"
    local_path: str = os.path.join(".note_engine", "storage.json")
    storage_key: str = "editor"
    remote_url: str = "http://localhost:5000"
    remote_timeout: float = 5.0
    history_limit: Optional[int] = None
    export_dir: str = "."
    export_extension: str = "txt"

    def __post_init__(self) -> None:
        self.storage = self.storage.strip().lower()
        if self.storage not in STORAGE_BACKENDS:
            raise ConfigError(
                f"Unknown storage backend '{self.storage}' "
                f"(expected one of: {', '.join(STORAGE_BACKENDS)})",
                key="storage",
            )
        if self.remote_timeout <= 0:
            raise ConfigError("Remote timeout must be positive", key="remote_timeout")
        if self.history_limit is not None and self.history_limit < 1:
            raise ConfigError("History limit must be at least 1", key="history_limit")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        def read(name: str) -> Optional[str]:
            raw = env.get(f"{ENV_PREFIX}{name}")
            if raw is None or not raw.strip():
                return None
            return raw.strip()

        for field_name, env_name in (
            ("storage", "STORAGE"),
            ("local_path", "LOCAL_PATH"),
            ("storage_key", "STORAGE_KEY"),
            ("remote_url", "REMOTE_URL"),
            ("export_dir", "EXPORT_DIR"),
            ("export_extension", "EXPORT_EXT"),
        ):
            raw = read(env_name)
            if raw is not None:
                values[field_name] = raw

        timeout = read("REMOTE_TIMEOUT")
        if timeout is not None:
            values["remote_timeout"] = _parse_float(timeout, key="remote_timeout")

        limit = read("HISTORY_LIMIT")
        if limit is not None:
            parsed = _parse_int(limit, key="history_limit")
            # 0 keeps the history unbounded
            values["history_limit"] = parsed or None

        return cls(**values)

    def replace(self, **overrides: Any) -> "EngineConfig":
        """Return a copy with every non-``None`` override applied."""

        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def _parse_int(raw: str, *, key: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Expected an integer for {key}, got {raw!r}", key=key) from exc


def _parse_float(raw: str, *, key: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Expected a number for {key}, got {raw!r}", key=key) from exc


__all__ = ["ConfigError", "EngineConfig", "ENV_PREFIX", "STORAGE_BACKENDS"]
