"""Editor configuration and its environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from termedit.runtime.telemetry import env

DEFAULT_HISTORY_LIMIT = 100
DEFAULT_DEBOUNCE_MS = 500
DEFAULT_TAB_WIDTH = 3
DEFAULT_ROWS = 24
DEFAULT_COLUMNS = 80
# status line + message/prompt line
DEFAULT_RESERVED_ROWS = 2


def _env_int(name: str, fallback: int, *, minimum: int = 0) -> int:
    raw = env(name)
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value >= minimum else fallback


@dataclass(slots=True)
class EditorConfig:
    """Tunables shared by the session and its collaborators."""

    history_limit: int = DEFAULT_HISTORY_LIMIT
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    tab_width: int = DEFAULT_TAB_WIDTH
    default_rows: int = DEFAULT_ROWS
    default_columns: int = DEFAULT_COLUMNS
    reserved_rows: int = DEFAULT_RESERVED_ROWS
    directory: str = field(default_factory=os.getcwd)

    def __post_init__(self) -> None:
        if self.history_limit <= 0:
            raise ValueError("history_limit must be positive")
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms cannot be negative")
        if self.default_rows <= self.reserved_rows:
            raise ValueError("default_rows must leave room for text")

    @classmethod
    def from_env(cls, **overrides: object) -> "EditorConfig":
        """Build a config from ``TERMEDIT_*`` variables, then ``overrides``."""

        config = cls(
            history_limit=_env_int("HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT, minimum=1),
            debounce_ms=_env_int("DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS),
            tab_width=_env_int("TAB_WIDTH", DEFAULT_TAB_WIDTH),
            directory=env("DIRECTORY") or os.getcwd(),
        )
        if overrides:
            config = replace(config, **overrides)
        return config


__all__ = ["EditorConfig"]
