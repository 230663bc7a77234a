"""Runtime configuration read from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_START_PATTERNS: tuple[str, ...] = ("start", "preview", "production")


def _env_list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(key)
    if raw is None:
        return default
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or default


def _env_log_level(key: str, default: str) -> str:
    level = os.environ.get(key, default).strip().upper()
    # getLevelName maps known names to ints, anything else to a "Level ..." string
    if not isinstance(logging.getLevelName(level), int):
        return default
    return level


@dataclass(frozen=True)
class Settings:
    """Per-invocation settings.

    Reads from environment variables:
        PR_LOG_LEVEL      — log level when not verbose (default: WARNING; unknown names fall back to it)
        PR_LOG_FORMAT     — console | json (default: console)
        PR_START_PATTERNS — comma-separated start role patterns
                            (default: start,preview,production)
    """

    log_level: str = "WARNING"
    log_format: str = "console"
    start_patterns: tuple[str, ...] = DEFAULT_START_PATTERNS

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            log_level=_env_log_level("PR_LOG_LEVEL", "WARNING"),
            log_format=os.environ.get("PR_LOG_FORMAT", "console").lower(),
            start_patterns=_env_list("PR_START_PATTERNS", DEFAULT_START_PATTERNS),
        )
