from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _as_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_nonempty(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    trimmed = value.strip()
    return trimmed if trimmed else default


def _as_log_level(value: Optional[str], default: str) -> str:
    level = _as_nonempty(value, default).upper()
    if level in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
        return level
    return default


@dataclass(frozen=True)
class Settings:
    port: int = _as_int(os.getenv("JSONISH_PORT"), 8790)
    log_level: str = _as_log_level(os.getenv("JSONISH_LOG_LEVEL"), "INFO")
    error_preview_chars: int = _as_int(os.getenv("JSONISH_ERROR_PREVIEW_CHARS"), 200)
    stream_fallback: str = _as_nonempty(os.getenv("JSONISH_STREAM_FALLBACK"), "{}")


settings = Settings()
