from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


def _getenv_opt_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


@dataclass(frozen=True)
class AppConfig:
    LIVECHECK_LANGUAGE: str
    LIVECHECK_CONFIDENCE_THRESHOLD: float
    LIVECHECK_VERIFY_ENABLED: bool
    LIVECHECK_CLOSE_DELAY_MS: int
    LIVECHECK_CAPTURE_CLOSE_DELAY_MS: int
    LIVECHECK_FALLBACK_DELAY_MS: int
    LIVECHECK_RECOGNIZER: str
    LIVECHECK_VERIFIER: str
    GEMINI_API_KEY: Optional[str]
    LIVECHECK_GEMINI_MODEL: str
    LIVECHECK_GEMINI_BASE_URL: str
    LIVECHECK_VERIFY_TIMEOUT_SEC: float
    LIVECHECK_LOG_LEVEL: str

    def close_delay_sec(self) -> float:
        # Capture-only mode closes utterances sooner since nothing waits on them.
        if self.LIVECHECK_VERIFY_ENABLED:
            return self.LIVECHECK_CLOSE_DELAY_MS / 1000.0
        return self.LIVECHECK_CAPTURE_CLOSE_DELAY_MS / 1000.0

    def fallback_delay_sec(self) -> float:
        return self.LIVECHECK_FALLBACK_DELAY_MS / 1000.0

    def with_overrides(self, **changes: object) -> "AppConfig":
        return replace(self, **changes)


def load_config() -> AppConfig:
    threshold = _getenv_float("LIVECHECK_CONFIDENCE_THRESHOLD", 0.5)
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(
            f"LIVECHECK_CONFIDENCE_THRESHOLD must be within [0, 1], got {threshold}"
        )

    return AppConfig(
        LIVECHECK_LANGUAGE=_getenv_str("LIVECHECK_LANGUAGE", "en-US"),
        LIVECHECK_CONFIDENCE_THRESHOLD=threshold,
        LIVECHECK_VERIFY_ENABLED=_getenv_bool("LIVECHECK_VERIFY_ENABLED", True),
        LIVECHECK_CLOSE_DELAY_MS=_getenv_int("LIVECHECK_CLOSE_DELAY_MS", 1500),
        LIVECHECK_CAPTURE_CLOSE_DELAY_MS=_getenv_int("LIVECHECK_CAPTURE_CLOSE_DELAY_MS", 1000),
        LIVECHECK_FALLBACK_DELAY_MS=_getenv_int("LIVECHECK_FALLBACK_DELAY_MS", 1000),
        LIVECHECK_RECOGNIZER=_getenv_str("LIVECHECK_RECOGNIZER", "bridge"),
        LIVECHECK_VERIFIER=_getenv_str("LIVECHECK_VERIFIER", "gemini"),
        GEMINI_API_KEY=_getenv_opt_str("GEMINI_API_KEY"),
        LIVECHECK_GEMINI_MODEL=_getenv_str("LIVECHECK_GEMINI_MODEL", "gemini-2.5-flash"),
        LIVECHECK_GEMINI_BASE_URL=_getenv_str(
            "LIVECHECK_GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        ),
        LIVECHECK_VERIFY_TIMEOUT_SEC=_getenv_float("LIVECHECK_VERIFY_TIMEOUT_SEC", 30.0),
        LIVECHECK_LOG_LEVEL=_getenv_str("LIVECHECK_LOG_LEVEL", "INFO"),
    )
