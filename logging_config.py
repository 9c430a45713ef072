from __future__ import annotations

import logging
import time
from enum import Enum
from logging.config import dictConfig
from typing import Any, Dict, Iterable, Optional, Sequence

from settings import get_settings, normalize_log_level

# Context attached via ``extra=`` by the dispatcher, fetcher and notifier.
DISPATCH_EXTRA_KEYS = (
    "location",
    "aqi",
    "threshold",
    "cron",
    "schedule",
    "outcome",
    "status_code",
    "reason",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Appends ``key=value`` pairs for known extras; timestamps are UTC."""

    converter = time.gmtime

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or DISPATCH_EXTRA_KEYS)

    @staticmethod
    def _render_value(value: Any) -> str:
        text = str(value.value if isinstance(value, Enum) else value)
        # Cron expressions contain spaces.
        return f'"{text}"' if " " in text else text

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={self._render_value(getattr(record, key))}"
            for key in self._extra_keys
            if getattr(record, key, None) is not None
        )
        return f"{message} | {context}" if context else message


def build_logging_config(level: str) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "contextual": {
                "()": "logging_config.ContextualFormatter",
                "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S",
                "extra_keys": list(DISPATCH_EXTRA_KEYS),
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "contextual",
            }
        },
        "root": {"handlers": ["default"], "level": level},
        # httpx logs every request URL at INFO, and those URLs carry tokens.
        "loggers": {"httpx": {"level": "WARNING"}},
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging once per process; unknown level names fall back to settings."""
    global _configured
    if _configured:
        return

    default_level = get_settings().log_level
    dictConfig(build_logging_config(normalize_log_level(level, default_level)))
    _configured = True
