from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional


_AQICN_TOKEN_ENV = "AQICN_TOKEN"
_BOT_TOKEN_ENV = "TELEGRAM_BOT_TOKEN"
_CHAT_ID_ENV = "TELEGRAM_CHAT_ID"
_THREAD_ID_ENV = "TELEGRAM_THREAD_ID"
_LOCATION_ENV = "AQI_LOCATION"
_LOCATION_TITLE_ENV = "AQI_LOCATION_TITLE"
_THRESHOLD_ENV = "AQI_ALERT_THRESHOLD"
_HOURLY_CRON_ENV = "CRON_HOURLY"
_DAILY_CRON_ENV = "CRON_DAILY_SUMMARY"
_HTTP_TIMEOUT_ENV = "HTTP_TIMEOUT_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_POLLUTANT_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "pm25": "PM2.5",
        "pm10": "PM10",
        "o3": "O₃",
        "no2": "NO₂",
        "so2": "SO₂",
        "co": "CO",
    }
)


@dataclass(frozen=True)
class MonitorConfig:
    """What to watch and when to speak up."""

    location: str = "bangkok"
    location_title: str = "Bangkok"
    alert_threshold: int = 100
    hourly_cron: str = "0 * * * *"
    # 1:00 UTC is 8:00 in Bangkok (UTC+7).
    daily_summary_cron: str = "0 1 * * *"
    pollutant_labels: Mapping[str, str] = field(default_factory=lambda: DEFAULT_POLLUTANT_LABELS)


@dataclass(frozen=True)
class Credentials:
    aqicn_token: str = ""
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_thread_id: Optional[str] = None


@dataclass(frozen=True)
class Settings:
    monitor: MonitorConfig
    credentials: Credentials
    http_timeout: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_threshold(default: int) -> int:
    value = os.getenv(_THRESHOLD_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_timeout(default: float) -> float:
    value = os.getenv(_HTTP_TIMEOUT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def normalize_log_level(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    candidate = value.strip().upper()
    if not candidate:
        return default
    # getLevelName maps known names to ints and anything else to "Level X".
    return candidate if isinstance(logging.getLevelName(candidate), int) else default


def _read_log_level(default: str) -> str:
    return normalize_log_level(os.getenv(_LOG_LEVEL_ENV), default)


@lru_cache
def get_settings() -> Settings:
    defaults = MonitorConfig()
    monitor = MonitorConfig(
        location=_read_str_env(_LOCATION_ENV, defaults.location),
        location_title=_read_str_env(_LOCATION_TITLE_ENV, defaults.location_title),
        alert_threshold=_read_threshold(defaults.alert_threshold),
        hourly_cron=_read_str_env(_HOURLY_CRON_ENV, defaults.hourly_cron),
        daily_summary_cron=_read_str_env(_DAILY_CRON_ENV, defaults.daily_summary_cron),
    )
    credentials = Credentials(
        aqicn_token=_read_str_env(_AQICN_TOKEN_ENV, ""),
        telegram_bot_token=_read_str_env(_BOT_TOKEN_ENV, ""),
        telegram_chat_id=_read_str_env(_CHAT_ID_ENV, ""),
        telegram_thread_id=_read_optional_env(_THREAD_ID_ENV, None),
    )
    return Settings(
        monitor=monitor,
        credentials=credentials,
        http_timeout=_read_timeout(30.0),
        log_level=_read_log_level("INFO"),
    )
