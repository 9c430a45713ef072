"""Render readings into Telegram HTML notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from models.records import Number, Reading, Weather
from services.classifier import classify
from settings import DEFAULT_POLLUTANT_LABELS, MonitorConfig

NO_POLLUTANT_DATA = "No pollutant data available"
DAILY_SUMMARY_FOOTER = "Have a good day! 🌅"


@dataclass(frozen=True)
class NotificationRequest:
    """Presentation template for one kind of notification."""

    title: str
    title_marker: str
    index_label: str
    footer: Optional[str] = None


def alert_request(config: MonitorConfig) -> NotificationRequest:
    return NotificationRequest(
        title=f"{config.location_title} Air Quality Alert",
        title_marker="⚠️",
        index_label="AQI",
    )


def daily_summary_request(config: MonitorConfig) -> NotificationRequest:
    return NotificationRequest(
        title=f"{config.location_title} Daily Air Quality Summary",
        title_marker="📋",
        index_label="Current AQI",
        footer=DAILY_SUMMARY_FOOTER,
    )


def format_number(value: Number) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_pollutants(
    pollutants: Mapping[str, Optional[Number]],
    labels: Mapping[str, str] = DEFAULT_POLLUTANT_LABELS,
) -> str:
    lines = [
        f"• {labels.get(code, code)}: {format_number(value)}"
        for code, value in pollutants.items()
        if value is not None
    ]
    return "\n".join(lines) if lines else NO_POLLUTANT_DATA


def format_weather(weather: Weather) -> str:
    parts: list[str] = []
    if weather.temperature is not None:
        parts.append(f"{format_number(weather.temperature)}°C")
    if weather.humidity is not None:
        parts.append(f"{format_number(weather.humidity)}% humidity")
    if weather.wind is not None:
        parts.append(f"Wind: {format_number(weather.wind)} m/s")
    return " | ".join(parts)


def format_message(
    reading: Reading,
    request: NotificationRequest,
    labels: Mapping[str, str] = DEFAULT_POLLUTANT_LABELS,
) -> str:
    """Compose the notification body; the last line always carries the observation time."""
    tier = classify(reading.index)
    index = format_number(reading.index)

    parts = [
        f"{request.title_marker} <b>{request.title}</b>",
        "",
        f"<b>{request.index_label}: {index}</b> - {tier.label} {tier.indicator}",
        "",
        "📊 <b>Pollutants:</b>",
        format_pollutants(reading.pollutants, labels),
        "",
        "🏥 <b>Health Advisory:</b>",
        tier.advisory,
    ]

    weather_info = format_weather(reading.weather)
    if weather_info:
        parts.extend(["", f"🌡️ {weather_info}"])

    if request.footer:
        parts.extend(["", request.footer])

    parts.extend(["", f"⏰ {reading.observed_at}"])
    return "\n".join(parts)


def format_alert_message(reading: Reading, config: MonitorConfig) -> str:
    return format_message(reading, alert_request(config), config.pollutant_labels)


def format_daily_summary(reading: Reading, config: MonitorConfig) -> str:
    return format_message(reading, daily_summary_request(config), config.pollutant_labels)
