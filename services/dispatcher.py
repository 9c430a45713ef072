"""Orchestration of fetch, format and delivery for each trigger."""

from __future__ import annotations

import logging
from enum import Enum

import httpx

from models.records import Reading
from services.fetcher import AqicnClient
from services.formatter import format_alert_message, format_daily_summary
from services.notifier import TelegramNotifier
from settings import MonitorConfig, Settings

logger = logging.getLogger(__name__)


class ScheduleKind(str, Enum):
    hourly = "hourly"
    daily_summary = "daily_summary"


class DispatchOutcome(str, Enum):
    """What a scheduled tick ended up doing."""

    summary_sent = "summary_sent"
    alert_sent = "alert_sent"
    below_threshold = "below_threshold"
    failed = "failed"


class Dispatcher:
    """Runs one fetch and at most one delivery per invocation; holds no state between calls."""

    def __init__(
        self,
        config: MonitorConfig,
        fetcher: AqicnClient,
        notifier: TelegramNotifier,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.notifier = notifier

    async def check(self) -> Reading:
        return await self.fetcher.fetch_reading(self.config.location)

    async def send_alert(self) -> Reading:
        reading = await self.check()
        await self.notifier.send(format_alert_message(reading, self.config))
        return reading

    async def send_summary(self) -> Reading:
        reading = await self.check()
        await self.notifier.send(format_daily_summary(reading, self.config))
        return reading

    def resolve_schedule(self, cron: str) -> ScheduleKind:
        """Map a fired schedule expression to its job.

        Only the daily summary expression is matched exactly; anything else
        runs the hourly threshold check.
        """
        if cron == self.config.daily_summary_cron:
            return ScheduleKind.daily_summary
        if cron != self.config.hourly_cron:
            logger.warning(
                "Unrecognized schedule expression, running hourly check",
                extra={"cron": cron},
            )
        return ScheduleKind.hourly

    async def run_scheduled(self, cron: str) -> DispatchOutcome:
        """Handle a scheduled tick.

        Failures are logged and swallowed: the next tick is the retry.
        """
        schedule = self.resolve_schedule(cron)
        try:
            reading = await self.check()
            logger.info(
                "AQI check completed",
                extra={
                    "location": self.config.location,
                    "aqi": reading.index,
                    "schedule": schedule.value,
                },
            )

            if schedule is ScheduleKind.daily_summary:
                await self.notifier.send(format_daily_summary(reading, self.config))
                logger.info("Daily summary sent", extra={"outcome": DispatchOutcome.summary_sent.value})
                return DispatchOutcome.summary_sent

            threshold = self.config.alert_threshold
            if reading.index > threshold:
                await self.notifier.send(format_alert_message(reading, self.config))
                logger.info(
                    "Alert sent",
                    extra={
                        "aqi": reading.index,
                        "threshold": threshold,
                        "outcome": DispatchOutcome.alert_sent.value,
                    },
                )
                return DispatchOutcome.alert_sent
            return DispatchOutcome.below_threshold
        except Exception as exc:  # noqa: BLE001 - a missed tick is retried by the next one
            logger.error(
                "AQI check failed: %s",
                exc,
                extra={
                    "cron": cron,
                    "reason": type(exc).__name__,
                    "outcome": DispatchOutcome.failed.value,
                },
            )
            return DispatchOutcome.failed


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http_timeout)


def build_dispatcher(http_client: httpx.AsyncClient, settings: Settings) -> Dispatcher:
    """Factory that wires the dispatcher with the configured providers."""
    credentials = settings.credentials
    fetcher = AqicnClient(http_client, api_token=credentials.aqicn_token)
    notifier = TelegramNotifier(
        http_client,
        bot_token=credentials.telegram_bot_token,
        chat_id=credentials.telegram_chat_id,
        thread_id=credentials.telegram_thread_id,
    )
    return Dispatcher(config=settings.monitor, fetcher=fetcher, notifier=notifier)
