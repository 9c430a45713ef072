from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import pytest

from models.errors import DeliveryError, FetchError
from models.records import Reading, Weather
from services.dispatcher import Dispatcher, DispatchOutcome, ScheduleKind
from settings import MonitorConfig

HOURLY = "0 * * * *"
DAILY = "0 1 * * *"


class StubFetcher:
    def __init__(self, index: int = 50, error: Optional[Exception] = None) -> None:
        self.index = index
        self.error = error
        self.locations: List[str] = []

    async def fetch_reading(self, location_key: str) -> Reading:
        self.locations.append(location_key)
        if self.error is not None:
            raise self.error
        return Reading(
            index=self.index,
            location_name="Bangkok",
            dominant_pollutant="pm25",
            observed_at="2024-03-01 08:00:00",
            pollutants={"pm25": self.index},
            weather=Weather(),
        )


class StubNotifier:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.messages: List[str] = []

    async def send(self, message: str) -> None:
        if self.error is not None:
            raise self.error
        self.messages.append(message)


def _dispatcher(
    fetcher: StubFetcher,
    notifier: StubNotifier,
    config: Optional[MonitorConfig] = None,
) -> Dispatcher:
    return Dispatcher(config=config or MonitorConfig(), fetcher=fetcher, notifier=notifier)  # type: ignore[arg-type]


def test_hourly_tick_at_threshold_sends_nothing() -> None:
    notifier = StubNotifier()
    dispatcher = _dispatcher(StubFetcher(index=100), notifier)

    outcome = asyncio.run(dispatcher.run_scheduled(HOURLY))

    assert outcome is DispatchOutcome.below_threshold
    assert notifier.messages == []


def test_hourly_tick_above_threshold_sends_one_alert() -> None:
    notifier = StubNotifier()
    dispatcher = _dispatcher(StubFetcher(index=101), notifier)

    outcome = asyncio.run(dispatcher.run_scheduled(HOURLY))

    assert outcome is DispatchOutcome.alert_sent
    assert len(notifier.messages) == 1
    assert notifier.messages[0].startswith("⚠️ <b>Bangkok Air Quality Alert</b>")


@pytest.mark.parametrize("index", [0, 100, 101, 450])
def test_daily_tick_always_sends_summary(index: int) -> None:
    notifier = StubNotifier()
    dispatcher = _dispatcher(StubFetcher(index=index), notifier)

    outcome = asyncio.run(dispatcher.run_scheduled(DAILY))

    assert outcome is DispatchOutcome.summary_sent
    assert len(notifier.messages) == 1
    assert "Daily Air Quality Summary" in notifier.messages[0]
    assert "Have a good day!" in notifier.messages[0]


def test_daily_tick_ignores_threshold_from_config() -> None:
    notifier = StubNotifier()
    config = MonitorConfig(alert_threshold=0)
    dispatcher = _dispatcher(StubFetcher(index=500), notifier, config)

    asyncio.run(dispatcher.run_scheduled(DAILY))

    assert len(notifier.messages) == 1
    assert "Air Quality Alert" not in notifier.messages[0]


def test_custom_threshold_is_respected() -> None:
    notifier = StubNotifier()
    dispatcher = _dispatcher(StubFetcher(index=60), notifier, MonitorConfig(alert_threshold=50))

    outcome = asyncio.run(dispatcher.run_scheduled(HOURLY))

    assert outcome is DispatchOutcome.alert_sent


def test_fetch_failure_is_logged_and_swallowed(caplog: pytest.LogCaptureFixture) -> None:
    notifier = StubNotifier()
    dispatcher = _dispatcher(StubFetcher(error=FetchError("AQICN API error: 502 Bad Gateway")), notifier)

    with caplog.at_level(logging.ERROR, logger="services.dispatcher"):
        outcome = asyncio.run(dispatcher.run_scheduled(HOURLY))

    assert outcome is DispatchOutcome.failed
    assert notifier.messages == []
    assert "AQI check failed: AQICN API error: 502 Bad Gateway" in caplog.text


def test_delivery_failure_is_swallowed() -> None:
    notifier = StubNotifier(error=DeliveryError("Telegram API error: 403 - Forbidden", status_code=403))
    dispatcher = _dispatcher(StubFetcher(index=10), notifier)

    outcome = asyncio.run(dispatcher.run_scheduled(DAILY))

    assert outcome is DispatchOutcome.failed


def test_unexpected_error_is_swallowed() -> None:
    dispatcher = _dispatcher(StubFetcher(error=RuntimeError("boom")), StubNotifier())

    assert asyncio.run(dispatcher.run_scheduled(HOURLY)) is DispatchOutcome.failed


def test_unrecognized_expression_falls_back_to_hourly(caplog: pytest.LogCaptureFixture) -> None:
    dispatcher = _dispatcher(StubFetcher(), StubNotifier())

    with caplog.at_level(logging.WARNING, logger="services.dispatcher"):
        kind = dispatcher.resolve_schedule("*/5 * * * *")

    assert kind is ScheduleKind.hourly
    assert "Unrecognized schedule expression" in caplog.text
    assert dispatcher.resolve_schedule(HOURLY) is ScheduleKind.hourly
    assert dispatcher.resolve_schedule(DAILY) is ScheduleKind.daily_summary


def test_manual_operations_use_configured_location() -> None:
    fetcher = StubFetcher(index=75)
    notifier = StubNotifier()
    dispatcher = _dispatcher(fetcher, notifier, MonitorConfig(location="@1603"))

    reading = asyncio.run(dispatcher.check())
    asyncio.run(dispatcher.send_alert())
    asyncio.run(dispatcher.send_summary())

    assert reading.index == 75
    assert fetcher.locations == ["@1603", "@1603", "@1603"]
    assert len(notifier.messages) == 2


def test_manual_operations_propagate_errors() -> None:
    dispatcher = _dispatcher(StubFetcher(error=FetchError("down")), StubNotifier())

    with pytest.raises(FetchError):
        asyncio.run(dispatcher.send_alert())
