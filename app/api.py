"""HTTP route definitions for manual checks and diagnostics."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse, Response

from app.schemas import ReadingPayload
from services.dispatcher import Dispatcher, build_dispatcher
from settings import MonitorConfig, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_dispatcher(request: Request) -> Dispatcher:
    return build_dispatcher(request.app.state.http_client, get_settings())


def usage_text(config: MonitorConfig) -> str:
    return (
        f"AQI Notify - {config.location_title} Air Quality Monitor\n"
        "\n"
        "Endpoints:\n"
        "- /check - Get current AQI data (JSON)\n"
        "- /test-alert - Send a test alert notification\n"
        "- /test-summary - Send a test daily summary\n"
        "\n"
        "Scheduled tasks:\n"
        f"- Hourly check ({config.hourly_cron}): Sends alert if AQI > {config.alert_threshold}\n"
        f"- Daily summary ({config.daily_summary_cron}): Sent once a day\n"
    )


async def _handle_with_error(operation: Callable[[], Awaitable[Response]]) -> Response:
    try:
        return await operation()
    except Exception as exc:  # noqa: BLE001 - every failure becomes a 500 body
        logger.warning("Manual request failed: %s", exc, extra={"reason": type(exc).__name__})
        return PlainTextResponse(
            f"Error: {exc}", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.get(
    "/check",
    response_model=ReadingPayload,
    summary="Fetch the current reading without notifying.",
)
async def check(dispatcher: Dispatcher = Depends(get_dispatcher)) -> Response:
    async def operation() -> Response:
        reading = await dispatcher.check()
        payload = ReadingPayload.from_reading(reading)
        return Response(
            content=payload.model_dump_json(by_alias=True, exclude_none=True),
            media_type="application/json",
        )

    return await _handle_with_error(operation)


@router.get(
    "/test-alert",
    response_class=PlainTextResponse,
    summary="Send an alert notification regardless of the threshold.",
)
async def test_alert(dispatcher: Dispatcher = Depends(get_dispatcher)) -> Response:
    async def operation() -> Response:
        reading = await dispatcher.send_alert()
        return PlainTextResponse(f"Alert sent! AQI: {reading.index}")

    return await _handle_with_error(operation)


@router.get(
    "/test-summary",
    response_class=PlainTextResponse,
    summary="Send the daily summary notification now.",
)
async def test_summary(dispatcher: Dispatcher = Depends(get_dispatcher)) -> Response:
    async def operation() -> Response:
        reading = await dispatcher.send_summary()
        return PlainTextResponse(f"Summary sent! AQI: {reading.index}")

    return await _handle_with_error(operation)


_ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/", methods=_ANY_METHOD, response_class=PlainTextResponse, include_in_schema=False)
@router.api_route(
    "/{path:path}", methods=_ANY_METHOD, response_class=PlainTextResponse, include_in_schema=False
)
async def usage() -> PlainTextResponse:
    return PlainTextResponse(usage_text(get_settings().monitor))
