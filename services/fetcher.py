"""Client for the WAQI (aqicn.org) city feed."""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import httpx

from models.errors import (
    ApiStatusError,
    ConfigurationError,
    FetchError,
    InvalidIndexError,
    SchemaError,
)
from models.records import POLLUTANT_CODES, Number, Reading, Weather

logger = logging.getLogger(__name__)

AQICN_BASE_URL = "https://api.waqi.info"

_SUCCESS_STATUS = "ok"
_WEATHER_CODES = {"temperature": "t", "humidity": "h", "wind": "w"}


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _sample(iaqi: Mapping[str, Any], code: str) -> Optional[Number]:
    entry = iaqi.get(code)
    if not isinstance(entry, dict):
        return None
    value = entry.get("v")
    return value if _is_number(value) else None


def _parse_index(raw: Any) -> Number:
    if not _is_number(raw) or raw < 0:
        raise InvalidIndexError(f"Invalid AQI value received: {raw}")
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    return raw


def parse_feed(payload: Any) -> Reading:
    """Validate a decoded feed response and project it into a :class:`Reading`."""
    if not isinstance(payload, dict):
        raise SchemaError("Unexpected response payload from AQICN API")

    status = payload.get("status")
    if status != _SUCCESS_STATUS:
        detail = payload.get("data")
        message = f"AQICN API returned error status: {status}"
        if isinstance(detail, str) and detail:
            message = f"{message} ({detail})"
        raise ApiStatusError(message)

    data = payload.get("data")
    city = data.get("city") if isinstance(data, dict) else None
    city_name = city.get("name") if isinstance(city, dict) else None
    if not isinstance(city_name, str) or not city_name:
        raise SchemaError("Incomplete data structure in API response")

    time_info = data.get("time")
    observed_at = time_info.get("s") if isinstance(time_info, dict) else None
    if not isinstance(observed_at, str):
        raise SchemaError("Incomplete data structure in API response")

    index = _parse_index(data.get("aqi"))

    iaqi = data.get("iaqi")
    if not isinstance(iaqi, dict):
        iaqi = {}

    dominant = data.get("dominentpol")  # sic, provider spelling
    return Reading(
        index=index,
        location_name=city_name,
        dominant_pollutant=dominant if isinstance(dominant, str) and dominant else None,
        observed_at=observed_at,
        pollutants=MappingProxyType({code: _sample(iaqi, code) for code in POLLUTANT_CODES}),
        weather=Weather(
            **{field: _sample(iaqi, code) for field, code in _WEATHER_CODES.items()}
        ),
    )


class AqicnClient:
    """Single-shot fetcher for a location's current reading."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_token: str,
        base_url: str = AQICN_BASE_URL,
    ) -> None:
        self._http = http_client
        self._token = api_token
        self._base_url = base_url.rstrip("/")

    async def fetch_reading(self, location_key: str) -> Reading:
        if not self._token:
            raise ConfigurationError("AQICN_TOKEN is not configured")

        url = f"{self._base_url}/feed/{location_key}/"
        try:
            response = await self._http.get(url, params={"token": self._token})
        except httpx.HTTPError as exc:
            # The query string carries the token; keep it out of the message.
            raise FetchError(f"AQICN API request failed: {type(exc).__name__}") from None

        if not response.is_success:
            raise FetchError(
                f"AQICN API error: {response.status_code} {response.reason_phrase}"
            )

        try:
            payload: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise SchemaError("AQICN API returned a non-JSON body") from exc

        reading = parse_feed(payload)
        logger.debug(
            "Fetched reading",
            extra={"location": location_key, "aqi": reading.index},
        )
        return reading
