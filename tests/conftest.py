from __future__ import annotations

import copy
from typing import Any, Dict, Iterator

import pytest

from settings import get_settings

_FEED: Dict[str, Any] = {
    "status": "ok",
    "data": {
        "aqi": 152,
        "idx": 1603,
        "city": {"name": "Bangkok", "geo": [13.75, 100.5], "url": "https://aqicn.org/city/bangkok"},
        "dominentpol": "pm25",
        "iaqi": {
            "pm25": {"v": 152},
            "pm10": {"v": 61},
            "o3": {"v": 12.5},
            "no2": {"v": 9},
            "t": {"v": 31.0},
            "h": {"v": 70},
            "w": {"v": 2.5},
            "p": {"v": 1008},
        },
        "time": {"s": "2024-03-01 08:00:00", "tz": "+07:00", "iso": "2024-03-01T08:00:00+07:00"},
    },
}


@pytest.fixture
def feed_payload() -> Dict[str, Any]:
    """A successful provider response; tests mutate their own copy."""
    return copy.deepcopy(_FEED)


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
