"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

Number = Union[int, float]

# Codes reported under ``iaqi`` that are projected into a reading, in display order.
POLLUTANT_CODES = ("pm25", "pm10", "o3", "no2", "so2", "co")


@dataclass(frozen=True, slots=True)
class Weather:
    """Weather observations reported alongside the air-quality index."""

    temperature: Optional[Number] = None
    humidity: Optional[Number] = None
    wind: Optional[Number] = None

    @property
    def is_empty(self) -> bool:
        return self.temperature is None and self.humidity is None and self.wind is None


@dataclass(frozen=True, slots=True)
class Reading:
    """A validated snapshot of the provider feed for one location."""

    index: Number
    location_name: str
    dominant_pollutant: Optional[str]
    observed_at: str
    pollutants: Mapping[str, Optional[Number]] = field(default_factory=lambda: MappingProxyType({}))
    weather: Weather = field(default_factory=Weather)


@dataclass(frozen=True, slots=True)
class SeverityTier:
    """A severity bracket; ``upper_bound`` is inclusive."""

    upper_bound: float
    label: str
    indicator: str
    advisory: str
