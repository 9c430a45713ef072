"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import Number, Reading


class WeatherPayload(BaseModel):
    """Weather observations; absent fields are dropped from the response."""

    temperature: Optional[Number] = None
    humidity: Optional[Number] = None
    wind: Optional[Number] = None


class ReadingPayload(BaseModel):
    """Current reading as returned by ``/check``."""

    model_config = ConfigDict(populate_by_name=True)

    aqi: Number
    city: str
    dominant_pollutant: Optional[str] = Field(default=None, alias="dominantPollutant")
    pollutants: Dict[str, Number] = Field(default_factory=dict)
    weather: WeatherPayload = Field(default_factory=WeatherPayload)
    time: str

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingPayload":
        return cls(
            aqi=reading.index,
            city=reading.location_name,
            dominant_pollutant=reading.dominant_pollutant,
            pollutants={
                code: value for code, value in reading.pollutants.items() if value is not None
            },
            weather=WeatherPayload(
                temperature=reading.weather.temperature,
                humidity=reading.weather.humidity,
                wind=reading.weather.wind,
            ),
            time=reading.observed_at,
        )
