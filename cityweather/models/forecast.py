"""Payload models matching the Open-Meteo geocoding and forecast responses.

Every field the mapper can default is optional here so that a partial
payload still decodes; only a body of the wrong shape is rejected.
"""

from typing import List, Optional

from pydantic import BaseModel


class GeoLocation(BaseModel):
    """One geocoding search result."""

    id: Optional[int] = None
    name: str
    country: Optional[str] = None
    latitude: float
    longitude: float
    timezone: Optional[str] = None


class GeocodingResponse(BaseModel):
    results: Optional[List[GeoLocation]] = None


class CurrentBlock(BaseModel):
    time: Optional[str] = None
    temperature_2m: Optional[float] = None
    weather_code: Optional[int] = None
    is_day: Optional[int] = None
    wind_speed_10m: Optional[float] = None
    relative_humidity_2m: Optional[int] = None
    apparent_temperature: Optional[float] = None


class HourlyBlock(BaseModel):
    """Parallel arrays, one element per forecast hour."""

    time: List[str] = []
    temperature_2m: List[Optional[float]] = []
    weather_code: List[Optional[int]] = []
    relative_humidity_2m: List[Optional[int]] = []
    visibility: Optional[List[Optional[float]]] = None


class DailyBlock(BaseModel):
    """Parallel arrays, one element per forecast day."""

    time: List[str] = []
    weather_code: List[Optional[int]] = []
    temperature_2m_max: List[Optional[float]] = []
    temperature_2m_min: List[Optional[float]] = []
    sunrise: Optional[List[Optional[str]]] = None
    sunset: Optional[List[Optional[str]]] = None
    uv_index_max: Optional[List[Optional[float]]] = None


class ForecastResponse(BaseModel):
    """Decoded forecast request body."""

    utc_offset_seconds: int = 0
    timezone: Optional[str] = None
    current: Optional[CurrentBlock] = None
    hourly: Optional[HourlyBlock] = None
    daily: Optional[DailyBlock] = None
