"""Internal weather timeline models and code mapping helpers."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from cityweather.models.city import City

WEATHER_CODE_MAP = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm (no hail)",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

# Coarse groups used to pick icons and backgrounds.
_CONDITION_RANGES = (
    ("clear", range(0, 1)),
    ("cloudy", range(1, 4)),
    ("fog", range(45, 49)),
    ("rain", range(51, 68)),
    ("rain", range(80, 83)),
    ("snow", range(71, 78)),
    ("snow", range(85, 87)),
    ("thunderstorm", range(95, 100)),
)


def describe_weather_code(code: int) -> str:
    """Return the WMO description for a weather code, or "Unknown"."""
    return WEATHER_CODE_MAP.get(code, "Unknown")


def weather_condition(code: int) -> str:
    """Map a weather code to its display group.

    Args:
        code: WMO weather code reported by the provider.

    Returns:
        One of clear, cloudy, fog, rain, snow, thunderstorm or unknown.
    """
    for condition, codes in _CONDITION_RANGES:
        if code in codes:
            return condition
    return "unknown"


class CurrentWeather(BaseModel):
    """Conditions at observation time, every field populated."""

    model_config = ConfigDict(frozen=True)

    temperature: float
    apparent_temperature: float
    weather_code: int
    is_day: bool
    wind_speed: float
    humidity: int
    time: datetime
    uv_index: float
    visibility: float

    @property
    def description(self) -> str:
        return describe_weather_code(self.weather_code)


class HourlyWeather(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: datetime
    temperature: float
    weather_code: int
    humidity: int


class DailyWeather(BaseModel):
    """One forecast day.

    ``date`` is local midnight of the day in the city's timezone.
    """

    model_config = ConfigDict(frozen=True)

    date: datetime
    weather_code: int
    max_temp: float
    min_temp: float
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    uv_index_max: float


class CityWeather(BaseModel):
    """Forecast aggregate built fresh for every fetch."""

    model_config = ConfigDict(frozen=True)

    city: City
    current: CurrentWeather
    hourly: List[HourlyWeather]
    daily: List[DailyWeather]
