"""Convert provider forecast payloads into the CityWeather timeline."""

import os
from datetime import datetime, timezone, tzinfo
from typing import Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cityweather.logging_config import logger
from cityweather.models.city import City
from cityweather.models.forecast import CurrentBlock, ForecastResponse
from cityweather.models.weather import (
    CityWeather,
    CurrentWeather,
    DailyWeather,
    HourlyWeather,
)

HOURLY_LIMIT = 25
DEFAULT_VISIBILITY_M = 10000.0
DEFAULT_UV_INDEX = 0.0

# Current, hourly, sunrise and sunset values: local time, no offset.
HOUR_FORMAT = "%Y-%m-%dT%H:%M"
# Daily "time" values only.
DAY_FORMAT = "%Y-%m-%d"

LOCALTIME_PATH = "/etc/localtime"


def local_timezone() -> tzinfo:
    """Return the runtime's local zone with its DST rules.

    Reads ``TZ`` and then ``/etc/localtime``. When neither resolves, the
    current fixed UTC offset is used, which ignores later DST transitions.
    """
    tz_name = os.environ.get("TZ", "").lstrip(":")
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            pass
    try:
        with open(LOCALTIME_PATH, "rb") as fh:
            return ZoneInfo.from_file(fh, key="localtime")
    except (OSError, ValueError):
        return datetime.now().astimezone().tzinfo


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Return the zone used to read the city's local timestamps.

    A missing name means UTC. A name the tz database does not know falls
    back to the runtime's local zone.
    """
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("UNKNOWN_TIMEZONE", timezone=name)
        return local_timezone()


def _parse(value: Optional[str], fmt: str, zone: tzinfo) -> datetime:
    try:
        return datetime.strptime(value, fmt).replace(tzinfo=zone)
    except (TypeError, ValueError):
        logger.debug("TIMESTAMP_FALLBACK_TO_NOW", value=value, format=fmt)
        return datetime.now(timezone.utc)


def parse_hour(value: Optional[str], zone: tzinfo) -> datetime:
    """Parse a "2024-03-10T14:00" local timestamp, or return now."""
    return _parse(value, HOUR_FORMAT, zone)


def parse_day(value: Optional[str], zone: tzinfo) -> datetime:
    """Parse a "2024-03-10" date as local midnight, or return now."""
    return _parse(value, DAY_FORMAT, zone)


def _at(values: Optional[Sequence], index: int, default):
    if values is None or index >= len(values) or values[index] is None:
        return default
    return values[index]


def _or(value, default):
    return default if value is None else value


def map_forecast(city: City, payload: ForecastResponse) -> CityWeather:
    """Build a CityWeather for a city from a decoded forecast payload.

    Missing blocks and fields are replaced by defaults; this function does
    not raise for partial data.

    Args:
        city: City the forecast was requested for; its timezone drives
            every timestamp conversion.
        payload: Decoded forecast response.

    Returns:
        A new CityWeather with at most 25 hourly entries and one daily
        entry per provider day.
    """
    zone = resolve_timezone(city.timezone)
    hourly_block = payload.hourly
    daily_block = payload.daily

    uv_index = _at(
        daily_block.uv_index_max if daily_block is not None else None,
        0,
        DEFAULT_UV_INDEX,
    )
    visibility = _at(
        hourly_block.visibility if hourly_block is not None else None,
        0,
        DEFAULT_VISIBILITY_M,
    )

    now = payload.current or CurrentBlock()
    current = CurrentWeather(
        temperature=_or(now.temperature_2m, 0.0),
        apparent_temperature=_or(now.apparent_temperature, 0.0),
        weather_code=_or(now.weather_code, 0),
        is_day=now.is_day == 1,
        wind_speed=_or(now.wind_speed_10m, 0.0),
        humidity=_or(now.relative_humidity_2m, 0),
        time=parse_hour(now.time, zone),
        uv_index=uv_index,
        visibility=visibility,
    )

    hourly = []
    if hourly_block is not None:
        for i in range(min(len(hourly_block.time), HOURLY_LIMIT)):
            hourly.append(
                HourlyWeather(
                    time=parse_hour(hourly_block.time[i], zone),
                    temperature=_at(hourly_block.temperature_2m, i, 0.0),
                    weather_code=_at(hourly_block.weather_code, i, 0),
                    humidity=_at(hourly_block.relative_humidity_2m, i, 0),
                )
            )

    daily = []
    if daily_block is not None:
        for i, day in enumerate(daily_block.time):
            daily.append(
                DailyWeather(
                    date=parse_day(day, zone),
                    weather_code=_at(daily_block.weather_code, i, 0),
                    max_temp=_at(daily_block.temperature_2m_max, i, 0.0),
                    min_temp=_at(daily_block.temperature_2m_min, i, 0.0),
                    sunrise=parse_hour(_at(daily_block.sunrise, i, ""), zone),
                    sunset=parse_hour(_at(daily_block.sunset, i, ""), zone),
                    uv_index_max=_at(daily_block.uv_index_max, i, 0.0),
                )
            )

    return CityWeather(city=city, current=current, hourly=hourly, daily=daily)
