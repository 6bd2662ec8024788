from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from cityweather.models.city import City
from cityweather.models.forecast import ForecastResponse
from cityweather.weather_service import mapper
from cityweather.weather_service.mapper import (
    local_timezone,
    map_forecast,
    parse_day,
    parse_hour,
)

NEW_YORK = City(
    id=5128581,
    name="New York",
    country="United States",
    latitude=40.71427,
    longitude=-74.00597,
    timezone="America/New_York",
)


@pytest.fixture
def payload():
    return {
        "utc_offset_seconds": -18000,
        "timezone": "America/New_York",
        "current": {
            "time": "2024-03-10T14:00",
            "temperature_2m": 8.4,
            "weather_code": 3,
            "is_day": 1,
            "wind_speed_10m": 14.2,
            "relative_humidity_2m": 61,
            "apparent_temperature": 5.1,
        },
        "hourly": {
            "time": ["2024-03-10T00:00", "2024-03-10T01:00"],
            "temperature_2m": [4.0, 3.6],
            "weather_code": [2, 3],
            "relative_humidity_2m": [80, 82],
            "visibility": [24140.0, 20000.0],
        },
        "daily": {
            "time": ["2024-03-10", "2024-03-11"],
            "weather_code": [3, 61],
            "temperature_2m_max": [10.2, 12.0],
            "temperature_2m_min": [1.4, 5.3],
            "sunrise": ["2024-03-10T07:16", "2024-03-11T07:14"],
            "sunset": ["2024-03-10T19:05", "2024-03-11T19:06"],
            "uv_index_max": [3.9, 2.1],
        },
    }


def test_map_current(payload):
    weather = map_forecast(NEW_YORK, ForecastResponse.model_validate(payload))
    current = weather.current
    assert weather.city == NEW_YORK
    assert current.temperature == 8.4
    assert current.apparent_temperature == 5.1
    assert current.weather_code == 3
    assert current.is_day is True
    assert current.wind_speed == 14.2
    assert current.humidity == 61
    assert current.time == datetime(2024, 3, 10, 14, 0, tzinfo=ZoneInfo("America/New_York"))
    assert current.uv_index == 3.9
    assert current.visibility == 24140.0
    assert current.description == "Overcast"


def test_daily_date_stays_on_local_day(payload):
    weather = map_forecast(NEW_YORK, ForecastResponse.model_validate(payload))
    first = weather.daily[0].date
    assert first.astimezone(ZoneInfo("America/New_York")).date() == date(2024, 3, 10)
    assert first.astimezone(timezone.utc) == datetime(2024, 3, 10, 5, 0, tzinfo=timezone.utc)
    assert weather.daily[1].date.astimezone(ZoneInfo("America/New_York")).date() == date(
        2024, 3, 11
    )


def test_daily_fields(payload):
    weather = map_forecast(NEW_YORK, ForecastResponse.model_validate(payload))
    assert len(weather.daily) == 2
    day = weather.daily[1]
    assert day.weather_code == 61
    assert day.max_temp == 12.0
    assert day.min_temp == 5.3
    assert day.uv_index_max == 2.1
    assert day.sunrise == datetime(2024, 3, 11, 7, 14, tzinfo=ZoneInfo("America/New_York"))
    assert day.sunset == datetime(2024, 3, 11, 19, 6, tzinfo=ZoneInfo("America/New_York"))


def test_hourly_clamped_to_first_25_entries(payload):
    start = datetime(2024, 3, 10)
    payload["hourly"] = {
        "time": [(start + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M") for i in range(40)],
        "temperature_2m": [float(i) for i in range(40)],
        "weather_code": [0] * 40,
        "relative_humidity_2m": [50] * 40,
    }
    weather = map_forecast(NEW_YORK, ForecastResponse.model_validate(payload))
    assert len(weather.hourly) == 25
    assert [hour.temperature for hour in weather.hourly] == [float(i) for i in range(25)]
    assert weather.hourly[24].time.hour == 0
    assert weather.hourly[24].time.day == 11


def test_missing_current_uses_defaults(payload):
    payload["current"] = None
    weather = map_forecast(NEW_YORK, ForecastResponse.model_validate(payload))
    current = weather.current
    assert current.temperature == 0
    assert current.apparent_temperature == 0
    assert current.weather_code == 0
    assert current.is_day is False
    assert current.wind_speed == 0
    assert current.humidity == 0
    assert current.uv_index == 3.9
    assert current.visibility == 24140.0


def test_empty_payload_uses_defaults():
    weather = map_forecast(NEW_YORK, ForecastResponse.model_validate({"utc_offset_seconds": 0}))
    assert weather.current.uv_index == 0.0
    assert weather.current.visibility == 10000.0
    assert weather.hourly == []
    assert weather.daily == []


def test_missing_sunrise_and_sunset_fall_back_to_now(payload):
    del payload["daily"]["sunrise"]
    payload["daily"]["sunset"] = ["2024-03-10T19:05", None]
    before = datetime.now(timezone.utc)
    weather = map_forecast(NEW_YORK, ForecastResponse.model_validate(payload))
    after = datetime.now(timezone.utc)
    assert len(weather.daily) == 2
    assert before <= weather.daily[0].sunrise <= after
    assert weather.daily[0].sunset == datetime(
        2024, 3, 10, 19, 5, tzinfo=ZoneInfo("America/New_York")
    )
    assert before <= weather.daily[1].sunset <= after


def test_short_parallel_arrays_are_padded_with_defaults(payload):
    payload["hourly"]["temperature_2m"] = [4.0]
    payload["daily"]["uv_index_max"] = None
    weather = map_forecast(NEW_YORK, ForecastResponse.model_validate(payload))
    assert weather.hourly[1].temperature == 0.0
    assert weather.daily[1].uv_index_max == 0.0
    assert weather.current.uv_index == 0.0


def test_city_without_timezone_uses_utc(payload):
    city = NEW_YORK.model_copy(update={"timezone": None})
    weather = map_forecast(city, ForecastResponse.model_validate(payload))
    assert weather.current.time == datetime(2024, 3, 10, 14, 0, tzinfo=timezone.utc)


def test_unknown_timezone_does_not_raise(payload):
    city = NEW_YORK.model_copy(update={"timezone": "Mars/Olympus_Mons"})
    weather = map_forecast(city, ForecastResponse.model_validate(payload))
    assert weather.current.time.tzinfo is not None
    assert weather.current.time.hour == 14


def test_parsers_reject_the_other_format():
    zone = ZoneInfo("Asia/Tokyo")
    assert parse_day("2024-03-10", zone) == datetime(2024, 3, 10, tzinfo=zone)
    assert parse_hour("2024-03-10T09:30", zone) == datetime(2024, 3, 10, 9, 30, tzinfo=zone)
    before = datetime.now(timezone.utc)
    assert parse_hour("2024-03-10", zone) >= before
    assert parse_day("", zone) >= before


def test_unknown_timezone_uses_local_zone_with_dst(payload, monkeypatch):
    monkeypatch.setenv("TZ", "America/Chicago")
    payload["hourly"]["time"] = ["2024-03-10T01:00", "2024-03-10T03:00"]
    city = NEW_YORK.model_copy(update={"timezone": "Mars/Olympus_Mons"})
    weather = map_forecast(city, ForecastResponse.model_validate(payload))
    assert weather.hourly[0].time.utcoffset() == timedelta(hours=-6)
    assert weather.hourly[1].time.utcoffset() == timedelta(hours=-5)


def test_local_timezone_without_tz_database_uses_current_offset(monkeypatch, tmp_path):
    monkeypatch.delenv("TZ", raising=False)
    monkeypatch.setattr(mapper, "LOCALTIME_PATH", str(tmp_path / "missing"))
    zone = local_timezone()
    assert zone.utcoffset(None) == datetime.now().astimezone().utcoffset()
