import asyncio

import httpx
import pytest

from cityweather.models.city import City
from cityweather.weather_service.client import OpenMeteoClient
from cityweather.weather_service.errors import (
    DecodingError,
    InvalidRequestError,
    NetworkError,
    ServerError,
)


def make_client(handler):
    return OpenMeteoClient(
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


def test_search_cities_sends_geocoding_params():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "results": [
                    {
                        "id": 2643743,
                        "name": "London",
                        "country": "United Kingdom",
                        "latitude": 51.50853,
                        "longitude": -0.12574,
                        "timezone": "Europe/London",
                    },
                    {
                        "id": 6058560,
                        "name": "London",
                        "latitude": 42.98339,
                        "longitude": -81.23304,
                    },
                ]
            },
        )

    cities = asyncio.run(make_client(handler).search_cities("London"))

    params = requests[0].url.params
    assert requests[0].url.host == "geocoding-api.open-meteo.com"
    assert params["name"] == "London"
    assert params["count"] == "10"
    assert params["language"] == "en"
    assert params["format"] == "json"
    assert cities == [
        City(
            id=2643743,
            name="London",
            country="United Kingdom",
            latitude=51.50853,
            longitude=-0.12574,
            timezone="Europe/London",
        ),
        City(
            id=6058560,
            name="London",
            country="Unknown",
            latitude=42.98339,
            longitude=-81.23304,
        ),
    ]


def test_search_cities_without_results_returns_empty_list():
    def handler(request):
        return httpx.Response(200, json={"generationtime_ms": 0.5})

    assert asyncio.run(make_client(handler).search_cities("Loooonnddonnn")) == []


def test_search_cities_rejects_blank_query():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(InvalidRequestError):
        asyncio.run(make_client(handler).search_cities("   "))


def test_fetch_forecast_sends_forecast_params():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "utc_offset_seconds": 3600,
                "current": {"time": "2024-01-01T00:00", "temperature_2m": 10.5},
            },
        )

    payload = asyncio.run(make_client(handler).fetch_forecast(52.52, 13.41))

    params = requests[0].url.params
    assert requests[0].url.host == "api.open-meteo.com"
    assert params["latitude"] == "52.52"
    assert params["longitude"] == "13.41"
    assert params["current"] == (
        "temperature_2m,weather_code,is_day,wind_speed_10m,"
        "relative_humidity_2m,apparent_temperature"
    )
    assert params["hourly"] == "temperature_2m,weather_code,relative_humidity_2m,visibility"
    assert params["daily"] == (
        "weather_code,temperature_2m_max,temperature_2m_min,sunrise,sunset,uv_index_max"
    )
    assert params["timezone"] == "auto"
    assert params["forecast_days"] == "7"
    assert payload.utc_offset_seconds == 3600
    assert payload.current.temperature_2m == 10.5
    assert payload.hourly is None


def test_bad_status_raises_server_error():
    def handler(request):
        return httpx.Response(503, text="unavailable")

    with pytest.raises(ServerError) as exc_info:
        asyncio.run(make_client(handler).fetch_forecast(52.52, 13.41))
    assert exc_info.value.status_code == 503
    assert str(exc_info.value) == "Server: Server Error"


def test_malformed_body_raises_decoding_error():
    def handler(request):
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(DecodingError) as exc_info:
        asyncio.run(make_client(handler).search_cities("Paris"))
    assert exc_info.value.cause is not None
    assert str(exc_info.value) == "Data processing failed."


def test_wrong_shape_raises_decoding_error():
    def handler(request):
        return httpx.Response(200, json={"hourly": {"time": "not-a-list"}})

    with pytest.raises(DecodingError):
        asyncio.run(make_client(handler).fetch_forecast(52.52, 13.41))


def test_transport_failure_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(make_client(handler).search_cities("Paris"))
    assert isinstance(exc_info.value.cause, httpx.ConnectError)
    assert str(exc_info.value) == "Network error: connection refused"


def test_server_error_status_code_is_optional():
    error = ServerError("Maintenance")
    assert error.status_code is None
    assert str(error) == "Server: Maintenance"
