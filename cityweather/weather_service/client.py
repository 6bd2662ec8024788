"""Open-Meteo geocoding and forecast client."""

import time
from typing import List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from cityweather.config import (
    FORECAST_DAYS,
    FORECAST_URL,
    GEOCODING_URL,
    HTTP_TIMEOUT_S,
    SEARCH_RESULT_COUNT,
)
from cityweather.logging_config import logger
from cityweather.metrics import PROVIDER_LATENCY, PROVIDER_REQUESTS
from cityweather.models.city import City
from cityweather.models.forecast import ForecastResponse, GeocodingResponse
from cityweather.weather_service.errors import (
    DecodingError,
    InvalidRequestError,
    NetworkError,
    ServerError,
)

CURRENT_FIELDS = (
    "temperature_2m",
    "weather_code",
    "is_day",
    "wind_speed_10m",
    "relative_humidity_2m",
    "apparent_temperature",
)
HOURLY_FIELDS = ("temperature_2m", "weather_code", "relative_humidity_2m", "visibility")
DAILY_FIELDS = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "sunrise",
    "sunset",
    "uv_index_max",
)

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class OpenMeteoClient:
    """Read-only client for the geocoding and forecast endpoints.

    Every call is a single attempt; retrying is left to the caller.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        geocoding_url: str = GEOCODING_URL,
        forecast_url: str = FORECAST_URL,
        timeout: float = HTTP_TIMEOUT_S,
    ):
        self.http_client = http_client or httpx.AsyncClient(
            timeout=timeout, headers={"Accept": "application/json"}
        )
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url

    async def _get(
        self, *, url: str, params: dict, endpoint: str, model: Type[PayloadT]
    ) -> PayloadT:
        """Send one GET and decode the body into ``model``.

        Args:
            url: Endpoint URL.
            params: Query parameters.
            endpoint: Short name used in logs and metrics.
            model: Payload model to validate the JSON body against.

        Returns:
            The decoded payload.

        Raises:
            InvalidRequestError: If the URL cannot be built.
            NetworkError: On transport failures.
            ServerError: On a non-2xx status.
            DecodingError: If the body is not the expected JSON shape.
        """
        try:
            request = self.http_client.build_request("GET", url, params=params)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            logger.error("PROVIDER_INVALID_REQUEST", endpoint=endpoint, error=str(exc))
            raise InvalidRequestError(str(exc)) from exc

        start = time.perf_counter()
        try:
            response = await self.http_client.send(request)
        except httpx.RequestError as exc:
            logger.error("PROVIDER_REQUEST_FAILED", endpoint=endpoint, error=str(exc))
            PROVIDER_REQUESTS.labels(endpoint=endpoint, outcome="network_error").inc()
            raise NetworkError(exc) from exc
        finally:
            PROVIDER_LATENCY.labels(endpoint=endpoint).observe(
                time.perf_counter() - start
            )

        logger.info(
            f"{endpoint.upper()}_RESPONSE", endpoint=endpoint, status=response.status_code
        )
        if not response.is_success:
            logger.error(
                f"{endpoint.upper()}_BAD_STATUS",
                endpoint=endpoint,
                status=response.status_code,
            )
            PROVIDER_REQUESTS.labels(endpoint=endpoint, outcome="server_error").inc()
            raise ServerError("Server Error", status_code=response.status_code)

        try:
            payload = model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.error(f"{endpoint.upper()}_BAD_PAYLOAD", endpoint=endpoint, error=str(exc))
            PROVIDER_REQUESTS.labels(endpoint=endpoint, outcome="decoding_error").inc()
            raise DecodingError(exc) from exc

        PROVIDER_REQUESTS.labels(endpoint=endpoint, outcome="ok").inc()
        return payload

    async def search_cities(self, query: str) -> List[City]:
        """Look up cities matching a free-text query.

        Args:
            query: Non-empty city name or fragment.

        Returns:
            Up to ten cities in provider order; a missing country becomes
            "Unknown".
        """
        if not query or not query.strip():
            raise InvalidRequestError("empty search query")
        response = await self._get(
            url=self.geocoding_url,
            params={
                "name": query,
                "count": SEARCH_RESULT_COUNT,
                "language": "en",
                "format": "json",
            },
            endpoint="city_search",
            model=GeocodingResponse,
        )
        return [
            City(
                id=location.id or 0,
                name=location.name,
                country=location.country or "Unknown",
                latitude=location.latitude,
                longitude=location.longitude,
                timezone=location.timezone,
            )
            for location in response.results or []
        ]

    async def fetch_forecast(self, latitude: float, longitude: float) -> ForecastResponse:
        """Fetch current, hourly and daily forecast data for a location.

        Args:
            latitude: Latitude in decimal degrees.
            longitude: Longitude in decimal degrees.

        Returns:
            The decoded forecast payload, timestamps in the location's zone.
        """
        return await self._get(
            url=self.forecast_url,
            params={
                "latitude": latitude,
                "longitude": longitude,
                "current": ",".join(CURRENT_FIELDS),
                "hourly": ",".join(HOURLY_FIELDS),
                "daily": ",".join(DAILY_FIELDS),
                "timezone": "auto",
                "forecast_days": FORECAST_DAYS,
            },
            endpoint="forecast",
            model=ForecastResponse,
        )

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.http_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
