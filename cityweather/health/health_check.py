"""Health checks for the history store and the external weather API."""

from cityweather.logging_config import logger
from cityweather.models.health import HealthReport, ServiceStatus
from cityweather.redis_cache.cache import CityHistoryCache
from cityweather.weather_service.client import OpenMeteoClient
from cityweather.weather_service.errors import WeatherServiceError

PROBE_LATITUDE = 51.5
PROBE_LONGITUDE = 0.12


async def is_history_store_available(store: CityHistoryCache) -> ServiceStatus:
    """Check Redis connectivity.

    Returns:
        ServiceStatus.available when Redis responds, else not_available.
    """
    if await store.ping():
        logger.info("REDIS_CONNECTED")
        return ServiceStatus.available
    return ServiceStatus.not_available


async def is_weather_api_available(client: OpenMeteoClient) -> ServiceStatus:
    """Check the forecast endpoint with a fixed sample location."""
    try:
        await client.fetch_forecast(PROBE_LATITUDE, PROBE_LONGITUDE)
    except WeatherServiceError as exc:
        logger.error("WEATHER_API_UNAVAILABLE", error=str(exc))
        return ServiceStatus.not_available
    return ServiceStatus.available


async def check_health(
    client: OpenMeteoClient, store: CityHistoryCache
) -> HealthReport:
    """Report availability of both external dependencies."""
    return HealthReport(
        weather_api=await is_weather_api_available(client),
        history_store=await is_history_store_available(store),
    )
