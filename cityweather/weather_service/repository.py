"""Weather repository combining the provider client and the mapper."""

from typing import List, Optional

from cityweather.models.city import City
from cityweather.models.weather import CityWeather
from cityweather.weather_service.client import OpenMeteoClient
from cityweather.weather_service.mapper import map_forecast


class WeatherRepository:
    """City search and forecast loading for the controllers."""

    def __init__(self, client: Optional[OpenMeteoClient] = None):
        self.client = client or OpenMeteoClient()

    async def search_cities(self, query: str) -> List[City]:
        return await self.client.search_cities(query)

    async def get_weather(self, city: City) -> CityWeather:
        """Fetch the forecast for a city and map it to a CityWeather.

        Raises:
            WeatherServiceError: Any client failure, unchanged.
        """
        payload = await self.client.fetch_forecast(city.latitude, city.longitude)
        return map_forecast(city, payload)
