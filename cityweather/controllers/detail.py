"""Forecast loading for a single city."""

import asyncio
from typing import Optional

from cityweather.config import DETAIL_LOAD_DELAY_S, HISTORY_WRITE_TIMEOUT_S
from cityweather.logging_config import logger
from cityweather.models.city import City
from cityweather.models.weather import CityWeather
from cityweather.protocols import CityHistoryStore, ForecastFetch
from cityweather.weather_service.errors import WeatherServiceError


class DetailController:
    """Loads the forecast for one city and records it in the history."""

    def __init__(
        self,
        city: City,
        forecast: ForecastFetch,
        history: Optional[CityHistoryStore] = None,
        load_delay_s: float = DETAIL_LOAD_DELAY_S,
        history_timeout_s: float = HISTORY_WRITE_TIMEOUT_S,
    ):
        self.city = city
        self.forecast = forecast
        self.history = history
        self.load_delay_s = load_delay_s
        self.history_timeout_s = history_timeout_s

        self.weather: Optional[CityWeather] = None
        self.is_loading = False
        self.error_message: Optional[str] = None

    async def load_weather(self) -> None:
        """Fetch the forecast unless a load is already running.

        On success the weather is stored and the city is saved with its
        latest temperature and weather code. On failure the previous
        weather stays in place and ``error_message`` is set.
        """
        if self.is_loading:
            logger.debug("WEATHER_LOAD_IGNORED", city=self.city.name)
            return

        self.is_loading = True
        self.error_message = None
        logger.info("WEATHER_LOAD_STARTED", city=self.city.name)
        try:
            await asyncio.sleep(self.load_delay_s)
            weather = await self.forecast.get_weather(self.city)
        except WeatherServiceError as exc:
            logger.error("WEATHER_LOAD_FAILED", city=self.city.name, error=str(exc))
            self.error_message = str(exc)
        else:
            self.weather = weather
            logger.info(
                "WEATHER_LOAD_SUCCEEDED",
                city=self.city.name,
                temperature=weather.current.temperature,
            )
            await self._remember(weather)
        finally:
            self.is_loading = False

    async def _remember(self, weather: CityWeather) -> None:
        if self.history is None:
            return
        city = self.city.with_last_known(
            weather.current.temperature, weather.current.weather_code
        )
        try:
            await asyncio.wait_for(self.history.save(city), self.history_timeout_s)
        except asyncio.TimeoutError:
            logger.error(
                "HISTORY_SAVE_TIMEOUT", city=city.name, timeout_s=self.history_timeout_s
            )
