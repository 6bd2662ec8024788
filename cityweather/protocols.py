"""Capability interfaces the controllers depend on."""

from typing import List, Protocol

from cityweather.models.city import City
from cityweather.models.weather import CityWeather


class CityLookup(Protocol):
    async def search_cities(self, query: str) -> List[City]: ...


class ForecastFetch(Protocol):
    async def get_weather(self, city: City) -> CityWeather: ...


class CityHistoryStore(Protocol):
    async def load_recent(self) -> List[City]: ...

    async def save(self, city: City) -> None: ...
