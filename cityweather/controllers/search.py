"""Debounced, cancellable city search."""

import asyncio
from enum import Enum
from typing import List, Optional

from cityweather.config import HISTORY_WRITE_TIMEOUT_S, SEARCH_DEBOUNCE_S
from cityweather.logging_config import logger
from cityweather.models.city import City
from cityweather.protocols import CityHistoryStore, CityLookup
from cityweather.weather_service.errors import WeatherServiceError


class SearchState(str, Enum):
    """Lifecycle of the current query."""

    idle = "idle"
    pending = "pending"
    searching = "searching"
    settled = "settled"


class SearchController:
    """Owns the live query and the search results derived from it.

    Each query change bumps a generation counter and cancels the pending
    debounce or in-flight request. Results are only committed when their
    generation is still current, so a superseded search never overwrites
    state for a newer query.

    ``set_query`` schedules work on the running event loop and must be
    called from inside it. Call ``load_history`` once to fill
    ``recent_cities``.
    """

    def __init__(
        self,
        lookup: CityLookup,
        history: Optional[CityHistoryStore] = None,
        debounce_s: float = SEARCH_DEBOUNCE_S,
        history_timeout_s: float = HISTORY_WRITE_TIMEOUT_S,
    ):
        self.lookup = lookup
        self.history = history
        self.debounce_s = debounce_s
        self.history_timeout_s = history_timeout_s

        self.query = ""
        self.state = SearchState.idle
        self.results: List[City] = []
        self.recent_cities: List[City] = []
        self.is_loading = False
        self.error_message: Optional[str] = None

        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    def set_query(self, query: str) -> None:
        """Replace the query, restarting the debounce for non-empty input.

        Args:
            query: New query text. Blank input clears the results at once.
        """
        self.query = query
        self._generation += 1
        self._cancel_task()

        if not query.strip():
            self.results = []
            self.error_message = None
            self.state = SearchState.idle
            return

        self.state = SearchState.pending
        self._task = asyncio.get_running_loop().create_task(
            self._debounced_search(self._generation, query)
        )

    def cancel(self) -> None:
        """Abandon the pending or in-flight search for the current query.

        Results already shown are kept; the controller ends up ``settled``,
        or ``idle`` when the query is blank.
        """
        self._generation += 1
        self._cancel_task()
        self.state = SearchState.settled if self.query.strip() else SearchState.idle

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self.is_loading = False

    async def wait(self) -> None:
        """Wait until the current search task, if any, has finished."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    async def _debounced_search(self, generation: int, query: str) -> None:
        try:
            await asyncio.sleep(self.debounce_s)
            await self._search(generation, query)
        except asyncio.CancelledError:
            logger.debug("CITY_SEARCH_CANCELLED", query=query)
            raise

    async def _search(self, generation: int, query: str) -> None:
        self.state = SearchState.searching
        self.is_loading = True
        self.error_message = None
        logger.info("CITY_SEARCH_ISSUED", query=query)
        try:
            results = await self.lookup.search_cities(query)
        except WeatherServiceError as exc:
            logger.error("CITY_SEARCH_FAILED", query=query, error=str(exc))
            self._complete(generation, error=str(exc))
        else:
            self._complete(generation, results=results)

    def _complete(
        self,
        generation: int,
        results: Optional[List[City]] = None,
        error: Optional[str] = None,
    ) -> None:
        if generation != self._generation:
            logger.debug("CITY_SEARCH_STALE_RESULT", generation=generation)
            return
        if error is None:
            self.results = results
        self.error_message = error
        self.is_loading = False
        self.state = SearchState.settled

    async def load_history(self) -> None:
        """Refresh ``recent_cities`` from the history store."""
        if self.history is None:
            return
        try:
            self.recent_cities = await asyncio.wait_for(
                self.history.load_recent(), self.history_timeout_s
            )
        except asyncio.TimeoutError:
            logger.error("HISTORY_LOAD_TIMEOUT", timeout_s=self.history_timeout_s)

    async def select_city(self, city: City) -> None:
        """Record a chosen city in the history and refresh the recent list."""
        if self.history is None:
            return
        try:
            await asyncio.wait_for(self.history.save(city), self.history_timeout_s)
        except asyncio.TimeoutError:
            logger.error(
                "HISTORY_SAVE_TIMEOUT", city=city.name, timeout_s=self.history_timeout_s
            )
        await self.load_history()
