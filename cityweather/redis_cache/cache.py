"""Redis-backed history of searched cities with their last known weather."""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from cityweather.config import (
    HISTORY_KEY_PREFIX,
    REDIS_DB,
    REDIS_HOST,
    REDIS_PORT,
    REDIS_SOCKET_TIMEOUT_S,
)
from cityweather.logging_config import logger
from cityweather.metrics import HISTORY_WRITES
from cityweather.models.city import City

redis_client = Redis(
    host=REDIS_HOST,
    port=REDIS_PORT,
    db=REDIS_DB,
    decode_responses=True,
    socket_timeout=REDIS_SOCKET_TIMEOUT_S,
    socket_connect_timeout=REDIS_SOCKET_TIMEOUT_S,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CachedCity(City):
    """Stored history record, one per composite key."""

    composite_id: str
    last_used_date: datetime

    @classmethod
    def from_city(cls, city: City, used_at: datetime) -> "CachedCity":
        return cls(
            **city.model_dump(),
            composite_id=city.composite_key,
            last_used_date=used_at,
        )

    def to_city(self) -> City:
        return City(**self.model_dump(exclude={"composite_id", "last_used_date"}))


class CityHistoryCache:
    """Recency-ordered city history.

    Records live under ``{prefix}:city:{lat}_{lon}`` as JSON; a sorted set
    ``{prefix}:recent`` scores each key by its last use timestamp.
    Redis failures are logged and never raised. Without an explicit client
    the module-level ``redis_client`` is used.
    """

    def __init__(
        self,
        client: Optional[Redis] = None,
        prefix: str = HISTORY_KEY_PREFIX,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.redis_client: Redis = client if client is not None else redis_client
        self.prefix = prefix
        self.clock = clock

    @property
    def recent_key(self) -> str:
        return f"{self.prefix}:recent"

    def record_key(self, key: str) -> str:
        return f"{self.prefix}:city:{key}"

    def _decode(self, raw: Optional[str]) -> Optional[CachedCity]:
        if not raw:
            return None
        try:
            return CachedCity.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("HISTORY_BAD_RECORD", error=str(exc))
            return None

    async def get(self, key: str) -> Optional[CachedCity]:
        """Get the stored record for a composite key.

        Args:
            key: Composite "{lat}_{lon}" key.

        Returns:
            The record if present and readable, otherwise None.
        """
        try:
            raw = await self.redis_client.get(self.record_key(key))
        except RedisError as exc:
            logger.error("REDIS_GET_CITY_FAILED", key=key, error=str(exc))
            return None
        return self._decode(raw)

    async def save(self, city: City) -> None:
        """Insert or refresh the history record for a city's location.

        An existing record gets a new ``last_used_date`` and takes the
        incoming ``last_known_*`` values only when they are set.

        Args:
            city: City to record; its coordinates identify the record.
        """
        key = city.composite_key
        now = self.clock()
        try:
            existing = self._decode(await self.redis_client.get(self.record_key(key)))
            if existing is None:
                record = CachedCity.from_city(city, now)
                outcome = "inserted"
            else:
                update = {"last_used_date": max(now, existing.last_used_date)}
                if city.last_known_temp is not None:
                    update["last_known_temp"] = city.last_known_temp
                if city.last_known_weather_code is not None:
                    update["last_known_weather_code"] = city.last_known_weather_code
                record = existing.model_copy(update=update)
                outcome = "updated"

            pipe = self.redis_client.pipeline()
            pipe.set(self.record_key(key), record.model_dump_json())
            pipe.zadd(self.recent_key, {key: record.last_used_date.timestamp()})
            await pipe.execute()
        except RedisError as exc:
            logger.error("REDIS_SAVE_CITY_FAILED", city=city.name, key=key, error=str(exc))
            HISTORY_WRITES.labels(outcome="failed").inc()
            return

        logger.info("HISTORY_CITY_SAVED", city=city.name, key=key, outcome=outcome)
        HISTORY_WRITES.labels(outcome=outcome).inc()

    async def load_recent(self) -> List[City]:
        """Return stored cities, most recently used first.

        Returns:
            Cities ordered by last use, descending; empty on Redis failure.
        """
        try:
            keys = await self.redis_client.zrevrange(self.recent_key, 0, -1)
            if not keys:
                return []
            raws = await self.redis_client.mget([self.record_key(key) for key in keys])
        except RedisError as exc:
            logger.error("REDIS_LOAD_RECENT_FAILED", error=str(exc))
            return []
        records = (self._decode(raw) for raw in raws)
        return [record.to_city() for record in records if record is not None]

    async def ping(self) -> bool:
        """Return True when Redis answers a PING."""
        try:
            return bool(await self.redis_client.ping())
        except RedisError as exc:
            logger.error("REDIS_UNAVAILABLE", error=str(exc))
            return False
