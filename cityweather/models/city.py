"""City model shared by search results, forecasts and the history store."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


def composite_key(latitude: float, longitude: float) -> str:
    """Build the stable location key used to deduplicate cities.

    Args:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.

    Returns:
        A "{lat}_{lon}" string such as "51.50853_-0.12574".
    """
    return f"{latitude}_{longitude}"


class City(BaseModel):
    """City information returned by the geocoding API.

    Only the two ``last_known_*`` fields change over a city's life; they are
    replaced through :meth:`with_last_known` rather than mutated.
    """

    model_config = ConfigDict(frozen=True)

    id: int = 0
    name: str
    country: str = "Unknown"
    latitude: float
    longitude: float
    timezone: Optional[str] = None
    last_known_temp: Optional[float] = None
    last_known_weather_code: Optional[int] = None

    @property
    def composite_key(self) -> str:
        return composite_key(self.latitude, self.longitude)

    def with_last_known(self, temperature: float, weather_code: int) -> "City":
        """Return a copy annotated with the latest observed weather."""
        return self.model_copy(
            update={
                "last_known_temp": temperature,
                "last_known_weather_code": weather_code,
            }
        )
