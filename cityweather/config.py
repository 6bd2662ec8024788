"""Environment-driven settings for the weather pipeline."""

import os

GEOCODING_URL = os.getenv(
    "GEOCODING_URL", "https://geocoding-api.open-meteo.com/v1/search"
)
FORECAST_URL = os.getenv("FORECAST_URL", "https://api.open-meteo.com/v1/forecast")
HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "5"))
SEARCH_RESULT_COUNT = int(os.getenv("SEARCH_RESULT_COUNT", "10"))
FORECAST_DAYS = int(os.getenv("FORECAST_DAYS", "7"))

SEARCH_DEBOUNCE_S = int(os.getenv("SEARCH_DEBOUNCE_MS", "500")) / 1000
DETAIL_LOAD_DELAY_S = int(os.getenv("DETAIL_LOAD_DELAY_MS", "200")) / 1000

REDIS_HOST = os.getenv("REDIS_HOST", "redis")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
HISTORY_KEY_PREFIX = os.getenv("HISTORY_KEY_PREFIX", "cityweather")
REDIS_SOCKET_TIMEOUT_S = float(os.getenv("REDIS_SOCKET_TIMEOUT_S", "2"))
HISTORY_WRITE_TIMEOUT_S = float(os.getenv("HISTORY_WRITE_TIMEOUT_S", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
