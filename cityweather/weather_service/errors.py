"""Failure taxonomy for the weather provider client."""

from typing import Optional


class WeatherServiceError(Exception):
    """Base exception for weather service failures.

    ``str(exc)`` is the message shown to the user.
    """

    pass


class NetworkError(WeatherServiceError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, cause: Exception):
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class DecodingError(WeatherServiceError):
    """Raised when the response body does not match the expected shape."""

    def __init__(self, cause: Exception):
        super().__init__("Data processing failed.")
        self.cause = cause


class ServerError(WeatherServiceError):
    """Raised for non-2xx HTTP status codes."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(f"Server: {message}")
        self.status_code = status_code


class InvalidRequestError(WeatherServiceError):
    """Raised when a request URL cannot be built."""

    def __init__(self, detail: str = ""):
        super().__init__("Invalid Request")
        self.detail = detail
