"""Health report models."""

from enum import Enum

from pydantic import BaseModel


class ServiceStatus(str, Enum):
    """Availability status for dependencies."""

    available = "available"
    not_available = "not_available"


class HealthReport(BaseModel):
    """Dependency status values for the pipeline."""

    weather_api: ServiceStatus
    history_store: ServiceStatus
