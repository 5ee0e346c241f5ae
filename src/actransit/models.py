"""Pydantic models for AC Transit API responses (PascalCase JSON)."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal

PREDICTED_DEPARTURE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def parse_predicted_departure(value: str) -> datetime:
    """Parse an AC Transit timestamp like 2024-01-01T08:05:00 as naive local time. Raises ValueError on anything else."""
    return datetime.strptime(value, PREDICTED_DEPARTURE_FORMAT)


class _ACTransitModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore")


class Stop(_ACTransitModel):
    stop_id: int
    name: str
    latitude: float
    longitude: float
    order: int | None = None
    scheduled_time: str | None = None


class Trip(_ACTransitModel):
    trip_id: int
    route_id: str
    direction: str
    direction_id: int | None = None
    headsign: str | None = None
    destination: str | None = None
    trip_start_time: str | None = None
    stop_id: int | None = None
    passing_time: str | None = None


class Prediction(_ACTransitModel):
    stop_id: int
    trip_id: int
    route_name: str
    # Raw wire value; parsed only for predictions on the route being queried
    predicted_departure: str
    vehicle_id: int | None = None
    predicted_delay_in_seconds: int | None = None
    prediction_date_time: str | None = None
