"""Pydantic models for the merged departure board."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Departure(BaseModel):
    """
    One board entry, bus or rail. route is the AC Transit route name or the BART line color.
    No direction/predicted_time means nothing was predicted for the stop; error marks a stop
    whose predictions referenced trips the provider did not return.
    """

    model_config = ConfigDict(frozen=True)

    route: str
    stop_name: str
    direction: str | None = None
    predicted_time: datetime | None = None
    error: str | None = None


class DeparturesBoard(BaseModel):
    generated_at: datetime
    departures: list[Departure]
    lines: list[str]
