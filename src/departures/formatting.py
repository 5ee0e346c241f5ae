"""
Line formatting for the departure board.
All datetimes are naive local time; the providers report wall-clock times.
"""
from datetime import datetime

from src.departures.models import Departure


def minutes_until(predicted: datetime, now: datetime) -> int:
    # Truncate toward zero so a departure a few seconds in the past still reads 0m
    return int((predicted - now).total_seconds() / 60)


def format_clock(dt: datetime) -> str:
    """12-hour clock without a leading zero, e.g. 8:05 AM."""
    return dt.strftime("%I:%M %p").lstrip("0")


def format_departure(departure: Departure, now: datetime) -> str:
    if departure.error:
        return f"{departure.route}: {departure.stop_name} (error: {departure.error})"
    if departure.predicted_time is None:
        return f"{departure.route}: {departure.stop_name} (no prediction)"
    label = f"{departure.route} {departure.direction}" if departure.direction else departure.route
    return (
        f"{label}: {departure.stop_name} at {format_clock(departure.predicted_time)} "
        f"({minutes_until(departure.predicted_time, now)}m away)"
    )


def format_board(departures: list[Departure], now: datetime) -> list[str]:
    return [format_departure(d, now) for d in departures]
