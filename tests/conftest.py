"""Pytest configuration and fixtures."""
import sys
from pathlib import Path

import httpx
import pytest

# Ensure project root is on path when running pytest from repo root or tests/
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from settings import Settings  # noqa: E402
from src.upstream.http import make_client  # noqa: E402

ACT_PREFIX = "/transit/stops"
ETD_PATH = "/api/etd.aspx"


class FakeUpstream:
    """
    Canned AC Transit / BART responses keyed by URL path (BART: path plus ?orig=).
    Unregistered paths answer 404. Every request is kept in `calls`.
    """

    def __init__(self):
        self.responses: dict[str, tuple[int, object]] = {}
        self.calls: list[httpx.Request] = []

    def _key(self, request: httpx.Request) -> str:
        if request.url.path == ETD_PATH:
            return f"{ETD_PATH}?orig={request.url.params.get('orig')}"
        return request.url.path

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        status, body = self.responses.get(self._key(request), (404, {"Message": "not found"}))
        return httpx.Response(status, json=body)

    def stops_near(self, route: str, radius_ft: int, stops: list[dict], lat=37.855, lon=-122.254, status=200):
        self.responses[f"{ACT_PREFIX}/{lat}/{lon}/{radius_ft}/true/{route}"] = (status, stops)

    def trips_today(self, stop_id: int, trips: list[dict], status=200):
        self.responses[f"{ACT_PREFIX}/{stop_id}/tripstoday"] = (status, trips)

    def predictions(self, stop_id: int, predictions: list[dict] | dict, status=200):
        self.responses[f"{ACT_PREFIX}/{stop_id}/predictions"] = (status, predictions)

    def etd(self, station: str, body: dict, status=200):
        self.responses[f"{ETD_PATH}?orig={station}"] = (status, body)

    def client(self) -> httpx.Client:
        return make_client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_upstream():
    return FakeUpstream()


@pytest.fixture
def http(fake_upstream):
    with fake_upstream.client() as client:
        yield client


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        actransit_token="act-secret",
        bart_api_key="bart-secret",
        bus_routes="51B:500",
        bart_stations="ROCK",
    )


def make_stop(stop_id: int, name: str) -> dict:
    return {"StopId": stop_id, "Name": name, "Latitude": 37.8549, "Longitude": -122.2531, "Order": None}


def make_trip(trip_id: int, direction: str, route_id: str = "51B") -> dict:
    return {
        "TripId": trip_id,
        "RouteId": route_id,
        "DirectionId": 1,
        "Direction": direction,
        "Headsign": "Berkeley Amtrak",
        "TripStartTime": "2024-01-01T07:40:00",
    }


def make_prediction(stop_id: int, trip_id: int, route_name: str, departure: str) -> dict:
    return {
        "StopId": stop_id,
        "TripId": trip_id,
        "VehicleId": 1402,
        "RouteName": route_name,
        "PredictedDelayInSeconds": 60,
        "PredictedDeparture": departure,
        "PredictionDateTime": "2024-01-01T07:58:12",
    }


def make_etd(station_name: str, abbr: str, etds: list[dict]) -> dict:
    return {
        "?xml": {"@version": "1.0", "@encoding": "utf-8"},
        "root": {
            "@id": "1",
            "uri": {"#cdata-section": "http://api.bart.gov/api/etd.aspx?cmd=etd&orig=" + abbr + "&json=y"},
            "date": "01/01/2024",
            "time": "08:00:00 AM PST",
            "station": [{"name": station_name, "abbr": abbr, "etd": etds}],
            "message": "",
        },
    }


def make_destination(destination: str, abbreviation: str, estimates: list[dict]) -> dict:
    return {"destination": destination, "abbreviation": abbreviation, "limited": "0", "estimate": estimates}


def make_estimate(minutes: str, color: str) -> dict:
    return {
        "minutes": minutes,
        "platform": "1",
        "direction": "South",
        "length": "8",
        "color": color,
        "hexcolor": "#ffff33",
        "bikeflag": "1",
        "delay": "0",
    }
