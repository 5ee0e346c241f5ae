"""
AC Transit REST API client: nearby stops, today's trips and real-time predictions.
Every call goes through the caller's shared httpx.Client.
"""
import httpx
from pydantic import TypeAdapter, ValidationError

from src.actransit.models import Prediction, Stop, Trip
from src.upstream.http import UpstreamError, get_json

ACTRANSIT_BASE = "https://api.actransit.org/transit"
PROVIDER = "actransit"

_stops_adapter = TypeAdapter(list[Stop])
_trips_adapter = TypeAdapter(list[Trip])
_predictions_adapter = TypeAdapter(list[Prediction])


class ACTransitClient:
    def __init__(self, token: str, http: httpx.Client, base_url: str = ACTRANSIT_BASE):
        self._token = token
        self._http = http
        self._base = base_url.rstrip("/")

    def _get(self, path: str, adapter: TypeAdapter, none_on_error_status: bool = False):
        data = get_json(
            self._http,
            f"{self._base}{path}",
            params={"token": self._token},
            provider=PROVIDER,
            path=path,
            none_on_error_status=none_on_error_status,
        )
        if data is None and none_on_error_status:
            return None
        return _validate(adapter, data, path)

    def get_stops_near(self, lat: float, lon: float, radius_ft: int, route: str) -> list[Stop]:
        """Stops served by `route` within radius_ft feet of (lat, lon)."""
        return self._get(f"/stops/{lat}/{lon}/{radius_ft}/true/{route}", _stops_adapter)

    def get_trips_today(self, stop_id: int) -> list[Trip]:
        return self._get(f"/stops/{stop_id}/tripstoday", _trips_adapter)

    def get_predictions(self, stop_id: int) -> list[Prediction] | None:
        """
        Real-time predictions for a stop, or None when the API answers with a
        non-200 status (it returns 404 when nothing is predicted).
        """
        return self._get(f"/stops/{stop_id}/predictions", _predictions_adapter, none_on_error_status=True)


def _validate(adapter: TypeAdapter, data, path: str):
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise UpstreamError(
            f"{PROVIDER} GET {path} returned unexpected data ({e.error_count()} errors)"
        ) from e
