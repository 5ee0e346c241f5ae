"""BART legacy API client: real-time estimated departures per station."""
import httpx
from pydantic import ValidationError

from src.bart.models import EtdResponse
from src.upstream.http import UpstreamError, get_json

BART_BASE = "https://api.bart.gov"
PROVIDER = "bart"
ETD_PATH = "/api/etd.aspx"


class BartClient:
    def __init__(self, key: str, http: httpx.Client, base_url: str = BART_BASE):
        self._key = key
        self._http = http
        self._base = base_url.rstrip("/")

    def get_estimated_departures(self, station: str) -> EtdResponse:
        """ETDs for one origin station abbreviation (e.g. ROCK)."""
        params = {"cmd": "etd", "orig": station, "key": self._key, "json": "y"}
        data = get_json(
            self._http,
            f"{self._base}{ETD_PATH}",
            params=params,
            provider=PROVIDER,
            path=f"{ETD_PATH}?cmd=etd&orig={station}",
        )
        try:
            return EtdResponse.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(
                f"{PROVIDER} etd for {station} returned unexpected data ({e.error_count()} errors)"
            ) from e
