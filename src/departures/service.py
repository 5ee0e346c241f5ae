"""
Departure board pipeline: AC Transit stops near the origin joined with their
trips and predictions, then BART ETDs for the configured stations.
Calls are made one at a time, in configured route/stop/station order.
"""
import logging
from datetime import datetime, timedelta

import httpx

from settings import Settings
from src.actransit.client import ACTransitClient
from src.actransit.models import Prediction, Stop, parse_predicted_departure
from src.bart.client import BartClient
from src.departures.models import Departure
from src.upstream.http import UpstreamError, make_client

logger = logging.getLogger(__name__)


def _predicted_time(stop: Stop, prediction: Prediction) -> datetime:
    try:
        return parse_predicted_departure(prediction.predicted_departure)
    except ValueError as e:
        raise UpstreamError(
            f"actransit prediction for trip {prediction.trip_id} at stop {stop.stop_id} "
            f"has malformed PredictedDeparture {prediction.predicted_departure!r}"
        ) from e


def _stop_departures(client: ACTransitClient, route: str, stop: Stop) -> list[Departure]:
    trips = client.get_trips_today(stop.stop_id)
    trips_by_id = {trip.trip_id: trip for trip in trips}
    predictions = client.get_predictions(stop.stop_id)
    if predictions is None:
        return [Departure(route=route, stop_name=stop.name)]

    departures: list[Departure] = []
    missing_trip_ids: list[int] = []
    for prediction in predictions:
        if prediction.route_name != route:
            continue
        trip = trips_by_id.get(prediction.trip_id)
        if trip is None:
            missing_trip_ids.append(prediction.trip_id)
            continue
        departures.append(
            Departure(
                route=route,
                stop_name=stop.name,
                direction=trip.direction,
                predicted_time=_predicted_time(stop, prediction),
            )
        )

    if missing_trip_ids:
        ids = ", ".join(str(t) for t in missing_trip_ids)
        logger.warning(
            "telemetry actransit_trip_missing stop_id=%s trip_ids=%s",
            stop.stop_id,
            ids,
        )
        departures.append(
            Departure(route=route, stop_name=stop.name, error=f"no trip info found for trip ID {ids}")
        )
    if not departures:
        departures.append(Departure(route=route, stop_name=stop.name))
    return departures


def fetch_bus_departures(
    client: ACTransitClient,
    routes: list[tuple[str, int]],
    lat: float,
    lon: float,
) -> list[Departure]:
    """
    For each (route, radius_ft): stops near (lat, lon), then one or more records per stop.
    Predictions for other routes serving the same stop are skipped.
    """
    departures: list[Departure] = []
    for route, radius_ft in routes:
        stops = client.get_stops_near(lat, lon, radius_ft, route)
        logger.info(
            "telemetry actransit_stops_fetched route=%s radius_ft=%s count=%s",
            route,
            radius_ft,
            len(stops),
        )
        for stop in stops:
            departures.extend(_stop_departures(client, route, stop))
    return departures


def fetch_rail_departures(client: BartClient, stations: list[str], now: datetime) -> list[Departure]:
    """Flatten station -> destination -> estimate; route is the line color."""
    departures: list[Departure] = []
    for abbr in stations:
        etd = client.get_estimated_departures(abbr)
        count = 0
        for station in etd.payload.station:
            for destination in station.etd:
                for estimate in destination.estimate:
                    departures.append(
                        Departure(
                            route=estimate.color,
                            stop_name=station.name,
                            direction=destination.destination,
                            predicted_time=now + timedelta(minutes=estimate.minutes),
                        )
                    )
                    count += 1
        logger.info("telemetry bart_etd_fetched station=%s count=%s", abbr, count)
    return departures


def collect_departures(
    settings: Settings,
    http: httpx.Client | None = None,
    now: datetime | None = None,
) -> list[Departure]:
    """
    Run the whole board: bus records first, then rail. Opens (and closes) one
    client with the configured timeout unless `http` is given.
    Raises UpstreamError if any provider call fails.
    """
    if now is None:
        now = datetime.now()
    if http is None:
        with make_client(settings.request_timeout_seconds) as client:
            return collect_departures(settings, http=client, now=now)

    bus = fetch_bus_departures(
        ACTransitClient(settings.actransit_token, http, base_url=settings.actransit_base_url),
        settings.bus_route_list,
        settings.origin_lat,
        settings.origin_lon,
    )
    rail = fetch_rail_departures(
        BartClient(settings.bart_api_key, http, base_url=settings.bart_base_url),
        settings.bart_station_list,
        now,
    )
    return bus + rail
