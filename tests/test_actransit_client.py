"""Tests for the AC Transit client: URLs, decoding, no-data predictions and failures."""
import httpx
import pytest

from conftest import make_prediction, make_stop, make_trip
from src.actransit.client import ACTransitClient
from src.upstream.http import UpstreamError


@pytest.fixture
def act(http):
    return ACTransitClient("act-secret", http)


def test_get_stops_near_builds_url_and_decodes(fake_upstream, act):
    fake_upstream.stops_near("51B", 500, [make_stop(55555, "College Av & Alcatraz Av")])
    stops = act.get_stops_near(37.855, -122.254, 500, "51B")
    assert len(stops) == 1
    assert stops[0].stop_id == 55555
    assert stops[0].name == "College Av & Alcatraz Av"
    request = fake_upstream.calls[0]
    assert request.url.host == "api.actransit.org"
    assert request.url.path == "/transit/stops/37.855/-122.254/500/true/51B"
    assert request.url.params["token"] == "act-secret"


def test_get_trips_today(fake_upstream, act):
    fake_upstream.trips_today(55555, [make_trip(1, "Northbound"), make_trip(2, "Southbound")])
    trips = act.get_trips_today(55555)
    assert [(t.trip_id, t.direction) for t in trips] == [(1, "Northbound"), (2, "Southbound")]


def test_get_predictions_keeps_raw_departure(fake_upstream, act):
    fake_upstream.predictions(55555, [make_prediction(55555, 1, "51B", "2024-01-01T08:05:00")])
    predictions = act.get_predictions(55555)
    assert predictions is not None
    assert predictions[0].route_name == "51B"
    assert predictions[0].predicted_departure == "2024-01-01T08:05:00"


def test_get_predictions_non_200_is_no_data(fake_upstream, act):
    fake_upstream.predictions(55555, {"Message": "No predictions"}, status=404)
    assert act.get_predictions(55555) is None


def test_get_predictions_leaves_timestamp_unparsed(fake_upstream, act):
    # Timestamps are only parsed for predictions on the queried route
    fake_upstream.predictions(55555, [make_prediction(55555, 1, "6", "tomorrow-ish")])
    assert act.get_predictions(55555)[0].predicted_departure == "tomorrow-ish"


def test_get_predictions_timeout_reported_like_other_calls():
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with httpx.Client(transport=httpx.MockTransport(slow)) as http:
        act = ACTransitClient("act-secret", http)
        with pytest.raises(UpstreamError, match="timed out") as exc:
            act.get_predictions(55555)
    assert str(exc.value) == "actransit GET /stops/55555/predictions timed out"


def test_get_predictions_unexpected_shape(fake_upstream, act):
    fake_upstream.responses["/transit/stops/55555/predictions"] = (200, "not-a-list")
    with pytest.raises(UpstreamError):
        act.get_predictions(55555)


def test_stops_error_status_raises_without_leaking_token(fake_upstream, act):
    fake_upstream.stops_near("51B", 500, {"Message": "Invalid token"}, status=401)
    with pytest.raises(UpstreamError) as exc:
        act.get_stops_near(37.855, -122.254, 500, "51B")
    assert "401" in str(exc.value)
    assert "act-secret" not in str(exc.value)


def test_unexpected_shape_raises(fake_upstream, act):
    fake_upstream.trips_today(55555, {"not": "a list"})
    with pytest.raises(UpstreamError):
        act.get_trips_today(55555)


def test_transport_error_raises():
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    with httpx.Client(transport=httpx.MockTransport(boom)) as http:
        act = ACTransitClient("act-secret", http)
        with pytest.raises(UpstreamError):
            act.get_trips_today(1)
        with pytest.raises(UpstreamError):
            act.get_predictions(1)
