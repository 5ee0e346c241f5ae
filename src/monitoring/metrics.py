"""In-memory counters for the /metrics endpoint: our own requests and calls made to the transit providers."""
import time
from collections.abc import MutableMapping
from threading import Lock

_start_time = time.monotonic()
_counts: MutableMapping[str, int] = {}
_upstream: MutableMapping[str, dict[str, int]] = {}
_lock = Lock()


def _bucket(status_code: int) -> str:
    if 200 <= status_code < 300:
        return "2xx"
    if 400 <= status_code < 500:
        return "4xx"
    if status_code >= 500:
        return "5xx"
    return "other"


def record_request(status_code: int) -> None:
    bucket = _bucket(status_code)
    with _lock:
        _counts[bucket] = _counts.get(bucket, 0) + 1


def record_upstream(host: str, status_code: int) -> None:
    """Count one provider response by host and status bucket."""
    bucket = _bucket(status_code)
    with _lock:
        per_host = _upstream.setdefault(host, {})
        per_host[bucket] = per_host.get(bucket, 0) + 1


def reset_metrics() -> None:
    with _lock:
        _counts.clear()
        _upstream.clear()


def get_metrics() -> dict:
    with _lock:
        counts = dict(_counts)
        upstream = {host: dict(c) for host, c in _upstream.items()}
    uptime_seconds = time.monotonic() - _start_time
    return {
        "requests_total": sum(counts.values()),
        "requests_2xx": counts.get("2xx", 0),
        "requests_4xx": counts.get("4xx", 0),
        "requests_5xx": counts.get("5xx", 0),
        "upstream": upstream,
        "uptime_seconds": round(uptime_seconds, 1),
    }
