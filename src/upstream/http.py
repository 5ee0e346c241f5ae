"""
Shared httpx plumbing for the transit providers.
One client per run, fixed timeout, no retries. Credentials travel as query
parameters, so anything that logs a URL goes through redact_url first, and
httpx's own request log lines are redacted by SecretParamFilter.
"""
import logging
import re
from typing import Any

import httpx

from src.monitoring.metrics import record_upstream

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
SECRET_PARAMS = ("token", "key")
_SECRET_PARAM_RE = re.compile(r"([?&](?:%s)=)[^&\s\"']+" % "|".join(SECRET_PARAMS))


class UpstreamError(RuntimeError):
    """A transit provider could not be reached or returned unusable data."""


def redact_url(url: httpx.URL) -> str:
    for name in SECRET_PARAMS:
        if name in url.params:
            url = url.copy_set_param(name, "****")
    return str(url)


class SecretParamFilter(logging.Filter):
    """Mask token=/key= query values in records from third-party HTTP loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _SECRET_PARAM_RE.sub(r"\1****", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


# httpx logs every request URL at INFO ("HTTP Request: GET ...?token=...")
for _name in ("httpx", "httpcore"):
    logging.getLogger(_name).addFilter(SecretParamFilter())


def _log_request(request: httpx.Request) -> None:
    logger.debug("HTTP %s %s", request.method, redact_url(request.url))


def _record_response(response: httpx.Response) -> None:
    record_upstream(response.request.url.host, response.status_code)


def make_client(timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS, **kwargs: Any) -> httpx.Client:
    """Build the client reused for every provider call in a run. Extra kwargs go to httpx.Client."""
    return httpx.Client(
        timeout=httpx.Timeout(timeout_seconds),
        headers={"Accept": "application/json"},
        event_hooks={"request": [_log_request], "response": [_record_response]},
        **kwargs,
    )


def get_json(
    http: httpx.Client,
    url: str,
    *,
    params: dict[str, Any],
    provider: str,
    path: str,
    none_on_error_status: bool = False,
) -> Any:
    """
    GET url and decode the JSON body. Any transport error, non-2xx status or
    undecodable body becomes UpstreamError. With none_on_error_status, a
    non-200 status returns None instead (the endpoint's "no data" answer).
    `path` is used in messages instead of the full URL so credentials never
    end up in errors.
    """
    try:
        resp = http.get(url, params=params)
        if none_on_error_status and resp.status_code != 200:
            logger.warning(
                "telemetry upstream_no_data provider=%s path=%s status=%s",
                provider,
                path,
                resp.status_code,
            )
            return None
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPStatusError as e:
        raise UpstreamError(f"{provider} GET {path} returned HTTP {e.response.status_code}") from e
    except httpx.TimeoutException as e:
        raise UpstreamError(f"{provider} GET {path} timed out") from e
    except httpx.HTTPError as e:
        raise UpstreamError(f"{provider} GET {path} failed: {e.__class__.__name__}") from e
    except ValueError as e:
        raise UpstreamError(f"{provider} GET {path} returned invalid JSON") from e
