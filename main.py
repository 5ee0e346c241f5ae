import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from settings import get_settings
from src.departures.formatting import format_board
from src.departures.models import DeparturesBoard
from src.departures.service import collect_departures
from src.middleware import RequestLoggingMiddleware
from src.monitoring.metrics import get_metrics
from src.upstream.http import UpstreamError, make_client

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One client for the life of the process; each /departures request reuses it
    app.state.http = make_client(settings.request_timeout_seconds)
    try:
        yield
    finally:
        app.state.http.close()
        app.state.http = None


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    """Return consistent JSON error for unhandled exceptions (500). Skip validation/HTTP errors."""
    from fastapi.exceptions import RequestValidationError
    if isinstance(exc, (HTTPException, RequestValidationError)):
        raise exc
    logger.exception("telemetry unhandled_exception path=%s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again later."},
    )


app.add_middleware(RequestLoggingMiddleware)


@app.get("/favicon.ico", include_in_schema=False)
def favicon(request: Request):
    """Return 204 so browser favicon requests don't log 404."""
    return Response(status_code=204)


@app.get("/health")
def health(request: Request):
    logger.info("telemetry route=health")
    return {"status": "ok"}


@app.get("/metrics")
def metrics(request: Request):
    """Request counts, provider response counts by host, uptime."""
    return get_metrics()


@app.get("/departures", response_model=DeparturesBoard)
@limiter.limit(settings.departures_rate_limit)
def departures(request: Request):
    """
    Run the bus + rail pipeline once and return both the records and the
    formatted board lines. Every call hits the providers; nothing is cached.
    """
    missing = settings.missing_credentials()
    if missing:
        raise HTTPException(
            status_code=503,
            detail=f"Transit API credentials not configured. Set {', '.join(missing)} in the environment.",
        )
    now = datetime.now()
    try:
        items = collect_departures(settings, http=getattr(request.app.state, "http", None), now=now)
    except UpstreamError as e:
        logger.warning("telemetry departures_route_error error=%s", str(e))
        raise HTTPException(status_code=502, detail=str(e)) from e
    logger.info("telemetry route=departures count=%s", len(items))
    return DeparturesBoard(generated_at=now, departures=items, lines=format_board(items, now))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
