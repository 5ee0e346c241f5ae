from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_bus_routes(value: str) -> list[tuple[str, int]]:
    """Parse "51B:500,27:750" into [("51B", 500), ("27", 750)]. Radius is in feet."""
    routes: list[tuple[str, int]] = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        route, sep, radius = item.partition(":")
        route = route.strip()
        if not sep or not route:
            raise ValueError(f"bus route {item!r} must look like ROUTE:RADIUS")
        try:
            radius_ft = int(radius)
        except ValueError:
            raise ValueError(f"bus route {item!r} has a non-integer radius") from None
        if radius_ft <= 0:
            raise ValueError(f"bus route {item!r} must have a positive radius")
        routes.append((route, radius_ft))
    return routes


def parse_stations(value: str) -> list[str]:
    return [s.strip().upper() for s in value.split(",") if s.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "East Bay Departures"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    actransit_token: str = ""  # AC Transit API token (get at api.actransit.org)
    bart_api_key: str = ""  # BART legacy API key (get at api.bart.gov)
    actransit_base_url: str = "https://api.actransit.org/transit"
    bart_base_url: str = "https://api.bart.gov"

    # Point the board is built around (Rockridge, Oakland by default)
    origin_lat: float = 37.855
    origin_lon: float = -122.254
    # Comma-separated ROUTE:RADIUS_FEET pairs, queried in order
    bus_routes: str = "51B:500,27:750,E:1500"
    # Comma-separated BART station abbreviations, queried in order
    bart_stations: str = "ROCK"

    request_timeout_seconds: float = 30.0
    departures_rate_limit: str = "30/minute"  # Per client IP on GET /departures

    @field_validator("bus_routes")
    @classmethod
    def bus_routes_well_formed(cls, v: str) -> str:
        parse_bus_routes(v)
        return v

    @property
    def bus_route_list(self) -> list[tuple[str, int]]:
        return parse_bus_routes(self.bus_routes)

    @property
    def bart_station_list(self) -> list[str]:
        return parse_stations(self.bart_stations)

    def missing_credentials(self) -> list[str]:
        missing = []
        if self.bus_route_list and not self.actransit_token:
            missing.append("ACTRANSIT_TOKEN")
        if self.bart_station_list and not self.bart_api_key:
            missing.append("BART_API_KEY")
        return missing


def get_settings() -> Settings:
    return Settings()
