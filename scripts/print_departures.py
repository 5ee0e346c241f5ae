#!/usr/bin/env python3
"""
Print upcoming AC Transit and BART departures near the configured origin.

Configuration is read from the environment or a .env file in the working directory (see settings.py):
  ACTRANSIT_TOKEN, BART_API_KEY     provider credentials (required)
  BUS_ROUTES=51B:500,27:750         route:radius_feet pairs, queried in order
  BART_STATIONS=ROCK                station abbreviations, queried in order
  ORIGIN_LAT / ORIGIN_LON           point the stop search is centred on

Run: python scripts/print_departures.py [--json] [--verbose]
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))

from pydantic import ValidationError

from settings import get_settings
from src.departures.formatting import format_board
from src.departures.models import DeparturesBoard
from src.departures.service import collect_departures
from src.upstream.http import UpstreamError

logger = logging.getLogger("print_departures")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print nearby bus and BART departures")
    parser.add_argument("--json", action="store_true", help="Print the board as JSON instead of text lines")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each provider request")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s %(message)s",
    )

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    missing = settings.missing_credentials()
    if missing:
        print(f"Error: set {', '.join(missing)} in the environment or .env", file=sys.stderr)
        return 1

    now = datetime.now()
    try:
        departures = collect_departures(settings, now=now)
    except UpstreamError as e:
        logger.error("telemetry departures_failed error=%s", str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    lines = format_board(departures, now)
    if args.json:
        board = DeparturesBoard(generated_at=now, departures=departures, lines=lines)
        print(board.model_dump_json(indent=2))
    else:
        for line in lines:
            print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
