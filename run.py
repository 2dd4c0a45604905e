#!/usr/bin/env python3
"""
ABL Partidas - Entry point script

Boots the shared headless browser and serves the HTTP API, or runs a single
lookup from the command line.

    python run.py                           # serve on $PORT
    python run.py verify --lat -34.6 --lng -58.4
    python run.py fetch --lat -34.6 --lng -58.4
"""

import argparse
import asyncio
import json
import logging
import signal
import sys

import uvicorn

from application import app, attach_session
from partidas.config import Settings, get_settings
from partidas.errors import PartidaError, SessionStartFailure
from partidas.models import Coordinate, dump_abl_data
from partidas.scrapers import BrowserSession

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_session(settings: Settings) -> BrowserSession:
    return BrowserSession(headless=settings.headless, max_pages=settings.max_concurrent_pages)


async def serve(settings: Settings) -> int:
    """
    Start the browser, then the HTTP server.

    Returns:
        int: Process exit status (1 if the browser could not start)
    """
    session = build_session(settings)
    try:
        await session.start()
    except SessionStartFailure as e:
        logger.error(f"Error starting Playwright: {e}")
        return 1

    attach_session(app, session, settings)

    config = uvicorn.Config(app, host="0.0.0.0", port=settings.port, log_level="info")
    server = uvicorn.Server(config)
    logger.info(f"Server running on port {settings.port}")
    try:
        await server.serve()
    finally:
        logger.info("Shutting down server...")
        await session.stop()
    return 0


async def lookup(command: str, coord: Coordinate, settings: Settings) -> int:
    """Run one verify/fetch lookup and print the result as JSON."""
    session = build_session(settings)
    try:
        await session.start()
    except SessionStartFailure as e:
        logger.error(f"Error starting Playwright: {e}")
        return 1

    try:
        attach_session(app, session, settings)
        resolver = app.state.resolver
        if command == "verify":
            result = (await resolver.verify(coord)).as_response()
        else:
            result = dump_abl_data(await resolver.fetch_data(coord))
    except PartidaError as e:
        logger.error(f"Lookup failed: {e}")
        return 1
    finally:
        await session.stop()

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


def _interrupt(signum, frame):
    raise KeyboardInterrupt


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="ABL partida lookup service")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Run the HTTP API (default)")
    for name, help_text in (
        ("verify", "Check whether a partida exists at a coordinate"),
        ("fetch", "Print the partida data at a coordinate"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--lat", required=True, help="Latitude")
        sub.add_argument("--lng", required=True, help="Longitude")

    args = parser.parse_args(argv)
    settings = get_settings()

    # uvicorn re-raises the caught signal after serve(); SIGTERM unwinds like SIGINT
    signal.signal(signal.SIGTERM, _interrupt)

    try:
        if args.command in ("verify", "fetch"):
            return asyncio.run(lookup(args.command, Coordinate(lat=args.lat, lng=args.lng), settings))
        return asyncio.run(serve(settings))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
