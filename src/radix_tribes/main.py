"""Command-line entrypoint for the Radix Tribes server."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from radix_tribes.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the Radix Tribes game server")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    parser.add_argument("--port", type=int, default=3000, help="TCP port to listen on")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (defaults to RADIX_LOG_LEVEL)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )
    args = parser.parse_args()

    level = args.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.reload:
        uvicorn.run(
            "radix_tribes.api.app:app",
            host=args.host,
            port=args.port,
            reload=True,
            log_level=level.lower(),
        )
    else:
        from radix_tribes.api.app import app

        uvicorn.run(app, host=args.host, port=args.port, log_level=level.lower())


if __name__ == "__main__":
    main()
