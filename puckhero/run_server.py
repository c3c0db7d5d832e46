"""
Start the duel server with uvicorn on the configured port.
PORT, HOST and LOG_LEVEL come from the environment; flags override them.
"""
from __future__ import annotations

import argparse
import logging

import uvicorn

from puckhero import config


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the PuckHero duel server.")
    parser.add_argument("--host", default=config.HOST, help="Bind address")
    parser.add_argument("--port", type=int, default=config.PORT, help="Listening port (env PORT)")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level (env LOG_LEVEL)")
    args = parser.parse_args(argv)
    level = args.log_level.upper()
    configure_logging(level)
    logging.getLogger(__name__).info("Server running on port %d", args.port)
    uvicorn.run("puckhero.api:app", host=args.host, port=args.port, log_level=level.lower())


if __name__ == "__main__":
    main()
