"""
Command line entry point for the race lobby server.
"""

import argparse
import logging
import sys
from pathlib import Path

from racelobby.server.config import ServerConfig

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure root logging.

    Args:
        level: Logging level name
        log_file: Optional file to log to in addition to stdout
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="racelobby",
        description="Real-time multiplayer race lobby server",
    )
    parser.add_argument("--host", help="Interface to bind (default 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default 3000, or $PORT)")
    parser.add_argument("--tick-ms", type=float, help="Simulation tick period in milliseconds")
    parser.add_argument("--max-ai", type=int, help="Maximum AI cars at lobby creation")
    parser.add_argument(
        "--idle-timeout",
        type=float,
        help="Seconds before an unwatched, inactive lobby is dropped (0 keeps lobbies forever)",
    )
    parser.add_argument("--cors-origin", action="append", dest="cors_origins",
                        help="Allowed CORS origin (repeatable)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", type=Path)
    return parser


def config_from_args(argv: list[str] | None = None) -> ServerConfig:
    """Build configuration from the environment and command line flags."""
    args = build_parser().parse_args(argv)
    return ServerConfig.from_env(
        host=args.host,
        port=args.port,
        tick_interval_s=args.tick_ms / 1000.0 if args.tick_ms else None,
        max_ai=args.max_ai,
        idle_timeout_s=args.idle_timeout,
        cors_origins=args.cors_origins,
        log_level=args.log_level,
        log_file=args.log_file,
    )


def main(argv: list[str] | None = None) -> None:
    import uvicorn

    from racelobby.server.app import create_app

    config = config_from_args(argv)
    setup_logging(config.log_level, config.log_file)

    app = create_app(config)
    logger.info(f"Racing server running on http://{config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
