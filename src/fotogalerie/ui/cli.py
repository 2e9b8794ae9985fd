from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from fotogalerie.app import load_settings, serve, sweep
from fotogalerie.config import ConfigurationError, configure_logging
from fotogalerie.domain.errors import SourceChannelNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

log = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain the Discord photo gallery catalog")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="INFO",
        help="Root log level (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "run",
        help="Connect to the gateway, run the startup sweeps and follow new events",
    )
    subparsers.add_parser(
        "backfill",
        help="Scan the channel history and validate the catalog once, then exit",
    )
    subparsers.add_parser(
        "validate",
        help="Validate the catalog against the channel once, then exit",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=getattr(logging, parsed_args.log_level))

    try:
        settings = load_settings()
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)

    try:
        if parsed_args.command == "run":
            asyncio.run(serve(settings))
        elif parsed_args.command in {"backfill", "validate"}:
            result = asyncio.run(sweep(settings, backfill=parsed_args.command == "backfill"))
            log.info(
                "Sweep finished: processed=%s, kept=%s, evicted=%s, unverified=%s",
                result.processed,
                result.validation.kept,
                len(result.validation.evicted),
                result.validation.unverified,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except KeyboardInterrupt:
        log.info("Closed by user (Ctrl+C)")
    except SourceChannelNotFoundError:
        log.exception("Source channel is unavailable")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
