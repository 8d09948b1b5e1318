"""
Command line entry point.

Usage:
    python -m zipkin_loader -H zipkin.local --tail /var/svc/log/*.log
    python -m zipkin_loader --dry-run --replay cnapi.log vmapi.log.gz
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from pydantic import ValidationError

from zipkin_loader.config import get_loader_settings
from zipkin_loader.exceptions import RecordFormatError
from zipkin_loader.loader import Loader
from zipkin_loader.logger import logger, set_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zipkin-loader",
        description="Stream tracer log records to a Zipkin collector.",
    )
    parser.add_argument("-H", "--host", help="Zipkin host (required unless --dry-run)")
    parser.add_argument("-P", "--port", type=int, help="Zipkin port (default 9411)")
    parser.add_argument(
        "--interval",
        type=int,
        dest="pump_interval_ms",
        help="Milliseconds between exports (default 1000)",
    )
    parser.add_argument("--config", help="YAML file with translation tables")
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        default=None,
        help="Print batches to stdout instead of sending them",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--tail", nargs="+", metavar="FILE", help="Follow live log files")
    mode.add_argument("--replay", nargs="+", metavar="FILE", help="Load complete log files and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_loader_settings(
            translation_path=args.config,
            zipkin_host=args.host,
            zipkin_port=args.port,
            pump_interval_ms=args.pump_interval_ms,
            dry_run=args.dry_run,
            log_level="DEBUG" if args.debug else None,
        )
    except (ValidationError, ValueError) as e:
        parser.error(f"invalid settings: {e}")
    set_log_level(settings.log_level)

    if not settings.dry_run and not settings.zipkin_host:
        parser.error("Zipkin host is required.")

    loader = Loader(settings)
    try:
        if args.replay:
            stats = asyncio.run(loader.replay(args.replay))
            logger.info(f"Done: {stats}")
        else:
            asyncio.run(loader.follow(args.tail))
    except RecordFormatError as e:
        logger.critical(f"FATAL: {e}")
        if e.line is not None:
            logger.critical(f"offending line: {e.line}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
