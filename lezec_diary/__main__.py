"""
CLI entry point for lezec-diary.

Usage:
    python -m lezec_diary
    python -m lezec_diary --enrich --offset 10 --limit 20
    python -m lezec_diary --config /path/to/lezec.yml --output data
"""

import argparse
import asyncio
import logging
import sys

import structlog

from .core.exceptions import ConfigurationError

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )


def positive_int(value: str) -> int:
    """argparse type for --limit."""
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {number}")
    return number


def non_negative_int(value: str) -> int:
    """argparse type for --offset."""
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Export your lezec.cz climbing diary to JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Credentials are read from LEZEC_USER and LEZEC_PASS (environment or .env).

Examples:
  # Export the whole diary to output/climbs.json
  python -m lezec_diary

  # Add sector and location of each route (output/climbs_enriched.json)
  python -m lezec_diary --enrich

  # Only climbs 10-29 of the listing
  python -m lezec_diary --offset 10 --limit 20

  # Use custom config file
  python -m lezec_diary --config /path/to/lezec.yml
        """,
    )

    parser.add_argument(
        "--offset",
        type=non_negative_int,
        help="Index of the first climb to export (default: 0)",
    )

    parser.add_argument(
        "--limit",
        type=positive_int,
        help="Maximum number of climbs to export (default: all)",
    )

    parser.add_argument(
        "--enrich",
        action="store_true",
        default=None,
        help="Fetch sector and location from each route page",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to lezec.yml config file",
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Output directory (default: output)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    return parser.parse_args(argv)


async def main_async(settings):
    """Async main function."""
    from .orchestrator import DiaryScraper

    logger = structlog.get_logger(__name__)

    logger.info(
        "starting_lezec_diary",
        offset=settings.offset,
        limit=settings.limit,
        enrich=settings.enrich,
    )

    scraper = DiaryScraper(settings)
    climbs = await scraper.run()

    path = scraper.save_json(climbs, enriched=settings.enrich)

    if scraper.stats["enrich_failed"]:
        logger.warning(
            "export_incomplete",
            missing_route_details=scraper.stats["enrich_failed"],
            path=path,
        )

    logger.info("export_complete", climbs=len(climbs), path=path)
    return path


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Version check
    if args.version:
        from . import __version__
        print(f"lezec-diary {__version__}")
        sys.exit(0)

    # Setup logging
    setup_logging(args.log_level, args.json_logs)
    logger = structlog.get_logger(__name__)

    from .config.loader import load_settings

    try:
        settings = load_settings(
            config_path=args.config,
            offset=args.offset,
            limit=args.limit,
            enrich=args.enrich,
            output_dir=args.output,
        )
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        sys.exit(1)

    # Run async main
    try:
        asyncio.run(main_async(settings))
        sys.exit(0)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("fatal_error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
