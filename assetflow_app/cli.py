"""
Command line entry point.

Usage:
    assetflow correlations --source yahoo
    assetflow flows --source file --input snapshot.json

Prints the report JSON to stdout. Exit codes: 0 on success, 1 on invalid
configuration or input, 2 when too few instruments have usable history.
"""

import argparse
import sys
from typing import Optional

import structlog

from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .data.parsers import ParseError
from .engine import FlowAnalysisEngine
from .errors import ConfigurationError
from .logging.config import configure_logging
from .sources import MarketDataSource, ProxiedHistorySource, StaticHistorySource, YahooChartSource
from .validation.report_schema import ReportValidationError, ReportValidator

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INSUFFICIENT_DATA = 2

# CLI source choice -> sources.yaml section
SOURCE_SECTIONS = {
    "yahoo": "yahoo",
    "proxy": "proxy",
    "file": "static",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetflow",
        description="Cross-asset correlation and capital flow analysis for futures markets",
    )
    parser.add_argument("command", choices=("correlations", "flows"),
                        help="Report to produce")
    parser.add_argument("--source", choices=tuple(SOURCE_SECTIONS), default="yahoo",
                        help="Where price history comes from (default: yahoo)")
    parser.add_argument("--input", metavar="PATH",
                        help="JSON history snapshot, required with --source file")
    parser.add_argument("--proxy-url", metavar="URL",
                        help="Base URL of the historical-data endpoint")
    parser.add_argument("--config-dir", metavar="DIR",
                        help="Directory holding sources.yaml")
    parser.add_argument("--log-level", metavar="LEVEL",
                        help="Override the configured log level")
    parser.add_argument("--json-logs", action="store_true",
                        help="Emit structured JSON logs on stderr")
    parser.add_argument("--pretty", action="store_true",
                        help="Indent the report JSON")
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict:
    overrides: dict = {}
    if args.proxy_url:
        overrides.setdefault("fetch", {})["proxy_base_url"] = args.proxy_url
    if args.log_level:
        overrides.setdefault("logging", {})["level"] = args.log_level.upper()
    if args.json_logs:
        overrides.setdefault("logging", {})["format_json"] = True
    return overrides


def build_source(args: argparse.Namespace, config: DefaultConfig) -> MarketDataSource:
    """
    Create the market data source selected on the command line.

    Raises:
        ConfigurationError: If the file source has no input path
        ParseError: If the snapshot file is malformed
        OSError: If the snapshot file cannot be read
    """
    if args.source == "yahoo":
        return YahooChartSource(config.fetch)
    if args.source == "proxy":
        return ProxiedHistorySource(config.fetch)
    if not args.input:
        raise ConfigurationError("--input is required with --source file")
    return StaticHistorySource.from_json_file(args.input, config.fetch)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        loader = ConfigLoader.create(args.config_dir)
        config = loader.build_config(SOURCE_SECTIONS[args.source], _cli_overrides(args))
    except ConfigurationError as e:
        configure_logging(level="INFO")
        logger.error(str(e), errors=[f"{err.field}: {err.message}" for err in e.errors])
        return EXIT_ERROR

    configure_logging(
        level=config.logging.level,
        format_json=config.logging.format_json,
        include_caller=config.logging.include_caller,
    )

    try:
        source = build_source(args, config)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_ERROR
    except (ParseError, OSError) as e:
        logger.error("Cannot load history snapshot", path=args.input, error=str(e))
        return EXIT_ERROR

    engine = FlowAnalysisEngine(source, config)
    validator = ReportValidator()

    if args.command == "correlations":
        result = engine.correlations()
        validate = validator.validate_correlation_report
    else:
        result = engine.asset_flows()
        validate = validator.validate_flow_report

    if not result.success:
        sys.stdout.write(result.to_json(pretty=args.pretty).decode() + "\n")
        return EXIT_INSUFFICIENT_DATA

    try:
        validate(result.to_dict())
    except ReportValidationError:
        return EXIT_ERROR

    sys.stdout.write(result.to_json(pretty=args.pretty).decode() + "\n")
    logger.debug("Source statistics", **source.get_stats())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
