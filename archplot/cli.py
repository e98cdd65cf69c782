"""Command line entry point: archplot [INPUT] [-o OUTPUT] [--demo] [--report] [-v]."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .generator import ArchitectureGenerator, demo_data, export_svg
from .parser import ParseError, load_business_data, validate_business_data
from .spatial import log_analysis_report

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with a clean format for terminal output."""
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []  # Clear any existing handlers
    root_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="archplot",
        description="Generate a business-architecture SVG diagram from JSON data",
        epilog="Example: archplot landscape.json -o landscape.svg --report",
    )
    p.add_argument("input", nargs="?", help="Business data JSON file")
    p.add_argument("-o", "--output", default="business-architecture.svg", help="SVG output path")
    p.add_argument("--demo", action="store_true", help="Use the built-in demo data instead of INPUT")
    p.add_argument("--report", action="store_true", help="Log the spatial analysis report")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input and not args.demo:
        parser.error("an INPUT file or --demo is required")

    setup_logging(args.verbose)

    try:
        if args.demo:
            data = demo_data()
        else:
            data = load_business_data(args.input)
            logger.info("Loaded data from %s", args.input)

        validation = validate_business_data(data)
        if not validation.is_valid:
            for error in validation.errors:
                logger.error(error)
            return 1

        result = ArchitectureGenerator().generate(data)
        if args.report:
            log_analysis_report(result.analysis)

        path = export_svg(result.svg, args.output)
    except (ParseError, OSError, json.JSONDecodeError) as e:
        logger.error("Generation failed: %s", e)
        return 1

    stats = result.stats
    print("Statistics:")
    print(f"  Systems: {stats.systems}")
    print(f"  Connections: {stats.connections}")
    print(f"  Regions: {stats.regions}")
    print(f"  Platforms: {stats.platforms}")
    print(f"SVG saved: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
