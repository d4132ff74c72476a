#!/usr/bin/env python3
"""
Extract data from Unity asset files.

Extraction types:
    spawners - all spawner nodes with their distance properties
    nodes    - all node names (or full nodes with --json)
    property - every value of one property (requires --property)

Usage:
    python run_extract.py spawners Assets/Graphs/Forest.asset
    python run_extract.py nodes Assets/Graphs/Forest.asset --json
    python run_extract.py property Assets/Graphs/Forest.asset --property GridCellSize
"""

import argparse
import logging
import sys

from core.log_context import configure_logging, log_context
from core.settings import (
    ConfigValidationError,
    resolve_log_level,
    resolve_settings_path,
    resolve_strict_config_validation,
)
from extraction.commands import (
    EXTRACTION_KINDS,
    extract_spawners,
    list_nodes,
    property_values,
    validate_request,
)
from extraction.settings import load_extraction_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Extract data from Unity asset files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_extract.py spawners Forest.asset\n"
            "  python run_extract.py property Forest.asset --property GridCellSize\n"
        ),
    )
    parser.add_argument(
        "kind",
        choices=EXTRACTION_KINDS,
        help="What to extract: spawners, nodes or property.",
    )
    parser.add_argument(
        "file",
        help="Path to the Unity asset file.",
    )
    parser.add_argument(
        "--property",
        default="",
        help="Property name to extract (required for 'property').",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print full nodes as JSON (for 'nodes').",
    )
    parser.add_argument(
        "--config",
        default=resolve_settings_path(),
        help="YAML settings file extending the property catalog "
        "(default: $ASSET_EXTRACT_CONFIG).",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=resolve_strict_config_validation(default=False),
        help="Fail on settings file parse/validation errors.",
    )
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    """Parse and validate command-line arguments.

    Request errors exit with status 2 before any file is read.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        validate_request(args.kind, args.property)
    except ValueError as e:
        parser.error(str(e))
    return args


def read_asset(file_path: str) -> str:
    """Read the asset text.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv=None) -> int:
    """Main entry point for the extraction CLI."""
    configure_logging(resolve_log_level(default=logging.WARNING))
    args = parse_args(argv)

    try:
        settings = load_extraction_settings(args.config, strict=args.strict_config)
    except ConfigValidationError as e:
        logger.error("Settings error: %s", e)
        return 1

    with log_context(source=args.file):
        try:
            with log_context(phase="read"):
                content = read_asset(args.file)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("failed to read file: %s", e)
            return 1

        with log_context(phase="extract"):
            if args.kind == "spawners":
                extract_spawners(
                    content,
                    property_catalog=settings.property_catalog,
                    key_substrings=settings.distance_key_substrings,
                    spawner_pattern=settings.spawner_pattern,
                )
            elif args.kind == "nodes":
                list_nodes(content, property_catalog=settings.property_catalog, as_json=args.json)
            else:
                property_values(content, args.property)
    return 0


if __name__ == "__main__":
    sys.exit(main())
