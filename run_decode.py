#!/usr/bin/env python3
"""
Decode a Unity-dialect YAML file and print it as standard YAML.

Each decoded document is written after a "---" separator. Header comments
and directives that preceded the first document are echoed first with
--leading-content.

Usage:
    python run_decode.py Assets/Scenes/Main.unity
    python run_decode.py Assets/Graphs/Forest.asset --leading-content
"""

import argparse
import logging
import sys

import yaml

from core.log_context import configure_logging, log_context
from core.settings import resolve_log_level
from decoding.decoder import DocumentDecoder

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Decode Unity-dialect YAML into standard YAML",
    )
    parser.add_argument(
        "file",
        help="Path to the Unity asset file.",
    )
    parser.add_argument(
        "--leading-content",
        action="store_true",
        default=False,
        help="Echo header comments/directives before the first document.",
    )
    return parser.parse_args(argv)


def write_documents(decoder: DocumentDecoder, out, leading_content: bool = False) -> int:
    """Dump every remaining document of ``decoder`` to ``out``.

    Returns:
        Number of documents written.
    """
    count = 0
    for document in decoder:
        if leading_content and document.leading_content:
            out.write(document.leading_content)
            if not document.leading_content.endswith("\n"):
                out.write("\n")
        out.write("---\n")
        out.write(yaml.safe_dump(document.to_python(), sort_keys=False, allow_unicode=True))
        count += 1
    return count


def main(argv=None) -> int:
    """Main entry point for the decode CLI."""
    configure_logging(resolve_log_level(default=logging.WARNING))
    args = parse_args(argv)

    with log_context(source=args.file):
        decoder = DocumentDecoder()
        try:
            with log_context(phase="normalize"), open(args.file, "rb") as f:
                decoder.init(f, filename=args.file)
        except OSError as e:
            logger.error("failed to read file: %s", e)
            return 1

        try:
            with log_context(phase="decode"):
                count = write_documents(decoder, sys.stdout, args.leading_content)
        except yaml.YAMLError as e:
            logger.error("Decode failed: %s", e)
            return 1

    logger.info("Wrote %d documents", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
