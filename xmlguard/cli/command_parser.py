"""
Command Parser
==============

Handles CLI argument parsing.
Follows SRP: Only handles command-line argument parsing.
"""

import argparse
import sys
from typing import Any

from ..core.settings import (
    CACHE_TTL_SECONDS,
    DATA_DIR,
    DEFAULT_REPORT_FORMAT,
    DEFAULT_WORKERS,
    MAX_CONTENT_LENGTH,
    PROHIBITED_ATTRIBUTES,
    PROHIBITED_ELEMENTS,
    REPORT_FORMATS,
    TITLE_MIN_LENGTH,
)


class CommandParser:
    """
    Parser for command-line arguments.

    Follows SRP: Only handles argument parsing.
    """

    def __init__(self):
        """Initialize command parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all options.

        Returns:
            Configured ArgumentParser
        """
        parser = argparse.ArgumentParser(
            prog="xmlguard",
            description="Validate XML documents against an XSD schema",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Validate one file
  xmlguard invoice.xml --xsd invoice.xsd

  # Validate a directory holding its schema, JSON report to a file
  xmlguard xmlxsddata/ --format json --output validation_logs/errors.json

  # List the XML and XSD files of the data directory
  xmlguard --list
            """,
        )

        parser.add_argument(
            "targets",
            nargs="*",
            default=[str(DATA_DIR)],
            help=f"XML files or directories to validate (default: {DATA_DIR})",
        )

        parser.add_argument(
            "--xsd",
            help="XSD schema (default: the single .xsd file in the target directory)",
        )

        # Report options
        parser.add_argument(
            "--format",
            choices=REPORT_FORMATS,
            default=DEFAULT_REPORT_FORMAT,
            help=f"Report format (default: {DEFAULT_REPORT_FORMAT})",
        )

        parser.add_argument(
            "--output",
            nargs="?",
            const="",
            metavar="FILE",
            help="Write the report to FILE instead of stdout "
            "(without FILE: the format's default report file in validation_logs/)",
        )

        # Validation options
        parser.add_argument(
            "--no-order",
            action="store_true",
            help="Skip the element order check",
        )

        parser.add_argument(
            "--title-min-length",
            type=int,
            default=TITLE_MIN_LENGTH,
            help=f"<title> text must be longer than this (default: {TITLE_MIN_LENGTH})",
        )

        parser.add_argument(
            "--prohibit-element",
            action="append",
            default=list(PROHIBITED_ELEMENTS),
            metavar="NAME",
            help="Report elements with this name (repeatable)",
        )

        parser.add_argument(
            "--prohibit-attribute",
            action="append",
            default=list(PROHIBITED_ATTRIBUTES),
            metavar="NAME",
            help="Report attributes with this name (repeatable)",
        )

        parser.add_argument(
            "--max-content-length",
            type=int,
            default=MAX_CONTENT_LENGTH,
            help="Warn about text longer than this (0 disables, default: %(default)s)",
        )

        # Runtime options
        parser.add_argument(
            "--workers",
            type=int,
            default=DEFAULT_WORKERS,
            help=f"Documents validated concurrently (default: {DEFAULT_WORKERS})",
        )

        parser.add_argument(
            "--cache-ttl",
            type=int,
            default=CACHE_TTL_SECONDS,
            help=f"Schema cache expiration in seconds (default: {CACHE_TTL_SECONDS})",
        )

        parser.add_argument(
            "--list",
            action="store_true",
            help="List XML and XSD files in the target directories and exit",
        )

        parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Log validation progress",
        )

        return parser

    def parse_args(self, args=None) -> Any:
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (default: sys.argv)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def validate_args(self, args: Any) -> bool:
        """
        Validate parsed arguments.

        Args:
            args: Parsed arguments namespace

        Returns:
            True if arguments are valid
        """
        if args.workers < 1:
            print("Error: --workers must be at least 1", file=sys.stderr)
            return False

        if args.cache_ttl < 0:
            print("Error: --cache-ttl must not be negative", file=sys.stderr)
            return False

        if args.title_min_length < 0:
            print("Error: --title-min-length must not be negative", file=sys.stderr)
            return False

        if args.max_content_length < 0:
            print("Error: --max-content-length must not be negative", file=sys.stderr)
            return False

        return True
