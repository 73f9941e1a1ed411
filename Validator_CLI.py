#!/usr/bin/env python3
"""
xmlguard - CLI Entry Point
==========================

Command-line interface for schema-driven XML validation.
This file is intentionally minimal, delegating all logic to specialized services.

Architecture:
- Services: Validation workflow and reporting
- Managers: File system operations
- CLI: User interface (parsing, formatting)
- Core: Settings, errors, records, loading, schema model and cache
- Validators: Validation engine (Structural, Custom, Order)

Usage:
    python Validator_CLI.py invoice.xml --xsd invoice.xsd
    python Validator_CLI.py xmlxsddata/ --format json --output errors.json
    python Validator_CLI.py --list
"""

import logging
import sys
from typing import List, Optional

# Service layer
from xmlguard.services import ErrorAggregator, ValidationService

# Manager layer
from xmlguard.managers import FileManager

# CLI layer
from xmlguard.cli import CommandParser, OutputFormatter

from xmlguard.core.errors import ErrorKind, ValidatorError
from xmlguard.core.schema_cache import SchemaCache
from xmlguard.core.settings import LOG_FORMAT, LOG_LEVEL, REPORT_FILES
from xmlguard.validators import ValidationPipeline, default_rules


def list_validation_files(targets: List[str]) -> None:
    """
    Print the XML and XSD files found in each target directory.

    Args:
        targets: Directories to inspect
    """
    file_manager = FileManager()
    formatter = OutputFormatter()

    for target in targets:
        formatter.print_header(f"Files in {target}")
        xml_files, xsd_files = file_manager.list_validation_files(target)
        formatter.print_file_list("Available XML files", xml_files)
        print()
        formatter.print_file_list("Available XSD files", xsd_files)


def resolve_schema(xsd: Optional[str], targets: List[str]) -> Optional[str]:
    """
    Pick the schema to validate against.

    Args:
        xsd: Schema given on the command line
        targets: Validation targets

    Returns:
        Schema path, or None if it cannot be determined
    """
    if xsd:
        return xsd
    file_manager = FileManager()
    schemas = []
    for target in targets:
        if file_manager.directory_exists(target):
            schemas.extend(file_manager.list_validation_files(target)[1])
    return schemas[0] if len(schemas) == 1 else None


def run_validation(args) -> bool:
    """
    Validate the requested documents and emit the report.

    Args:
        args: Parsed arguments namespace

    Returns:
        True if every document passed
    """
    file_manager = FileManager()
    formatter = OutputFormatter()
    aggregator = ErrorAggregator()

    xsd_file = resolve_schema(args.xsd, args.targets)
    if xsd_file is None:
        formatter.print_error("No schema given and no single .xsd file found; use --xsd")
        sys.exit(2)

    xml_files = file_manager.collect_xml_files(args.targets)
    if not xml_files:
        formatter.print_error("No XML files found")
        sys.exit(2)

    # Initialize services (dependency injection)
    pipeline = ValidationPipeline(
        cache=SchemaCache(ttl=args.cache_ttl),
        rules=default_rules(
            title_min_length=args.title_min_length,
            prohibited_elements=args.prohibit_element,
            prohibited_attributes=args.prohibit_attribute,
            max_content_length=args.max_content_length,
        ),
        check_order=not args.no_order,
    )
    service = ValidationService(pipeline)

    formatter.print_header(f"Validating {len(xml_files)} XML files against {xsd_file}")
    outcomes = service.validate_paths(xml_files, xsd_file, workers=args.workers)

    for outcome in outcomes.values():
        formatter.print_outcome(outcome)

    passed = sum(1 for o in outcomes.values() if service.is_valid(o))
    formatter.print_summary(passed, len(outcomes))

    report = aggregator.render(outcomes, args.format, xsd_file=xsd_file)
    if args.output is not None:
        path = aggregator.write_report(report, args.output or str(REPORT_FILES[args.format]))
        formatter.print_info(f"Report saved to: {path}")
    else:
        formatter.print_report(report)

    if passed == len(outcomes):
        formatter.print_success("All documents passed validation")
        return True
    return False


def main(argv=None) -> None:
    """Main entry point for CLI."""
    # Parse arguments
    parser = CommandParser()
    args = parser.parse_args(argv)
    formatter = OutputFormatter()

    # Validate arguments
    if not parser.validate_args(args):
        sys.exit(2)

    logging.basicConfig(level="INFO" if args.verbose else LOG_LEVEL, format=LOG_FORMAT)

    # Execute command
    try:
        if args.list:
            list_validation_files(args.targets)
            sys.exit(0)
        all_passed = run_validation(args)
    except KeyboardInterrupt:
        formatter.print_warning("Operation cancelled by user")
        sys.exit(130)
    except ValidatorError as e:
        # Schema-level failures end the run; per-document ones are in the report
        labels = {
            ErrorKind.IO_ERROR: "File error",
            ErrorKind.PARSE_ERROR: "Parse error",
            ErrorKind.SCHEMA_MALFORMED: "Schema error",
        }
        formatter.print_error(f"{labels.get(e.kind, 'Validation error')}: {e}")
        sys.exit(1)

    sys.exit(0 if all_passed else 1)


if __name__ == "__main__":
    main()
