"""
Output Formatter
================

Handles console output formatting.
Follows SRP: Only handles output formatting.
"""

import sys
from typing import List

from ..core.violation import ValidationOutcome


class OutputFormatter:
    """
    Formatter for console output.

    Follows SRP: Only handles output formatting.
    """

    def print_header(self, title: str) -> None:
        """
        Print formatted header.

        Args:
            title: Header title
        """
        print("\n" + "=" * 80)
        print(f" {title}")
        print("=" * 80)

    def print_file_list(self, title: str, files: List[str]) -> None:
        print(f"{title}:")
        if not files:
            print("  (none)")
        for index, path in enumerate(files, start=1):
            print(f"  {index}. {path}")

    def print_outcome(self, outcome: ValidationOutcome) -> None:
        """
        Print per-class PASS/FAIL lines for one document.

        Args:
            outcome: Validation outcome
        """
        print(f"Validating: {outcome.file_path or '<document>'}")
        if outcome.fatal is not None:
            print(f"  FAIL ({outcome.fatal.category}): {outcome.fatal.message}")
            return
        total = len(outcome.classes)
        for index, result in enumerate(outcome.classes, start=1):
            if not result.passed:
                status = f"FAIL ({len(result.errors)})"
            elif result.violations:
                status = f"PASS ({len(result.violations)} warnings)"
            else:
                status = "PASS"
            print(f"  [{index}/{total}] {result.name} validation... {status}")

    def print_summary(self, passed: int, total: int) -> None:
        """
        Print run summary.

        Args:
            passed: Number of documents that passed
            total: Number of documents validated
        """
        print()
        print("-" * 80)
        print("Validation Summary:")
        print(f"  Validated: {total}")
        print(f"  Passed: {passed}")
        print(f"  Failed: {total - passed}")
        print("=" * 80)

    def print_report(self, report_text: str) -> None:
        print(report_text)

    def print_error(self, message: str) -> None:
        """
        Print error message.

        Args:
            message: Error message
        """
        print(f"ERROR: {message}", file=sys.stderr)

    def print_warning(self, message: str) -> None:
        """
        Print warning message.

        Args:
            message: Warning message
        """
        print(f"WARNING: {message}", file=sys.stderr)

    def print_success(self, message: str) -> None:
        print(f"✓ {message}")

    def print_info(self, message: str) -> None:
        print(f"ℹ {message}")
