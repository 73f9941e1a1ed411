"""
Report Service
==============

Groups violations and renders validation reports.
Follows SRP: Only handles aggregation and report formatting.
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..core.settings import REPORT_FORMATS, UNKNOWN_LOCATION
from ..core.violation import ValidationOutcome, Violation

Outcomes = Union[ValidationOutcome, Mapping[str, ValidationOutcome], Iterable[ValidationOutcome]]


def _as_list(outcomes: Outcomes) -> List[ValidationOutcome]:
    if isinstance(outcomes, ValidationOutcome):
        return [outcomes]
    if isinstance(outcomes, Mapping):
        return list(outcomes.values())
    return list(outcomes)


def _status(passed: bool) -> str:
    return "success" if passed else "failure"


class ErrorGroup:
    """Violations sharing one (category, location) key."""

    def __init__(self, key: str, category: str, location: str):
        self.key = key
        self.category = category
        self.location = location
        self.violations: List[Violation] = []

    @property
    def count(self) -> int:
        return len(self.violations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "location": self.location,
            "count": self.count,
            "violations": [v.to_dict() for v in self.violations],
        }


class ErrorAggregator:
    """
    Aggregator for validation outcomes.

    Follows SRP: Only handles grouping and rendering.
    """

    @staticmethod
    def location_key(violation: Violation) -> str:
        """
        Build ``file:line:column`` for a violation.

        Missing components become ``unknownLocation``; a violation with no
        location at all is just ``unknownLocation``.
        """
        location = violation.location
        parts = (location.file, location.line, location.column)
        if all(p is None or p == "" for p in parts):
            return UNKNOWN_LOCATION
        return ":".join(UNKNOWN_LOCATION if p is None or p == "" else str(p) for p in parts)

    def group_key(self, violation: Violation) -> str:
        return f"{violation.category}-{self.location_key(violation)}"

    def aggregate(self, outcomes: Outcomes) -> Dict[str, ErrorGroup]:
        """
        Group every violation of the given outcomes by (category, location).

        Args:
            outcomes: One outcome, a list of outcomes or a path -> outcome mapping

        Returns:
            Dictionary mapping group keys to ErrorGroup objects
        """
        groups: Dict[str, ErrorGroup] = {}
        for outcome in _as_list(outcomes):
            for violation in outcome.violations():
                key = self.group_key(violation)
                group = groups.get(key)
                if group is None:
                    group = ErrorGroup(key, violation.category, self.location_key(violation))
                    groups[key] = group
                group.violations.append(violation)
        return groups

    # ------------------------------------------------------------------
    # Renderings
    # ------------------------------------------------------------------

    def to_structured(self, groups: Mapping[str, ErrorGroup]) -> Dict[str, Dict[str, Any]]:
        return {key: group.to_dict() for key, group in groups.items()}

    def render_json(self, groups: Mapping[str, ErrorGroup]) -> str:
        return json.dumps(self.to_structured(groups), indent=2, ensure_ascii=False)

    def render_text(self, groups: Mapping[str, ErrorGroup]) -> str:
        if not groups:
            return "No errors found"
        report = []
        for key, group in groups.items():
            report.append(f"Error group: {key} (count: {group.count})")
            for violation in group.violations:
                report.append(f"  - Level: {violation.level}, Message: {violation.message}")
        return "\n".join(report)

    def render_markdown(self, outcomes: Outcomes) -> str:
        """Per-file markdown report with a summary per validation class."""
        outcome_list = _as_list(outcomes)
        report_lines = []
        report_lines.append("# XML Validation Report")
        report_lines.append("")
        report_lines.append(f"**Total files validated:** {len(outcome_list)}")

        passed = sum(1 for o in outcome_list if o.passed)
        report_lines.append(f"**Passed:** {passed}")
        report_lines.append(f"**Failed:** {len(outcome_list) - passed}")
        report_lines.append("")

        # Summary by validation class
        report_lines.append("## Validation Class Summary")
        report_lines.append("")
        class_names: List[str] = []
        for outcome in outcome_list:
            for result in outcome.classes:
                if result.name not in class_names:
                    class_names.append(result.name)
        for name in class_names:
            ran = [o.get(name) for o in outcome_list if o.get(name) is not None]
            ok = sum(1 for r in ran if r.passed)
            report_lines.append(f"- **{name}:** {ok}/{len(ran)} passed")
        fatal = sum(1 for o in outcome_list if o.fatal is not None)
        if fatal:
            report_lines.append(f"- **Not validated (load/parse errors):** {fatal}")
        report_lines.append("")

        # Per-file results
        report_lines.append("## Per-file Results")
        report_lines.append("")
        for outcome in sorted(outcome_list, key=lambda o: o.file_path or ""):
            file_name = Path(outcome.file_path).name if outcome.file_path else "<document>"
            status = "PASS" if outcome.passed else f"FAIL ({outcome.total_errors()} errors)"
            report_lines.append(f"### {file_name} - {status}")
            report_lines.append("")

            if outcome.fatal is not None:
                report_lines.append(f"**{outcome.fatal.category}:** {outcome.fatal.message}")
                report_lines.append("")

            for result in outcome.classes:
                if not result.violations:
                    continue
                heading = "Errors" if not result.passed else "Warnings"
                report_lines.append(f"**{result.name} {heading}:**")
                for violation in result.violations:
                    line = violation.location.line
                    where = f" (line {line})" if line is not None else ""
                    report_lines.append(f"- {violation.message}{where}")
                report_lines.append("")

        return "\n".join(report_lines)

    def build_run_report(self, outcomes: Outcomes, xsd_file: Optional[str] = None) -> Dict[str, Any]:
        """
        Structured report of a whole run, passing checks included.

        Every validation class of every document is one check with a
        success/failure status; the summary counts checks and files, and
        the grouped violations are attached under ``errorGroups``.

        Args:
            outcomes: Validation outcomes
            xsd_file: Schema the documents were validated against

        Returns:
            JSON-ready dictionary
        """
        outcome_list = _as_list(outcomes)
        summary = {
            "totalFiles": len(outcome_list),
            "passedFiles": 0,
            "totalChecks": 0,
            "successfulChecks": 0,
            "failedChecks": 0,
        }
        files = []
        for outcome in outcome_list:
            checks = []
            for result in outcome.classes:
                summary["totalChecks"] += 1
                summary["successfulChecks" if result.passed else "failedChecks"] += 1
                checks.append(
                    {
                        "name": result.name,
                        "status": _status(result.passed),
                        "errors": len(result.errors),
                        "details": [self.format_violation(v) for v in result.violations],
                    }
                )
            if outcome.passed:
                summary["passedFiles"] += 1
            files.append(
                {
                    "xmlFilePath": outcome.file_path,
                    "status": _status(outcome.passed),
                    "fatal": self.format_violation(outcome.fatal) if outcome.fatal is not None else None,
                    "validationChecks": checks,
                }
            )

        return {
            "xsdFilePath": str(xsd_file) if xsd_file else None,
            "validationTime": datetime.now(timezone.utc).isoformat(),
            "status": _status(all(o.passed for o in outcome_list)),
            "summary": summary,
            "files": files,
            "errorGroups": self.to_structured(self.aggregate(outcome_list)),
        }

    def render(
        self,
        outcomes: Outcomes,
        output_format: str = "text",
        xsd_file: Optional[str] = None,
    ) -> str:
        """
        Render outcomes in one of the supported formats.

        Args:
            outcomes: Validation outcomes
            output_format: 'json' (run report), 'text' or 'markdown'
            xsd_file: Schema path recorded in the json run report

        Returns:
            Report text
        """
        if output_format not in REPORT_FORMATS:
            raise ValueError(f"Unsupported output format: {output_format}")
        if output_format == "markdown":
            return self.render_markdown(outcomes)
        if output_format == "json":
            return json.dumps(self.build_run_report(outcomes, xsd_file), indent=2, ensure_ascii=False)
        return self.render_text(self.aggregate(outcomes))

    def write_report(self, report_text: str, output_file: str) -> str:
        """
        Write a rendered report as UTF-8.

        Returns:
            Path to the written file
        """
        directory = os.path.dirname(str(output_file))
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(report_text)
        return str(output_file)

    @staticmethod
    def format_violation(violation: Violation) -> Dict[str, Any]:
        """Flat mapping with 'unknown' in place of missing fields."""
        location = violation.location
        return {
            "message": violation.message,
            "category": violation.category,
            "level": violation.level if violation.level is not None else "unknown",
            "element": location.element or "unknown",
            "line": location.line if location.line is not None else "unknown",
            "column": location.column if location.column is not None else "unknown",
            "file": location.file or "unknown",
        }
