"""
Validation Service
==================

Orchestrates validation workflow following Single Responsibility Principle.
Only handles validation orchestration.
"""

from typing import Dict, Iterable, Optional

from ..core.violation import ValidationOutcome
from ..validators.validation_pipeline import ValidationPipeline


class ValidationService:
    """
    Service responsible for running validations.

    Follows SRP: Only handles validation logic.
    """

    def __init__(self, pipeline: Optional[ValidationPipeline] = None):
        """
        Initialize validation service.

        Args:
            pipeline: Validation pipeline (dependency injection)
        """
        self.pipeline = pipeline or ValidationPipeline()

    def validate_xml(self, xml_content: str, xsd_file: str) -> ValidationOutcome:
        """
        Validate in-memory XML content.

        Args:
            xml_content: XML content to validate
            xsd_file: Schema path

        Returns:
            ValidationOutcome
        """
        return self.pipeline.validate_text(xml_content, xsd_file)

    def validate_paths(
        self,
        xml_files: Iterable[str],
        xsd_file: str,
        workers: int = 1,
    ) -> Dict[str, ValidationOutcome]:
        """
        Validate several files against one schema.

        Args:
            xml_files: Document paths
            xsd_file: Schema path
            workers: Documents validated concurrently

        Returns:
            Dictionary mapping file paths to outcomes
        """
        return self.pipeline.validate_files(xml_files, xsd_file, workers)

    def is_valid(self, outcome: ValidationOutcome) -> bool:
        return outcome.passed

    def get_error_summary(self, outcome: ValidationOutcome) -> str:
        """
        Get human-readable error summary.

        Args:
            outcome: Result from validate_xml()

        Returns:
            Error summary string
        """
        if self.is_valid(outcome):
            return "No errors"

        errors = []
        if outcome.fatal is not None:
            errors.append(f"{outcome.fatal.category}: {outcome.fatal.message}")
        for result in outcome.classes:
            if not result.passed:
                errors.append(f"{result.name}: {len(result.errors)} errors")

        return "; ".join(errors) if errors else "Validation failed"
