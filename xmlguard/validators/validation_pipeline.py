"""
validation_pipeline.py

Orchestrates complete document validation: Structural → Custom → Order.

The three validation classes are independent:
1. Structural - XSD conformance via python-xmlschema (types, cardinality, attributes)
2. Custom     - business rules (e.g. minimum <title> length)
3. Order      - declared child order replayed from the Schema Model

Every class runs even when an earlier one fails, so a single outcome lists
every violation found. Compiled schemas are shared through a SchemaCache.

Usage:
    pipeline = ValidationPipeline()
    outcome = pipeline.validate_file("xmlxsddata/invoice.xml", "xmlxsddata/invoice.xsd")
    results = pipeline.validate_directory("xmlxsddata/")
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence

from ..core.errors import (
    ErrorKind,
    FATAL_KINDS,
    ValidatorError,
    is_recoverable,
)
from ..core.schema_cache import SchemaCache, cache_key
from ..core.schema_model import SchemaModel, build_schema_model
from ..core.settings import LEVEL_ERROR, LEVEL_FATAL, XML_EXTENSION, XSD_EXTENSION
from ..core.violation import ClassResult, Location, ValidationOutcome, Violation
from ..core.xml_loader import load_text, load_xml, parse_xml
from .custom_rules import CustomRuleValidator, Rule
from .element_order import ElementOrderValidator
from .structural import StructuralValidator, compile_xsd

logger = logging.getLogger(__name__)

STRUCTURAL = "Structural"
CUSTOM = "Custom"
ORDER = "Order"

CLASS_KINDS = {
    STRUCTURAL: ErrorKind.SCHEMA_VALIDATION,
    CUSTOM: ErrorKind.CUSTOM_VALIDATION,
    ORDER: ErrorKind.ELEMENT_ORDER,
}


class CompiledSchema:
    """Everything derived from one schema file; immutable once built."""

    __slots__ = ("path", "root", "model", "xsd")

    def __init__(self, path: Optional[str], root, model: SchemaModel, xsd):
        self.path = path
        self.root = root
        self.model = model
        self.xsd = xsd

    @classmethod
    def from_text(cls, schema_text: str, path: Optional[str] = None) -> "CompiledSchema":
        root = parse_xml(schema_text, source=path)
        model = build_schema_model(root)
        xsd = compile_xsd(schema_text, source=path)
        return cls(path, root, model, xsd)


def _error_violation(err: Exception, kind: ErrorKind, file_path: Optional[str]) -> Violation:
    """Turn a raised error into a violation of ``kind``."""
    line = getattr(err, "line", None)
    column = getattr(err, "column", None)
    level = LEVEL_FATAL if kind in FATAL_KINDS else LEVEL_ERROR
    message = getattr(err, "message", None) or str(err)
    if not isinstance(err, ValidatorError):
        message = f"Unexpected error: {type(err).__name__}: {err}"
    return Violation(
        kind,
        message,
        level=level,
        location=Location(None, line, column, getattr(err, "path", None) or file_path),
    )


class ValidationPipeline:
    """Orchestrates Structural → Custom → Order validation."""

    def __init__(
        self,
        cache: Optional[SchemaCache] = None,
        rules: Optional[Sequence[Rule]] = None,
        check_order: bool = True,
    ):
        """
        Initialize validation pipeline.

        Args:
            cache: Schema cache shared by every validation run
            rules: Custom rules (defaults to the configured rule set)
            check_order: Run the element order class
        """
        self.cache = cache if cache is not None else SchemaCache()
        self.check_order = check_order
        self.structural = StructuralValidator()
        self.custom = CustomRuleValidator(rules)
        self.order = ElementOrderValidator()
        self.results: Dict[str, ValidationOutcome] = {}

    # ------------------------------------------------------------------
    # Schema loading
    # ------------------------------------------------------------------

    def load_schema(self, xsd_path: str) -> CompiledSchema:
        """
        Return the compiled schema for ``xsd_path``, compiling it on a cache miss.

        Raises:
            ResourceNotFoundError, XmlParsingError, SchemaMalformedError
        """
        key = cache_key(xsd_path)
        compiled = self.cache.get(key)
        if compiled is None:
            logger.info("Compiling schema %s", xsd_path)
            compiled = CompiledSchema.from_text(load_text(xsd_path), path=str(xsd_path))
            self.cache.set(key, compiled)
        return compiled

    # ------------------------------------------------------------------
    # Single document
    # ------------------------------------------------------------------

    def _run_class(self, name: str, check, file_path: Optional[str]) -> ClassResult:
        kind = CLASS_KINDS[name]
        try:
            violations = list(check())
        except ValidatorError as e:
            if is_recoverable(e.kind) and e.violations:
                violations = e.violations
            else:
                violations = [_error_violation(e, e.kind, file_path)]
        except Exception as e:
            logger.exception("%s validation raised unexpectedly", name)
            violations = [_error_violation(e, kind, file_path)]

        violations = [v.with_file(file_path) for v in violations]
        result = ClassResult(name, violations)
        logger.info("%s validation: %s", name, "PASS" if result.passed else f"FAIL ({len(violations)})")
        return result

    def validate_document(
        self,
        document_root,
        compiled: CompiledSchema,
        file_path: Optional[str] = None,
    ) -> ValidationOutcome:
        """
        Run every validation class on a parsed document.

        Args:
            document_root: Root element of the document
            compiled: Compiled schema
            file_path: Document path for violation locations

        Returns:
            ValidationOutcome with one ClassResult per class
        """
        classes = [
            self._run_class(
                STRUCTURAL,
                lambda: self.structural.validate(document_root, compiled, file_path),
                file_path,
            ),
            self._run_class(
                CUSTOM,
                lambda: self.custom.validate(document_root, file_path),
                file_path,
            ),
        ]
        if self.check_order:
            classes.append(
                self._run_class(
                    ORDER,
                    lambda: self.order.validate(document_root, compiled.model, file_path),
                    file_path,
                )
            )
        return ValidationOutcome(file_path, classes)

    def validate_text(self, xml_text: str, xsd_path: str) -> ValidationOutcome:
        """Validate in-memory XML text against a schema file."""
        compiled = self.load_schema(xsd_path)
        return self.validate_document(parse_xml(xml_text), compiled)

    def validate_file(self, xml_file: str, xsd_file: str) -> ValidationOutcome:
        """
        Run the complete pipeline on a single file.

        Raises:
            ResourceNotFoundError, XmlParsingError: For the document or schema
            SchemaMalformedError: If the schema cannot be modeled or compiled
        """
        compiled = self.load_schema(xsd_file)
        document_root = load_xml(xml_file)
        outcome = self.validate_document(document_root, compiled, str(xml_file))
        self.results[str(xml_file)] = outcome
        return outcome

    # ------------------------------------------------------------------
    # Multi-file runs
    # ------------------------------------------------------------------

    def _validate_isolated(self, xml_file: str, compiled: CompiledSchema) -> ValidationOutcome:
        try:
            document_root = load_xml(xml_file)
        except ValidatorError as e:
            if e.kind not in FATAL_KINDS:
                raise
            logger.warning("Skipping %s: %s", xml_file, e)
            return ValidationOutcome(xml_file, fatal=_error_violation(e, e.kind, xml_file))
        return self.validate_document(document_root, compiled, xml_file)

    def validate_files(
        self,
        xml_files: Iterable[str],
        xsd_file: str,
        workers: int = 1,
    ) -> Dict[str, ValidationOutcome]:
        """
        Validate several documents against one schema.

        A document that cannot be read or parsed gets a fatal outcome; the
        remaining documents are still validated.

        Args:
            xml_files: Document paths
            xsd_file: Schema path
            workers: Documents validated concurrently

        Returns:
            Dictionary mapping file paths to ValidationOutcome objects
        """
        paths = [str(p) for p in xml_files]
        compiled = self.load_schema(xsd_file)

        if workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(lambda p: self._validate_isolated(p, compiled), paths))
        else:
            outcomes = [self._validate_isolated(p, compiled) for p in paths]

        batch = dict(zip(paths, outcomes))
        self.results.update(batch)
        return batch

    def validate_directory(
        self,
        directory: str,
        xsd_file: Optional[str] = None,
        workers: int = 1,
    ) -> Dict[str, ValidationOutcome]:
        """
        Validate all XML files in a directory.

        When ``xsd_file`` is omitted the directory must hold exactly one schema.
        """
        dir_path = Path(directory)
        if dir_path.is_file():
            xml_files = [dir_path]
        else:
            xml_files = sorted(dir_path.glob(f"*{XML_EXTENSION}"))

        if xsd_file is None:
            schemas = sorted(dir_path.glob(f"*{XSD_EXTENSION}")) if dir_path.is_dir() else []
            if len(schemas) != 1:
                raise ValueError(
                    f"Expected exactly one {XSD_EXTENSION} file in {directory}, found {len(schemas)}; pass xsd_file"
                )
            xsd_file = str(schemas[0])

        logger.info("Validating %d XML files from %s", len(xml_files), directory)
        return self.validate_files([str(p) for p in xml_files], xsd_file, workers)

    def all_passed(self) -> bool:
        return all(outcome.passed for outcome in self.results.values())
