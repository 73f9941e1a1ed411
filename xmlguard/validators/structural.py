"""
structural.py

Whole-document schema conformance.

Type, cardinality and attribute checks are delegated to the XSD engine
(python-xmlschema). Each raw diagnostic is wrapped into a Violation and
enriched with the element's declared type from the Schema Model.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

import xmlschema

from ..core.errors import ErrorKind, SchemaMalformedError, SchemaValidationFailed
from ..core.settings import LEVEL_ERROR
from ..core.violation import Location, Violation
from ..core.xml_loader import element_text, local_name
from .facets import validate_value

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"\[[^\]]*\]$")


def compile_xsd(schema_text: str, source: Optional[str] = None) -> xmlschema.XMLSchema:
    """
    Compile schema text with python-xmlschema.

    Args:
        schema_text: XSD document text
        source: Path the text came from

    Returns:
        Compiled XMLSchema

    Raises:
        SchemaMalformedError: If the schema does not compile
    """
    try:
        return xmlschema.XMLSchema(schema_text.strip())
    except Exception as e:
        raise SchemaMalformedError(
            f"Could not compile schema {source or '<string>'}: {e}", path=source or ""
        ) from e


def run_schema_primitive(xsd: xmlschema.XMLSchema, document_root) -> Tuple[bool, List[Dict]]:
    """
    Validate a document tree with the compiled XSD.

    Returns:
        (valid, diagnostics) where each diagnostic has
        message, line, column, element_name and path
    """
    diagnostics: List[Dict] = []
    for err in xsd.iter_errors(document_root):
        elem = getattr(err, "elem", None)
        obj = getattr(err, "obj", None)
        path = getattr(err, "path", None) or ""
        if elem is not None and isinstance(getattr(elem, "tag", None), str):
            element_name = local_name(elem)
            line = getattr(elem, "sourceline", None)
            value = element_text(elem) if len(elem) == 0 else None
        else:
            element_name = _name_from_path(path)
            line = None
            value = None
        if value is None and isinstance(obj, str):
            value = obj
        diagnostics.append(
            {
                "message": getattr(err, "reason", None) or str(err),
                "line": getattr(err, "sourceline", None) or line,
                "column": None,
                "element_name": element_name,
                "path": path,
                "value": value,
            }
        )
    return not diagnostics, diagnostics


def _name_from_path(path: str) -> Optional[str]:
    """'/invoice/line[2]/ns:amount' -> 'amount'."""
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    segment = _INDEX_RE.sub("", segment).rsplit("}", 1)[-1].split(":", 1)[-1]
    return segment or None


class StructuralValidator:
    """Wraps the XSD engine and converts its diagnostics into Violations."""

    name = "Structural"

    def validate(self, document_root, compiled, file_path: Optional[str] = None) -> List[Violation]:
        """
        Validate a document against a compiled schema.

        Args:
            document_root: Root element of the document
            compiled: CompiledSchema (XSD engine + Schema Model)
            file_path: Document path for violation locations

        Returns:
            Empty list when the document conforms

        Raises:
            SchemaValidationFailed: Carrying every violation when it does not
        """
        valid, diagnostics = run_schema_primitive(compiled.xsd, document_root)
        if valid:
            return []

        violations = [self._wrap(d, compiled.model, file_path) for d in diagnostics]
        logger.info("Schema validation found %d problem(s) in %s", len(violations), file_path or "<document>")
        raise SchemaValidationFailed("Schema validation failed", violations)

    def _wrap(self, diagnostic: Dict, model, file_path: Optional[str]) -> Violation:
        element_name = diagnostic["element_name"]
        location = Location(element_name, diagnostic["line"], diagnostic["column"], file_path)
        details = {"path": diagnostic["path"]}

        if element_name:
            type_name = model.type_of(element_name)
            if type_name:
                details["expected_type"] = type_name
            simple_type = model.simple_type_for(element_name)
            if simple_type is not None:
                details["base_type"] = simple_type.base_type
                details["restrictions"] = dict(simple_type.restrictions)
                if diagnostic["value"] is not None:
                    result = validate_value(diagnostic["value"], simple_type, location)
                    details["facet_violations"] = [v.message for v in result.violations]
            declared = model.attributes.get(element_name) or model.attributes.get(type_name or "")
            if declared:
                details["declared_attributes"] = {n: d.to_dict() for n, d in declared.items()}

        message = diagnostic["message"]
        if element_name:
            message = f"{message} (element: {element_name})"
        return Violation(
            ErrorKind.SCHEMA_VALIDATION,
            message,
            level=LEVEL_ERROR,
            location=location,
            details=details,
        )
