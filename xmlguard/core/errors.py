"""
Error taxonomy for the validation engine.

Every error kind the engine knows about is a member of ``ErrorKind``. Raised
errors all derive from ``ValidatorError`` and carry their kind plus structured
payload, so handling sites can dispatch on ``err.kind`` instead of walking
exception class chains.
"""

from enum import Enum
from typing import List, Optional


class ErrorKind(Enum):
    """Closed set of error kinds. The value doubles as the report category."""

    IO_ERROR = "ioError"
    PARSE_ERROR = "parseError"
    SCHEMA_MALFORMED = "schemaMalformed"
    SCHEMA_VALIDATION = "schemaValidationError"
    CUSTOM_VALIDATION = "customValidationError"
    ELEMENT_ORDER = "elementOrderError"
    DATA_TYPE = "dataTypeValidationError"


# Terminate the attempt for one document or schema
FATAL_KINDS = frozenset(
    {ErrorKind.IO_ERROR, ErrorKind.PARSE_ERROR, ErrorKind.SCHEMA_MALFORMED}
)

# Collected as violations, never abort the orchestrator
RECOVERABLE_KINDS = frozenset(
    {
        ErrorKind.SCHEMA_VALIDATION,
        ErrorKind.CUSTOM_VALIDATION,
        ErrorKind.ELEMENT_ORDER,
        ErrorKind.DATA_TYPE,
    }
)


def is_recoverable(kind: ErrorKind) -> bool:
    return kind in RECOVERABLE_KINDS


class ValidatorError(Exception):
    """Base class for every error raised by xmlguard."""

    kind: ErrorKind = ErrorKind.SCHEMA_VALIDATION

    def __init__(self, message: str, violations: Optional[List] = None):
        super().__init__(message)
        self.message = message
        self.violations = list(violations or [])


class ResourceNotFoundError(ValidatorError):
    """A document or schema file is missing or unreadable."""

    kind = ErrorKind.IO_ERROR

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class XmlParsingError(ValidatorError):
    """Markup could not be parsed into a tree."""

    kind = ErrorKind.PARSE_ERROR

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        path: str = "",
    ):
        super().__init__(message)
        self.line = line
        self.column = column
        self.path = path


class SchemaMalformedError(ValidatorError):
    """The schema tree cannot be interpreted by the modeler or compiled."""

    kind = ErrorKind.SCHEMA_MALFORMED

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class SchemaValidationFailed(ValidatorError):
    """The schema validation primitive reported the document invalid."""

    kind = ErrorKind.SCHEMA_VALIDATION

