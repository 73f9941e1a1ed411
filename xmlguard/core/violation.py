"""
Violation and outcome records shared by every validator.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ErrorKind
from .settings import LEVEL_ERROR, LEVEL_NAMES


class Location:
    """Where a violation was found. Every field is optional."""

    __slots__ = ("element", "line", "column", "file")

    def __init__(
        self,
        element: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        file: Optional[str] = None,
    ):
        self.element = element
        self.line = line
        self.column = column
        self.file = file

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element": self.element,
            "line": self.line,
            "column": self.column,
            "file": self.file,
        }

    def __eq__(self, other):
        if not isinstance(other, Location):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"Location(element={self.element!r}, line={self.line!r}, "
            f"column={self.column!r}, file={self.file!r})"
        )


class Violation:
    """Represents a single validation failure."""

    __slots__ = ("kind", "level", "message", "location", "details")

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        level: int = LEVEL_ERROR,
        location: Optional[Location] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        self.kind = kind
        self.level = level
        self.message = message
        self.location = location or Location()
        self.details = MappingProxyType(dict(details or {}))

    @property
    def category(self) -> str:
        return self.kind.value

    @property
    def severity(self) -> str:
        return LEVEL_NAMES.get(self.level, "unknown")

    def with_file(self, file_path: Optional[str]) -> "Violation":
        """Return a copy located in ``file_path`` (self if nothing changes)."""
        if not file_path or self.location.file == file_path:
            return self
        location = Location(
            self.location.element,
            self.location.line,
            self.location.column,
            file_path,
        )
        return Violation(self.kind, self.message, self.level, location, self.details)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.name,
            "category": self.category,
            "level": self.level,
            "severity": self.severity,
            "message": self.message,
            "location": self.location.to_dict(),
            "details": dict(self.details),
        }

    def __repr__(self):
        where = self.location.element or "<unknown>"
        if self.location.line is not None:
            where = f"{where} (line {self.location.line})"
        return f"{self.category} [{self.severity}]: {self.message} (at {where})"


class ClassResult:
    """Result of one validation class (Structural, Custom or Order)."""

    def __init__(self, name: str, violations: Optional[List[Violation]] = None):
        self.name = name
        self.violations: Tuple[Violation, ...] = tuple(violations or ())

    @property
    def errors(self) -> Tuple[Violation, ...]:
        """Violations at error level or above; warnings are reported but never fail a class."""
        return tuple(v for v in self.violations if v.level >= LEVEL_ERROR)

    @property
    def passed(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "errors": len(self.errors),
            "violations": [v.to_dict() for v in self.violations],
        }

    def __repr__(self):
        return f"ClassResult({self.name!r}, passed={self.passed}, violations={len(self.violations)})"


class ValidationOutcome:
    """Holds validation results for a single document."""

    def __init__(
        self,
        file_path: Optional[str] = None,
        classes: Optional[List[ClassResult]] = None,
        fatal: Optional[Violation] = None,
    ):
        self.file_path = file_path
        self.classes: Tuple[ClassResult, ...] = tuple(classes or ())
        self.fatal = fatal

    @property
    def passed(self) -> bool:
        """True if the document was validated and every class passed."""
        return self.fatal is None and all(c.passed for c in self.classes)

    def get(self, name: str) -> Optional[ClassResult]:
        for result in self.classes:
            if result.name == name:
                return result
        return None

    def violations(self) -> List[Violation]:
        """All violations in class order, fatal error first."""
        collected = [self.fatal] if self.fatal is not None else []
        for result in self.classes:
            collected.extend(result.violations)
        return collected

    def total_errors(self) -> int:
        """Number of violations at error level or above."""
        return sum(1 for v in self.violations() if v.level >= LEVEL_ERROR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file_path,
            "passed": self.passed,
            "fatal": self.fatal.to_dict() if self.fatal is not None else None,
            "classes": [c.to_dict() for c in self.classes],
        }
