"""
facets.py

Facet validators: one pure function per base type.

Each validator takes the raw text of a value plus the restrictions of its
simple type and returns every violated facet. Checks accumulate; only a
value that cannot be parsed at all stops the remaining checks for it.
"""

import re
from datetime import datetime, time as dt_time
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Mapping, Optional

from ..core.errors import ErrorKind
from ..core.settings import LEVEL_ERROR
from ..core.violation import Location, Violation

INTEGER_TYPES = {
    "integer",
    "int",
    "long",
    "short",
    "byte",
    "nonNegativeInteger",
    "nonPositiveInteger",
    "positiveInteger",
    "negativeInteger",
    "unsignedLong",
    "unsignedInt",
    "unsignedShort",
    "unsignedByte",
}
DECIMAL_TYPES = {"decimal", "float", "double"}

_INTEGER_RE = re.compile(r"[+-]?\d+")
_DECIMAL_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"

# Exact lexical forms; strptime and fromisoformat alone are more lenient
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIME_RE = re.compile(r"\d{2}:\d{2}:\d{2}")
_DATETIME_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})?")


class FacetResult:
    """Outcome of checking one value against its simple type."""

    __slots__ = ("violations",)

    def __init__(self, violations: Optional[List[Violation]] = None):
        self.violations = tuple(violations or ())

    @property
    def ok(self) -> bool:
        return not self.violations

    def __repr__(self):
        return f"FacetResult(ok={self.ok}, violations={list(self.violations)})"


class _Collector:
    """Builds dataTypeValidationError violations for one value."""

    def __init__(self, value: str, type_name: str, location: Optional[Location]):
        self.value = value
        self.type_name = type_name
        self.location = location or Location()
        self.violations: List[Violation] = []

    def add(self, facet: str, message: str, expected=None):
        where = f" for element {self.location.element}" if self.location.element else ""
        self.violations.append(
            Violation(
                ErrorKind.DATA_TYPE,
                f"{message}{where}",
                level=LEVEL_ERROR,
                location=self.location,
                details={
                    "facet": facet,
                    "expected": expected,
                    "actual": self.value,
                    "type": self.type_name,
                },
            )
        )

    def result(self) -> FacetResult:
        return FacetResult(self.violations)


def _collapse(value: str) -> str:
    return value.strip()


def _check_range(collector: _Collector, restrictions, parsed, parse_bound, label):
    for facet in ("minInclusive", "maxInclusive"):
        raw = restrictions.get(facet)
        if raw is None:
            continue
        bound = parse_bound(raw)
        if bound is None:
            collector.add(
                "invalidFacetValue",
                f"Facet {facet} value '{raw}' is not a valid {label}",
                expected=raw,
            )
            continue
        try:
            too_low = facet == "minInclusive" and parsed < bound
            too_high = facet == "maxInclusive" and parsed > bound
        except TypeError:
            # Mixed naive/aware datetimes compare on their wall-clock value
            parsed_cmp = parsed.replace(tzinfo=None)
            bound_cmp = bound.replace(tzinfo=None)
            too_low = facet == "minInclusive" and parsed_cmp < bound_cmp
            too_high = facet == "maxInclusive" and parsed_cmp > bound_cmp
        if too_low:
            collector.add(facet, f"Value '{collector.value}' is less than {facet} {raw}", expected=raw)
        elif too_high:
            collector.add(facet, f"Value '{collector.value}' is greater than {facet} {raw}", expected=raw)


def _check_pattern(collector: _Collector, restrictions, text: str):
    pattern = restrictions.get("pattern")
    if pattern is None:
        return
    try:
        matched = re.fullmatch(pattern, text) is not None
    except re.error as e:
        collector.add("pattern", f"Pattern '{pattern}' could not be compiled: {e}", expected=pattern)
        return
    if not matched:
        collector.add("pattern", f"Value '{text}' does not match pattern '{pattern}'", expected=pattern)


def _digit_counts(text: str):
    """(significant digits, fraction digits) of a decimal literal."""
    unsigned = text.lstrip("+-")
    integer_part, _, fraction_part = unsigned.partition(".")
    integer_part = integer_part.lstrip("0")
    fraction_part = fraction_part.rstrip("0")
    return len(integer_part) + len(fraction_part), len(fraction_part)


def _check_digits(collector: _Collector, restrictions, text: str):
    total, fraction = _digit_counts(text)
    total_digits = restrictions.get("totalDigits")
    if total_digits is not None and total > total_digits:
        collector.add(
            "totalDigits",
            f"Value '{collector.value}' has {total} digits, more than totalDigits {total_digits}",
            expected=total_digits,
        )
    fraction_digits = restrictions.get("fractionDigits")
    if fraction_digits is not None and fraction > fraction_digits:
        collector.add(
            "fractionDigits",
            f"Value '{collector.value}' has {fraction} fraction digits, more than fractionDigits {fraction_digits}",
            expected=fraction_digits,
        )


# ==============================================================================
# BASE TYPE VALIDATORS
# ==============================================================================


def _parse_integer(raw: str) -> Optional[int]:
    text = _collapse(raw)
    if not _INTEGER_RE.fullmatch(text):
        return None
    return int(text)


def _parse_decimal(raw: str) -> Optional[Decimal]:
    text = _collapse(raw)
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def validate_integer(value: str, restrictions: Mapping, type_name="integer", location=None) -> FacetResult:
    collector = _Collector(value, type_name, location)
    parsed = _parse_integer(value)
    if parsed is None:
        collector.add("type", f"Value '{value}' is not an integer", expected="integer")
        return collector.result()
    _check_range(collector, restrictions, parsed, _parse_decimal, "number")
    _check_digits(collector, restrictions, _collapse(value))
    _check_pattern(collector, restrictions, value)
    return collector.result()


def validate_decimal(value: str, restrictions: Mapping, type_name="decimal", location=None) -> FacetResult:
    collector = _Collector(value, type_name, location)
    parsed = _parse_decimal(value)
    if parsed is None:
        collector.add("type", f"Value '{value}' is not a decimal", expected="decimal")
        return collector.result()
    text = _collapse(value)
    _check_range(collector, restrictions, parsed, _parse_decimal, "number")
    if _DECIMAL_RE.fullmatch(text):
        _check_digits(collector, restrictions, text)
    else:
        # Exponent notation: count digits of the normalized value
        _check_digits(collector, restrictions, format(parsed, "f"))
    _check_pattern(collector, restrictions, value)
    return collector.result()


def validate_boolean(value: str, restrictions: Mapping, type_name="boolean", location=None) -> FacetResult:
    collector = _Collector(value, type_name, location)
    if value not in ("true", "false"):
        collector.add("type", f"Value '{value}' is not a boolean", expected="true|false")
        return collector.result()
    _check_pattern(collector, restrictions, value)
    return collector.result()


def validate_string(value: str, restrictions: Mapping, type_name="string", location=None) -> FacetResult:
    collector = _Collector(value, type_name, location)
    length = len(value)
    min_length = restrictions.get("minLength")
    if min_length is not None and length < min_length:
        collector.add(
            "minLength",
            f"Value '{value}' is shorter than minLength {min_length}",
            expected=min_length,
        )
    max_length = restrictions.get("maxLength")
    if max_length is not None and length > max_length:
        collector.add(
            "maxLength",
            f"Value '{value}' is longer than maxLength {max_length}",
            expected=max_length,
        )
    _check_pattern(collector, restrictions, value)
    return collector.result()


def _parse_date(raw: str):
    text = _collapse(raw)
    if not _DATE_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def _parse_time(raw: str) -> Optional[dt_time]:
    text = _collapse(raw)
    if not _TIME_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, TIME_FORMAT).time()
    except ValueError:
        return None


def _parse_datetime(raw: str) -> Optional[datetime]:
    text = _collapse(raw)
    if not _DATETIME_RE.fullmatch(text):
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _temporal_validator(parse: Callable, label: str):
    def validate(value: str, restrictions: Mapping, type_name=label, location=None) -> FacetResult:
        collector = _Collector(value, type_name, location)
        parsed = parse(value)
        if parsed is None:
            collector.add("type", f"Invalid {label} format: {value}", expected=label)
            return collector.result()
        _check_range(collector, restrictions, parsed, parse, label)
        _check_pattern(collector, restrictions, value)
        return collector.result()

    validate.__name__ = f"validate_{label}"
    validate.__doc__ = f"Check a {label} value against its facets."
    return validate


validate_date = _temporal_validator(_parse_date, "date")
validate_time = _temporal_validator(_parse_time, "time")
validate_datetime = _temporal_validator(_parse_datetime, "dateTime")


BASE_VALIDATORS: Dict[str, Callable[..., FacetResult]] = {
    "integer": validate_integer,
    "decimal": validate_decimal,
    "boolean": validate_boolean,
    "string": validate_string,
    "date": validate_date,
    "time": validate_time,
    "dateTime": validate_datetime,
}


def base_family(base_type: str) -> str:
    """Map an XSD built-in type name onto one of the seven validator families."""
    if base_type in BASE_VALIDATORS:
        return base_type
    if base_type in INTEGER_TYPES:
        return "integer"
    if base_type in DECIMAL_TYPES:
        return "decimal"
    return "string"


def validate_value(value: str, simple_type, location: Optional[Location] = None) -> FacetResult:
    """
    Check a textual value against a simple type's base type and facets.

    Args:
        value: Raw text of the element or attribute
        simple_type: SimpleType from the Schema Model
        location: Where the value was found

    Returns:
        FacetResult with every violated facet
    """
    validator = BASE_VALIDATORS[base_family(simple_type.base_type)]
    return validator(value, simple_type.restrictions, simple_type.name, location)
