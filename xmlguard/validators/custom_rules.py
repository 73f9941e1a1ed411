"""
custom_rules.py

Business rules evaluated independently of the schema structure.

A rule is any callable ``rule(document_root) -> iterable of Violation``.
Rules run in order and are isolated from each other: a rule that raises is
reported as a violation and the remaining rules still run.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from ..core.errors import ErrorKind
from ..core.settings import (
    LEVEL_ERROR,
    LEVEL_WARNING,
    MAX_CONTENT_LENGTH,
    PROHIBITED_ATTRIBUTES,
    PROHIBITED_ELEMENTS,
    TITLE_MIN_LENGTH,
)
from ..core.violation import Location, Violation
from ..core.xml_loader import element_text, local_name

logger = logging.getLogger(__name__)

Rule = Callable[..., Iterable[Violation]]


def _iter_elements(document_root):
    for node in document_root.iter():
        if isinstance(node.tag, str):
            yield node


def _custom(message, node, level=LEVEL_ERROR, **details):
    return Violation(
        ErrorKind.CUSTOM_VALIDATION,
        message,
        level=level,
        location=Location(local_name(node), node.sourceline),
        details=details,
    )


# ==============================================================================
# RULE FACTORIES
# ==============================================================================


def title_length_rule(min_length: int = TITLE_MIN_LENGTH) -> Rule:
    """Every <title> must have text strictly longer than ``min_length`` characters."""

    def check_title_length(document_root):
        for node in _iter_elements(document_root):
            if local_name(node) != "title":
                continue
            text = element_text(node).strip()
            if len(text) <= min_length:
                yield _custom(
                    f"Title length must be greater than {min_length} characters (found {len(text)})",
                    node,
                    rule="title_length",
                    min_length=min_length,
                    actual=len(text),
                )

    return check_title_length


def prohibited_elements_rule(names: Sequence[str]) -> Rule:
    prohibited = frozenset(names)

    def check_prohibited_elements(document_root):
        for node in _iter_elements(document_root):
            if local_name(node) in prohibited:
                yield _custom(
                    f"Prohibited element found: {local_name(node)}",
                    node,
                    rule="prohibited_element",
                )

    return check_prohibited_elements


def prohibited_attributes_rule(names: Sequence[str]) -> Rule:
    prohibited = frozenset(names)

    def check_prohibited_attributes(document_root):
        for node in _iter_elements(document_root):
            for attr in node.attrib:
                attr_name = attr.rsplit("}", 1)[-1]
                if attr_name in prohibited:
                    yield _custom(
                        f"Prohibited attribute found: {attr_name}",
                        node,
                        rule="prohibited_attribute",
                        attribute=attr_name,
                    )

    return check_prohibited_attributes


def max_content_length_rule(limit: int = 1024) -> Rule:
    """Own text longer than ``limit`` characters is a warning."""

    def check_content_length(document_root):
        for node in _iter_elements(document_root):
            length = len(node.text or "")
            if length > limit:
                yield _custom(
                    f"Content length exceeded: {length}",
                    node,
                    level=LEVEL_WARNING,
                    rule="max_content_length",
                    limit=limit,
                    actual=length,
                )

    return check_content_length


def default_rules(
    title_min_length: int = TITLE_MIN_LENGTH,
    prohibited_elements: Sequence[str] = PROHIBITED_ELEMENTS,
    prohibited_attributes: Sequence[str] = PROHIBITED_ATTRIBUTES,
    max_content_length: int = MAX_CONTENT_LENGTH,
) -> List[Rule]:
    """Title rule plus whichever optional rules are configured."""
    rules = [title_length_rule(title_min_length)]
    if prohibited_elements:
        rules.append(prohibited_elements_rule(prohibited_elements))
    if prohibited_attributes:
        rules.append(prohibited_attributes_rule(prohibited_attributes))
    if max_content_length:
        rules.append(max_content_length_rule(max_content_length))
    return rules


# ==============================================================================
# VALIDATOR
# ==============================================================================


class CustomRuleValidator:
    """Runs an ordered list of business rules over a document."""

    name = "Custom"

    def __init__(self, rules: Optional[Sequence[Rule]] = None):
        self.rules = list(rules) if rules is not None else default_rules()

    def add_rule(self, rule: Rule) -> None:
        self.rules.append(rule)

    def validate(self, document_root, file_path: Optional[str] = None) -> List[Violation]:
        violations: List[Violation] = []
        for rule in self.rules:
            rule_name = getattr(rule, "__name__", repr(rule))
            try:
                found = list(rule(document_root))
            except Exception as e:
                logger.exception("Custom rule %s failed", rule_name)
                found = [
                    Violation(
                        ErrorKind.CUSTOM_VALIDATION,
                        f"Custom rule {rule_name} raised {type(e).__name__}: {e}",
                        level=LEVEL_ERROR,
                        location=Location(local_name(document_root), document_root.sourceline),
                        details={"rule": rule_name},
                    )
                ]
            violations.extend(v.with_file(file_path) for v in found)
        return violations
