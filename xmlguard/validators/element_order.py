"""
element_order.py

Replays the Schema Model's declared child order against a document tree.

The XSD engine checks content models per type; this pass reports order
problems in the shape the model declares them: one violation per
out-of-place child and one for the first declared element that never
appears. Position only advances on a match. After a mismatch it holds, with
no resynchronization.
"""

import logging
from typing import List, Optional, Tuple

from ..core.errors import ErrorKind
from ..core.settings import LEVEL_ERROR
from ..core.violation import Location, Violation
from ..core.xml_loader import iter_children, local_name

logger = logging.getLogger(__name__)


def _order_violation(message, parent_path, element, line, file_path, expected, found, position):
    return Violation(
        ErrorKind.ELEMENT_ORDER,
        message,
        level=LEVEL_ERROR,
        location=Location(element, line, None, file_path),
        details={
            "expected": expected,
            "found": found,
            "position": position,
            "parent": parent_path,
        },
    )


def check_children_order(
    node,
    expected: Tuple[str, ...],
    path: str = "",
    file_path: Optional[str] = None,
) -> List[Violation]:
    """
    Check the direct children of ``node`` against one expected order.

    Args:
        node: Parent element
        expected: Declared child element names, in order
        path: Slash path of ``node`` for reporting
        file_path: Document path for violation locations

    Returns:
        Violations for this node only (no descent)
    """
    violations: List[Violation] = []
    children = list(iter_children(node))
    position = 0
    last_matched = None

    for child in children:
        name = local_name(child)
        if position < len(expected) and name == expected[position]:
            last_matched = name
            position += 1
            continue
        if name == last_matched:
            # Repeated occurrence; cardinality belongs to the XSD engine
            continue
        wanted = expected[position] if position < len(expected) else None
        if wanted is None:
            message = f"Element order violation in {path}: unexpected element '{name}'"
        else:
            message = f"Element order violation in {path}: expected '{wanted}', found '{name}'"
        violations.append(
            _order_violation(message, path, name, child.sourceline, file_path, wanted, name, position)
        )

    names = {local_name(child) for child in children}
    if position < len(expected) and expected[position] not in names:
        missing = expected[position]
        violations.append(
            _order_violation(
                f"Element order violation in {path}: missing element '{missing}'",
                path,
                local_name(node),
                node.sourceline,
                file_path,
                missing,
                None,
                position,
            )
        )
    return violations


class ElementOrderValidator:
    """Depth-first order check over the whole document."""

    name = "Order"

    def validate(self, document_root, model, file_path: Optional[str] = None) -> List[Violation]:
        """
        Walk the document and check every node that has a declared order.

        Args:
            document_root: Root element of the document
            model: SchemaModel with complex_type_order
            file_path: Document path for violation locations

        Returns:
            Violations in document (pre-)order
        """
        violations: List[Violation] = []
        stack = [(document_root, "/" + local_name(document_root))]

        while stack:
            node, path = stack.pop()
            expected = model.order_for(local_name(node))
            if expected is not None:
                violations.extend(check_children_order(node, expected, path, file_path))

            children = list(iter_children(node))
            for child in reversed(children):
                stack.append((child, f"{path}/{local_name(child)}"))

        if violations:
            logger.info("Element order check found %d problem(s) in %s", len(violations), file_path or "<document>")
        return violations
