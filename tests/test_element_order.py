"""
Unit tests for the element order check.
"""

import unittest

from xmlguard.core.errors import ErrorKind
from xmlguard.core.schema_model import build_schema_model
from xmlguard.core.xml_loader import parse_xml
from xmlguard.validators.element_order import ElementOrderValidator, check_children_order

from xml_fixtures import ABC_XSD, INVOICE_XSD, VALID_INVOICE, XS, abc_document


class TestElementOrder(unittest.TestCase):
    """Order replay against a declared sequence [a, b, c]."""

    def setUp(self):
        self.model = build_schema_model(parse_xml(ABC_XSD))
        self.validator = ElementOrderValidator()

    def check(self, *names):
        return self.validator.validate(parse_xml(abc_document(*names)), self.model, "doc.xml")

    def test_matching_order(self):
        self.assertEqual(self.check("a", "b", "c"), [])

    def test_swapped_children_yield_one_violation(self):
        violations = self.check("a", "c", "b")
        self.assertEqual(len(violations), 1)
        violation = violations[0]
        self.assertEqual(violation.kind, ErrorKind.ELEMENT_ORDER)
        self.assertEqual(violation.details["expected"], "b")
        self.assertEqual(violation.details["found"], "c")
        self.assertEqual(violation.details["position"], 1)
        self.assertEqual(violation.location.element, "c")
        self.assertEqual(violation.location.file, "doc.xml")

    def test_missing_trailing_element(self):
        violations = self.check("a", "b")
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].details["expected"], "c")
        self.assertIsNone(violations[0].details["found"])
        self.assertIn("missing element 'c'", violations[0].message)

    def test_missing_names_first_absent_element(self):
        violations = self.check("a")
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].details["expected"], "b")

    def test_no_children_is_a_violation(self):
        violations = self.check()
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].details["expected"], "a")
        self.assertEqual(violations[0].location.element, "root")

    def test_position_holds_after_mismatch(self):
        # x never matches; a, b, c still line up behind it
        violations = self.check("x", "a", "b", "c")
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].details["found"], "x")
        self.assertEqual(violations[0].details["expected"], "a")

    def test_repeated_child_does_not_hide_missing_element(self):
        violations = self.check("a", "b", "b")
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].details["expected"], "c")
        self.assertIsNone(violations[0].details["found"])

    def test_repeated_first_child_reports_next_missing(self):
        violations = self.check("a", "a", "a")
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].details["expected"], "b")
        self.assertIn("missing element 'b'", violations[0].message)

    def test_stray_child_and_missing_element_both_reported(self):
        violations = self.check("a", "x", "b")
        self.assertEqual(
            [(v.details["expected"], v.details["found"]) for v in violations],
            [("b", "x"), ("c", None)],
        )

    def test_unexpected_trailing_element(self):
        violations = self.check("a", "b", "c", "d")
        self.assertEqual(len(violations), 1)
        self.assertIsNone(violations[0].details["expected"])
        self.assertEqual(violations[0].details["found"], "d")

    def test_comments_are_ignored(self):
        root = parse_xml("<root><a/><!-- note --><b/><c/></root>")
        self.assertEqual(self.validator.validate(root, self.model), [])


class TestNestedOrder(unittest.TestCase):

    def test_repeated_elements_are_accepted(self):
        model = build_schema_model(parse_xml(INVOICE_XSD))
        self.assertEqual(ElementOrderValidator().validate(parse_xml(VALID_INVOICE), model), [])

    def test_nested_violation_below_unconstrained_node(self):
        schema = f"""<xs:schema {XS}>
          <xs:complexType name="pair">
            <xs:sequence>
              <xs:element name="left" type="xs:string"/>
              <xs:element name="right" type="xs:string"/>
            </xs:sequence>
          </xs:complexType>
        </xs:schema>"""
        model = build_schema_model(parse_xml(schema))
        document = parse_xml("<wrapper><group><pair><right/><left/></pair></group></wrapper>")
        violations = ElementOrderValidator().validate(document, model)
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].details["parent"], "/wrapper/group/pair")

    def test_violations_in_document_order(self):
        model = build_schema_model(parse_xml(INVOICE_XSD))
        document = parse_xml(
            "<invoice><header/><line><amount/><sku/></line><line><amount/><sku/></line><footer/></invoice>"
        )
        violations = ElementOrderValidator().validate(document, model)
        lines = [v.location.line for v in violations]
        self.assertEqual(len(violations), 2)
        self.assertEqual(lines, sorted(lines))

    def test_check_children_order_directly(self):
        node = parse_xml("<p><b/><a/></p>")
        violations = check_children_order(node, ("a", "b"), "/p")
        self.assertEqual([v.details["found"] for v in violations], ["b"])


if __name__ == "__main__":
    unittest.main()
