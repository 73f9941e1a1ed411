"""
Tests for the structural validator and the validation pipeline.

Schemas and documents are written to a temporary directory so the whole
load → model → validate path is exercised.
"""

import unittest

from xmlguard.core.errors import (
    ErrorKind,
    ResourceNotFoundError,
    SchemaMalformedError,
    SchemaValidationFailed,
    XmlParsingError,
)
from xmlguard.core.schema_cache import SchemaCache, cache_key
from xmlguard.core.settings import LEVEL_WARNING
from xmlguard.core.xml_loader import parse_xml
from xmlguard.validators.custom_rules import max_content_length_rule
from xmlguard.validators.structural import StructuralValidator, run_schema_primitive
from xmlguard.validators.validation_pipeline import CompiledSchema, ValidationPipeline

from xml_fixtures import (
    BAD_AMOUNT_INVOICE,
    BOOK_XSD,
    DOCUMENT_XSD,
    INVOICE_XSD,
    SHORT_TITLE_BOOK,
    SWAPPED_DOCUMENT,
    VALID_DOCUMENT,
    VALID_INVOICE,
    TempDir,
)


class TestStructuralValidator(unittest.TestCase):

    def setUp(self):
        self.compiled = CompiledSchema.from_text(INVOICE_XSD, "invoice.xsd")

    def test_valid_document(self):
        root = parse_xml(VALID_INVOICE)
        self.assertEqual(StructuralValidator().validate(root, self.compiled), [])

    def test_primitive_reports_diagnostics(self):
        valid, diagnostics = run_schema_primitive(self.compiled.xsd, parse_xml(BAD_AMOUNT_INVOICE))
        self.assertFalse(valid)
        self.assertTrue(diagnostics)
        self.assertTrue(all("message" in d and "line" in d for d in diagnostics))

    def test_invalid_document_raises_with_violations(self):
        root = parse_xml(BAD_AMOUNT_INVOICE)
        with self.assertRaises(SchemaValidationFailed) as ctx:
            StructuralValidator().validate(root, self.compiled, "bad.xml")
        violations = ctx.exception.violations
        self.assertTrue(violations)
        self.assertEqual(ctx.exception.kind, ErrorKind.SCHEMA_VALIDATION)
        for violation in violations:
            self.assertEqual(violation.category, "schemaValidationError")
            self.assertEqual(violation.location.file, "bad.xml")
        amount = [v for v in violations if v.details.get("expected_type") == "AmountType"]
        self.assertTrue(amount)
        self.assertEqual(amount[0].details["base_type"], "decimal")
        self.assertTrue(amount[0].details["facet_violations"])

    def test_missing_required_attribute(self):
        root = parse_xml(VALID_INVOICE.replace(' id="INV-1"', ""))
        with self.assertRaises(SchemaValidationFailed) as ctx:
            StructuralValidator().validate(root, self.compiled)
        self.assertIn("id", ctx.exception.violations[0].details["declared_attributes"])


class PipelineTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = TempDir()
        self.pipeline = ValidationPipeline(cache=SchemaCache())

    def tearDown(self):
        self.tmp.cleanup()


class TestEndToEnd(PipelineTestCase):

    def test_conformant_document_passes_every_class(self):
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        xml = self.tmp.write("document.xml", VALID_DOCUMENT)
        outcome = self.pipeline.validate_file(xml, xsd)
        self.assertTrue(outcome.passed)
        self.assertEqual([c.name for c in outcome.classes], ["Structural", "Custom", "Order"])
        self.assertEqual(outcome.violations(), [])

    def test_short_title_fails_custom_class_only(self):
        xsd = self.tmp.write("book.xsd", BOOK_XSD)
        xml = self.tmp.write("book.xml", SHORT_TITLE_BOOK)
        outcome = self.pipeline.validate_file(xml, xsd)
        self.assertFalse(outcome.passed)
        self.assertTrue(outcome.get("Structural").passed)
        self.assertTrue(outcome.get("Order").passed)
        custom = outcome.get("Custom")
        self.assertFalse(custom.passed)
        self.assertEqual(len(custom.violations), 1)
        self.assertEqual(custom.violations[0].location.file, xml)

    def test_every_class_runs_after_a_failure(self):
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        xml = self.tmp.write("swapped.xml", SWAPPED_DOCUMENT)
        outcome = self.pipeline.validate_file(xml, xsd)
        self.assertFalse(outcome.get("Structural").passed)
        self.assertTrue(outcome.get("Custom").passed)
        order = outcome.get("Order")
        self.assertEqual(len(order.violations), 1)
        self.assertEqual(order.violations[0].details["expected"], "body")
        self.assertEqual(order.violations[0].details["found"], "footer")

    def test_order_class_can_be_disabled(self):
        pipeline = ValidationPipeline(check_order=False)
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        outcome = pipeline.validate_file(self.tmp.write("d.xml", VALID_DOCUMENT), xsd)
        self.assertEqual([c.name for c in outcome.classes], ["Structural", "Custom"])

    def test_unexpected_error_is_isolated(self):
        def exploding_rule(document_root):
            raise ValueError("bad rule")

        pipeline = ValidationPipeline(rules=[exploding_rule])
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        outcome = pipeline.validate_file(self.tmp.write("d.xml", VALID_DOCUMENT), xsd)
        self.assertTrue(outcome.get("Structural").passed)
        self.assertFalse(outcome.get("Custom").passed)
        self.assertTrue(outcome.get("Order").passed)

    def test_warnings_do_not_fail_a_class(self):
        pipeline = ValidationPipeline(rules=[max_content_length_rule(4)])
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        outcome = pipeline.validate_file(self.tmp.write("d.xml", VALID_DOCUMENT), xsd)
        custom = outcome.get("Custom")
        self.assertTrue(custom.violations)
        self.assertTrue(all(v.level == LEVEL_WARNING for v in custom.violations))
        self.assertEqual(custom.errors, ())
        self.assertTrue(custom.passed)
        self.assertTrue(outcome.passed)
        self.assertEqual(outcome.total_errors(), 0)

    def test_validate_text(self):
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        self.assertTrue(self.pipeline.validate_text(VALID_DOCUMENT, xsd).passed)


class TestSchemaLoading(PipelineTestCase):

    def test_schema_is_cached_by_path(self):
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        first = self.pipeline.load_schema(xsd)
        self.assertIs(self.pipeline.load_schema(xsd), first)
        self.assertIs(self.pipeline.cache.get(cache_key(xsd)), first)

    def test_invalidated_schema_is_recompiled(self):
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        first = self.pipeline.load_schema(xsd)
        self.pipeline.cache.invalidate(cache_key(xsd))
        self.assertIsNot(self.pipeline.load_schema(xsd), first)

    def test_missing_schema(self):
        with self.assertRaises(ResourceNotFoundError) as ctx:
            self.pipeline.load_schema(self.tmp.path + "/nope.xsd")
        self.assertEqual(ctx.exception.kind, ErrorKind.IO_ERROR)

    def test_schema_with_wrong_root(self):
        xsd = self.tmp.write("broken.xsd", "<notaschema/>")
        with self.assertRaises(SchemaMalformedError):
            self.pipeline.load_schema(xsd)

    def test_unparseable_document_propagates(self):
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        xml = self.tmp.write("broken.xml", "<document><header>")
        with self.assertRaises(XmlParsingError) as ctx:
            self.pipeline.validate_file(xml, xsd)
        self.assertIsNotNone(ctx.exception.line)


class TestMultiFileRuns(PipelineTestCase):

    def test_load_errors_do_not_abort_the_run(self):
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        good = self.tmp.write("good.xml", VALID_DOCUMENT)
        broken = self.tmp.write("broken.xml", "<document>")
        missing = self.tmp.path + "/missing.xml"
        results = self.pipeline.validate_files([good, broken, missing], xsd)
        self.assertTrue(results[good].passed)
        self.assertEqual(results[broken].fatal.kind, ErrorKind.PARSE_ERROR)
        self.assertEqual(results[missing].fatal.kind, ErrorKind.IO_ERROR)
        self.assertEqual(results[missing].classes, ())
        self.assertFalse(self.pipeline.all_passed())

    def test_concurrent_workers(self):
        xsd = self.tmp.write("document.xsd", DOCUMENT_XSD)
        files = [self.tmp.write(f"doc{i}.xml", VALID_DOCUMENT) for i in range(4)]
        files.append(self.tmp.write("swapped.xml", SWAPPED_DOCUMENT))
        results = self.pipeline.validate_files(files, xsd, workers=3)
        self.assertEqual(list(results), files)
        self.assertEqual(sum(1 for o in results.values() if o.passed), 4)

    def test_directory_with_single_schema(self):
        self.tmp.write("document.xsd", DOCUMENT_XSD)
        self.tmp.write("a.xml", VALID_DOCUMENT)
        self.tmp.write("b.xml", SWAPPED_DOCUMENT)
        results = self.pipeline.validate_directory(self.tmp.path)
        self.assertEqual(len(results), 2)
        self.assertEqual(sorted(o.passed for o in results.values()), [False, True])

    def test_directory_needs_one_schema(self):
        self.tmp.write("a.xsd", DOCUMENT_XSD)
        self.tmp.write("b.xsd", BOOK_XSD)
        with self.assertRaises(ValueError):
            self.pipeline.validate_directory(self.tmp.path)


if __name__ == "__main__":
    unittest.main()
