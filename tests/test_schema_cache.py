"""
Unit tests for the schema cache.
"""

import os
import unittest

from xmlguard.core.schema_cache import SchemaCache, cache_key


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestSchemaCache(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.cache = SchemaCache(ttl=3600, clock=self.clock)

    def test_set_then_get(self):
        model = object()
        self.cache.set("a.xsd", model)
        self.assertIs(self.cache.get("a.xsd"), model)
        self.assertIn("a.xsd", self.cache)

    def test_missing_entry(self):
        self.assertIsNone(self.cache.get("missing.xsd"))

    def test_entry_expires_after_ttl(self):
        self.cache.set("a.xsd", "model")
        self.clock.now += 3600
        self.assertEqual(self.cache.get("a.xsd"), "model")
        self.clock.now += 1
        self.assertIsNone(self.cache.get("a.xsd"))
        self.assertEqual(len(self.cache), 0)

    def test_set_refreshes_timestamp(self):
        self.cache.set("a.xsd", "old")
        self.clock.now += 3000
        self.cache.set("a.xsd", "new")
        self.clock.now += 3000
        self.assertEqual(self.cache.get("a.xsd"), "new")

    def test_invalidate(self):
        self.cache.set("a.xsd", "model")
        self.cache.invalidate("a.xsd")
        self.assertIsNone(self.cache.get("a.xsd"))
        # Invalidating an absent key is a no-op
        self.cache.invalidate("a.xsd")

    def test_clear(self):
        self.cache.set("a.xsd", 1)
        self.cache.set("b.xsd", 2)
        self.cache.clear()
        self.assertEqual(len(self.cache), 0)


class TestCacheKey(unittest.TestCase):

    def test_equivalent_paths_share_a_key(self):
        self.assertEqual(cache_key("schemas/a.xsd"), cache_key("schemas/./x/../a.xsd"))

    def test_key_is_absolute(self):
        self.assertTrue(os.path.isabs(cache_key("a.xsd")))


if __name__ == "__main__":
    unittest.main()
