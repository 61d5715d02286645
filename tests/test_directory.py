"""
Test suite for FieldDirectory

Tests:
    - Log creation and lookup
    - Sorted field enumeration
    - Literal prefix filtering
    - Key registry
"""

import unittest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from chronokv.directory import FieldDirectory


class TestFieldDirectory(unittest.TestCase):
    """Test FieldDirectory operations"""

    def setUp(self):
        self.directory = FieldDirectory()

    def test_get_unknown(self):
        self.assertIsNone(self.directory.get("user", "name"))
        self.assertNotIn("user", self.directory)

    def test_get_or_create_returns_same_log(self):
        log = self.directory.get_or_create("user", "name")
        self.assertIs(self.directory.get_or_create("user", "name"), log)
        self.assertIs(self.directory.get("user", "name"), log)
        self.assertIn("user", self.directory)

    def test_get_does_not_create(self):
        self.directory.get_or_create("user", "name")
        self.assertIsNone(self.directory.get("user", "age"))
        self.assertEqual(self.directory.fields("user"), ["name"])

    def test_fields_sorted(self):
        for name in ["zebra", "apple", "mango"]:
            self.directory.get_or_create("user", name)

        self.assertEqual(self.directory.fields("user"), ["apple", "mango", "zebra"])

    def test_fields_unknown_key(self):
        self.assertEqual(self.directory.fields("nobody"), [])
        self.assertEqual(self.directory.fields("nobody", "a"), [])

    def test_prefix_filter(self):
        for name in ["app.db.host", "app.server.host", "app.server.port",
                     "logging.level", "apple", "ap"]:
            self.directory.get_or_create("config", name)

        self.assertEqual(self.directory.fields("config", "app."),
                         ["app.db.host", "app.server.host", "app.server.port"])
        self.assertEqual(self.directory.fields("config", "app.server."),
                         ["app.server.host", "app.server.port"])
        self.assertEqual(self.directory.fields("config", "app"),
                         ["app.db.host", "app.server.host", "app.server.port", "apple"])
        self.assertEqual(self.directory.fields("config", "zzz"), [])

    def test_prefix_is_literal(self):
        """Regex metacharacters in the prefix have no special meaning"""
        self.directory.get_or_create("k", "a.b")
        self.directory.get_or_create("k", "axb")
        self.assertEqual(self.directory.fields("k", "a."), ["a.b"])

    def test_empty_prefix_matches_all(self):
        self.directory.get_or_create("k", "b")
        self.directory.get_or_create("k", "a")
        self.assertEqual(self.directory.fields("k", ""), ["a", "b"])

    def test_keys_sorted(self):
        self.directory.get_or_create("user2", "name")
        self.directory.get_or_create("user1", "name")
        self.assertEqual(self.directory.keys(), ["user1", "user2"])
        self.assertEqual(len(self.directory), 2)


def run_tests():
    """Run all FieldDirectory tests"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestFieldDirectory))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


if __name__ == '__main__':
    success = run_tests()
    sys.exit(0 if success else 1)
