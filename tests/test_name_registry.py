"""Tests for the default <-> header-derived filename registry."""

import unittest

from errors import FilenameCollisionError
from exporters.name_registry import NameRegistry, strip_extension


class TestNameRegistry(unittest.TestCase):
    def setUp(self):
        self.registry = NameRegistry()

    def test_register_and_lookup(self):
        self.registry.register("guides__setup.md", "Setup-Guide.md")

        self.assertEqual(self.registry.get_override("guides__setup.md"), "Setup-Guide.md")
        self.assertEqual(self.registry.get_default("Setup-Guide.md"), "guides__setup.md")
        self.assertIn("guides__setup.md", self.registry)
        self.assertIn("Setup-Guide.md", self.registry)
        self.assertEqual(len(self.registry), 1)

    def test_same_pair_is_idempotent(self):
        self.registry.register("a.md", "A.md")
        self.registry.register("a.md", "A.md")
        self.assertEqual(len(self.registry), 1)

    def test_override_claimed_twice_raises(self):
        self.registry.register("a__intro.md", "Intro.md")

        with self.assertRaises(FilenameCollisionError) as ctx:
            self.registry.register("b__intro.md", "Intro.md")

        self.assertEqual(ctx.exception.override_name, "Intro.md")
        self.assertEqual(ctx.exception.existing_default, "a__intro.md")
        self.assertEqual(ctx.exception.new_default, "b__intro.md")

    def test_default_renamed_twice_raises(self):
        self.registry.register("a.md", "First.md")
        with self.assertRaises(FilenameCollisionError):
            self.registry.register("a.md", "Second.md")

    def test_substitutions_in_registration_order(self):
        self.registry.register("z.md", "Zed.md")
        self.registry.register("a__b.md", "Bee.md")

        self.assertEqual(list(self.registry.substitutions()), [("z", "Zed"), ("a__b", "Bee")])
        self.assertEqual(self.registry.get_all_mappings(), {"z.md": "Zed.md", "a__b.md": "Bee.md"})

    def test_clear(self):
        self.registry.register("a.md", "A.md")
        self.registry.clear()
        self.assertEqual(len(self.registry), 0)
        self.assertIsNone(self.registry.get_override("a.md"))

    def test_strip_extension(self):
        self.assertEqual(strip_extension("page.md"), "page")
        self.assertEqual(strip_extension("page"), "page")


if __name__ == '__main__':
    unittest.main()
