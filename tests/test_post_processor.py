"""Tests for repointing links at header-renamed pages."""

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from exporters.name_registry import NameRegistry
from exporters.post_processor import PostProcessor, apply_substitutions


class TestApplySubstitutions(unittest.TestCase):
    def test_replaces_every_occurrence(self):
        content, count = apply_substitutions(
            "[a](guides__setup) and [b](guides__setup#x)", [("guides__setup", "Setup-Guide")]
        )
        self.assertEqual(content, "[a](Setup-Guide) and [b](Setup-Guide#x)")
        self.assertEqual(count, 2)

    def test_plain_text_is_also_replaced(self):
        """Substitution is textual, prose mentioning the default id changes too."""
        content, _ = apply_substitutions("The guides__setup page", [("guides__setup", "Setup-Guide")])
        self.assertEqual(content, "The Setup-Guide page")

    def test_applied_in_order(self):
        content, count = apply_substitutions("[x](a)", [("a", "b"), ("b", "c")])
        self.assertEqual(content, "[x](c)")
        self.assertEqual(count, 2)

    def test_no_match(self):
        self.assertEqual(apply_substitutions("nothing", [("a__b", "B")]), ("nothing", 0))


class TestPostProcessor(unittest.TestCase):
    def setUp(self):
        self._tmp = TemporaryDirectory()
        self.wiki = Path(self._tmp.name)
        self.registry = NameRegistry()

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name: str, content: str) -> Path:
        path = self.wiki / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
        return path

    def test_no_renames_is_a_no_op(self):
        self._write("Home.md", "[x](a__b)")
        stats = PostProcessor(self.wiki, self.registry).post_process()
        self.assertEqual(stats, {'files_scanned': 0, 'files_updated': 0, 'substitutions': 0})

    def test_updates_markdown_files_only(self):
        self.registry.register("a__b.md", "Bee.md")
        home = self._write("Home.md", "[x](a__b)\n")
        other = self._write("Other.md", "unrelated\n")
        notes = self._write("notes.txt", "a__b\n")
        image_note = self._write("plantuml-images/readme.md", "see a__b\n")
        git_file = self._write(".git/COMMIT_EDITMSG.md", "a__b\n")

        stats = PostProcessor(self.wiki, self.registry).post_process()

        self.assertEqual(home.read_text(encoding='utf-8'), "[x](Bee)\n")
        self.assertEqual(other.read_text(encoding='utf-8'), "unrelated\n")
        self.assertEqual(notes.read_text(encoding='utf-8'), "a__b\n")
        self.assertEqual(image_note.read_text(encoding='utf-8'), "see Bee\n")
        self.assertEqual(git_file.read_text(encoding='utf-8'), "a__b\n")
        self.assertEqual(stats['files_scanned'], 3)
        self.assertEqual(stats['files_updated'], 2)
        self.assertEqual(stats['substitutions'], 2)


if __name__ == '__main__':
    unittest.main()
