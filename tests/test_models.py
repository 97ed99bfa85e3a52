"""Tests for run settings, documents and commit message templates."""

import unittest

from models import CommitInfo, ExportedPage, SourceDocument, SyncSettings, WikiLink


class TestSyncSettings(unittest.TestCase):
    def test_normalizes_docs_root_and_url(self):
        settings = SyncSettings(docs_root="docs\\wiki/", repository_url="https://github.com/o/r/")

        self.assertEqual(settings.docs_root_segments, ['docs', 'wiki'])
        self.assertEqual(settings.docs_root_depth, 2)
        self.assertEqual(settings.repository_url, "https://github.com/o/r")

    def test_repository_root_has_depth_zero(self):
        self.assertEqual(SyncSettings(docs_root=".").docs_root_depth, 0)
        self.assertEqual(SyncSettings(docs_root="").docs_root_depth, 0)


class TestSourceDocument(unittest.TestCase):
    def test_default_name_joins_stack(self):
        doc = SourceDocument(("guides", "setup"), "install.md", "")
        self.assertEqual(doc.default_name, "guides__setup__install.md")
        self.assertEqual(doc.relative_path, "guides/setup/install.md")

    def test_root_readme_detection(self):
        self.assertTrue(SourceDocument((), "README.md", "").is_root_readme())
        self.assertTrue(SourceDocument((), "readme.md", "").is_root_readme())
        self.assertFalse(SourceDocument(("a",), "README.md", "").is_root_readme())

    def test_sidebar_detection(self):
        self.assertTrue(SourceDocument(("a",), "_Sidebar.md", "").is_sidebar())
        self.assertFalse(SourceDocument((), "sidebar.md", "").is_sidebar())

    def test_exported_page_summary(self):
        page = ExportedPage(SourceDocument(("a",), "b.md", "x"), "B.md", "x", renamed=True, links_rewritten=2)
        self.assertEqual(
            page.to_dict(),
            {'source': 'a/b.md', 'output_name': 'B.md', 'renamed': True, 'links_rewritten': 2}
        )


class TestCommitMessage(unittest.TestCase):
    def setUp(self):
        self.commit = CommitInfo(sha="abcdef1234567890", message="Fix install docs\n\n")

    def test_default_template(self):
        self.assertEqual(self.commit.format_message(), "Fix install docs")

    def test_all_placeholders(self):
        self.assertEqual(
            self.commit.format_message("{commitMessage} ({shaShort}) {shaFull}"),
            "Fix install docs (abcdef1) abcdef1234567890"
        )

    def test_unknown_braces_left_alone(self):
        self.assertEqual(self.commit.format_message("wiki: {other} {shaShort}"), "wiki: {other} abcdef1")


class TestWikiLink(unittest.TestCase):
    def test_render_original_target(self):
        self.assertEqual(WikiLink(text="guide", target="guide.md").render(), "[guide](guide.md)")

    def test_render_replacement_target(self):
        link = WikiLink(text="guide", target="../guide.md#top")
        self.assertEqual(link.render("guide#top"), "[guide](guide#top)")
        self.assertEqual(link.target, "../guide.md#top")


if __name__ == '__main__':
    unittest.main()
