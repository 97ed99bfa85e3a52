"""Tests for link rewriting and attribution headers."""

import logging

import pytest

from errors import UnresolvableLinkError
from exporters.content_rewriter import ContentRewriter
from models import SyncSettings

REPO = "https://github.com/org/repo"


@pytest.fixture
def rewriter():
    return ContentRewriter(SyncSettings(docs_root="docs", repository_url=REPO))


class TestLinkRewriting:
    """Test rewriting of `[text](target)` occurrences."""

    def test_internal_and_absolute_links(self, rewriter):
        content, count = rewriter.rewrite_links(
            "See [guide](guide.md) and [site](https://example.com).", ()
        )

        assert content == "See [guide](guide) and [site](https://example.com)."
        assert count == 1

    def test_links_relative_to_directory(self, rewriter):
        content, count = rewriter.rewrite_links(
            "[up](../index.md) [down](deep/page.md#top) [code](../../setup.py)", ("guides",)
        )

        assert content == (
            "[up](index) [down](guides__deep__page#top) "
            f"[code]({REPO}/blob/main//setup.py)"
        )
        assert count == 3

    def test_image_link_points_at_repository(self, rewriter):
        content, _ = rewriter.rewrite_links("![flow](plantuml-images/flow.png)", ("a",))
        assert content == f"![flow]({REPO}/blob/main/docs/plantuml-images/flow.png)"

    def test_multiple_links_on_one_line(self, rewriter):
        content, count = rewriter.rewrite_links("[a](a.md), [b](b.md), [c](#c)", ())
        assert content == "[a](a), [b](b), [c](#c)"
        assert count == 2

    def test_targets_with_spaces_are_not_links(self, rewriter):
        text = "[broken](my page.md)"
        assert rewriter.rewrite_links(text, ()) == (text, 0)

    def test_text_without_links_is_byte_identical(self, rewriter):
        text = "# Title\r\n\r\nNo links here (really).\r\n[not a link]\n\ttabbed\n"
        assert rewriter.rewrite_links(text, ("a", "b")) == (text, 0)

    def test_line_endings_preserved_around_links(self, rewriter):
        content, _ = rewriter.rewrite_links("first [x](x.md)\r\nsecond\r\n", ())
        assert content == "first [x](x)\r\nsecond\r\n"

    def test_link_text_kept_when_target_rewritten(self, rewriter):
        content, _ = rewriter.rewrite_links("[Read *this* first](./intro.md)", ("a",))
        assert content == "[Read *this* first](a__.__intro)"

    def test_rewrite_count_logged_at_debug(self, rewriter, caplog):
        with caplog.at_level(logging.DEBUG, logger='docs_to_wiki.exporters.content_rewriter'):
            rewriter.rewrite_links("[a](a.md) [b](b.md) [site](https://example.com)", ("guides",))

        assert "Rewrote 2 links in document under guides" in caplog.text

    def test_nothing_logged_without_rewrites(self, rewriter, caplog):
        with caplog.at_level(logging.DEBUG, logger='docs_to_wiki.exporters.content_rewriter'):
            rewriter.rewrite_links("plain text", ())

        assert "Rewrote" not in caplog.text

    def test_unresolvable_link_raises(self, rewriter):
        with pytest.raises(UnresolvableLinkError):
            rewriter.rewrite_links("[x](../../../../outside.md)", ("a",))


class TestHeaderInjection:
    """Test the custom header added to each page."""

    def test_no_template_leaves_content(self, rewriter):
        assert rewriter.build_header(("a",), "b.md") is None
        assert rewriter.inject_header("body", ("a",), "b.md") == "body"

    def test_template_with_source_link(self):
        rewriter = ContentRewriter(SyncSettings(
            docs_root="docs",
            repository_url=REPO,
            custom_header="Edit the [source]({sourceFileLink})."
        ))

        result = rewriter.inject_header("body\n", ("a",), "b.md")

        assert result == f"Edit the [source]({REPO}/blob/main/docs/a/b.md).\n\n\nbody\n"

    def test_template_without_placeholder(self):
        rewriter = ContentRewriter(SyncSettings(repository_url=REPO, custom_header="Generated page"))
        assert rewriter.inject_header("body", (), "x.md") == "Generated page\n\n\nbody"
