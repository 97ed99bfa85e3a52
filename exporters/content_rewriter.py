"""Rewrite markdown links for the flat wiki layout and add attribution headers."""

import logging
import re
from typing import Optional, Sequence, Tuple

from models import SyncSettings, WikiLink
from .path_resolver import PathResolver

MAX_CHARS_BETWEEN_BRACKETS = 1000  # Prevent catastrophic backtracking
SOURCE_LINK_PLACEHOLDER = '{sourceFileLink}'


class ContentRewriter:
    """
    Applies PathResolver to every `[text](target)` occurrence in a document.

    The rewriter is pure: it takes text and returns text. Reading and
    writing files is left to the caller.
    """

    def __init__(
        self,
        settings: SyncSettings,
        resolver: Optional[PathResolver] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the content rewriter.

        Args:
            settings: Run settings (docs root, repository URL, header template)
            resolver: PathResolver to use (built from settings when omitted)
            logger: Logger instance
        """
        self.settings = settings
        self.resolver = resolver or PathResolver(settings)
        self.logger = logger or logging.getLogger('docs_to_wiki.exporters.content_rewriter')

        # Single-bracket links only, nested brackets are not supported
        self.link_pattern = re.compile(
            r'\[([^\[\]]{0,' + str(MAX_CHARS_BETWEEN_BRACKETS) + r'})\]\(([^()\s]+)\)'
        )

    def rewrite_links(self, content: str, directory_stack: Sequence[str]) -> Tuple[str, int]:
        """
        Rewrite every link in `content` for a document at `directory_stack`.

        Args:
            content: Document text
            directory_stack: Directories from the docs root to the document

        Returns:
            Tuple of (rewritten_content, rewritten_count)

        Raises:
            UnresolvableLinkError: If a link climbs above the repository root
        """
        rewritten_count = 0

        def replace_link(match):
            nonlocal rewritten_count

            link = WikiLink(text=match.group(1), target=match.group(2))
            resolved = self.resolver.resolve(directory_stack, link.target)
            if resolved == link.target:
                return match.group(0)

            rewritten_count += 1
            return link.render(resolved)

        lines = content.split('\n')
        rewritten = '\n'.join(self.link_pattern.sub(replace_link, line) for line in lines)

        if rewritten_count:
            location = '/'.join(directory_stack) or '<root>'
            self.logger.debug(f"Rewrote {rewritten_count} links in document under {location}")

        return rewritten, rewritten_count

    def build_header(self, directory_stack: Sequence[str], filename: str) -> Optional[str]:
        """
        Fill the configured header template for a document.

        Returns:
            Header line, or None when no template is configured
        """
        if not self.settings.custom_header:
            return None

        source_link = self.resolver.source_file_url(directory_stack, filename)
        return self.settings.custom_header.replace(SOURCE_LINK_PLACEHOLDER, source_link)

    def inject_header(self, content: str, directory_stack: Sequence[str], filename: str) -> str:
        """Prepend the attribution header and two blank lines, if a template is set."""
        header = self.build_header(directory_stack, filename)
        if header is None:
            return content

        return f"{header}\n\n\n{content}"


__all__ = ['ContentRewriter', 'SOURCE_LINK_PLACEHOLDER']
