"""Resolve relative markdown links against the flattened wiki namespace."""

import logging
from typing import List, Sequence, Tuple

from models import LinkKind, SyncSettings
from errors import UnresolvableLinkError

logger = logging.getLogger('docs_to_wiki.exporters.path_resolver')

ABSOLUTE_PREFIXES = ('http', 'onenote')
ANCHOR_PREFIX = '#'
PARENT_SEGMENT = '..'
WIKI_SEPARATOR = '__'
MARKDOWN_EXTENSION = '.md'


def split_link(link: str) -> Tuple[int, List[str]]:
    """
    Split a relative link into its up-move count and remaining segments.

    Every `..` counts as one move up wherever it appears in the path, so
    `a/../b.md` yields `(1, ['a', 'b.md'])`. Every other segment, `.`
    included, is kept in order.

    Args:
        link: Relative link target

    Returns:
        Tuple of (up_dirs, path_segments)
    """
    up_dirs = 0
    path = []
    for segment in link.split('/'):
        if segment == PARENT_SEGMENT:
            up_dirs += 1
        else:
            path.append(segment)
    return up_dirs, path


def is_markdown_link(link: str) -> bool:
    """Check if the link (ignoring any fragment) targets a markdown file."""
    return link.split('#', 1)[0].endswith(MARKDOWN_EXTENSION)


class PathResolver:
    """
    Maps a (directory stack, relative link) pair to a wiki page id or a URL.

    Links that stay inside the docs root and point at markdown become
    `__`-joined page ids. Everything else relative becomes an absolute
    `<repo>/blob/<branch>/...` URL, unless it climbs above the repository
    root, which raises `UnresolvableLinkError`.
    """

    def __init__(self, settings: SyncSettings):
        self.settings = settings

    def classify(self, directory_stack: Sequence[str], link: str) -> LinkKind:
        """
        Classify a link target without rewriting it.

        Args:
            directory_stack: Directories from the docs root to the linking document
            link: Link target as written in the document

        Returns:
            LinkKind of the target
        """
        if link.startswith(ABSOLUTE_PREFIXES):
            return LinkKind.ABSOLUTE
        if link.startswith(ANCHOR_PREFIX):
            return LinkKind.ANCHOR

        up_dirs, _ = split_link(link)
        if up_dirs <= len(directory_stack) and is_markdown_link(link):
            return LinkKind.INTERNAL
        return LinkKind.EXTERNAL

    def resolve(self, directory_stack: Sequence[str], link: str) -> str:
        """
        Resolve a link target for a document at `directory_stack`.

        Args:
            directory_stack: Directories from the docs root to the linking document
            link: Link target as written in the document

        Returns:
            Wiki page id, absolute URL, or the unchanged link

        Raises:
            UnresolvableLinkError: If the link climbs above the repository root
        """
        kind = self.classify(directory_stack, link)
        if kind in (LinkKind.ABSOLUTE, LinkKind.ANCHOR):
            return link

        stack = list(directory_stack)
        up_dirs, path = split_link(link)

        if kind == LinkKind.INTERNAL:
            wiki_path = stack[:len(stack) - up_dirs] + path
            # First occurrence only, so `page.md#section` keeps its fragment
            return WIKI_SEPARATOR.join(wiki_path).replace(MARKDOWN_EXTENSION, '', 1)

        return self._repository_url(stack, up_dirs, path, link)

    def _repository_url(self, stack: List[str], up_dirs: int, path: List[str], link: str) -> str:
        """Build the blob URL for a link that leaves the wiki."""
        depth = self.settings.docs_root_depth
        extra_up_dirs = up_dirs - len(stack)
        if extra_up_dirs > depth:
            raise UnresolvableLinkError(link, up_dirs, depth)

        # Slicing past the end keeps the whole docs root for links that stay inside it
        relative_path_from_root = "/".join(self.settings.docs_root_segments[:depth - extra_up_dirs])
        url = f"{self._blob_base()}/{relative_path_from_root}/{'/'.join(path)}"
        logger.debug(f"Resolved '{link}' (up={up_dirs}, extra={extra_up_dirs}) to {url}")
        return url

    def source_file_url(self, directory_stack: Sequence[str], filename: str) -> str:
        """
        Canonical repository URL of a document in the docs tree.

        Args:
            directory_stack: Directories from the docs root to the document
            filename: Document filename

        Returns:
            Absolute `<repo>/blob/<branch>/<docs_root>/.../<filename>` URL
        """
        parts = self.settings.docs_root_segments + list(directory_stack) + [filename]
        return "/".join([self._blob_base()] + parts)

    def _blob_base(self) -> str:
        return f"{self.settings.repository_url}/blob/{self.settings.default_branch}"


__all__ = ['PathResolver', 'split_link', 'is_markdown_link']
