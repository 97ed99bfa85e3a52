"""Derive wiki page filenames from a document's leading `# Title` line."""

import re
from typing import Optional, Tuple

HEADER_PATTERN = re.compile(r'^#\s+(.*)$')
DISALLOWED_CHARS_PATTERN = re.compile(r'[^A-Za-z0-9 .(){}_!?\-]')


def sanitize_title(title: str) -> str:
    """
    Turn a header title into a wiki filename stem.

    Spaces become hyphens first, then everything outside
    `[A-Za-z0-9 .(){}_!?-]` is removed.
    """
    return DISALLOWED_CHARS_PATTERN.sub('', title.replace(' ', '-'))


def extract_header_name(content: str) -> Optional[Tuple[str, str]]:
    """
    Look for a level-one header on the first line of a document.

    Args:
        content: Full document text

    Returns:
        Tuple of (candidate_filename, content_without_first_line), or None
        when the first line is not a `# ` header
    """
    first_line, _, remaining = content.partition('\n')
    match = HEADER_PATTERN.match(first_line)
    if not match:
        return None

    return f"{sanitize_title(match.group(1))}.md", remaining


__all__ = ['extract_header_name', 'sanitize_title', 'HEADER_PATTERN']
