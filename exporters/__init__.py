"""Wiki export package for the docs-to-wiki pipeline.

This package turns a hierarchical docs tree into the flat page namespace of a
GitHub wiki while keeping every link working.

Package Structure:
- path_resolver: Maps relative links to wiki page ids or repository URLs
- header_extractor: Derives page filenames from a leading `# Title` line
- name_registry: Tracks default <-> header-derived filename renames
- content_rewriter: Rewrites links in document text, adds attribution headers
- tree_flattener: Walks the docs tree and writes the flat wiki tree
- post_processor: Repoints links to pages renamed from their headers

Key Features:
- `a/b/page.md` becomes the wiki page `a__b__page`
- Links leaving the docs root become `<repo>/blob/<branch>/...` URLs
- Optional `Home.md` from the root readme
- `plantuml-images` folders are mirrored with their subpaths intact

Configuration Referenced:
- source.docs_root: Docs root relative to the repository root
- source.repository_url / source.default_branch: Base for blob URLs
- conversion.*: Home page, header naming, attribution header
"""

from .path_resolver import PathResolver
from .header_extractor import extract_header_name
from .name_registry import NameRegistry
from .content_rewriter import ContentRewriter
from .tree_flattener import TreeFlattener
from .post_processor import PostProcessor

__all__ = [
    'PathResolver',
    'extract_header_name',
    'NameRegistry',
    'ContentRewriter',
    'TreeFlattener',
    'PostProcessor'
]
