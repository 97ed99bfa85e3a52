"""Data models for the docs-to-wiki sync pipeline."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger('docs_to_wiki')

HOME_PAGE_FILENAME = "Home.md"
SIDEBAR_FILENAME = "_sidebar.md"
IMAGE_FOLDER_NAME = "plantuml-images"
DEFAULT_COMMIT_MESSAGE = "{commitMessage}"

DirectoryStack = Tuple[str, ...]


class LinkKind(Enum):
    """How a markdown link target is treated by the link rewriter."""
    ABSOLUTE = "absolute"
    ANCHOR = "anchor"
    INTERNAL = "internal"
    EXTERNAL = "external"


@dataclass
class SyncSettings:
    """Run configuration shared by every stage of the conversion."""

    docs_root: str = "docs"
    repository_url: str = ""
    default_branch: str = "main"
    root_readme_as_home: bool = False
    use_header_for_wiki_name: bool = False
    custom_header: Optional[str] = None
    commit_message: str = DEFAULT_COMMIT_MESSAGE

    def __post_init__(self) -> None:
        """Normalize paths and URLs."""
        self.docs_root = self.docs_root.replace('\\', '/').strip()
        self.repository_url = self.repository_url.rstrip('/')

    @property
    def docs_root_segments(self) -> List[str]:
        """Path segments of the docs root relative to the repository root."""
        return [segment for segment in self.docs_root.split('/') if segment not in ('', '.')]

    @property
    def docs_root_depth(self) -> int:
        """Number of directories between the repository root and the docs root."""
        return len(self.docs_root_segments)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings to dictionary."""
        return {
            'docs_root': self.docs_root,
            'repository_url': self.repository_url,
            'default_branch': self.default_branch,
            'root_readme_as_home': self.root_readme_as_home,
            'use_header_for_wiki_name': self.use_header_for_wiki_name,
            'custom_header': self.custom_header,
            'commit_message': self.commit_message
        }


@dataclass(frozen=True)
class WikiLink:
    """A `[text](target)` occurrence found in document text."""

    text: str
    target: str

    def render(self, target: Optional[str] = None) -> str:
        """Render the link, optionally with a replacement target."""
        return f"[{self.text}]({self.target if target is None else target})"


@dataclass(frozen=True)
class SourceDocument:
    """A markdown file read from the docs tree."""

    directory_stack: DirectoryStack
    filename: str
    content: str

    @property
    def default_name(self) -> str:
        """Flattened wiki filename, e.g. `guides__setup__install.md`."""
        return "__".join(self.directory_stack + (self.filename,))

    @property
    def relative_path(self) -> str:
        """Path of the document relative to the docs root."""
        return "/".join(self.directory_stack + (self.filename,))

    def is_root_readme(self) -> bool:
        """Check if this is the readme at the top of the docs root."""
        return not self.directory_stack and self.filename.lower() == "readme.md"

    def is_sidebar(self) -> bool:
        """Check if this is a wiki sidebar file."""
        return self.filename.lower() == SIDEBAR_FILENAME


@dataclass
class ExportedPage:
    """Final identity and content of a page written to the wiki tree."""

    source: SourceDocument
    output_name: str
    content: str
    renamed: bool = False
    links_rewritten: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize page summary to dictionary."""
        return {
            'source': self.source.relative_path,
            'output_name': self.output_name,
            'renamed': self.renamed,
            'links_rewritten': self.links_rewritten
        }


@dataclass
class CommitInfo:
    """Source commit that triggered the sync."""

    sha: str
    message: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def short_sha(self) -> str:
        """Abbreviated SHA as shown by `git log --oneline`."""
        return self.sha[:7]

    def format_message(self, template: Optional[str] = None) -> str:
        """
        Fill a commit message template.

        Supported placeholders are `{commitMessage}`, `{shaFull}` and `{shaShort}`.
        Other braces are left untouched.
        """
        template = template or DEFAULT_COMMIT_MESSAGE
        return (
            template
            .replace('{commitMessage}', self.message.strip())
            .replace('{shaFull}', self.sha)
            .replace('{shaShort}', self.short_sha)
        )


__all__ = [
    'DirectoryStack',
    'LinkKind',
    'SyncSettings',
    'WikiLink',
    'SourceDocument',
    'ExportedPage',
    'CommitInfo',
    'HOME_PAGE_FILENAME',
    'SIDEBAR_FILENAME',
    'IMAGE_FOLDER_NAME',
    'DEFAULT_COMMIT_MESSAGE'
]
