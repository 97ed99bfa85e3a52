"""Flatten a hierarchical docs tree into a single-directory wiki tree."""

import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from models import (
    DirectoryStack,
    ExportedPage,
    SourceDocument,
    SyncSettings,
    HOME_PAGE_FILENAME,
    IMAGE_FOLDER_NAME
)
from errors import FilenameCollisionError, UnresolvableLinkError
from logger import ProgressTracker
from .content_rewriter import ContentRewriter
from .header_extractor import extract_header_name
from .name_registry import NameRegistry

IMAGE_EXTENSIONS = {'.png', '.svg', '.jpg', '.jpeg', '.gif'}
PRESERVED_ENTRIES = {'.git'}


class TreeFlattener:
    """
    Walks the docs tree depth-first and writes every page into one flat directory.

    For each directory it:
    1. Exports the directory's own markdown files (sorted by name)
    2. Mirrors its `plantuml-images` folder under the destination image folder
    3. Descends into each remaining subdirectory
    """

    def __init__(
        self,
        source_root: Path,
        destination: Path,
        settings: SyncSettings,
        registry: NameRegistry,
        logger: Optional[logging.Logger] = None,
        rewriter: Optional[ContentRewriter] = None,
        show_progress: bool = False
    ):
        """
        Initialize the tree flattener.

        Args:
            source_root: Docs root directory to read from
            destination: Wiki working tree to write into
            settings: Run settings
            registry: NameRegistry that collects header-derived renames
            logger: Logger instance
            rewriter: ContentRewriter to use (built from settings when omitted)
            show_progress: Show a tqdm bar per directory when attached to a terminal
        """
        self.source_root = Path(source_root)
        self.destination = Path(destination)
        self.settings = settings
        self.registry = registry
        self.logger = logger or logging.getLogger('docs_to_wiki.exporters.tree_flattener')
        self.rewriter = rewriter or ContentRewriter(settings, logger=self.logger)
        self.show_progress = show_progress

        self.pages: List[ExportedPage] = []
        self._written: Dict[str, str] = {}
        self._tracker: Optional[ProgressTracker] = None

        self.stats = {
            'directories_visited': 0,
            'pages_written': 0,
            'pages_renamed': 0,
            'links_rewritten': 0,
            'images_copied': 0
        }

    def clear_destination(self) -> int:
        """
        Remove everything from the destination except the `.git` directory.

        Returns:
            Number of top-level entries removed
        """
        self.destination.mkdir(parents=True, exist_ok=True)

        removed = 0
        for entry in self.destination.iterdir():
            if entry.name in PRESERVED_ENTRIES:
                continue
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
            removed += 1

        self.logger.debug(f"Cleared {removed} entries from {self.destination}")
        return removed

    def run(self) -> Dict[str, Any]:
        """
        Flatten the whole docs tree starting from the docs root.

        Returns:
            Statistics dictionary

        Raises:
            FilenameCollisionError: If two pages resolve to the same wiki filename
            UnresolvableLinkError: If a link climbs above the repository root
        """
        if not self.source_root.is_dir():
            raise FileNotFoundError(f"Docs root not found: {self.source_root}")

        self.logger.info(f"Flattening {self.source_root} into {self.destination}")
        self.destination.mkdir(parents=True, exist_ok=True)

        total_pages = self._count_pages(self.source_root)
        with ProgressTracker(total_items=total_pages, item_type='pages', logger=self.logger) as tracker:
            self._tracker = tracker
            try:
                self.flatten(())
            finally:
                self._tracker = None

        self.logger.info(
            f"Flattened {self.stats['pages_written']} pages "
            f"({self.stats['pages_renamed']} renamed from headers), "
            f"{self.stats['links_rewritten']} links rewritten, "
            f"{self.stats['images_copied']} images copied"
        )
        return self.stats.copy()

    def flatten(self, directory_stack: DirectoryStack = ()) -> None:
        """
        Export one directory of the docs tree, then recurse into its subdirectories.

        Args:
            directory_stack: Directories from the docs root to the directory to export
        """
        directory = self.source_root.joinpath(*directory_stack)
        self.stats['directories_visited'] += 1
        self.logger.debug(f"Visiting '{'/'.join(directory_stack) or '.'}'")

        pages = sorted(p for p in directory.glob('*.md') if p.is_file())
        if pages and self._should_show_progress():
            pages = tqdm(pages, desc=f"Pages: {'/'.join(directory_stack) or '.'}"[:40], leave=False)

        for path in pages:
            document = self._read_document(directory_stack, path)
            page = self.export_document(document)
            self._write_page(page)
            if self._tracker is not None:
                self._tracker.advance()

        self._copy_images(directory / IMAGE_FOLDER_NAME)

        for subdirectory in sorted(p for p in directory.iterdir() if p.is_dir()):
            if self._should_skip_directory(subdirectory):
                continue
            self.flatten(directory_stack + (subdirectory.name,))

    def export_document(self, document: SourceDocument) -> ExportedPage:
        """
        Compute the final wiki filename and content of a document.

        Registers header-derived names in the NameRegistry as a side effect.

        Args:
            document: Source document

        Returns:
            ExportedPage ready to be written

        Raises:
            FilenameCollisionError: If the header-derived name is already taken
            UnresolvableLinkError: If a link climbs above the repository root
        """
        try:
            content, links_rewritten = self.rewriter.rewrite_links(
                document.content, document.directory_stack
            )
        except UnresolvableLinkError as e:
            raise e.with_filename(document.relative_path) from e

        output_name = document.default_name
        renamed = False

        if self.settings.root_readme_as_home and document.is_root_readme():
            output_name = HOME_PAGE_FILENAME
        elif self.settings.use_header_for_wiki_name:
            header = extract_header_name(content)
            if header is not None:
                candidate, remaining = header
                if candidate == '.md':
                    self.logger.warning(
                        f"Header of '{document.relative_path}' has no usable characters, "
                        f"keeping '{output_name}'"
                    )
                else:
                    self.registry.register(document.default_name, candidate)
                    output_name, content, renamed = candidate, remaining, True

        if not document.is_sidebar():
            content = self.rewriter.inject_header(content, document.directory_stack, document.filename)

        return ExportedPage(
            source=document,
            output_name=output_name,
            content=content,
            renamed=renamed,
            links_rewritten=links_rewritten
        )

    def _read_document(self, directory_stack: DirectoryStack, path: Path) -> SourceDocument:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
        return SourceDocument(directory_stack=directory_stack, filename=path.name, content=content)

    def _write_page(self, page: ExportedPage) -> None:
        """Write a page to the flat destination, refusing to overwrite a page from this run."""
        previous = self._written.get(page.output_name)
        if previous is not None:
            raise FilenameCollisionError(page.output_name, previous, page.source.relative_path)
        self._written[page.output_name] = page.source.relative_path

        target = self.destination / page.output_name
        with open(target, 'w', encoding='utf-8', newline='') as f:
            f.write(page.content)

        self.pages.append(page)
        self.stats['pages_written'] += 1
        self.stats['links_rewritten'] += page.links_rewritten
        if page.renamed:
            self.stats['pages_renamed'] += 1

        self.logger.debug(f"Wrote {page.source.relative_path} -> {page.output_name}")

    def _copy_images(self, image_dir: Path) -> None:
        """Mirror an image folder under `<destination>/plantuml-images`, keeping its subpaths."""
        if not image_dir.is_dir():
            return

        target_root = self.destination / IMAGE_FOLDER_NAME
        for path in sorted(image_dir.rglob('*')):
            if not path.is_file() or path.suffix.lower() not in IMAGE_EXTENSIONS:
                continue

            target = target_root / path.relative_to(image_dir)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, target)
            self.stats['images_copied'] += 1
            self.logger.debug(f"Copied image {path} -> {target}")

    def _count_pages(self, directory: Path) -> int:
        count = sum(1 for p in directory.glob('*.md') if p.is_file())
        for subdirectory in directory.iterdir():
            if subdirectory.is_dir() and not self._should_skip_directory(subdirectory):
                count += self._count_pages(subdirectory)
        return count

    def _should_show_progress(self) -> bool:
        return self.show_progress and sys.stdout.isatty()

    def _should_skip_directory(self, directory: Path) -> bool:
        if directory.name.startswith('.') or directory.name == IMAGE_FOLDER_NAME:
            return True
        # The wiki checkout may live inside the docs tree
        return directory.resolve() == self.destination.resolve()


__all__ = ['TreeFlattener', 'IMAGE_EXTENSIONS']
