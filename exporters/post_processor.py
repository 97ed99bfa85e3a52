"""Second pass over the flat wiki tree that repoints links to renamed pages."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .name_registry import NameRegistry
from .tree_flattener import PRESERVED_ENTRIES


class PostProcessor:
    """
    Replaces default page ids with header-derived ones in every emitted page.

    Links are written during the forward pass before every rename is known,
    so a page linking to `guides__setup` still points at the default id after
    `guides__setup.md` was written as `Setup-Guide.md`. This pass applies each
    registered rename as a plain text substitution, in registration order.
    Any occurrence of the default id is replaced, inside or outside link syntax.
    """

    def __init__(self, destination: Path, registry: NameRegistry, logger: Optional[logging.Logger] = None):
        """
        Initialize the post-processor.

        Args:
            destination: Flat wiki tree written by TreeFlattener
            registry: NameRegistry populated during the forward pass
            logger: Logger instance
        """
        self.destination = Path(destination)
        self.registry = registry
        self.logger = logger or logging.getLogger('docs_to_wiki.exporters.post_processor')

        self.stats = {
            'files_scanned': 0,
            'files_updated': 0,
            'substitutions': 0
        }

    def post_process(self) -> Dict[str, Any]:
        """
        Apply all registered renames to every markdown file under the destination.

        Returns:
            Statistics dictionary
        """
        substitutions = list(self.registry.substitutions())
        if not substitutions:
            self.logger.info("No renamed pages, skipping post-processing")
            return self.stats.copy()

        self.logger.info(f"Applying {len(substitutions)} page renames to {self.destination}")
        self._process_directory(self.destination, substitutions)

        self.logger.info(
            f"Post-processing complete: {self.stats['files_updated']}/{self.stats['files_scanned']} "
            f"files updated, {self.stats['substitutions']} substitutions"
        )
        return self.stats.copy()

    def _process_directory(self, directory: Path, substitutions: List[Tuple[str, str]]) -> None:
        entries = sorted(directory.iterdir())

        for path in entries:
            if path.is_file() and path.suffix == '.md':
                self._process_file(path, substitutions)

        for path in entries:
            if path.is_dir() and path.name not in PRESERVED_ENTRIES:
                self._process_directory(path, substitutions)

    def _process_file(self, path: Path, substitutions: List[Tuple[str, str]]) -> None:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            original = f.read()

        content, count = apply_substitutions(original, substitutions)
        self.stats['files_scanned'] += 1

        if content == original:
            return

        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)

        self.stats['files_updated'] += 1
        self.stats['substitutions'] += count
        self.logger.debug(f"Updated {count} references in {path.name}")


def apply_substitutions(content: str, substitutions: List[Tuple[str, str]]) -> Tuple[str, int]:
    """
    Replace every occurrence of each default page id with its override, in order.

    Args:
        content: Page text
        substitutions: `(default_page_id, override_page_id)` pairs

    Returns:
        Tuple of (new_content, replacement_count)
    """
    count = 0
    for default_id, override_id in substitutions:
        occurrences = content.count(default_id)
        if occurrences:
            content = content.replace(default_id, override_id)
            count += occurrences
    return content, count


__all__ = ['PostProcessor', 'apply_substitutions']
