"""
Name registry for header-derived wiki filenames.

Tracks the mapping between a page's default flattened filename and the
override filename taken from its header line, so the post-processor can
repoint links that were written against the default name.
"""

import logging
from typing import Dict, Iterator, Optional, Tuple

from errors import FilenameCollisionError


def strip_extension(filename: str) -> str:
    """Drop a trailing `.md` to get the wiki page id."""
    return filename[:-3] if filename.endswith('.md') else filename


class NameRegistry:
    """Bidirectional default <-> override filename mapping, kept in registration order."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize name registry.

        Args:
            logger: Optional logger instance (defaults to module logger)
        """
        self.logger = logger or logging.getLogger('docs_to_wiki.exporters.name_registry')

        # Mapping: override filename -> default filename
        self._override_to_default: Dict[str, str] = {}

        # Reverse mapping: default filename -> override filename
        self._default_to_override: Dict[str, str] = {}

    def register(self, default_name: str, override_name: str) -> None:
        """
        Record that the page normally named `default_name` is written as `override_name`.

        Registering the exact same pair again is a no-op.

        Args:
            default_name: Flattened filename, e.g. `guides__setup.md`
            override_name: Header-derived filename, e.g. `Setup-Guide.md`

        Raises:
            FilenameCollisionError: If either name is already paired with a different one
        """
        existing_default = self._override_to_default.get(override_name)
        if existing_default is not None and existing_default != default_name:
            raise FilenameCollisionError(override_name, existing_default, default_name)

        existing_override = self._default_to_override.get(default_name)
        if existing_override is not None and existing_override != override_name:
            raise FilenameCollisionError(existing_override, default_name, default_name)

        self._override_to_default[override_name] = default_name
        self._default_to_override[default_name] = override_name

        self.logger.debug(f"Name mapping added: {default_name} -> {override_name}")

    def get_override(self, default_name: str) -> Optional[str]:
        """Get the override filename for a default filename."""
        return self._default_to_override.get(default_name)

    def get_default(self, override_name: str) -> Optional[str]:
        """Get the default filename that an override filename replaced."""
        return self._override_to_default.get(override_name)

    def substitutions(self) -> Iterator[Tuple[str, str]]:
        """
        Yield `(default_page_id, override_page_id)` pairs in registration order.

        Page ids are filenames without the `.md` extension, as they appear in links.
        """
        for override_name, default_name in self._override_to_default.items():
            yield strip_extension(default_name), strip_extension(override_name)

    def get_all_mappings(self) -> Dict[str, str]:
        """Get a copy of the default -> override mapping."""
        return dict(self._default_to_override)

    def __len__(self) -> int:
        return len(self._override_to_default)

    def __contains__(self, name: str) -> bool:
        return name in self._override_to_default or name in self._default_to_override

    def clear(self) -> None:
        """Clear all mappings."""
        self._override_to_default.clear()
        self._default_to_override.clear()

        self.logger.debug("Cleared all name mappings")


__all__ = ['NameRegistry', 'strip_extension']
