"""Exception hierarchy for the docs-to-wiki sync pipeline."""

from typing import Optional


class WikiSyncError(Exception):
    """Base exception for all sync failures."""
    pass


class FilenameCollisionError(WikiSyncError):
    """Two documents resolved to the same header-derived wiki filename."""

    def __init__(self, override_name: str, existing_default: str, new_default: str):
        """
        Initialize collision error.

        Args:
            override_name: Wiki filename claimed twice
            existing_default: Default filename that registered it first
            new_default: Default filename that tried to claim it again
        """
        self.override_name = override_name
        self.existing_default = existing_default
        self.new_default = new_default
        super().__init__(
            f"Wiki filename '{override_name}' is already used by '{existing_default}', "
            f"cannot assign it to '{new_default}'"
        )


class UnresolvableLinkError(WikiSyncError):
    """A relative link walks above the repository root."""

    def __init__(self, link: str, up_dirs: int, docs_root_depth: int, filename: Optional[str] = None):
        self.link = link
        self.up_dirs = up_dirs
        self.docs_root_depth = docs_root_depth
        self.filename = filename
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        location = f" in '{self.filename}'" if self.filename else ""
        return (
            f"Link '{self.link}'{location} goes up {self.up_dirs} directories, "
            f"beyond the repository root (docs root depth {self.docs_root_depth})"
        )

    def with_filename(self, filename: str) -> 'UnresolvableLinkError':
        """Return a copy of this error that names the offending source file."""
        return UnresolvableLinkError(self.link, self.up_dirs, self.docs_root_depth, filename)


class PublishError(WikiSyncError):
    """A git command against the wiki repository failed."""

    def __init__(self, command: str, returncode: int, stderr: str = ''):
        """
        Initialize publish error.

        Args:
            command: Command line that failed (credentials already redacted)
            returncode: Process exit status
            stderr: Captured standard error
        """
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command '{command}' failed with exit code {returncode}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(message)


__all__ = [
    'WikiSyncError',
    'FilenameCollisionError',
    'UnresolvableLinkError',
    'PublishError'
]
