"""Git operations against the wiki repository."""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional
from urllib.parse import urlparse, urlunparse

from errors import PublishError
from models import CommitInfo

REDACTED = '***REDACTED***'
DEFAULT_AUTHOR_NAME = 'docs-to-wiki'
DEFAULT_AUTHOR_EMAIL = 'docs-to-wiki@users.noreply.github.com'


def run_git(
    args: List[str],
    cwd: Optional[Path] = None,
    secrets: Optional[List[str]] = None,
    logger: Optional[logging.Logger] = None
) -> str:
    """
    Run a git command and return its standard output.

    Args:
        args: Arguments after `git`
        cwd: Working directory
        secrets: Strings to redact from errors and logs
        logger: Logger instance

    Returns:
        Stripped standard output

    Raises:
        PublishError: If git exits with a non-zero status
    """
    logger = logger or logging.getLogger('docs_to_wiki.publishers.wiki_repository')
    command = _redact(' '.join(['git'] + args), secrets)
    logger.debug(f"Running: {command}")

    result = subprocess.run(
        ['git'] + args,
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        check=False
    )
    if result.returncode != 0:
        raise PublishError(command, result.returncode, _redact(result.stderr or '', secrets))

    return (result.stdout or '').strip()


def _redact(text: str, secrets: Optional[List[str]]) -> str:
    for secret in secrets or []:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def read_commit_info(source_path: Path, environ: Optional[Mapping[str, str]] = None) -> CommitInfo:
    """
    Read the source commit that is being published.

    `GITHUB_SHA` wins over the checkout's HEAD when set.

    Args:
        source_path: Source repository checkout
        environ: Environment mapping (defaults to os.environ)

    Returns:
        CommitInfo with SHA and full message
    """
    environ = os.environ if environ is None else environ
    sha = environ.get('GITHUB_SHA') or run_git(['rev-parse', 'HEAD'], cwd=source_path)
    message = run_git(['log', '-1', '--format=%B', sha], cwd=source_path)
    return CommitInfo(sha=sha, message=message)


class WikiRepository:
    """Local checkout of a GitHub wiki that can be refreshed, committed and pushed."""

    def __init__(
        self,
        directory: Path,
        clone_url: Optional[str] = None,
        token: Optional[str] = None,
        author_name: str = DEFAULT_AUTHOR_NAME,
        author_email: str = DEFAULT_AUTHOR_EMAIL,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize wiki repository wrapper.

        Args:
            directory: Local checkout directory
            clone_url: Wiki clone URL (https)
            token: Access token injected into https clone URLs
            author_name: Commit author name
            author_email: Commit author email
            logger: Logger instance
        """
        self.directory = Path(directory)
        self.clone_url = clone_url
        self.token = token
        self.author_name = author_name
        self.author_email = author_email
        self.logger = logger or logging.getLogger('docs_to_wiki.publishers.wiki_repository')

    @property
    def is_cloned(self) -> bool:
        """Check if the directory already holds a git checkout."""
        return (self.directory / '.git').exists()

    def authenticated_url(self) -> str:
        """Clone URL with the token as `x-access-token` credentials, for https remotes."""
        if not self.clone_url:
            raise ValueError("No wiki clone URL configured")

        parsed = urlparse(self.clone_url)
        if not self.token or parsed.scheme != 'https' or '@' in parsed.netloc:
            return self.clone_url

        return urlunparse(parsed._replace(netloc=f"x-access-token:{self.token}@{parsed.netloc}"))

    def clone(self) -> None:
        """Clone the wiki, or reuse an existing checkout at the target directory."""
        if self.is_cloned:
            self.logger.info(f"Using existing wiki checkout at {self.directory}")
        else:
            self.logger.info(f"Cloning wiki {self.clone_url} into {self.directory}")
            self.directory.parent.mkdir(parents=True, exist_ok=True)
            run_git(
                ['clone', '--depth', '1', self.authenticated_url(), str(self.directory)],
                secrets=self._secrets(),
                logger=self.logger
            )
        self.configure_author()

    def configure_author(self) -> None:
        """Set the commit identity for this checkout only."""
        self._git(['config', 'user.name', self.author_name])
        self._git(['config', 'user.email', self.author_email])

    def has_changes(self) -> bool:
        """Check if the working tree differs from HEAD, untracked files included."""
        return bool(self._git(['status', '--porcelain']))

    def commit(self, message: str) -> bool:
        """
        Stage everything and commit.

        Args:
            message: Commit message

        Returns:
            True if a commit was created, False if there was nothing to commit
        """
        self._git(['add', '--all'])
        if not self.has_changes():
            self.logger.info("Wiki content unchanged, nothing to commit")
            return False

        self._git(['commit', '--message', message])
        self.logger.info(f"Committed wiki changes: {message.splitlines()[0] if message else ''}")
        return True

    def push(self) -> None:
        """Push the current branch to origin."""
        self.logger.info("Pushing wiki changes")
        self._git(['push', 'origin', 'HEAD'])

    def _secrets(self) -> List[str]:
        return [self.token] if self.token else []

    def _git(self, args: List[str]) -> str:
        return run_git(args, cwd=self.directory, secrets=self._secrets(), logger=self.logger)


__all__ = ['WikiRepository', 'read_commit_info', 'run_git']
