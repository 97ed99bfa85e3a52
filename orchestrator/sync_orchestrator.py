"""
Sync orchestrator for coordinating the complete docs-to-wiki pipeline.

This module sequences all phases: Checkout → Flatten → Post-process →
Publish → Report. Any failure stops the run before anything is pushed;
files already written to the local wiki checkout are left as they are.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from config_loader import ConfigLoader, get_nested
from errors import WikiSyncError
from exporters import NameRegistry, PostProcessor, TreeFlattener
from logger import log_section
from orchestrator.sync_report import SyncReport
from publishers import WikiRepository, read_commit_info
from publishers.wiki_repository import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME


class SyncOrchestrator:
    """Central coordinator sequencing all sync phases: Checkout → Flatten → Post-process → Publish."""

    def __init__(
        self,
        config: Dict[str, Any],
        logger: Optional[logging.Logger] = None,
        repository: Optional[WikiRepository] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize sync orchestrator.

        Args:
            config: Validated configuration dictionary
            logger: Optional logger instance
            repository: Optional WikiRepository (built from config when omitted)
            environ: Environment mapping used to read the source commit
        """
        self.config = config
        self.logger = logger or logging.getLogger('docs_to_wiki.orchestrator')
        self.environ = environ
        self.settings = ConfigLoader.to_settings(config)

        self.source_path = Path(get_nested(config, 'source.path', '.') or '.')
        self.docs_root = self.source_path.joinpath(*self.settings.docs_root_segments)
        self.wiki_dir = Path(get_nested(config, 'wiki.directory', './wiki'))

        self.convert_only = get_nested(config, 'publish.convert_only', False)
        self.dry_run = get_nested(config, 'publish.dry_run', False)
        self.push = get_nested(config, 'publish.push', True)

        self.repository = repository or WikiRepository(
            directory=self.wiki_dir,
            clone_url=get_nested(config, 'wiki.clone_url'),
            token=get_nested(config, 'wiki.token'),
            author_name=get_nested(config, 'wiki.author_name', DEFAULT_AUTHOR_NAME),
            author_email=get_nested(config, 'wiki.author_email', DEFAULT_AUTHOR_EMAIL),
            logger=self.logger
        )

        # One registry per run, shared by the forward pass and post-processing
        self.registry = NameRegistry(logger=self.logger)
        self.flattener: Optional[TreeFlattener] = None
        self.report_generator = SyncReport(logger=self.logger)

        self.logger.info(
            f"SyncOrchestrator initialized: docs_root={self.docs_root}, wiki={self.wiki_dir}, "
            f"convert_only={self.convert_only}, dry_run={self.dry_run}"
        )

    def orchestrate_sync(self) -> Dict[str, Any]:
        """
        Run the complete sync pipeline.

        Returns:
            Report dictionary

        Raises:
            WikiSyncError: On collisions, unresolvable links or git failures
            FileNotFoundError: If the docs root does not exist
        """
        self.logger.info("Starting sync orchestration")
        start_time = time.time()
        phase_stats: Dict[str, Any] = {}

        try:
            if self.convert_only:
                self.logger.info("Convert-only mode: skipping wiki checkout")
                phase_stats['checkout'] = {'skipped': True}
            else:
                log_section("Phase 1: Wiki Checkout")
                self.repository.clone()
                phase_stats['checkout'] = {'skipped': False, 'directory': str(self.wiki_dir)}

            log_section("Phase 2: Flatten Docs Tree")
            phase_stats['flatten'] = self._execute_flatten()

            log_section("Phase 3: Post-process Renamed Pages")
            phase_stats['post_process'] = PostProcessor(
                self.wiki_dir, self.registry, logger=self.logger
            ).post_process()

            log_section("Phase 4: Publish")
            phase_stats['publish'] = self._execute_publish()

        except (WikiSyncError, OSError) as e:
            self.logger.error(f"Sync failed: {e}")
            raise

        duration = time.time() - start_time
        report = self.report_generator.generate_report(
            phase_stats=phase_stats,
            duration=duration,
            pages=self.flattener.pages if self.flattener else [],
            registry=self.registry
        )
        self.logger.info(f"Sync orchestration complete in {duration:.2f}s")
        return report

    def _execute_flatten(self) -> Dict[str, Any]:
        self.flattener = TreeFlattener(
            source_root=self.docs_root,
            destination=self.wiki_dir,
            settings=self.settings,
            registry=self.registry,
            logger=self.logger,
            show_progress=get_nested(self.config, 'conversion.progress_bars', True)
        )
        removed = self.flattener.clear_destination()
        self.logger.info(f"Cleared {removed} entries from previous wiki content")

        stats = self.flattener.run()
        stats['entries_cleared'] = removed
        return stats

    def _execute_publish(self) -> Dict[str, Any]:
        if self.convert_only:
            self.logger.info(f"Convert-only mode: wiki tree left at {self.wiki_dir}")
            return {'skipped': True, 'committed': False, 'pushed': False}

        commit_info = read_commit_info(self.source_path, environ=self.environ)
        message = commit_info.format_message(self.settings.commit_message)
        stats = {
            'skipped': False,
            'source_sha': commit_info.sha,
            'commit_message': message,
            'committed': False,
            'pushed': False
        }

        if self.dry_run:
            self.logger.info(f"Dry-run: would commit wiki changes with message: {message}")
            stats['has_changes'] = self.repository.has_changes()
            return stats

        stats['committed'] = self.repository.commit(message)
        if stats['committed'] and self.push:
            self.repository.push()
            stats['pushed'] = True
        elif not self.push:
            self.logger.info("Push disabled, leaving commit in local wiki checkout")

        return stats


__all__ = ['SyncOrchestrator']
