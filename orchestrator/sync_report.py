"""
Sync report generator for aggregating statistics and formatting reports.

This module builds the run report from phase statistics and formats it for
console display and JSON export.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from exporters.name_registry import NameRegistry
from models import ExportedPage


class SyncReport:
    """Generates the run report aggregating statistics from all phases."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize sync report generator.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger('docs_to_wiki.orchestrator.sync_report')

    def generate_report(
        self,
        phase_stats: Dict[str, Any],
        duration: float,
        pages: List[ExportedPage],
        registry: NameRegistry
    ) -> Dict[str, Any]:
        """
        Generate the run report.

        Args:
            phase_stats: Statistics from all phases
            duration: Total run duration in seconds
            pages: Pages written during the forward pass
            registry: Name registry with header-derived renames

        Returns:
            Report dictionary
        """
        flatten = phase_stats.get('flatten', {})
        post_process = phase_stats.get('post_process', {})
        publish = phase_stats.get('publish', {})

        report = {
            'summary': {
                'pages': flatten.get('pages_written', 0),
                'pages_renamed': flatten.get('pages_renamed', 0),
                'links_rewritten': flatten.get('links_rewritten', 0),
                'images_copied': flatten.get('images_copied', 0),
                'references_updated': post_process.get('substitutions', 0),
                'committed': publish.get('committed', False),
                'pushed': publish.get('pushed', False),
                'duration_seconds': round(duration, 3),
                'duration_formatted': self._format_duration(duration)
            },
            'phases': phase_stats,
            'renames': registry.get_all_mappings(),
            'pages': [page.to_dict() for page in pages],
            'timestamp': datetime.now().isoformat()
        }

        self.logger.info(
            f"Report generated: {report['summary']['pages']} pages, "
            f"{report['summary']['pages_renamed']} renamed"
        )
        return report

    def _format_duration(self, seconds: float) -> str:
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes, seconds = divmod(int(seconds), 60)
        return f"{minutes}m {seconds}s"

    def format_console_report(self, report: Dict[str, Any]) -> str:
        """
        Format report for console display.

        Args:
            report: Report dictionary

        Returns:
            Formatted console string
        """
        summary = report.get('summary', {})
        publish = report.get('phases', {}).get('publish', {})

        sections = [
            "=" * 60,
            "WIKI SYNC REPORT",
            "=" * 60,
            "",
            "Summary:",
            f"  Pages:       {summary.get('pages', 0)}",
            f"  Renamed:     {summary.get('pages_renamed', 0)}",
            f"  Links:       {summary.get('links_rewritten', 0)} rewritten, "
            f"{summary.get('references_updated', 0)} repointed",
            f"  Images:      {summary.get('images_copied', 0)}",
            f"  Duration:    {summary.get('duration_formatted', '0s')}",
            ""
        ]

        renames = report.get('renames', {})
        if renames:
            sections.append("Renamed Pages:")
            sections.append("-" * 60)
            for default_name, override_name in renames.items():
                sections.append(f"  {default_name} -> {override_name}")
            sections.append("")

        sections.append("Publish:")
        sections.append("-" * 60)
        if publish.get('skipped', True):
            sections.append("  Skipped (convert only)")
        else:
            sections.append(f"  Source:      {publish.get('source_sha', 'unknown')}")
            sections.append(f"  Message:     {publish.get('commit_message', '')}")
            sections.append(f"  Committed:   {'yes' if publish.get('committed') else 'no'}")
            sections.append(f"  Pushed:      {'yes' if publish.get('pushed') else 'no'}")

        sections.append("=" * 60)
        return "\n".join(sections)

    def export_json_report(self, report: Dict[str, Any], filepath: str) -> None:
        """
        Export report to JSON file.

        Args:
            report: Report dictionary
            filepath: Output file path
        """
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False, default=str)

        self.logger.info(f"JSON report exported to {filepath}")


__all__ = ['SyncReport']
