"""Tests for the end-to-end sync pipeline."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from errors import FilenameCollisionError
from models import CommitInfo
from orchestrator import SyncOrchestrator, SyncReport
from publishers import WikiRepository

REPO = "https://github.com/org/repo"


def write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')


@pytest.fixture
def source(tmp_path):
    root = tmp_path / "src"
    write(root / "docs" / "README.md", "# Welcome\nRead the [guide](guides/install.md).\n")
    write(root / "docs" / "guides" / "install.md", "# Install\nSee [code](../../setup.py).\n")
    return root


def make_config(source, tmp_path, **publish):
    return {
        'source': {'path': str(source), 'docs_root': 'docs', 'repository_url': REPO},
        'wiki': {'directory': str(tmp_path / 'wiki'), 'clone_url': f"{REPO}.wiki.git"},
        'conversion': {'root_readme_as_home': True, 'use_header_for_wiki_name': True},
        'publish': dict(publish)
    }


@pytest.fixture
def repository():
    repo = MagicMock(spec=WikiRepository)
    repo.commit.return_value = True
    repo.has_changes.return_value = True
    return repo


class TestConvertOnly:
    """Test runs that only write the wiki tree."""

    def test_writes_flat_tree(self, source, tmp_path):
        config = make_config(source, tmp_path, convert_only=True)

        report = SyncOrchestrator(config).orchestrate_sync()

        wiki = tmp_path / 'wiki'
        assert (wiki / 'Home.md').read_text(encoding='utf-8') == "# Welcome\nRead the [guide](Install).\n"
        assert (wiki / 'Install.md').read_text(encoding='utf-8') == (
            f"See [code]({REPO}/blob/main//setup.py).\n"
        )
        assert report['summary']['pages'] == 2
        assert report['summary']['pages_renamed'] == 1
        assert report['summary']['references_updated'] == 1
        assert report['renames'] == {'guides__install.md': 'Install.md'}
        assert report['phases']['checkout'] == {'skipped': True}
        assert report['phases']['publish']['skipped'] is True

    def test_previous_content_removed(self, source, tmp_path):
        write(tmp_path / 'wiki' / 'Stale-Page.md', "old\n")
        write(tmp_path / 'wiki' / '.git' / 'HEAD', "ref: refs/heads/master\n")

        report = SyncOrchestrator(make_config(source, tmp_path, convert_only=True)).orchestrate_sync()

        assert not (tmp_path / 'wiki' / 'Stale-Page.md').exists()
        assert (tmp_path / 'wiki' / '.git' / 'HEAD').exists()
        assert report['phases']['flatten']['entries_cleared'] == 1


class TestPublish:
    """Test committing and pushing the wiki."""

    @patch('orchestrator.sync_orchestrator.read_commit_info')
    def test_commit_and_push(self, mock_commit_info, source, tmp_path, repository):
        mock_commit_info.return_value = CommitInfo(sha='abcdef1234567890', message='Update docs\n')
        config = make_config(source, tmp_path, commit_message='{commitMessage} ({shaShort})')

        report = SyncOrchestrator(config, repository=repository).orchestrate_sync()

        repository.clone.assert_called_once()
        repository.commit.assert_called_once_with('Update docs (abcdef1)')
        repository.push.assert_called_once()
        assert report['summary']['committed'] is True
        assert report['summary']['pushed'] is True
        assert report['phases']['publish']['source_sha'] == 'abcdef1234567890'

    @patch('orchestrator.sync_orchestrator.read_commit_info')
    def test_nothing_to_commit(self, mock_commit_info, source, tmp_path, repository):
        mock_commit_info.return_value = CommitInfo(sha='abc1234', message='x')
        repository.commit.return_value = False

        report = SyncOrchestrator(make_config(source, tmp_path), repository=repository).orchestrate_sync()

        repository.push.assert_not_called()
        assert report['summary']['committed'] is False

    @patch('orchestrator.sync_orchestrator.read_commit_info')
    def test_push_disabled(self, mock_commit_info, source, tmp_path, repository):
        mock_commit_info.return_value = CommitInfo(sha='abc1234', message='x')

        SyncOrchestrator(make_config(source, tmp_path, push=False), repository=repository).orchestrate_sync()

        repository.commit.assert_called_once()
        repository.push.assert_not_called()

    @patch('orchestrator.sync_orchestrator.read_commit_info')
    def test_dry_run(self, mock_commit_info, source, tmp_path, repository):
        mock_commit_info.return_value = CommitInfo(sha='abc1234', message='x')

        report = SyncOrchestrator(make_config(source, tmp_path, dry_run=True), repository=repository).orchestrate_sync()

        repository.commit.assert_not_called()
        repository.push.assert_not_called()
        assert report['phases']['publish']['has_changes'] is True
        assert report['phases']['publish']['commit_message'] == 'x'

    def test_failure_stops_before_publish(self, source, tmp_path, repository):
        write(source / 'docs' / 'other' / 'install.md', "# Install\nduplicate\n")

        with pytest.raises(FilenameCollisionError):
            SyncOrchestrator(make_config(source, tmp_path), repository=repository).orchestrate_sync()

        repository.commit.assert_not_called()
        repository.push.assert_not_called()


class TestSyncReport:
    """Test report formatting and export."""

    def test_console_and_json_report(self, source, tmp_path):
        report = SyncOrchestrator(make_config(source, tmp_path, convert_only=True)).orchestrate_sync()
        generator = SyncReport()

        console = generator.format_console_report(report)
        assert "WIKI SYNC REPORT" in console
        assert "guides__install.md -> Install.md" in console
        assert "Skipped (convert only)" in console

        path = tmp_path / 'report.json'
        generator.export_json_report(report, str(path))
        exported = json.loads(path.read_text(encoding='utf-8'))
        assert exported['summary']['pages'] == 2
        assert {page['output_name'] for page in exported['pages']} == {'Home.md', 'Install.md'}

    def test_format_duration(self):
        generator = SyncReport()
        assert generator._format_duration(4.31) == "4.3s"
        assert generator._format_duration(125) == "2m 5s"
