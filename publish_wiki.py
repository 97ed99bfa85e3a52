#!/usr/bin/env python3
"""
Docs to Wiki Sync Tool - Main CLI Entry Point

This script provides the command-line interface for publishing a repository's
hierarchical markdown docs to its flat GitHub wiki, keeping internal links
working and pointing everything else back at the repository.
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from config_loader import ConfigLoader, DEFAULT_CONFIG_PATH, get_nested
from errors import WikiSyncError
from logger import setup_logging, log_section, log_config
from orchestrator import SyncOrchestrator, SyncReport

__version__ = "1.0.0"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Publish a repository's markdown docs tree to its GitHub wiki",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync using config.yaml
  docs-to-wiki --config config.yaml

  # Convert only, into a local directory
  docs-to-wiki --convert-only --docs-root docs --destination ./wiki \\
      --repository-url https://github.com/org/repo

  # Name wiki pages after their first header
  docs-to-wiki --header-names --home-page

  # Preview the commit without pushing
  docs-to-wiki --dry-run -v
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH} if present)'
    )

    parser.add_argument('--source', type=str, help='Path to the source repository checkout')
    parser.add_argument('--docs-root', type=str, help='Docs root relative to the repository root')
    parser.add_argument('--destination', type=str, help='Wiki working directory to write into')
    parser.add_argument('--repository-url', type=str, help='Repository URL used for blob links')
    parser.add_argument('--branch', type=str, help='Branch used for blob links')
    parser.add_argument('--wiki-url', type=str, help='Wiki git clone URL')

    parser.add_argument(
        '--home-page',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Publish the root README.md as Home.md'
    )

    parser.add_argument(
        '--header-names',
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Name wiki pages after each document's leading '# ' header"
    )

    parser.add_argument(
        '--custom-header',
        type=str,
        help='Header line added to every page; {sourceFileLink} is replaced with the source URL'
    )

    parser.add_argument(
        '--commit-message',
        type=str,
        help='Commit message template using {commitMessage}, {shaFull} and {shaShort}'
    )

    parser.add_argument(
        '--convert-only',
        action='store_true',
        help='Only write the flat wiki tree, no git operations'
    )

    parser.add_argument(
        '--dry-run',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Convert and report the commit without committing or pushing'
    )

    parser.add_argument(
        '--push',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Push the wiki commit (default: on)'
    )

    parser.add_argument('--report-path', type=str, help='Write a JSON report to this path')
    parser.add_argument('--log-file', type=str, help='Also log to this file')

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def run_sync(config: dict, logger: logging.Logger) -> int:
    """Execute the complete sync pipeline."""
    orchestrator = SyncOrchestrator(config, logger=logger)

    try:
        report = orchestrator.orchestrate_sync()
    except KeyboardInterrupt:
        logger.error("Sync interrupted by user")
        return 130
    except (WikiSyncError, OSError) as e:
        logger.error(f"Sync aborted: {e}")
        return 1

    report_generator = SyncReport(logger)
    print("\n" + report_generator.format_console_report(report))

    report_path = get_nested(config, 'publish.report_path')
    if report_path:
        try:
            report_generator.export_json_report(report, report_path)
        except OSError as e:
            logger.warning(f"Failed to export JSON report: {str(e)}")

    logger.info("Sync completed successfully")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        # Minimal logging for config loading
        logger = setup_logging(verbosity=args.verbose)

        log_section("Docs to Wiki Sync Tool")
        logger.info(f"Version: {__version__}")

        config_path = args.config or DEFAULT_CONFIG_PATH
        logger.info(f"Loading configuration from {config_path}")
        config = ConfigLoader.load(config_path, required=args.config is not None)
        config = ConfigLoader.apply_environment_defaults(config)

        # CLI takes precedence
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)

        # Reconfigure logging with config file settings
        logger = setup_logging(
            verbosity=args.verbose,
            level=get_nested(config, 'logging.level'),
            log_file=get_nested(config, 'logging.file')
        )

        log_config(config)

        return run_sync(config, logger)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except (ValueError, yaml.YAMLError) as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nSync interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
