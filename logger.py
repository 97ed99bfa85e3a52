"""Structured logging infrastructure with verbosity levels and progress tracking."""

import copy
import logging
import logging.handlers
import time
from typing import Any, Dict, Optional

import colorlog

LOGGER_NAME = 'docs_to_wiki'


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Set up structured logging with configurable verbosity levels.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
        log_file: Optional path to log file
        log_format: Optional custom log format string
        date_format: Optional custom date format string
        level: Optional explicit log level string, overrides verbosity

    Returns:
        Configured logger instance
    """
    # Determine log level
    if level:
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level_upper = level.upper()
        if level_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{level}'. Must be one of: {sorted(allowed_levels)}"
            )
        log_level = getattr(logging, level_upper)
    else:
        if verbosity >= 2:
            log_level = logging.DEBUG
        elif verbosity >= 1:
            log_level = logging.INFO
        else:
            log_level = logging.WARNING

    if log_format is None:
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    if date_format is None:
        date_format = '%Y-%m-%d %H:%M:%S'

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Clear existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + log_format,
        datefmt=date_format,
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    ))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(fmt=log_format, datefmt=date_format))
            logger.addHandler(file_handler)

            logger.info(f"Logging to file: {log_file}")
            logger.info(f"Log level: {logging.getLevelName(log_level)}")
        except OSError as e:
            logger.warning(f"Failed to set up file logging: {str(e)}")
    else:
        logger.info(f"Console logging only. Level: {logging.getLevelName(log_level)}")

    return logger


class ProgressTracker:
    """
    Logs progress for one pass over a known number of items.

    A line is logged every `log_every` items and once more when the context
    exits. If the context exits with an exception, the closing line is logged
    at error level with the number of items processed before the abort.
    """

    def __init__(
        self,
        total_items: int,
        item_type: str = "items",
        logger: Optional[logging.Logger] = None,
        log_every: int = 10
    ):
        self.total_items = total_items
        self.item_type = item_type
        self.log_every = max(log_every, 1)
        self.processed_items = 0
        self.started_at: Optional[float] = None
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def __enter__(self) -> 'ProgressTracker':
        self.started_at = time.monotonic()
        self.logger.info(f"Processing {self.total_items} {self.item_type}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = self.format_elapsed(self.elapsed)
        done = f"{self.processed_items}/{self.total_items} {self.item_type}"

        if exc_type is not None:
            self.logger.error(f"Aborted after {done} ({exc_type.__name__}), {elapsed}")
        else:
            self.logger.info(f"Done: {done} in {elapsed}")

    @property
    def elapsed(self) -> float:
        """Seconds since the context was entered."""
        return time.monotonic() - self.started_at if self.started_at is not None else 0.0

    def advance(self, count: int = 1) -> None:
        """Record `count` more processed items."""
        before = self.processed_items
        self.processed_items += count

        if self.processed_items // self.log_every > before // self.log_every:
            self.logger.info(f"Processed {self.processed_items}/{self.total_items} {self.item_type}")

    def get_stats(self) -> Dict[str, Any]:
        """Get current progress statistics."""
        return {
            'total': self.total_items,
            'processed': self.processed_items,
            'elapsed_time': self.elapsed,
            'elapsed_time_formatted': self.format_elapsed(self.elapsed)
        }

    @staticmethod
    def format_elapsed(seconds: float) -> str:
        """Format elapsed time, e.g. `4.2s`, `3m 5s` or `1h 2m 5s`."""
        if seconds < 60:
            return f"{seconds:.1f}s"

        minutes, seconds = divmod(int(seconds), 60)
        hours, minutes = divmod(minutes, 60)
        if hours:
            return f"{hours}h {minutes}m {seconds}s"
        return f"{minutes}m {seconds}s"


def log_section(title: str) -> None:
    """
    Log a decorative section header.

    Args:
        title: Section title to display
    """
    logger = logging.getLogger(LOGGER_NAME)

    separator = "=" * 60
    logger.info("")
    logger.info(separator)
    logger.info(f"  {title.upper()}")
    logger.info(separator)
    logger.info("")


def log_config(config: Dict[str, Any]) -> None:
    """
    Log sanitized configuration for debugging.

    Args:
        config: Configuration dictionary to log
    """
    logger = logging.getLogger(LOGGER_NAME)

    sanitized_config = _sanitize_config(config)

    log_section("Configuration")

    source = sanitized_config.get('source', {})
    logger.info(f"Source Path: {source.get('path', '.')}")
    logger.info(f"Docs Root: {source.get('docs_root', 'docs')}")
    logger.info(f"Repository URL: {source.get('repository_url', 'Not Set')}")
    logger.info(f"Default Branch: {source.get('default_branch', 'main')}")

    logger.info("")

    wiki = sanitized_config.get('wiki', {})
    logger.info(f"Wiki Clone URL: {wiki.get('clone_url', 'Not Set')}")
    logger.info(f"Wiki Directory: {wiki.get('directory', './wiki')}")
    logger.info("Token: ***REDACTED***" if wiki.get('token') else "Token: Not Set")

    logger.info("")

    conversion = sanitized_config.get('conversion', {})
    logger.info(f"Root Readme As Home: {conversion.get('root_readme_as_home', False)}")
    logger.info(f"Header As Wiki Name: {conversion.get('use_header_for_wiki_name', False)}")
    logger.info(f"Custom Header: {conversion.get('custom_header') or 'Not Set'}")

    logger.info("")

    publish = sanitized_config.get('publish', {})
    logger.info(f"Commit Message: {publish.get('commit_message', '{commitMessage}')}")
    logger.info(f"Convert Only: {publish.get('convert_only', False)}")
    logger.info(f"Dry Run: {publish.get('dry_run', False)}")
    logger.info(f"Push: {publish.get('push', True)}")


def _sanitize_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a sanitized copy of configuration with sensitive fields masked.

    Args:
        config: Configuration dictionary

    Returns:
        Sanitized configuration copy
    """
    sanitized = copy.deepcopy(config)

    sensitive_fields = {
        'password', 'token', 'secret', 'api_key', 'access_token', 'auth_header'
    }

    def mask_sensitive(data: Any) -> Any:
        """Recursively mask sensitive fields."""
        if isinstance(data, dict):
            masked = {}
            for key, value in data.items():
                is_sensitive = any(sensitive in key.lower() for sensitive in sensitive_fields)

                if is_sensitive and isinstance(value, str) and value:
                    masked[key] = "***REDACTED***"
                else:
                    masked[key] = mask_sensitive(value)

            return masked
        elif isinstance(data, list):
            return [mask_sensitive(item) for item in data]
        else:
            return data

    return mask_sensitive(sanitized)


__all__ = [
    'setup_logging',
    'ProgressTracker',
    'log_section',
    'log_config',
    'LOGGER_NAME'
]
