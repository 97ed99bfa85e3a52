"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import yaml

from models import SyncSettings, DEFAULT_COMMIT_MESSAGE

DEFAULT_CONFIG_PATH = 'config.yaml'


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: str, required: bool = True) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file
            required: Raise if the file is missing; otherwise return an empty config

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist and is required
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            if required:
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return {}

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            return {}

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        return cls._substitute_env_vars_recursive(config_data)

    @classmethod
    def apply_environment_defaults(
        cls,
        config: Dict[str, Any],
        environ: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Fill settings a GitHub Actions runner already knows about.

        Only missing values are filled: the repository URL from
        `GITHUB_SERVER_URL`/`GITHUB_REPOSITORY`, the wiki clone URL from the
        same with `.wiki.git`, the token from `GITHUB_TOKEN` and the source
        checkout from `GITHUB_WORKSPACE`.

        Args:
            config: Configuration dictionary
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Configuration copy with defaults applied
        """
        environ = os.environ if environ is None else environ
        merged = copy.deepcopy(config)
        source = merged.setdefault('source', {})
        wiki = merged.setdefault('wiki', {})

        server_url = environ.get('GITHUB_SERVER_URL', 'https://github.com').rstrip('/')
        repository = environ.get('GITHUB_REPOSITORY')

        if repository:
            if not source.get('repository_url'):
                source['repository_url'] = f"{server_url}/{repository}"
            if not wiki.get('clone_url'):
                wiki['clone_url'] = f"{server_url}/{repository}.wiki.git"

        if not source.get('path') and environ.get('GITHUB_WORKSPACE'):
            source['path'] = environ['GITHUB_WORKSPACE']

        if not wiki.get('token') and environ.get('GITHUB_TOKEN'):
            wiki['token'] = environ['GITHUB_TOKEN']

        return merged

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        cls._validate_required_field(config, 'source.repository_url')
        cls._validate_url(get_nested(config, 'source.repository_url'), 'source.repository_url')

        docs_root = get_nested(config, 'source.docs_root', 'docs')
        if not isinstance(docs_root, str):
            raise ValueError("source.docs_root must be a string")
        if '..' in docs_root.replace('\\', '/').split('/'):
            raise ValueError("source.docs_root must not contain '..'")
        if os.path.isabs(docs_root):
            raise ValueError("source.docs_root must be relative to the repository root")

        branch = get_nested(config, 'source.default_branch', 'main')
        if not isinstance(branch, str) or not branch.strip():
            raise ValueError("source.default_branch must be a non-empty string")

        for flag in ('conversion.root_readme_as_home', 'conversion.use_header_for_wiki_name',
                     'conversion.progress_bars', 'publish.dry_run', 'publish.push',
                     'publish.convert_only'):
            value = get_nested(config, flag)
            if value is not None and not isinstance(value, bool):
                raise ValueError(f"{flag} must be a boolean")

        custom_header = get_nested(config, 'conversion.custom_header')
        if custom_header is not None and not isinstance(custom_header, str):
            raise ValueError("conversion.custom_header must be a string")

        commit_message = get_nested(config, 'publish.commit_message', DEFAULT_COMMIT_MESSAGE)
        if not isinstance(commit_message, str) or not commit_message.strip():
            raise ValueError("publish.commit_message must be a non-empty string")

        # Publishing needs somewhere to push to
        if not get_nested(config, 'publish.convert_only', False):
            wiki_dir = Path(get_nested(config, 'wiki.directory', './wiki'))
            if not get_nested(config, 'wiki.clone_url') and not (wiki_dir / '.git').exists():
                raise ValueError(
                    "Missing required configuration: wiki.clone_url "
                    "(or an existing git checkout at wiki.directory)"
                )

        level = get_nested(config, 'logging.level')
        if level is not None and str(level).upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("logging.level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        for section in ('source', 'wiki', 'conversion', 'publish', 'logging'):
            if not isinstance(merged.get(section), dict):
                merged[section] = {}

        # Value-carrying arguments: only override when given
        value_args = {
            'source': ('source', 'path'),
            'docs_root': ('source', 'docs_root'),
            'repository_url': ('source', 'repository_url'),
            'branch': ('source', 'default_branch'),
            'wiki_url': ('wiki', 'clone_url'),
            'destination': ('wiki', 'directory'),
            'custom_header': ('conversion', 'custom_header'),
            'commit_message': ('publish', 'commit_message'),
            'report_path': ('publish', 'report_path'),
            'log_file': ('logging', 'file'),
        }
        for arg_name, (section, key) in value_args.items():
            value = getattr(args, arg_name, None)
            if value:
                merged[section][key] = value

        # Tri-state flags: None means "not given on the command line"
        flag_args = {
            'home_page': ('conversion', 'root_readme_as_home'),
            'header_names': ('conversion', 'use_header_for_wiki_name'),
            'dry_run': ('publish', 'dry_run'),
            'push': ('publish', 'push'),
        }
        for arg_name, (section, key) in flag_args.items():
            value = getattr(args, arg_name, None)
            if value is not None:
                merged[section][key] = value

        if getattr(args, 'convert_only', False):
            merged['publish']['convert_only'] = True

        verbose = getattr(args, 'verbose', 0)
        if verbose:
            merged['logging']['level'] = 'DEBUG' if verbose >= 2 else 'INFO'

        return merged

    @classmethod
    def to_settings(cls, config: Dict[str, Any]) -> SyncSettings:
        """
        Build the run settings used by the conversion pipeline.

        Args:
            config: Validated configuration dictionary

        Returns:
            SyncSettings instance
        """
        return SyncSettings(
            docs_root=get_nested(config, 'source.docs_root', 'docs'),
            repository_url=get_nested(config, 'source.repository_url', ''),
            default_branch=get_nested(config, 'source.default_branch', 'main'),
            root_readme_as_home=get_nested(config, 'conversion.root_readme_as_home', False),
            use_header_for_wiki_name=get_nested(config, 'conversion.use_header_for_wiki_name', False),
            custom_header=get_nested(config, 'conversion.custom_header') or None,
            commit_message=get_nested(config, 'publish.commit_message', DEFAULT_COMMIT_MESSAGE)
        )

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config_section: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config_section, field)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {field}")

        # Check for unsubstituted environment variables
        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_url(url: str, field_name: str) -> None:
        """Validate URL format."""
        parsed = urlparse(url)
        if not parsed.scheme or parsed.scheme not in ['http', 'https']:
            raise ValueError(f"{field_name} must use http or https scheme: {url}")
        if not parsed.netloc:
            raise ValueError(f"{field_name} missing hostname: {url}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "source.docs_root")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


__all__ = ['ConfigLoader', 'get_nested', 'DEFAULT_CONFIG_PATH']
