"""
Configuration management and loading.

Handles the optional YAML settings file and timezone resolution.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Any, Dict, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from claude_contribs.storage.files import DEFAULT_DATA_DIR

CONFIG_ENV_VAR = "CLAUDE_CONTRIBS_CONFIG"
DEFAULT_CONFIG_PATH = "~/.claude-contribs.yaml"

TIMEZONE_UTC = "utc"
TIMEZONE_LOCAL = "local"


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    data_dir: str = DEFAULT_DATA_DIR
    timezone: str = TIMEZONE_UTC
    output_dir: str = "."
    max_workers: int = 4

    def __post_init__(self):
        """Validate configuration values."""
        if not self.data_dir or not self.data_dir.strip():
            raise ValueError("data_dir cannot be empty")
        if not self.output_dir or not self.output_dir.strip():
            raise ValueError("output_dir cannot be empty")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        # Fail at load time rather than mid-run
        resolve_timezone(self.timezone)

    @property
    def resolved_data_dir(self) -> Path:
        return Path(self.data_dir).expanduser()

    @property
    def resolved_output_dir(self) -> Path:
        return Path(self.output_dir).expanduser()

    @property
    def tz(self) -> tzinfo:
        return resolve_timezone(self.timezone)


def resolve_timezone(name: str) -> tzinfo:
    """Map a timezone setting to a tzinfo.

    Accepts "utc", "local" (the host's current offset) or an IANA name
    such as "Europe/Paris".

    Raises:
        ValueError: If the name is not a known timezone
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError("timezone must be a non-empty string")
    lowered = name.strip().lower()
    if lowered == TIMEZONE_UTC:
        return timezone.utc
    if lowered == TIMEZONE_LOCAL:
        return datetime.now().astimezone().tzinfo

    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {name}")


def _default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)).expanduser()


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load and validate configuration from a YAML file.

    With no explicit path, $CLAUDE_CONTRIBS_CONFIG or ~/.claude-contribs.yaml
    is used if it exists; otherwise defaults are returned.

    Args:
        path: Optional path to YAML configuration file

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    if path is None:
        config_path = _default_config_path()
        if not config_path.exists():
            return AppConfig()
    else:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {config_path}: {e}")

    if raw_config is None:
        return AppConfig()

    return parse_config(raw_config)


def parse_config(raw_config: Any) -> AppConfig:
    """Validate a decoded config mapping.

    Raises:
        ValueError: If keys are unknown or values have the wrong type
    """
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a mapping")

    allowed_keys = {'data_dir', 'timezone', 'output_dir', 'max_workers'}
    unknown_keys = set(raw_config.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    values: Dict[str, Any] = {}
    for key in ('data_dir', 'timezone', 'output_dir'):
        if key in raw_config:
            value = raw_config[key]
            if not isinstance(value, str):
                raise ValueError(f"'{key}' must be a string")
            values[key] = value

    if 'max_workers' in raw_config:
        max_workers = raw_config['max_workers']
        if isinstance(max_workers, bool) or not isinstance(max_workers, int):
            raise ValueError("'max_workers' must be an integer")
        values['max_workers'] = max_workers

    return AppConfig(**values)
