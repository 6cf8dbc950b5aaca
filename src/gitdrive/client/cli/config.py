"""Configuration utilities for gitdrive CLI.

This module provides the persistent defaults file shared by CLI commands.
Precedence for every setting: command-line option, then config file, then
built-in default.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from gitdrive.client.sync.scheduler import DEFAULT_INTERVAL
from gitdrive.core.config import DEFAULT_BRANCH, DEFAULT_REMOTE

T = TypeVar("T")

DEFAULT_NOTIFY_DEDUP_INTERVAL = 3600.0  # seconds

# Settings that may be stored in the config file, with their built-in defaults
CONFIG_KEYS: dict[str, str] = {
    "remote": DEFAULT_REMOTE,
    "branch": DEFAULT_BRANCH,
    "interval": str(DEFAULT_INTERVAL),
    "identity": "",
    "notify": "true",
    "notify_dedup_interval": str(DEFAULT_NOTIFY_DEDUP_INTERVAL),
}


class ConfigError(ValueError):
    """Invalid configuration key or value."""


def get_config_dir() -> Path:
    """Get the configuration directory for gitdrive.

    Returns:
        Path from GITDRIVE_CONFIG_DIR, or ~/.gitdrive.
    """
    override = os.environ.get("GITDRIVE_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".gitdrive"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> dict[str, str]:
    """Load configuration from config file."""
    config_file = get_config_file()
    if config_file.exists():
        return dict(json.loads(config_file.read_text()))
    return {}


def save_config(config: dict[str, str]) -> None:
    """Save configuration to config file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2))


def parse_bool(value: str) -> bool:
    """Parse a boolean config value."""
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"not a boolean: {value!r}")


def parse_seconds(value: str) -> float:
    """Parse a non-negative duration in seconds."""
    try:
        seconds = float(value)
    except ValueError as e:
        raise ConfigError(f"not a number of seconds: {value!r}") from e
    if seconds < 0:
        raise ConfigError(f"duration must not be negative: {value!r}")
    return seconds


# Validators for values written with `gitdrive config set`
VALIDATORS: dict[str, Callable[[str], object]] = {
    "interval": parse_seconds,
    "notify": parse_bool,
    "notify_dedup_interval": parse_seconds,
}


def set_config_value(key: str, value: str) -> dict[str, str]:
    """Validate and persist a single setting.

    Args:
        key: One of CONFIG_KEYS.
        value: Raw value.

    Returns:
        The updated configuration.

    Raises:
        ConfigError: Unknown key or invalid value.
    """
    if key not in CONFIG_KEYS:
        raise ConfigError(f"unknown key {key!r} (expected one of: {', '.join(CONFIG_KEYS)})")
    validator = VALIDATORS.get(key)
    if validator is not None:
        validator(value)

    config = load_config()
    config[key] = value
    save_config(config)
    return config


def resolve_setting(
    option: T | None,
    key: str,
    config: dict[str, str],
    convert: Callable[[str], T],
) -> T:
    """Resolve a setting from the command line, the config file or the default.

    Args:
        option: Value given on the command line (None if absent).
        key: Config key, also used to look up the built-in default.
        config: Loaded config file.
        convert: Parser for string values.
    """
    if option is not None:
        return option
    return convert(config.get(key, CONFIG_KEYS[key]))
