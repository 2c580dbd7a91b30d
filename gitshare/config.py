"""User configuration for gitshare logging, read from a TOML rc file."""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import tomli

__all__ = [
    "get_logger_verbosity",
    "get_logger_path",
]

# Default configuration values
DEFAULT_CONFIG = {
    "logger": {
        "verbosity": "INFO",  # Default logging level
        "path": str(Path.home() / ".gitshare"),  # Default logger path
    },
}


def get_config_path() -> Path:
    """Return the path to the user's config file.

    Checks the following locations in order:
    1. $GITSHARE_CONFIG_DIR/gitsharerc if $GITSHARE_CONFIG_DIR is defined
    2. $XDG_CONFIG_HOME/gitshare/gitsharerc if $XDG_CONFIG_HOME is defined
    3. Fallback to $HOME/.gitsharerc

    Returns:
        Path to the config file
    """
    if "GITSHARE_CONFIG_DIR" in os.environ:
        path = Path(os.environ["GITSHARE_CONFIG_DIR"]) / "gitsharerc"
        if path.exists():
            return path

    if "XDG_CONFIG_HOME" in os.environ:
        path = Path(os.environ["XDG_CONFIG_HOME"]) / "gitshare" / "gitsharerc"
        if path.exists():
            return path

    return Path.home() / ".gitsharerc"


def load_config() -> dict[str, Any]:
    """Load configuration from the config file.

    Returns:
        Dict containing the merged configuration (defaults + user config).
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                user_config = tomli.load(f)

            _merge_configs(config, user_config)
        except (OSError, tomli.TOMLDecodeError) as e:
            logging.warning(f"Error loading config from {config_path}: {e}")

    return config


def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Recursively merge override dict into base dict.

    Args:
        base: The base configuration dictionary to merge into.
        override: The override configuration dictionary to merge from.

    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            nested_value: dict[str, Any] = value
            _merge_configs(base[key], nested_value)
        else:
            base[key] = value


def get_logger_verbosity() -> str:
    """Get the configured logger verbosity level.

    Returns:
        String representing the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    """
    config = load_config()
    return config["logger"]["verbosity"]


def get_logger_path() -> str:
    """Get the configured logger path.

    Returns:
        String representing the path where logs should be stored.

    """
    config = load_config()
    return os.path.expanduser(config["logger"]["path"])
