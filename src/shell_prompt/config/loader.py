"""Configuration loader with support for drop-in directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from shell_prompt.config.schema import Config

logger = logging.getLogger(__name__)


def config_home() -> Path:
    """Directory holding config.yaml and conf.d/, honouring $XDG_CONFIG_HOME."""
    base = os.environ.get("XDG_CONFIG_HOME")
    return (Path(base) if base else Path.home() / ".config") / "prompt"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning empty dict if the file is missing."""
    if not path.exists():
        logger.debug("No config file at %s", path)
        return {}
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    logger.debug("Loaded config from %s", path)
    return data


def load_dropin_directory(dropin_dir: Path) -> dict[str, Any]:
    """Load and merge all YAML files from drop-in directory."""
    if not dropin_dir.is_dir():
        return {}

    result: dict[str, Any] = {}
    yaml_files = sorted(dropin_dir.glob("*.yaml")) + sorted(dropin_dir.glob("*.yml"))

    for yaml_file in yaml_files:
        result = deep_merge(result, load_yaml_file(yaml_file))

    return result


def load_config(
    config_path: Path | str | None = None,
    dropin_dir: Path | str | None = None,
) -> Config:
    """Load configuration from file and drop-in directory.

    Args:
        config_path: Path to main config file (default: ~/.config/prompt/config.yaml)
        dropin_dir: Path to drop-in directory (default: ~/.config/prompt/conf.d/)

    Returns:
        Merged configuration object

    Raises:
        pydantic.ValidationError: A setting has an invalid value
        ValueError: A file does not contain a YAML mapping
    """
    config_path = Path(config_path) if config_path is not None else config_home() / "config.yaml"
    dropin_dir = Path(dropin_dir) if dropin_dir is not None else config_home() / "conf.d"

    merged_data = deep_merge(load_yaml_file(config_path), load_dropin_directory(dropin_dir))
    return Config(**merged_data)


def load_config_from_string(yaml_string: str) -> Config:
    """Load configuration from a YAML string (useful for testing)."""
    data = yaml.safe_load(yaml_string)
    return Config(**(data if data else {}))
