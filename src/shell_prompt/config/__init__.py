"""Configuration loading and schema definitions."""

from shell_prompt.config.loader import load_config, load_config_from_string
from shell_prompt.config.schema import Config, GitSettings

__all__ = [
    "Config",
    "GitSettings",
    "load_config",
    "load_config_from_string",
]
