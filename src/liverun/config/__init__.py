"""
Configuration management for the liverun package.

This module provides loading of the optional ``liverun.toml`` file, merging
with command-line values, and validation into a LiveConfig.
"""

from .loader import (
    CONFIG_SECTION,
    DEFAULT_CONFIG_FILENAME,
    find_config_file,
    load_live_section,
    load_toml_file,
)
from .manager import load_config
from .validators import validate_live_config

__all__ = [
    "CONFIG_SECTION",
    "DEFAULT_CONFIG_FILENAME",
    "find_config_file",
    "load_config",
    "load_live_section",
    "load_toml_file",
    "validate_live_config",
]
