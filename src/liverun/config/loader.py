"""
Configuration file loading utilities.

This module handles the low-level loading and parsing of the optional
``liverun.toml`` file.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from ..validation import ErrorSeverity, handle_config_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "liverun.toml"
CONFIG_SECTION = "liverun"


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def find_config_file(explicit_path: Optional[Path], cwd: Path) -> Optional[Path]:
    """
    Resolve which configuration file to read.

    An explicit path always wins (and must exist). Otherwise ``liverun.toml``
    in the working directory is used when present.
    """
    if explicit_path is not None:
        return explicit_path
    candidate = cwd / DEFAULT_CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None


def load_live_section(config_path: Path) -> Dict[str, Any]:
    """
    Load the ``[liverun]`` table of a configuration file.

    A file without the table yields an empty dict, so every setting falls
    back to its default.
    """
    data = load_toml_file(config_path, "liverun configuration file")
    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise KeyError(f"[{CONFIG_SECTION}] in {config_path} must be a table")
    return section
