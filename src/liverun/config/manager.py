"""
Configuration assembly.

Merges the optional configuration file with command-line overrides and
validates the result. Nothing is cached at module level: the session owns
the LiveConfig it was started with.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import LiveConfig
from ..validation import ErrorSeverity, handle_config_error
from .loader import find_config_file, load_live_section
from .validators import validate_live_config

logger = logging.getLogger(__name__)


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    cwd: Optional[Path] = None,
) -> LiveConfig:
    """
    Build the session configuration.

    Args:
        config_path: Explicit configuration file, or None to look for
            ``liverun.toml`` in ``cwd``
        overrides: Values given on the command line; keys whose value is
            None are ignored so that file values survive
        cwd: Directory searched for the default file (defaults to the
            process working directory)

    Returns:
        The validated LiveConfig

    Raises:
        FileNotFoundError: If an explicit configuration file is missing
        OSError: If the configuration file cannot be read
        ValidationError: If the merged settings are invalid
        tomllib.TOMLDecodeError: If the file is malformed
    """
    settings: Dict[str, Any] = {}

    resolved = find_config_file(config_path, cwd or Path.cwd())
    if resolved is not None:
        try:
            settings.update(load_live_section(resolved))
        except FileNotFoundError as e:
            handle_config_error(
                error=e,
                context="loading configuration file",
                severity=ErrorSeverity.CRITICAL,
                reraise=True,
                logger=logger
            )
    else:
        logger.debug("No configuration file found, using defaults and command-line values")

    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value

    config = validate_live_config(settings)
    logger.debug(f"Loaded configuration: {config}")
    return config
