"""
Validation of raw configuration data into a LiveConfig.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict

from ..models.config import LiveConfig
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_command_template,
    validate_positive_float,
    validate_relative_file,
    validate_watch_paths,
)

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "watch",
    "build",
    "run",
    "redirect_input",
    "artifact_path",
    "marker_path",
    "use_shell",
    "ignore_paths",
    "kill_timeout",
}


def validate_live_config(data: Dict[str, Any]) -> LiveConfig:
    """
    Validate a flat settings dictionary and build a LiveConfig.

    Missing keys take the LiveConfig defaults. Unknown keys are rejected so
    that typos in ``liverun.toml`` do not go unnoticed.

    Args:
        data: Settings merged from the config file and the command line

    Returns:
        A validated LiveConfig

    Raises:
        ValidationError: If any value is invalid or a key is unknown
    """
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ValidationError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            field_name="liverun",
            value=unknown
        )

    defaults = LiveConfig()

    watch_paths = (
        validate_watch_paths(data["watch"], field_name="watch")
        if "watch" in data else list(defaults.watch_paths)
    )
    build_template = validate_command_template(
        data.get("build", defaults.build_template), field_name="build"
    )
    run_template = validate_command_template(
        data.get("run", defaults.run_template), field_name="run"
    )
    redirect_input = validate_boolean(
        data.get("redirect_input", defaults.redirect_input), field_name="redirect_input"
    )
    use_shell = validate_boolean(data.get("use_shell", defaults.use_shell), field_name="use_shell")
    artifact_path = validate_relative_file(
        data.get("artifact_path", defaults.artifact_path), field_name="artifact_path"
    )
    marker_path = validate_relative_file(
        data.get("marker_path", defaults.marker_path), field_name="marker_path"
    )
    kill_timeout = validate_positive_float(
        data.get("kill_timeout", defaults.kill_timeout),
        min_value=0.1,
        max_value=60.0,
        field_name="kill_timeout",
    )

    ignore_paths = data.get("ignore_paths", [])
    if not isinstance(ignore_paths, list) or not all(isinstance(p, str) for p in ignore_paths):
        raise ValidationError(
            "ignore_paths must be a list of strings",
            field_name="ignore_paths",
            value=ignore_paths
        )
    ignore_paths = [os.path.normpath(p) for p in ignore_paths]
    artifact_norm = os.path.normpath(str(artifact_path))
    if artifact_norm not in ignore_paths:
        ignore_paths.append(artifact_norm)

    if os.path.normpath(str(artifact_path)) == os.path.normpath(str(marker_path)):
        raise ValidationError(
            "artifact_path and marker_path must differ",
            field_name="artifact_path",
            value=str(artifact_path)
        )

    return LiveConfig(
        watch_paths=watch_paths,
        build_template=build_template,
        run_template=run_template,
        redirect_input=redirect_input,
        artifact_path=Path(artifact_path),
        marker_path=Path(marker_path),
        use_shell=use_shell,
        ignore_paths=ignore_paths,
        kill_timeout=kill_timeout,
    )
