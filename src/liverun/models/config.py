"""
Configuration data models.

The values here are fixed once at startup; the command templates are
rendered with the artifact path before any listener starts.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

DEFAULT_MARKER_PATH = "./.liverun"
DEFAULT_ARTIFACT_PATH = "_liverun.bin"
DEFAULT_BUILD_TEMPLATE = "go build -o $1"
DEFAULT_RUN_TEMPLATE = "./$1"


@dataclass
class LiveConfig:
    """
    Startup configuration, loaded from ``liverun.toml`` and the command line.
    """

    # Paths to watch. A ``dir/*`` entry watches the entries of ``dir``.
    watch_paths: List[str] = field(default_factory=lambda: [DEFAULT_MARKER_PATH])
    # Build command; ``$1`` is replaced with the artifact path.
    build_template: str = DEFAULT_BUILD_TEMPLATE
    # Run command; ``$1`` is replaced with the artifact path.
    run_template: str = DEFAULT_RUN_TEMPLATE
    # Connect our stdin to the run target.
    redirect_input: bool = False
    # Ephemeral build output, removed at shutdown.
    artifact_path: Path = Path(DEFAULT_ARTIFACT_PATH)
    # Touch this file to force a rebuild. Only created when watched.
    marker_path: Path = Path(DEFAULT_MARKER_PATH)
    # Run commands through the shell (redirections, pipes, &&).
    use_shell: bool = True
    # Changes to these paths never trigger a rebuild. The artifact is
    # always added by the config validator.
    ignore_paths: List[str] = field(default_factory=list)
    # Seconds to wait per termination phase before escalating.
    kill_timeout: float = 2.0
