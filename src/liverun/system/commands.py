"""
Command templates and process spawning.

This module renders the build/run command templates and spawns external
commands wired to our own standard streams.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..validation import PLACEHOLDER, ProcessStartError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandTemplate:
    """
    A command line containing the ``$1`` placeholder.

    Rendered exactly once at startup; the rendered string is what every
    build or run uses afterwards.
    """

    name: str
    template: str

    def render(self, artifact_path: Union[str, Path]) -> str:
        """Substitute every ``$1`` with the artifact path.

        Examples:
            >>> CommandTemplate("build", "go build -o $1").render("_liverun.bin")
            'go build -o _liverun.bin'
        """
        return self.template.replace(PLACEHOLDER, str(artifact_path))


def split_command(command: str) -> List[str]:
    """Split a command line for direct (non-shell) execution.

    Raises:
        ValueError: If the command is empty or has unbalanced quotes.
    """
    argv = shlex.split(command)
    if not argv:
        raise ValueError("empty command")
    return argv


def spawn_command(
    command: str,
    use_shell: bool = True,
    inherit_stdin: bool = False,
    cwd: Optional[Path] = None,
    new_session: bool = False,
) -> subprocess.Popen:
    """Start ``command`` without waiting for it.

    Standard output and error are inherited so the child's output is passed
    straight through to our terminal. Standard input is inherited only when
    ``inherit_stdin`` is set; otherwise the child reads from /dev/null.

    Args:
        command: Rendered command line.
        use_shell: Run through ``/bin/sh -c`` instead of splitting with shlex.
        inherit_stdin: Connect our stdin to the child.
        cwd: Working directory, defaults to ours.
        new_session: Detach the child from our session and process group,
            so keyboard signals from the terminal do not reach it.

    Returns:
        The started subprocess.Popen object.

    Raises:
        ProcessStartError: If the command could not be spawned.
    """
    logger.info(f"ex. {command}")
    stdin = None if inherit_stdin else subprocess.DEVNULL
    try:
        args = command if use_shell else split_command(command)
        return subprocess.Popen(
            args,
            cwd=cwd,
            stdin=stdin,
            stdout=None,
            stderr=None,
            shell=use_shell,
            start_new_session=new_session,
        )
    except (OSError, ValueError) as e:
        raise ProcessStartError(command, e) from e
