"""
Build/run sequencing for the orchestration module.

This module contains the BuildRunOrchestrator, which runs the build command
to completion and hands the run command to the ProcessController. Every
transition is serialized on the session's transition lock, so a change
event and an operator key can never interleave their build and start steps.
"""

import logging
from typing import Optional

from ..system.commands import spawn_command
from ..validation import BuildError, LiveRunError
from .process_manager import ProcessController
from .shared_state import SessionState

logger = logging.getLogger(__name__)


class BuildRunOrchestrator:
    """
    Sequences "build, then run" as one logical action.

    Errors are returned rather than raised: the caller decides whether a
    failure is fatal (operator key) or only worth a log line (file change).
    """

    def __init__(self, state: SessionState, controller: ProcessController,
                 build_command: str, run_command: str, use_shell: bool = True):
        """
        Args:
            state: Session state providing the transition lock
            controller: Owner of the running process
            build_command: Rendered build command
            run_command: Rendered run command
            use_shell: Run the build through the shell
        """
        self.state = state
        self.controller = controller
        self.build_command = build_command
        self.run_command = run_command
        self.use_shell = use_shell

    def build(self) -> Optional[Exception]:
        """
        Run the build command to completion, streaming its output live.

        Returns:
            BuildError on a non-zero exit, ProcessStartError if the command
            could not be spawned, otherwise None
        """
        with self.state.transition_lock:
            if self._shutting_down():
                return None
            try:
                # Own session: Ctrl-C quits liverun after the build instead of
                # failing the build.
                process = spawn_command(self.build_command, use_shell=self.use_shell, new_session=True)
            except LiveRunError as e:
                return e

            return_code = process.wait()
            if return_code != 0:
                logger.error(f"Build failed with exit code {return_code}")
                return BuildError(self.build_command, return_code)

            logger.info("Build completed successfully.")
            return None

    def run(self) -> Optional[Exception]:
        """Start the run command, replacing whatever is running."""
        with self.state.transition_lock:
            if self._shutting_down():
                return None
            try:
                self.controller.start(self.run_command)
            except LiveRunError as e:
                return e
            return None

    def build_and_run(self) -> Optional[Exception]:
        """
        Build, and only if that succeeded, run.

        The lock is held across both steps so the freshly built artifact is
        the one that gets started.
        """
        with self.state.transition_lock:
            if self._shutting_down():
                return None
            error = self.build()
            if error is not None:
                return error
            return self.run()

    def _shutting_down(self) -> bool:
        if self.state.shutdown_requested.is_set():
            logger.info("Shutdown in progress, skipping build/run.")
            return True
        return False
