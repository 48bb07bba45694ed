"""
Shutdown sequencing for the orchestration module.
"""

import logging
from typing import List

from .artifacts import TransientArtifacts
from .process_manager import ProcessController

logger = logging.getLogger(__name__)


class ShutdownSequencer:
    """
    Best-effort teardown run once after the operator quits.

    Each step runs regardless of the previous ones failing; errors are
    collected and returned, never raised.
    """

    def __init__(self, controller: ProcessController, artifacts: TransientArtifacts):
        self.controller = controller
        self.artifacts = artifacts

    def run(self) -> List[Exception]:
        errors: List[Exception] = []

        if self.controller.current is not None:
            logger.info("Stopping running process...")
            errors.extend(self._step("stopping process", self.controller.stop))

        if self.artifacts.marker_exists():
            errors.extend(self._step("closing marker file", self.artifacts.close_marker))
            errors.extend(self._step("removing marker file", self.artifacts.remove_marker))

        if self.artifacts.artifact_exists():
            errors.extend(self._step("removing build artifact", self.artifacts.remove_artifact))

        return errors

    def _step(self, description: str, action) -> List[Exception]:
        try:
            return list(action())
        except Exception as e:
            logger.warning(f"Unexpected error while {description}: {e}")
            return [e]
