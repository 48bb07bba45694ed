"""
Transient artifact management for the orchestration module.

This module handles the marker file (a watched file the operator can save to
force a rebuild) and the ephemeral build artifact, including their removal
at shutdown.
"""

import logging
import os
from pathlib import Path
from typing import IO, Any, Iterable, List, Optional

from ..validation import ErrorSeverity, handle_file_error

logger = logging.getLogger(__name__)


def same_path(a: str, b: str) -> bool:
    """Compare two relative or absolute paths after normalization."""
    return os.path.normpath(a) == os.path.normpath(b)


class TransientArtifacts:
    """
    Owns the marker file handle and knows where the build artifact lives.
    """

    def __init__(self, artifact_path: Path, marker_path: Path):
        self.artifact_path = Path(artifact_path)
        self.marker_path = Path(marker_path)
        self.marker_file: Optional[IO[Any]] = None

    def prepare_marker(self, watch_paths: Iterable[str]) -> bool:
        """
        Create the marker file if it is among the watched paths.

        The file is opened read/write and created when absent; the handle
        stays open until shutdown.

        Returns:
            True if the marker is watched and now exists

        Raises:
            OSError: If the marker cannot be created
        """
        if not any(same_path(p, str(self.marker_path)) for p in watch_paths):
            return False
        if self.marker_file is not None:
            return True

        try:
            self.marker_file = open(self.marker_path, "a+", encoding="utf-8")
        except OSError as e:
            handle_file_error(
                error=e,
                context=f"creating marker {self.marker_path}",
                severity=ErrorSeverity.CRITICAL,
                reraise=True,
                logger=logger
            )
        logger.debug(f"Marker file ready: {self.marker_path}")
        return True

    def marker_exists(self) -> bool:
        return self.marker_path.exists()

    def artifact_exists(self) -> bool:
        return self.artifact_path.exists()

    def close_marker(self) -> List[Exception]:
        """Close the marker handle if we hold one."""
        if self.marker_file is None:
            return []
        try:
            self.marker_file.close()
            return []
        except OSError as e:
            logger.warning(f"Failed to close marker file {self.marker_path}: {e}")
            return [OSError(f"error closing file {self.marker_path}: {e}")]
        finally:
            self.marker_file = None

    def remove_marker(self) -> List[Exception]:
        return self._safe_remove(self.marker_path)

    def remove_artifact(self) -> List[Exception]:
        return self._safe_remove(self.artifact_path)

    def _safe_remove(self, path: Path) -> List[Exception]:
        """Delete ``path``, collecting the error instead of raising it."""
        try:
            path.unlink()
            logger.debug(f"Removed {path}")
            return []
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning(f"Failed to delete {path}: {e}")
            return [OSError(f"error deleting {path} file: {e}")]
