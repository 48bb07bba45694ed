"""
Exception types and error handling helpers.

This module provides the error taxonomy used across the application together
with the small helpers that log an error consistently before deciding whether
to re-raise it or to exit.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when configuration validation fails.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class LiveRunError(Exception):
    """Base class for errors raised by the build/run machinery."""


class BuildError(LiveRunError):
    """The build command ran but exited with a non-zero status."""

    def __init__(self, command: str, return_code: int):
        super().__init__(f"build command '{command}' exited with status {return_code}")
        self.command = command
        self.return_code = return_code


class ProcessStartError(LiveRunError):
    """An external command could not be spawned."""

    def __init__(self, command: str, cause: Exception):
        super().__init__(f"failed to start '{command}': {cause}")
        self.command = command
        self.cause = cause


class ProcessTerminationError(LiveRunError):
    """A managed process (or part of its tree) could not be terminated."""

    def __init__(self, pid: int, message: str):
        super().__init__(f"error killing process {pid}: {message}")
        self.pid = pid


class WatchError(LiveRunError):
    """A path could not be subscribed for change notifications."""

    def __init__(self, path: str, message: str):
        super().__init__(f"cannot watch '{path}': {message}")
        self.path = path


class TerminalError(LiveRunError):
    """The terminal surface failed or could not be initialized."""


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    # Handle both enum and string severity values
    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a fatal CLI error and exit with ``exit_code`` (default 1)."""
    exit_code = kwargs.pop('exit_code', 1)
    severity = kwargs.pop('severity', ErrorSeverity.CRITICAL)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)
    sys.exit(exit_code)
