"""
Validation and error handling for the liverun package.

This module provides the exception taxonomy, consistent error reporting and
the validators used when loading configuration.
"""

from .exceptions import (
    BuildError,
    ErrorSeverity,
    LiveRunError,
    ProcessStartError,
    ProcessTerminationError,
    TerminalError,
    ValidationError,
    WatchError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
)
from .validators import (
    PLACEHOLDER,
    validate_boolean,
    validate_command_template,
    validate_positive_float,
    validate_relative_file,
    validate_watch_paths,
)

__all__ = [
    # Exceptions
    "BuildError",
    "ErrorSeverity",
    "LiveRunError",
    "ProcessStartError",
    "ProcessTerminationError",
    "TerminalError",
    "ValidationError",
    "WatchError",
    # Handlers
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_file_error",
    # Validators
    "PLACEHOLDER",
    "validate_boolean",
    "validate_command_template",
    "validate_positive_float",
    "validate_relative_file",
    "validate_watch_paths",
]
