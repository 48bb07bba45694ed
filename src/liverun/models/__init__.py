"""
Data models used throughout the application.

Configuration Models:
- LiveConfig: startup settings (watch set, command templates, artifacts)

Runtime Models:
- ManagedProcess: the single externally running process

Event Models:
- ChangeEvent: filesystem change notification for a watched path
- TerminalEvent / KeyCommand: operator input from the terminal
"""

from .config import (
    DEFAULT_ARTIFACT_PATH,
    DEFAULT_BUILD_TEMPLATE,
    DEFAULT_MARKER_PATH,
    DEFAULT_RUN_TEMPLATE,
    LiveConfig,
)
from .events import ChangeEvent, KeyCommand, TerminalEvent, TerminalEventKind
from .runtime import ManagedProcess

__all__ = [
    # Configuration
    "DEFAULT_ARTIFACT_PATH",
    "DEFAULT_BUILD_TEMPLATE",
    "DEFAULT_MARKER_PATH",
    "DEFAULT_RUN_TEMPLATE",
    "LiveConfig",
    # Events
    "ChangeEvent",
    "KeyCommand",
    "TerminalEvent",
    "TerminalEventKind",
    # Runtime
    "ManagedProcess",
]
