"""
Event models flowing between the watchers, the terminal and the listeners.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyCommand(Enum):
    """Operator commands recognized by the terminal listener."""
    RESYNC = "resync"
    QUIT = "quit"
    BUILD = "build"
    RUN = "run"
    BUILD_AND_RUN = "build_and_run"


class TerminalEventKind(Enum):
    KEY = "key"
    RESIZE = "resize"
    INTERRUPT = "interrupt"
    ERROR = "error"


@dataclass(frozen=True)
class TerminalEvent:
    """
    One input event read from the terminal surface.

    ``command`` is only set for KEY events that map to a KeyCommand;
    ``error`` only for ERROR events.
    """

    kind: TerminalEventKind
    command: Optional[KeyCommand] = None
    key: str = ""
    error: Optional[Exception] = None


@dataclass(frozen=True)
class ChangeEvent:
    """
    A change notification for one watched path.

    ``watch_path`` is the entry of the watch set whose subscription fired,
    ``src_path`` the file that actually changed. ``generation`` is the
    subscription generation the notification arrived on; it goes stale once
    the path is re-subscribed.
    """

    watch_path: str
    src_path: str
    event_type: str
    is_directory: bool = False
    generation: int = 0

    def __str__(self) -> str:
        return f"{self.event_type} {self.src_path} (watch: {self.watch_path})"
