"""
Signal handling for the orchestration module.

SIGINT and SIGTERM are turned into an INTERRUPT event on the terminal
surface, so they leave through the normal quit path and the shutdown
sequence still runs. SIGWINCH becomes a RESIZE event.
"""

import logging
import signal
from typing import Any, Dict

from ..models.events import TerminalEventKind
from ..terminal.surface import TerminalSurface

logger = logging.getLogger(__name__)

_SIGNAL_EVENTS = {
    signal.SIGINT: TerminalEventKind.INTERRUPT,
    signal.SIGTERM: TerminalEventKind.INTERRUPT,
}
if hasattr(signal, "SIGWINCH"):
    _SIGNAL_EVENTS[signal.SIGWINCH] = TerminalEventKind.RESIZE


class SignalHandler:
    """
    Installs and restores the session's signal handlers.

    Must be used from the main thread, like every Python signal handler.
    """

    def __init__(self, surface: TerminalSurface):
        self.surface = surface
        self._original_handlers: Dict[int, Any] = {}

    def setup_signal_handlers(self) -> None:
        """Route the session signals to the terminal surface."""
        for signum in _SIGNAL_EVENTS:
            try:
                self._original_handlers[signum] = signal.signal(signum, self._handle_signal)
            except (ValueError, OSError) as e:
                logger.warning(f"Failed to set up handler for {signal.Signals(signum).name}: {e}")
        logger.debug("Signal handlers set up")

    def cleanup_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        for signum, handler in self._original_handlers.items():
            try:
                signal.signal(signum, handler)
            except (ValueError, OSError) as e:
                logger.warning(f"Failed to restore handler for {signal.Signals(signum).name}: {e}")
        self._original_handlers.clear()

    def _handle_signal(self, signum: int, frame: Any) -> None:
        self.surface.notify(_SIGNAL_EVENTS[signum])
