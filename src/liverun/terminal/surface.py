"""
Terminal surface: key input and screen control on a POSIX tty.

The terminal is switched to cbreak mode with software flow control off, so
that Ctrl-Q and friends reach us while output post-processing (and thus the
child processes' output) stays untouched. Ctrl-C still raises SIGINT.
"""

import collections
import logging
import os
import select
import sys
import termios
import tty
from typing import IO, Any, Deque, List, Optional

from ..models.events import TerminalEvent, TerminalEventKind
from ..validation import TerminalError
from .keys import HELP_TEXT, KeyDecoder

logger = logging.getLogger(__name__)

_WAKE_CODES = {
    TerminalEventKind.INTERRUPT: b"i",
    TerminalEventKind.RESIZE: b"r",
}
_WAKE_KINDS = {code: kind for kind, code in _WAKE_CODES.items()}

CLEAR_SCREEN = "\x1b[2J\x1b[H"


class TerminalSurface:
    """
    Source of TerminalEvents and target for clear/flush/resync.

    ``poll_event`` blocks until the operator presses a key or ``notify`` is
    called (from a signal handler, through a self-pipe).
    """

    def __init__(self, stdin: Optional[IO[Any]] = None, stdout: Optional[IO[Any]] = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._saved_attrs: Optional[List[Any]] = None
        self._wake_r: Optional[int] = None
        self._wake_w: Optional[int] = None
        self._pending: Deque[TerminalEvent] = collections.deque()
        self._keys = KeyDecoder()

    @property
    def is_open(self) -> bool:
        return self._saved_attrs is not None

    def open(self) -> None:
        """
        Put the terminal in cbreak mode.

        Raises:
            TerminalError: If stdin is not a terminal or cannot be configured
        """
        try:
            fd = self.stdin.fileno()
            if not os.isatty(fd):
                raise TerminalError("standard input is not a terminal")
            self._saved_attrs = termios.tcgetattr(fd)
            self._keys = KeyDecoder()
            tty.setcbreak(fd)
            attrs = termios.tcgetattr(fd)
            attrs[0] &= ~(termios.IXON | termios.IXOFF)
            termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
            self._wake_r, self._wake_w = os.pipe()
            os.set_blocking(self._wake_w, False)
        except (OSError, termios.error, ValueError) as e:
            self.close()
            raise TerminalError(f"cannot initialize terminal: {e}") from e
        self.flush()
        logger.debug("Terminal switched to cbreak mode")

    def close(self) -> None:
        """Restore the terminal. Safe to call more than once."""
        if self._saved_attrs is not None:
            try:
                termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
            except (OSError, termios.error) as e:
                logger.warning(f"Failed to restore terminal settings: {e}")
            self._saved_attrs = None
        for fd in (self._wake_r, self._wake_w):
            if fd is not None:
                try:
                    os.close(fd)
                except OSError:
                    pass
        self._wake_r = self._wake_w = None

    def notify(self, kind: TerminalEventKind) -> None:
        """Wake ``poll_event`` with a non-key event. Async-signal-safe."""
        if self._wake_w is None:
            return
        try:
            os.write(self._wake_w, _WAKE_CODES[kind])
        except BlockingIOError:
            pass

    def poll_event(self) -> TerminalEvent:
        """Block until the next input event."""
        while not self._pending:
            if self._wake_r is None:
                return TerminalEvent(kind=TerminalEventKind.ERROR,
                                     error=TerminalError("terminal is not open"))
            try:
                ready, _, _ = select.select([self.stdin.fileno(), self._wake_r], [], [])
                if self._wake_r in ready:
                    for code in os.read(self._wake_r, 64):
                        kind = _WAKE_KINDS.get(bytes([code]))
                        if kind is not None:
                            self._pending.append(TerminalEvent(kind=kind))
                if self.stdin.fileno() in ready:
                    data = os.read(self.stdin.fileno(), 64)
                    if not data:
                        return TerminalEvent(kind=TerminalEventKind.ERROR,
                                             error=TerminalError("end of input on terminal"))
                    self._pending.extend(self._keys.feed(data))
            except OSError as e:
                return TerminalEvent(kind=TerminalEventKind.ERROR, error=TerminalError(str(e)))
        return self._pending.popleft()

    def clear(self) -> None:
        self.stdout.write(CLEAR_SCREEN)

    def flush(self) -> None:
        self.stdout.flush()

    def sync(self) -> None:
        """Redraw from scratch: clear and show the key help again."""
        self.clear()
        self.show_help()
        self.flush()

    def show_help(self) -> None:
        self.stdout.write(HELP_TEXT + "\n")
