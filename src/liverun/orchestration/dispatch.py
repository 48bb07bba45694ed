"""
Event dispatch for the orchestration module.

Three listeners feed the BuildRunOrchestrator:

- ChangeEventListener: background thread, one build & run per change
- ErrorListener: background thread, logs watch subsystem errors
- TerminalKeyListener: main thread, maps operator keys to actions

The background listeners never stop on an error; they end when their
channel receives the ``None`` sentinel. The terminal listener returns the
first fatal error to its caller instead of aborting the process itself.
"""

import logging
import queue
import threading
from enum import Enum
from typing import Optional

from ..models.events import ChangeEvent, KeyCommand, TerminalEvent, TerminalEventKind
from ..terminal.surface import TerminalSurface
from ..validation import TerminalError
from ..watching.watch_manager import WatchSetManager
from .build_runner import BuildRunOrchestrator
from .shared_state import SessionState

logger = logging.getLogger(__name__)


class ChangeEventListener:
    """Rebuilds and restarts on every change notification."""

    def __init__(self, events: "queue.Queue[Optional[ChangeEvent]]",
                 orchestrator: BuildRunOrchestrator, watch_manager: WatchSetManager):
        self.events = events
        self.orchestrator = orchestrator
        self.watch_manager = watch_manager
        self.thread: Optional[threading.Thread] = None

    def start(self) -> threading.Thread:
        self.thread = threading.Thread(target=self.run, name="liverun-changes", daemon=True)
        self.thread.start()
        return self.thread

    def run(self) -> None:
        while True:
            event = self.events.get()
            if event is None:
                logger.debug("Change channel closed")
                return
            self.handle(event)

    def handle(self, event: ChangeEvent) -> None:
        if not self.watch_manager.is_current(event):
            logger.debug(f"Dropping file event from before the last rearm [{event}]")
            return
        logger.info(f"File event [{event}]")
        error = self.orchestrator.build_and_run()
        if error is not None:
            logger.error(f"Build & run after file change failed: {error}")
        self.watch_manager.rearm(event.watch_path)


class ErrorListener:
    """Logs every error published by the watch subsystem."""

    def __init__(self, errors: "queue.Queue[Optional[Exception]]"):
        self.errors = errors
        self.thread: Optional[threading.Thread] = None

    def start(self) -> threading.Thread:
        self.thread = threading.Thread(target=self.run, name="liverun-errors", daemon=True)
        self.thread.start()
        return self.thread

    def run(self) -> None:
        while True:
            error = self.errors.get()
            if error is None:
                return
            logger.error(f"Watcher error: {error}")


class ListenerState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class TerminalKeyListener:
    """
    State machine driven by operator keys.

    ``run`` blocks on the terminal until QUIT (or an interrupt) moves it to
    TERMINATED, or until an action fails. Failures of manual actions and
    terminal errors are fatal and returned to the caller.
    """

    def __init__(self, surface: TerminalSurface, orchestrator: BuildRunOrchestrator,
                 state: SessionState):
        self.surface = surface
        self.orchestrator = orchestrator
        self.state = state
        self.status = ListenerState.RUNNING

    def run(self) -> Optional[Exception]:
        """
        Process events until terminated.

        Returns:
            None after a normal quit, otherwise the fatal error
        """
        while self.status is ListenerState.RUNNING:
            error = self.handle_event(self.surface.poll_event())
            if error is not None:
                return error
        self.state.shutdown_requested.set()
        return None

    def handle_event(self, event: TerminalEvent) -> Optional[Exception]:
        if event.kind is TerminalEventKind.ERROR:
            return event.error or TerminalError("unknown terminal error")
        if event.kind is TerminalEventKind.INTERRUPT:
            logger.info("Interrupted, quitting.")
            self.status = ListenerState.TERMINATED
            return None
        if event.kind is TerminalEventKind.KEY and event.command is not None:
            return self.handle_command(event.command)
        return None

    def handle_command(self, command: KeyCommand) -> Optional[Exception]:
        if command is KeyCommand.RESYNC:
            logger.info("Screen resync...")
            self.surface.sync()
        elif command is KeyCommand.QUIT:
            logger.info("Quit!")
            self.status = ListenerState.TERMINATED
        elif command is KeyCommand.BUILD:
            logger.info("Build the project.")
            return self.orchestrator.build()
        elif command is KeyCommand.RUN:
            logger.info("Run the executable.")
            return self.orchestrator.run()
        elif command is KeyCommand.BUILD_AND_RUN:
            logger.info("Build & Run.")
            return self.orchestrator.build_and_run()
        return None
