"""
The live session for the orchestration module.

LiveSession owns every component of one run of the program (watch set,
process controller, orchestrator, terminal, artifacts) and drives the
startup, listen and teardown phases. No state lives at module level.
"""

import logging
from typing import List, Optional

from ..models.config import LiveConfig
from ..system.commands import CommandTemplate
from ..terminal.surface import TerminalSurface
from ..validation import ErrorSeverity, LiveRunError, handle_error
from ..watching.watch_manager import WatchSetManager
from .artifacts import TransientArtifacts
from .build_runner import BuildRunOrchestrator
from .dispatch import ChangeEventListener, ErrorListener, TerminalKeyListener
from .process_manager import ProcessController
from .shared_state import SessionState
from .shutdown import ShutdownSequencer
from .signal_handler import SignalHandler

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


class LiveSession:
    """
    Coordinates the listeners of one live-reload session.

    The terminal listener runs on the calling thread; the change and error
    listeners run as daemon threads that end when the watch channels close.
    """

    def __init__(self, config: LiveConfig,
                 surface: Optional[TerminalSurface] = None,
                 watch_manager: Optional[WatchSetManager] = None,
                 install_signal_handlers: bool = True):
        """
        Args:
            config: Validated startup configuration
            surface: Terminal surface; a real tty surface when omitted
            watch_manager: Watch set manager; a watchdog-backed one when omitted
            install_signal_handlers: Route SIGINT/SIGTERM/SIGWINCH to the
                terminal listener (main thread only)
        """
        self.config = config
        self.state = SessionState()

        self.build_command = CommandTemplate("build", config.build_template).render(config.artifact_path)
        self.run_command = CommandTemplate("run", config.run_template).render(config.artifact_path)

        self.surface = surface or TerminalSurface()
        self.watch_manager = watch_manager or WatchSetManager(ignore_paths=config.ignore_paths)
        self.artifacts = TransientArtifacts(config.artifact_path, config.marker_path)
        self.controller = ProcessController(
            redirect_input=config.redirect_input,
            use_shell=config.use_shell,
            kill_timeout=config.kill_timeout,
        )
        self.orchestrator = BuildRunOrchestrator(
            self.state, self.controller, self.build_command, self.run_command,
            use_shell=config.use_shell,
        )
        self.key_listener = TerminalKeyListener(self.surface, self.orchestrator, self.state)
        self.change_listener = ChangeEventListener(
            self.watch_manager.events, self.orchestrator, self.watch_manager
        )
        self.error_listener = ErrorListener(self.watch_manager.errors)
        self.signal_handler = SignalHandler(self.surface) if install_signal_handlers else None

    def run(self) -> int:
        """
        Execute the whole session.

        Returns:
            EXIT_OK after a normal quit (even if teardown had errors),
            EXIT_FATAL on a startup or runtime failure, in which case the
            shutdown sequence is skipped
        """
        logger.info(f"Build command: {self.build_command}")
        logger.info(f"Run command: {self.run_command}")

        try:
            try:
                self.setup()
            except (LiveRunError, OSError) as e:
                handle_error(e, "startup", severity=ErrorSeverity.CRITICAL, reraise=False, logger=logger)
                self.watch_manager.close()
                return EXIT_FATAL

            self.change_listener.start()
            self.error_listener.start()
            if self.signal_handler:
                self.signal_handler.setup_signal_handlers()

            fatal = self.key_listener.run()
        finally:
            if self.signal_handler:
                self.signal_handler.cleanup_signal_handlers()
            self.surface.close()

        self.watch_manager.close()

        if fatal is not None:
            handle_error(fatal, "terminal listener", severity=ErrorSeverity.CRITICAL,
                         reraise=False, logger=logger)
            return EXIT_FATAL

        errors = self.shutdown()
        if errors:
            logger.warning("Some errors occurred during shutting down.")
            for error in errors:
                logger.warning(str(error))
        return EXIT_OK

    def setup(self) -> None:
        """
        Prepare the marker, the watches and the terminal.

        Raises:
            OSError: If the marker file cannot be created
            WatchError: If a path cannot be watched
            TerminalError: If the terminal cannot be initialized
        """
        self.artifacts.prepare_marker(self.config.watch_paths)
        self.watch_manager.register(self.config.watch_paths)

        self.surface.open()
        self.surface.clear()
        self.surface.show_help()
        self.surface.flush()

        watched = "\n".join(f"\t\t\t- {p}" for p in self.config.watch_paths)
        logger.info(f"Watching files:\n{watched}")

    def shutdown(self) -> List[Exception]:
        """Run the shutdown sequence once no transition is in flight."""
        with self.state.transition_lock:
            return ShutdownSequencer(self.controller, self.artifacts).run()
