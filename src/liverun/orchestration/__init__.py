"""
Orchestration module for live reloading.

Components:
- LiveSession: owns all components of one session and drives its phases
- BuildRunOrchestrator: build, run, build & run
- ProcessController: lifecycle of the single running process
- ChangeEventListener / ErrorListener / TerminalKeyListener: event dispatch
- ShutdownSequencer: best-effort teardown
- TransientArtifacts: marker file and build artifact
- SignalHandler: signal routing to the terminal listener
"""

from .artifacts import TransientArtifacts
from .build_runner import BuildRunOrchestrator
from .dispatch import ChangeEventListener, ErrorListener, ListenerState, TerminalKeyListener
from .process_manager import ProcessController
from .session import EXIT_FATAL, EXIT_OK, LiveSession
from .shared_state import SessionState, TimeoutConstants
from .shutdown import ShutdownSequencer

__all__ = [
    "BuildRunOrchestrator",
    "ChangeEventListener",
    "ErrorListener",
    "EXIT_FATAL",
    "EXIT_OK",
    "ListenerState",
    "LiveSession",
    "ProcessController",
    "SessionState",
    "ShutdownSequencer",
    "TerminalKeyListener",
    "TimeoutConstants",
    "TransientArtifacts",
]
