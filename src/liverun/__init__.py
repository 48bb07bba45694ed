"""
liverun: live-reload orchestrator.

Watches a set of filesystem paths and, on every change, rebuilds and
restarts a target executable, while a terminal control surface lets the
operator build, run or quit by hand.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Error taxonomy, error handling and validators
- system: Command templates and process spawning
- watching: Watch set management on top of watchdog
- terminal: Terminal key input and screen control
- orchestration: Process control, build/run sequencing, listeners, shutdown
- cli: Command-line interface

Usage:
    From command line:
        liverun --watch 'src/*' --build 'go build -o $1' --run './$1'

    Programmatically:
        from liverun import LiveSession, load_config
        session = LiveSession(load_config())
        session.run()
"""

__version__ = "0.1.0"

from .config import load_config
from .models import ChangeEvent, KeyCommand, LiveConfig, ManagedProcess
from .orchestration import (
    BuildRunOrchestrator,
    LiveSession,
    ProcessController,
    ShutdownSequencer,
)
from .system import CommandTemplate
from .validation import (
    BuildError,
    LiveRunError,
    ProcessStartError,
    ProcessTerminationError,
    TerminalError,
    ValidationError,
    WatchError,
)
from .watching import WatchSetManager
from .cli import main_cli

__all__ = [
    "__version__",
    # Main interfaces
    "LiveSession",
    "load_config",
    "main_cli",
    # Components
    "BuildRunOrchestrator",
    "CommandTemplate",
    "ProcessController",
    "ShutdownSequencer",
    "WatchSetManager",
    # Models
    "ChangeEvent",
    "KeyCommand",
    "LiveConfig",
    "ManagedProcess",
    # Errors
    "BuildError",
    "LiveRunError",
    "ProcessStartError",
    "ProcessTerminationError",
    "TerminalError",
    "ValidationError",
    "WatchError",
]
