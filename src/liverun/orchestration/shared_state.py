"""
Shared data structures for the orchestration module.

This module defines the state shared by the listeners of one session and
the timeout constants used by process termination and teardown.
"""

import threading
from dataclasses import dataclass, field


@dataclass
class SessionState:
    """
    State shared across the listeners of one live session.

    Owned by LiveSession and handed to each component explicitly.
    """
    # Serializes every build/run transition, whichever listener asks.
    transition_lock: threading.RLock = field(default_factory=threading.RLock)
    # Set once the terminal listener has terminated.
    shutdown_requested: threading.Event = field(default_factory=threading.Event)


class TimeoutConstants:
    """
    Centralized timeout configuration.
    """
    # Process termination phases; the graceful phase uses the configured
    # kill_timeout instead when one is given.
    TERMINATION_GRACEFUL_TIMEOUT = 2.0
    TERMINATION_INTERRUPT_TIMEOUT = 1.0
    TERMINATION_FORCE_TIMEOUT = 2.0

    # Final wait on the Popen object after the tree is gone
    REAP_TIMEOUT = 5.0
