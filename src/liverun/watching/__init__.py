"""
Filesystem watching for the liverun package.
"""

from .watch_manager import CHANGE_EVENT_TYPES, WatchSetManager, WatchTarget

__all__ = [
    "CHANGE_EVENT_TYPES",
    "WatchSetManager",
    "WatchTarget",
]
