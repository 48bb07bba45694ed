"""
Runtime data models.
"""

import subprocess
import time
from dataclasses import dataclass, field


@dataclass
class ManagedProcess:
    """
    The single external process currently under our control.

    Only the ProcessController creates and holds these; everything else asks
    the controller for its ``current`` process.
    """

    popen: subprocess.Popen
    command: str
    started_at: float = field(default_factory=time.time)

    @property
    def pid(self) -> int:
        return self.popen.pid

    @property
    def is_running(self) -> bool:
        return self.popen.poll() is None

    @property
    def returncode(self):
        return self.popen.returncode
