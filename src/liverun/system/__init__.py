"""
System interaction: command templates and process spawning.
"""

from .commands import CommandTemplate, spawn_command, split_command

__all__ = [
    "CommandTemplate",
    "spawn_command",
    "split_command",
]
