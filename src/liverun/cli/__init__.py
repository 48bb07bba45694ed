"""
Command-line interface for the liverun package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
