"""
Terminal control surface for the liverun package.
"""

from .keys import HELP_TEXT, KEY_BINDINGS, KeyDecoder, decode_keys, split_keys
from .surface import TerminalSurface

__all__ = [
    "HELP_TEXT",
    "KEY_BINDINGS",
    "KeyDecoder",
    "TerminalSurface",
    "decode_keys",
    "split_keys",
]
