"""
Key decoding for the terminal surface.

Raw bytes read from the terminal are split into keys (single control bytes
or escape sequences) and mapped onto operator commands.
"""

import codecs
import re
from typing import Dict, List

from ..models.events import KeyCommand, TerminalEvent, TerminalEventKind

CTRL_A = "\x01"
CTRL_B = "\x02"
CTRL_Q = "\x11"
CTRL_R = "\x12"
# xterm and the linux console spell F5 differently
F5_SEQUENCES = ("\x1b[15~", "\x1b[[E")

KEY_BINDINGS: Dict[str, KeyCommand] = {
    CTRL_Q: KeyCommand.QUIT,
    CTRL_B: KeyCommand.BUILD,
    CTRL_R: KeyCommand.RUN,
    CTRL_A: KeyCommand.BUILD_AND_RUN,
}
KEY_BINDINGS.update({seq: KeyCommand.RESYNC for seq in F5_SEQUENCES})

HELP_TEXT = (
    "F5: resync screen | Ctrl-B: build | Ctrl-R: run | "
    "Ctrl-A: build & run | Ctrl-Q: quit"
)

_KEY_PATTERN = re.compile(
    r"\x1b\[\[[A-E]"          # linux console function keys
    r"|\x1b\[[0-9;]*[~A-Za-z]"  # CSI sequences
    r"|\x1bO."                # SS3 sequences
    r"|\x1b"                  # lone escape
    r"|.",
    re.DOTALL,
)
# An escape sequence cut off at the end of a read
_PARTIAL_ESCAPE = re.compile(r"\x1b(?:\[\[?[0-9;]*|O)?\Z")


def split_keys(text: str) -> List[str]:
    """Split terminal input into individual keys.

    Examples:
        >>> split_keys("a\\x1b[15~\\x11")
        ['a', '\\x1b[15~', '\\x11']
    """
    return _KEY_PATTERN.findall(text)


def _key_events(text: str) -> List[TerminalEvent]:
    return [
        TerminalEvent(kind=TerminalEventKind.KEY, command=KEY_BINDINGS.get(key), key=key)
        for key in split_keys(text)
    ]


def decode_keys(data: bytes) -> List[TerminalEvent]:
    """Turn raw terminal bytes into KEY events, one per key."""
    return _key_events(data.decode("utf-8", errors="replace"))


class KeyDecoder:
    """
    Incremental key decoder for a stream of reads.

    A read can end in the middle of an escape sequence or of a UTF-8
    character; that tail is held back and completed by the next ``feed``.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._tail = ""

    def feed(self, data: bytes) -> List[TerminalEvent]:
        text = self._tail + self._decoder.decode(data)
        match = _PARTIAL_ESCAPE.search(text)
        if match:
            self._tail = text[match.start():]
            text = text[:match.start()]
        else:
            self._tail = ""
        return _key_events(text)
