"""
Unit tests for terminal key decoding and the terminal surface.
"""

import io
import os
import termios

import pytest

from liverun.models import KeyCommand, TerminalEventKind
from liverun.terminal import KeyDecoder, TerminalSurface, decode_keys, split_keys
from liverun.validation import TerminalError


@pytest.mark.unit
class TestKeyDecoding:
    """Test cases for split_keys/decode_keys."""

    @pytest.mark.parametrize(
        "data,command",
        [
            (b"\x11", KeyCommand.QUIT),
            (b"\x02", KeyCommand.BUILD),
            (b"\x12", KeyCommand.RUN),
            (b"\x01", KeyCommand.BUILD_AND_RUN),
            (b"\x1b[15~", KeyCommand.RESYNC),
            (b"\x1b[[E", KeyCommand.RESYNC),
        ],
    )
    def test_bindings(self, data, command):
        events = decode_keys(data)
        assert len(events) == 1
        assert events[0].kind is TerminalEventKind.KEY
        assert events[0].command is command

    def test_unbound_keys_have_no_command(self):
        events = decode_keys(b"x\x1b[A")
        assert [e.key for e in events] == ["x", "\x1b[A"]
        assert all(e.command is None for e in events)

    def test_several_keys_in_one_read(self):
        assert split_keys("a\x1b[15~\x11") == ["a", "\x1b[15~", "\x11"]

    def test_lone_escape(self):
        assert split_keys("\x1b") == ["\x1b"]


@pytest.mark.unit
class TestKeyDecoder:
    """Test cases for decoding keys across several reads."""

    @pytest.mark.parametrize("split_at", [1, 2, 3, 4])
    def test_f5_split_across_reads(self, split_at):
        decoder = KeyDecoder()
        data = b"\x1b[15~"

        assert decoder.feed(data[:split_at]) == []
        events = decoder.feed(data[split_at:])

        assert [e.command for e in events] == [KeyCommand.RESYNC]

    def test_linux_console_f5_split(self):
        decoder = KeyDecoder()

        assert [e.key for e in decoder.feed(b"\x02\x1b[[")] == ["\x02"]
        assert [e.command for e in decoder.feed(b"E")] == [KeyCommand.RESYNC]

    def test_complete_sequences_are_not_held_back(self):
        decoder = KeyDecoder()
        events = decoder.feed(b"\x1b[A\x11")
        assert [e.key for e in events] == ["\x1b[A", "\x11"]

    def test_utf8_character_split_across_reads(self):
        decoder = KeyDecoder()
        data = "\u00e9".encode("utf-8")

        assert decoder.feed(data[:1]) == []
        assert [e.key for e in decoder.feed(data[1:])] == ["\u00e9"]


@pytest.mark.unit
class TestTerminalSurface:
    def test_open_requires_a_tty(self, temp_dir):
        with open(temp_dir / "input.txt", "w+") as not_a_tty:
            surface = TerminalSurface(stdin=not_a_tty, stdout=io.StringIO())
            with pytest.raises(TerminalError):
                surface.open()
            assert surface.is_open is False

    def test_poll_on_closed_surface_reports_error(self):
        surface = TerminalSurface(stdin=io.StringIO(), stdout=io.StringIO())
        event = surface.poll_event()
        assert event.kind is TerminalEventKind.ERROR

    def test_sync_redraws_help(self):
        out = io.StringIO()
        surface = TerminalSurface(stdin=io.StringIO(), stdout=out)
        surface.sync()
        assert "Ctrl-Q: quit" in out.getvalue()

    def test_close_is_idempotent(self):
        surface = TerminalSurface(stdin=io.StringIO(), stdout=io.StringIO())
        surface.close()
        surface.close()


@pytest.fixture
def pty_surface():
    """A TerminalSurface opened on the slave side of a pseudo terminal."""
    master, slave = os.openpty()
    slave_file = os.fdopen(slave, "rb", buffering=0)
    surface = TerminalSurface(stdin=slave_file, stdout=io.StringIO())
    surface.open()
    yield surface, master
    surface.close()
    slave_file.close()
    try:
        os.close(master)
    except OSError:
        pass


@pytest.mark.unit
class TestTerminalSurfaceOnPty:
    def test_open_disables_flow_control(self, pty_surface):
        surface, _ = pty_surface
        attrs = termios.tcgetattr(surface.stdin.fileno())

        assert surface.is_open
        assert not attrs[0] & termios.IXON
        assert not attrs[3] & termios.ICANON

    def test_keys_become_events(self, pty_surface):
        surface, master = pty_surface
        os.write(master, b"\x02\x11")

        assert surface.poll_event().command is KeyCommand.BUILD
        assert surface.poll_event().command is KeyCommand.QUIT

    def test_notify_wakes_poll(self, pty_surface):
        surface, _ = pty_surface
        surface.notify(TerminalEventKind.RESIZE)

        assert surface.poll_event().kind is TerminalEventKind.RESIZE

    def test_hangup_is_an_error(self, pty_surface):
        surface, master = pty_surface
        os.close(master)

        assert surface.poll_event().kind is TerminalEventKind.ERROR

    def test_close_restores_settings(self, pty_surface):
        surface, _ = pty_surface
        surface.close()

        attrs = termios.tcgetattr(surface.stdin.fileno())
        assert attrs[3] & termios.ICANON
        assert surface.poll_event().kind is TerminalEventKind.ERROR
