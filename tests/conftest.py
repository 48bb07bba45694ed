"""
Pytest configuration and shared fixtures for the liverun test suite.

This module provides fakes for the two external collaborators (terminal
surface and watchdog observer) plus common fixtures.
"""

import shutil
import sys
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from liverun.models import KeyCommand, LiveConfig, TerminalEvent, TerminalEventKind  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Fakes
# ============================================================================


def key(command: KeyCommand) -> TerminalEvent:
    return TerminalEvent(kind=TerminalEventKind.KEY, command=command)


class FakeSurface:
    """
    Scripted terminal surface.

    The script holds TerminalEvents and callables; callables are invoked
    (e.g. to wait for a background condition) and skipped. When the script
    runs out a QUIT key is returned so no test can block forever.
    """

    def __init__(self, script: Optional[List[Union[TerminalEvent, Callable[[], Any]]]] = None,
                 fail_open: Optional[Exception] = None):
        self.script = list(script or [])
        self.fail_open = fail_open
        self.opened = False
        self.closed = False
        self.sync_calls = 0
        self.notified: List[TerminalEventKind] = []

    def open(self) -> None:
        if self.fail_open is not None:
            raise self.fail_open
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def clear(self) -> None:
        pass

    def flush(self) -> None:
        pass

    def show_help(self) -> None:
        pass

    def sync(self) -> None:
        self.sync_calls += 1

    def notify(self, kind: TerminalEventKind) -> None:
        self.notified.append(kind)

    def poll_event(self) -> TerminalEvent:
        while self.script:
            item = self.script.pop(0)
            if callable(item):
                item()
                continue
            return item
        return key(KeyCommand.QUIT)


class FakeWatch:
    def __init__(self, path: str, recursive: bool):
        self.path = path
        self.is_recursive = recursive

    def __eq__(self, other):
        return isinstance(other, FakeWatch) and (self.path, self.is_recursive) == (other.path, other.is_recursive)

    def __hash__(self):
        return hash((self.path, self.is_recursive))


class FakeObserver:
    """Records schedule/unschedule calls the way watchdog's Observer keys them."""

    def __init__(self):
        self.alive = False
        self.stopped = False
        self.handlers = {}
        self.calls: List[tuple] = []

    def is_alive(self) -> bool:
        return self.alive

    def start(self) -> None:
        self.alive = True

    def stop(self) -> None:
        self.stopped = True

    def join(self, timeout=None) -> None:
        self.alive = False

    def schedule(self, handler, path, recursive=False):
        watch = FakeWatch(path, recursive)
        self.handlers.setdefault(watch, set()).add(handler)
        self.calls.append(("schedule", path))
        return watch

    def unschedule(self, watch) -> None:
        if watch not in self.handlers:
            raise KeyError(watch)
        del self.handlers[watch]
        self.calls.append(("unschedule", watch.path))


def wait_for(condition: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(0.02)
    return condition()


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def in_temp_dir(temp_dir, monkeypatch):
    """Run the test with the temporary directory as working directory."""
    monkeypatch.chdir(temp_dir)
    return temp_dir


@pytest.fixture
def fake_observer():
    return FakeObserver()


@pytest.fixture
def make_surface():
    """Factory for scripted terminal surfaces."""
    return FakeSurface


@pytest.fixture
def key_event():
    """Build a KEY event for a command."""
    return key


@pytest.fixture
def wait_until():
    return wait_for


@pytest.fixture
def live_config():
    """Factory for LiveConfig objects with test-friendly defaults."""
    def _make(**overrides) -> LiveConfig:
        values = dict(
            watch_paths=["."],
            build_template="echo build > OUT",
            run_template="echo run",
            artifact_path=Path("_liverun.bin"),
            marker_path=Path(".liverun"),
            ignore_paths=["_liverun.bin"],
            kill_timeout=0.5,
        )
        values.update(overrides)
        return LiveConfig(**values)
    return _make
