"""
Unit tests for ProcessController.

These tests spawn short-lived real processes (``sleep``) so that
replacement, termination and reaping are checked against the OS.
"""

import time
from unittest.mock import patch

import psutil
import pytest

from liverun.orchestration import ProcessController
from liverun.validation import ProcessStartError, ProcessTerminationError


@pytest.fixture
def controller():
    controller = ProcessController(kill_timeout=0.5)
    yield controller
    controller.stop()


@pytest.mark.unit
class TestStart:
    """Test cases for ProcessController.start."""

    def test_start_returns_running_process(self, controller):
        process = controller.start("sleep 30")

        assert controller.current is process
        assert process.is_running

    def test_start_replaces_previous_process(self, controller):
        first = controller.start("sleep 30")

        second = controller.start("sleep 30")

        assert controller.current is second
        assert first.returncode is not None  # reaped before the new start
        assert second.is_running

    def test_replacement_ignores_termination_errors(self, controller):
        first = controller.start("sleep 30")

        def kill_and_fail(pid, name):
            psutil.Process(pid).kill()
            return [ProcessTerminationError(pid, "access denied")]

        with patch.object(controller, "terminate_process_tree", side_effect=kill_and_fail):
            second = controller.start("sleep 30")

        assert controller.current is second
        assert first.returncode is not None

    def test_start_failure_raises(self):
        controller = ProcessController(use_shell=False)

        with pytest.raises(ProcessStartError):
            controller.start("/nonexistent/liverun-test-binary")
        assert controller.current is None

    def test_exited_process_stays_current(self, controller):
        process = controller.start("true")
        process.popen.wait(timeout=10)

        assert controller.current is process
        assert not process.is_running


@pytest.mark.unit
class TestStop:
    """Test cases for ProcessController.stop."""

    def test_stop_without_process_is_noop(self):
        controller = ProcessController()
        assert controller.stop() == []
        assert controller.current is None

    def test_stop_terminates_and_reaps(self, controller):
        process = controller.start("sleep 30")

        errors = controller.stop()

        assert errors == []
        assert controller.current is None
        assert process.returncode is not None

    def test_stop_kills_child_tree(self, controller):
        process = controller.start("sleep 30 & sleep 30; wait")
        parent = psutil.Process(process.pid)
        assert _wait_for_children(parent)
        children = parent.children(recursive=True)

        controller.stop()

        gone, alive = psutil.wait_procs(children, timeout=5)
        assert alive == []

    def test_stop_collects_termination_errors(self, controller):
        controller.start("sleep 30")
        error = ProcessTerminationError(123, "access denied")

        def kill_and_fail(pid, name):
            psutil.Process(pid).kill()
            return [error]

        with patch.object(controller, "terminate_process_tree", side_effect=kill_and_fail):
            errors = controller.stop()

        assert errors == [error]
        assert controller.current is None

    def test_stop_after_natural_exit(self, controller):
        process = controller.start("exit 3")
        process.popen.wait(timeout=10)

        assert controller.stop() == []
        assert process.returncode == 3


@pytest.mark.unit
def test_terminate_unknown_pid_is_quiet():
    controller = ProcessController()
    with patch("liverun.orchestration.process_manager.psutil.Process",
               side_effect=psutil.NoSuchProcess(999999)):
        assert controller.terminate_process_tree(999999, "ghost") == []


def _wait_for_children(parent, timeout=5.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if len(parent.children(recursive=True)) >= 2:
            return True
        time.sleep(0.05)
    return False
