"""
Unit tests for BuildRunOrchestrator.
"""

import threading
from unittest.mock import Mock, patch

import pytest

from liverun.orchestration import BuildRunOrchestrator, ProcessController, SessionState
from liverun.validation import BuildError, ProcessStartError


def make_orchestrator(build="true", run="echo run", controller=None, use_shell=True):
    controller = controller or Mock(spec=ProcessController)
    return BuildRunOrchestrator(SessionState(), controller, build, run, use_shell=use_shell)


@pytest.mark.unit
class TestBuild:
    """Test cases for BuildRunOrchestrator.build."""

    def test_successful_build(self, in_temp_dir):
        orchestrator = make_orchestrator(build="echo build > OUT")

        assert orchestrator.build() is None
        assert (in_temp_dir / "OUT").read_text().strip() == "build"

    def test_failing_build_returns_error(self):
        orchestrator = make_orchestrator(build="exit 2")

        error = orchestrator.build()

        assert isinstance(error, BuildError)
        assert error.return_code == 2

    def test_unstartable_build_returns_error(self):
        orchestrator = make_orchestrator(build="/nonexistent/liverun-build", use_shell=False)

        assert isinstance(orchestrator.build(), ProcessStartError)


@pytest.mark.unit
class TestRunAndBuildAndRun:
    """Test cases for run and build_and_run."""

    def test_run_starts_run_command(self):
        controller = Mock(spec=ProcessController)
        orchestrator = make_orchestrator(controller=controller, run="./app")

        assert orchestrator.run() is None
        controller.start.assert_called_once_with("./app")

    def test_run_returns_start_failure(self):
        controller = Mock(spec=ProcessController)
        failure = ProcessStartError("./app", OSError("no such file"))
        controller.start.side_effect = failure
        orchestrator = make_orchestrator(controller=controller)

        assert orchestrator.run() is failure

    def test_build_failure_short_circuits_run(self):
        controller = Mock(spec=ProcessController)
        orchestrator = make_orchestrator(build="false", controller=controller)

        error = orchestrator.build_and_run()

        assert isinstance(error, BuildError)
        controller.start.assert_not_called()

    def test_build_then_run(self, in_temp_dir):
        controller = Mock(spec=ProcessController)
        controller.start.side_effect = lambda cmd: (in_temp_dir / "OUT").exists() or pytest.fail("run before build")
        orchestrator = make_orchestrator(build="echo build > OUT", controller=controller)

        assert orchestrator.build_and_run() is None
        controller.start.assert_called_once_with("echo run")

    def test_nothing_happens_after_shutdown_requested(self):
        controller = Mock(spec=ProcessController)
        orchestrator = make_orchestrator(build="exit 1", controller=controller)
        orchestrator.state.shutdown_requested.set()

        assert orchestrator.build_and_run() is None
        assert orchestrator.run() is None
        controller.start.assert_not_called()

    def test_transitions_are_serialized(self):
        """A second build & run waits until the first one released the lock."""
        order = []
        in_start = threading.Event()
        release = threading.Event()
        controller = Mock(spec=ProcessController)

        def slow_start(cmd):
            order.append("start-begin")
            in_start.set()
            release.wait(5)
            order.append("start-end")

        controller.start.side_effect = slow_start
        orchestrator = make_orchestrator(controller=controller)

        first = threading.Thread(target=orchestrator.build_and_run)
        first.start()
        assert in_start.wait(5)

        second_done = threading.Event()

        def second():
            orchestrator.build()
            order.append("second-build")
            second_done.set()

        threading.Thread(target=second).start()
        assert not second_done.wait(0.3)

        release.set()
        first.join(5)
        assert second_done.wait(5)
        assert order == ["start-begin", "start-end", "second-build"]


@pytest.mark.unit
def test_build_runs_outside_terminal_process_group():
    """Ctrl-C on the terminal must not interrupt a build in progress."""
    orchestrator = make_orchestrator(build="make")

    with patch("liverun.orchestration.build_runner.spawn_command") as mock_spawn:
        mock_spawn.return_value.wait.return_value = 0
        assert orchestrator.build() is None

    mock_spawn.assert_called_once_with("make", use_shell=True, new_session=True)
