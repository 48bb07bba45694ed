"""
Process management for the orchestration module.

This module owns the lifecycle of the single externally running process:
starting it, replacing it, and terminating its whole process tree.
"""

import logging
import signal
import subprocess
import threading
from typing import List, Optional

import psutil

from ..models.runtime import ManagedProcess
from ..system.commands import spawn_command
from ..validation import ProcessTerminationError
from .shared_state import TimeoutConstants

logger = logging.getLogger(__name__)


class ProcessController:
    """
    Lifecycle management for at most one running process.

    ``start`` always terminates and reaps the previous process before the new
    one becomes current, so two processes are never current at once.
    """

    def __init__(self, redirect_input: bool = False, use_shell: bool = True,
                 kill_timeout: float = TimeoutConstants.TERMINATION_GRACEFUL_TIMEOUT):
        self.redirect_input = redirect_input
        self.use_shell = use_shell
        self.kill_timeout = kill_timeout
        self._current: Optional[ManagedProcess] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[ManagedProcess]:
        return self._current

    def start(self, command: str) -> ManagedProcess:
        """
        Replace the current process with a new one running ``command``.

        Termination errors of the previous process are logged and do not
        prevent the start. Returns as soon as the new process is running.

        Raises:
            ProcessStartError: If ``command`` could not be spawned
        """
        with self._lock:
            if self._current is not None:
                previous = self._current
                logger.info(f"Replacing running process (PID: {previous.pid})")
                for error in self._terminate(previous):
                    logger.warning(f"Ignoring termination error while replacing process: {error}")
                self._current = None

            popen = spawn_command(command, use_shell=self.use_shell, inherit_stdin=self.redirect_input)
            self._current = ManagedProcess(popen=popen, command=command)
            logger.info(f"Process started with PID: {popen.pid}")
            return self._current

    def stop(self) -> List[Exception]:
        """
        Terminate the current process and wait until it has been reaped.

        Returns:
            Errors met while terminating; empty when nothing was running
        """
        with self._lock:
            if self._current is None:
                return []
            process = self._current
            try:
                return self._terminate(process)
            finally:
                self._current = None

    def _terminate(self, process: ManagedProcess) -> List[Exception]:
        """Kill ``process`` with its children and reap it."""
        errors: List[Exception] = []
        if process.is_running:
            errors.extend(self.terminate_process_tree(process.pid, process.command))

        try:
            exit_code = process.popen.wait(timeout=TimeoutConstants.REAP_TIMEOUT)
            logger.info(f"Process {process.pid} exited with code: {exit_code}")
        except subprocess.TimeoutExpired:
            logger.warning(f"Process {process.pid} did not exit after termination, killing it")
            try:
                process.popen.kill()
                process.popen.wait()
            except OSError as e:
                errors.append(ProcessTerminationError(process.pid, str(e)))
        return errors

    def terminate_process_tree(self, pid: int, name: str) -> List[Exception]:
        """
        Terminate a process and all its children with escalating signals.

        Phases are SIGTERM, SIGINT and SIGKILL; each phase only targets the
        processes still alive, re-reading the children list since the tree
        can change between phases.

        Returns:
            A ProcessTerminationError per process that survived every phase
            or could not be signalled
        """
        try:
            parent = psutil.Process(pid)
        except psutil.NoSuchProcess:
            logger.info(f"Process {name} (PID: {pid}) already terminated")
            return []
        except psutil.AccessDenied as e:
            return [ProcessTerminationError(pid, f"access denied: {e}")]

        logger.info(f"Terminating {name} (PID: {pid}) and its process tree")

        phases = [
            {"name": "graceful", "signal": signal.SIGTERM, "timeout": self.kill_timeout},
            {"name": "interrupt", "signal": signal.SIGINT,
             "timeout": TimeoutConstants.TERMINATION_INTERRUPT_TIMEOUT},
            {"name": "force_kill", "signal": signal.SIGKILL,
             "timeout": TimeoutConstants.TERMINATION_FORCE_TIMEOUT},
        ]

        errors: List[Exception] = []
        remaining: List[psutil.Process] = []
        for phase in phases:
            children = self._get_process_children(parent)
            targets = [p for p in [parent] + children if self._is_process_alive(p)]
            if not targets:
                remaining = []
                break

            signalled = self._apply_termination_signal(targets, phase["signal"], errors)
            remaining = self._wait_for_termination(signalled, phase["timeout"])
            if not remaining:
                logger.debug(f"All processes terminated in phase {phase['name']}")
                break
            logger.warning(f"Phase {phase['name']}: {len(remaining)} processes still alive")

        for process in remaining:
            errors.append(ProcessTerminationError(process.pid, "still alive after SIGKILL"))
        return errors

    def _is_process_alive(self, process: psutil.Process) -> bool:
        """Check if a process is still alive and not a zombie."""
        try:
            if not process.is_running():
                return False
            return process.status() not in (psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return False

    def _get_process_children(self, parent: psutil.Process) -> List[psutil.Process]:
        try:
            return [c for c in parent.children(recursive=True) if self._is_process_alive(c)]
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            # The parent went away while we were listing
            return []

    def _apply_termination_signal(self, processes: List[psutil.Process], sig: int,
                                  errors: List[Exception]) -> List[psutil.Process]:
        """Send ``sig`` to every process; returns those that were signalled."""
        signalled = []
        for process in processes:
            try:
                process.send_signal(sig)
                signalled.append(process)
                logger.debug(f"Sent {signal.Signals(sig).name} to PID {process.pid}")
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied as e:
                errors.append(ProcessTerminationError(process.pid, f"access denied: {e}"))
        return signalled

    def _wait_for_termination(self, processes: List[psutil.Process], timeout: float) -> List[psutil.Process]:
        """Wait for processes to terminate and return any that are still alive."""
        if not processes:
            return []
        _, still_alive = psutil.wait_procs(processes, timeout=timeout)
        return [p for p in still_alive if self._is_process_alive(p)]
