"""
Watch set management on top of a watchdog Observer.

Every entry of the watch set is turned into a subscription on a directory:
a directory (or ``dir/*``) entry subscribes that directory, a file entry
subscribes its parent and filters on the file name. Change notifications are
published on the ``events`` channel, internal failures on ``errors``.
"""

import logging
import os
import queue
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..models.events import ChangeEvent
from ..validation import WatchError

logger = logging.getLogger(__name__)

OBSERVER_JOIN_TIMEOUT = 5.0
# Upper bound for letting the observer hand out notifications it already read
DISPATCH_DRAIN_TIMEOUT = 0.5

# Opened/closed notifications are not changes.
CHANGE_EVENT_TYPES = frozenset({
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
})


def _abs(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


@dataclass(frozen=True)
class WatchTarget:
    """Where a watch set entry is subscribed and what it matches."""

    watch_path: str
    directory: str
    file_path: Optional[str] = None

    @classmethod
    def parse(cls, watch_path: str) -> "WatchTarget":
        """
        Examples:
            ``src/*`` and ``src`` subscribe ``src``; ``./.liverun``
            subscribes ``.`` and matches only ``.liverun``.
        """
        if watch_path.endswith(("/*", os.sep + "*")):
            return cls(watch_path, watch_path[:-2] or os.sep)
        if os.path.isdir(watch_path):
            return cls(watch_path, watch_path)
        return cls(watch_path, os.path.dirname(watch_path) or ".", _abs(watch_path))

    @property
    def directory_key(self) -> str:
        return _abs(self.directory)

    def exists(self) -> bool:
        if self.file_path is not None:
            return os.path.isfile(self.file_path)
        return os.path.isdir(self.directory)

    def matches(self, path: str) -> bool:
        if self.file_path is None:
            return True
        return _abs(path) == self.file_path


class _WatchHandler(FileSystemEventHandler):
    """Forwards watchdog events for one target to the manager."""

    def __init__(self, manager: "WatchSetManager", target: WatchTarget):
        super().__init__()
        self.manager = manager
        self.target = target

    def on_any_event(self, event: FileSystemEvent) -> None:
        self.manager.handle_raw_event(self.target, event)


@dataclass
class _Subscription:
    target: WatchTarget
    handler: _WatchHandler
    watch: Any = None


class WatchSetManager:
    """
    Owns the watch set and its subscriptions.

    ``rearm`` drops and re-creates the subscription of a path after it
    fired, so that a replaced file or a recreated directory keeps being
    watched. Every rearm starts a new generation for the path; events
    published under an older generation are stale (see ``is_current``).
    """

    def __init__(self, ignore_paths: Iterable[str] = (),
                 observer_factory: Callable[[], Any] = Observer):
        self.events: "queue.Queue[Optional[ChangeEvent]]" = queue.Queue()
        self.errors: "queue.Queue[Optional[Exception]]" = queue.Queue()
        self.watch_set: List[str] = []
        self._ignored = {_abs(p) for p in ignore_paths}
        self._observer = observer_factory()
        self._subscriptions: Dict[str, _Subscription] = {}
        self._generations: Dict[str, int] = {}
        self._lock = threading.RLock()
        self._closed = False

    def register(self, watch_set: Iterable[str]) -> None:
        """
        Subscribe every path of ``watch_set``.

        Raises:
            WatchError: If a path does not exist or cannot be subscribed;
                the session cannot run without its watches
        """
        with self._lock:
            if not self._observer.is_alive():
                self._observer.start()
            for path in watch_set:
                target = WatchTarget.parse(path)
                if not target.exists():
                    raise WatchError(path, "no such file or directory")
                try:
                    self._subscribe(target)
                except OSError as e:
                    raise WatchError(path, str(e)) from e
                self.watch_set.append(path)
                logger.debug(f"Watching {path} via directory {target.directory}")

    def rearm(self, path: str) -> bool:
        """
        Unsubscribe ``path`` and subscribe it again.

        Changes landing between the two steps are not reported. Entries
        sharing the same directory subscription are re-subscribed with it
        and move to the new generation too, so notifications they queued
        before the rearm (typically the files the build just wrote) become
        stale.

        Returns:
            False if the path could not be subscribed again; the failure is
            logged and published on the error channel
        """
        with self._lock:
            if self._closed:
                return False
            registered = self._subscriptions.get(path)
            target = registered.target if registered is not None else WatchTarget.parse(path)
            siblings = [
                s for s in self._subscriptions.values()
                if s.target.directory_key == target.directory_key
            ]

            for sub in siblings:
                self._unschedule(sub)
            self._wait_for_dispatch()
            for sub in siblings:
                watch_path = sub.target.watch_path
                self._generations[watch_path] = self._generations.get(watch_path, 0) + 1

            if path in self.watch_set:
                self.watch_set.remove(path)

            self.watch_set.append(path)
            if target.file_path is not None and not target.exists():
                logger.warning(f"Watched file {path} is gone, keeping its directory watched")

            ok = True
            for sub in siblings:
                try:
                    if not os.path.isdir(sub.target.directory):
                        raise FileNotFoundError(f"no such directory: {sub.target.directory}")
                    sub.watch = self._observer.schedule(sub.handler, sub.target.directory, recursive=False)
                except OSError as e:
                    ok = False
                    error = WatchError(sub.target.watch_path, str(e))
                    logger.warning(f"Failed to re-subscribe: {error}")
                    self.errors.put(error)
            return ok

    def close(self) -> None:
        """Stop the observer and close both channels."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                self._observer.stop()
                if self._observer.is_alive():
                    self._observer.join(timeout=OBSERVER_JOIN_TIMEOUT)
            finally:
                self.events.put(None)
                self.errors.put(None)

    def handle_raw_event(self, target: WatchTarget, event: FileSystemEvent) -> None:
        """Filter a watchdog event and publish it as a ChangeEvent."""
        try:
            if event.event_type not in CHANGE_EVENT_TYPES:
                return
            if event.is_directory and event.event_type == EVENT_TYPE_MODIFIED:
                return

            paths = [os.fsdecode(event.src_path)]
            dest_path = getattr(event, "dest_path", "")
            if dest_path:
                paths.append(os.fsdecode(dest_path))

            if not any(target.matches(p) for p in paths):
                return
            if all(_abs(p) in self._ignored for p in paths):
                return

            self.events.put(ChangeEvent(
                watch_path=target.watch_path,
                src_path=paths[0],
                event_type=event.event_type,
                is_directory=event.is_directory,
                generation=self._generations.get(target.watch_path, 0),
            ))
        except Exception as e:
            self.errors.put(e)

    def is_current(self, event: ChangeEvent) -> bool:
        """True unless the event's path was re-subscribed after it was published."""
        return event.generation == self._generations.get(event.watch_path, 0)

    def _wait_for_dispatch(self) -> None:
        # Notifications the observer already read are handed to their
        # handlers before the generation moves on, so they come out stale.
        event_queue = getattr(self._observer, "event_queue", None)
        if event_queue is None or not self._observer.is_alive():
            return
        deadline = time.monotonic() + DISPATCH_DRAIN_TIMEOUT
        while event_queue.unfinished_tasks and time.monotonic() < deadline:
            time.sleep(0.01)

    def _subscribe(self, target: WatchTarget) -> None:
        if target.watch_path in self._subscriptions:
            return
        sub = _Subscription(target=target, handler=_WatchHandler(self, target))
        sub.watch = self._observer.schedule(sub.handler, target.directory, recursive=False)
        self._subscriptions[target.watch_path] = sub

    def _unschedule(self, sub: _Subscription) -> None:
        if sub.watch is None:
            return
        try:
            self._observer.unschedule(sub.watch)
        except KeyError:
            # Already dropped together with a sibling sharing the directory
            pass
        sub.watch = None
