"""
Filesystem watch adapter.

This module turns OS-level file notifications into FileChangeEvent records
for the watch orchestrator. The orchestrator only depends on the WatchSource
protocol; `WatchdogSource` is the production implementation built on the
watchdog library, and `InMemoryWatchSource` lets tests push events by hand.

Mapping of watchdog events:

    created  -> ADDED
    modified -> MODIFIED
    deleted  -> REMOVED
    moved    -> REMOVED (source) + ADDED (destination)

Directory events are not forwarded; files inside a created or deleted
directory produce their own events.
"""

import os
from pathlib import Path
import threading
from typing import Callable, Protocol

from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
    FileSystemMovedEvent,
)
from watchdog.observers import Observer

from core.models import FileChangeEvent
from models import ChangeKind

EventCallback = Callable[[FileChangeEvent], None]
ErrorCallback = Callable[[Exception], None]


class Subscription(Protocol):
    """Handle returned by WatchSource.subscribe."""

    def cancel(self) -> None:
        """Stop delivering events. Safe to call more than once."""


class WatchSource(Protocol):
    """Anything that can deliver change notifications for a directory tree."""

    def subscribe(
        self,
        directory: Path,
        on_event: EventCallback,
        on_error: ErrorCallback | None = None,
    ) -> Subscription:
        """
        Start delivering events for `directory` and everything beneath it.

        Args:
            directory: Root of the watched tree.
            on_event: Called once per change, possibly from a background thread.
            on_error: Called when delivering an event raised.
        """
        ...


class _ForwardingHandler(FileSystemEventHandler):
    def __init__(self, on_event: EventCallback, on_error: ErrorCallback | None):
        super().__init__()
        self._on_event = on_event
        self._on_error = on_error

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(ChangeKind.ADDED, event.src_path, event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._forward(ChangeKind.MODIFIED, event.src_path, event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._forward(ChangeKind.REMOVED, event.src_path, event)

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        self._forward(ChangeKind.REMOVED, event.src_path, event)
        self._forward(ChangeKind.ADDED, event.dest_path, event)

    def _forward(self, kind: ChangeKind, raw_path: str | bytes, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        try:
            self._on_event(FileChangeEvent(kind=kind, path=Path(os.fsdecode(raw_path))))
        except Exception as e:
            # Exceptions must not reach the observer thread.
            if self._on_error is None:
                raise
            self._on_error(e)


class ObserverSubscription:
    """A running watchdog Observer."""

    def __init__(self, observer: Observer):
        self._observer = observer
        self._lock = threading.Lock()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
        self._observer.stop()
        # Joining from inside a callback would wait on ourselves.
        if threading.current_thread() is not self._observer:
            self._observer.join()


class WatchdogSource:
    """
    WatchSource backed by watchdog's native Observer (inotify, FSEvents,
    ReadDirectoryChangesW, or polling as a fallback).
    """

    def subscribe(
        self,
        directory: Path,
        on_event: EventCallback,
        on_error: ErrorCallback | None = None,
    ) -> ObserverSubscription:
        observer = Observer()
        observer.daemon = True
        observer.schedule(
            _ForwardingHandler(on_event, on_error), str(directory), recursive=True
        )
        observer.start()
        return ObserverSubscription(observer)


class _InMemorySubscription:
    def __init__(self, source: "InMemoryWatchSource", directory: Path):
        self._source = source
        self.directory = directory
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        self._source._subscribers.pop(self, None)


class InMemoryWatchSource:
    """
    Test double for WatchSource.

    Events passed to `emit` are delivered synchronously to every active
    subscriber whose directory contains the path.
    """

    def __init__(self) -> None:
        self._subscribers: dict[
            _InMemorySubscription, tuple[EventCallback, ErrorCallback | None]
        ] = {}
        self.subscribe_calls: list[Path] = []

    @property
    def active(self) -> bool:
        return bool(self._subscribers)

    def subscribe(
        self,
        directory: Path,
        on_event: EventCallback,
        on_error: ErrorCallback | None = None,
    ) -> _InMemorySubscription:
        self.subscribe_calls.append(directory)
        subscription = _InMemorySubscription(self, directory)
        self._subscribers[subscription] = (on_event, on_error)
        return subscription

    def emit(self, kind: ChangeKind, path: Path) -> None:
        event = FileChangeEvent(kind=kind, path=path)
        for subscription, (on_event, on_error) in list(self._subscribers.items()):
            if not path.is_relative_to(subscription.directory):
                continue
            try:
                on_event(event)
            except Exception as e:
                if on_error is None:
                    raise
                on_error(e)

    def emit_move(self, source: Path, destination: Path) -> None:
        self.emit(ChangeKind.REMOVED, source)
        self.emit(ChangeKind.ADDED, destination)
