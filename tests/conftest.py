"""
Shared fixtures for the assetsync test suite.

This module provides a throwaway Flutter project layout, a manual timer
factory for deterministic debounce tests, and the in-memory collaborators
used by the watch loop tests.
"""

from pathlib import Path

import pytest

from adapters.fs_watch import InMemoryWatchSource
from ui.watch_reporter import RecordingWatchReporter

MINIMAL_PUBSPEC = """\
name: demo_app
description: A demo Flutter app.

dependencies:
  flutter:
    sdk: flutter

flutter:
  uses-material-design: true
  # Asset declarations are managed by assetsync.
  assets: []
"""


class ManualTimer:
    """A timer that only fires when the test says so."""

    def __init__(self, delay, action):
        self.delay = delay
        self.action = action
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.cancelled:
            return
        self.fired = True
        self.action()


class ManualTimerFactory:
    """Timer factory that keeps every timer it creates."""

    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, delay, action):
        timer = ManualTimer(delay, action)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[ManualTimer]:
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]

    def fire_all(self):
        for timer in list(self.live):
            timer.fire()


@pytest.fixture
def manual_timers():
    """Timer factory whose timers fire only on demand."""
    return ManualTimerFactory()


@pytest.fixture
def project_root(tmp_path) -> Path:
    """A Flutter project with an empty asset list and an empty assets/ directory."""
    root = tmp_path / "demo_app"
    (root / "assets").mkdir(parents=True)
    (root / "lib").mkdir()
    (root / "pubspec.yaml").write_text(MINIMAL_PUBSPEC, encoding="utf-8")
    return root


@pytest.fixture
def add_asset_file(project_root):
    """Factory that creates a file under the project and returns its path."""

    def _factory(relative: str, data: bytes = b"\x89PNG") -> Path:
        path = project_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    return _factory


@pytest.fixture
def watch_source():
    """In-memory filesystem watch source."""
    return InMemoryWatchSource()


@pytest.fixture
def recording_reporter():
    """Watch reporter that records every call."""
    return RecordingWatchReporter()
