"""
The watch loop: keeps pubspec.yaml and the generated file in sync with the
assets directory while the user works.

State machine:

    IDLE --start()--> WATCHING --stop()--> STOPPING --> IDLE

While WATCHING, every filesystem event is filtered, remembered per path
(the most recent event wins) and pushes back a single shared debounce timer.
When the timer settles, each remembered path is processed once:

    ADDED / MODIFIED on an undeclared path -> add to the manifest
    REMOVED                                -> remove from the manifest

and the generated file is rewritten at most once for the whole batch. A
failure on one path is reported and does not affect the other paths or the
watch itself.
"""

from enum import StrEnum
from pathlib import Path
import threading
from typing import Iterable

from constants import ASSETS_DIR_NAME, DEFAULT_DEBOUNCE_MS
from adapters.fs_watch import Subscription, WatchSource
from core.debouncer import Debouncer, TimerFactory
from core.exceptions import AssetDirectoryNotFoundError, InvalidStateError
from core.filters import is_watched_asset
from core.generator import CodeGenerator
from core.manifest import ManifestFile, is_declared
from core.models import EventOutcome, FileChangeEvent
from models import ChangeKind
from ui.watch_reporter import NoOpWatchReporter, WatchReporter
from utils import relative_posix, to_posix


class WatchState(StrEnum):
    IDLE = "idle"
    WATCHING = "watching"
    STOPPING = "stopping"


class WatchOrchestrator:
    """
    Drives manifest updates and regeneration from filesystem events.

    Attributes:
        project_root: The Flutter project root. Event paths are made relative to it.
        debounce_seconds: Quiet period before a batch of events is processed.
        regenerate_on_modify: Whether a content change to an already declared
            asset rewrites the generated file.
    """

    def __init__(
        self,
        project_root: Path,
        manifest: ManifestFile,
        generator: CodeGenerator,
        source: WatchSource,
        reporter: WatchReporter | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_MS / 1000,
        regenerate_on_modify: bool = False,
        timer_factory: TimerFactory | None = None,
    ):
        self.project_root = project_root
        self.debounce_seconds = debounce_seconds
        self.regenerate_on_modify = regenerate_on_modify
        self._manifest = manifest
        self._generator = generator
        self._source = source
        self._reporter: WatchReporter = reporter if reporter is not None else NoOpWatchReporter()
        self._timer_factory = timer_factory

        self._state = WatchState.IDLE
        self._state_lock = threading.Lock()
        # Serializes manifest edits and generation across settles.
        self._process_lock = threading.Lock()
        self._pending: dict[str, FileChangeEvent] = {}
        self._debouncer: Debouncer | None = None
        self._subscription: Subscription | None = None

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def assets_dir(self) -> Path:
        return self.project_root / ASSETS_DIR_NAME

    def pending_paths(self) -> list[str]:
        with self._state_lock:
            return list(self._pending)

    def start(self) -> None:
        """
        Subscribe to the assets directory and begin watching.

        Raises:
            AssetDirectoryNotFoundError: If `<project_root>/assets` does not exist.
            InvalidStateError: If the orchestrator is not IDLE.
        """
        if not self.assets_dir.is_dir():
            raise AssetDirectoryNotFoundError(str(self.assets_dir))

        with self._state_lock:
            if self._state is not WatchState.IDLE:
                raise InvalidStateError(f"Cannot start while {self._state}")
            self._pending.clear()
            self._debouncer = Debouncer(self.debounce_seconds, self._timer_factory)
            self._state = WatchState.WATCHING

        try:
            subscription = self._source.subscribe(
                self.assets_dir, self.handle_event, self._reporter.on_watch_error
            )
        except Exception:
            with self._state_lock:
                self._debouncer.dispose()
                self._debouncer = None
                self._state = WatchState.IDLE
            raise

        with self._state_lock:
            stopped_meanwhile = self._state is not WatchState.WATCHING
            if not stopped_meanwhile:
                self._subscription = subscription
        if stopped_meanwhile:
            subscription.cancel()
            return
        self._reporter.on_start(self.assets_dir)

    def handle_event(self, event: FileChangeEvent) -> None:
        """
        Accept one raw event from the watch source.

        Irrelevant events are dropped. Relevant ones replace any earlier event
        for the same path and restart the settle timer. Ignored unless WATCHING.
        """
        if self._state is not WatchState.WATCHING:
            return

        relative = self._relative(event.path)
        if relative is None or not is_watched_asset(relative):
            self._reporter.on_dropped(event)
            return

        with self._state_lock:
            if self._state is not WatchState.WATCHING or self._debouncer is None:
                return
            self._pending[relative] = event
            self._debouncer.call(self._settle)
        self._reporter.on_event(relative, event.kind)

    def _settle(self) -> None:
        with self._state_lock:
            if self._state is not WatchState.WATCHING:
                return
            events = list(self._pending.values())
            self._pending.clear()
        self.process_events(events)

    def process_events(self, events: Iterable[FileChangeEvent]) -> list[EventOutcome]:
        """
        Apply a batch of events to the manifest and regenerate once.

        Events are reduced to the last one per path first. Callers outside the
        watch loop (tests, one-shot sync) may use this directly.

        Returns:
            One outcome per processed path, in first-seen order.
        """
        latest: dict[str, FileChangeEvent] = {}
        for event in events:
            relative = self._relative(event.path)
            if relative is not None and is_watched_asset(relative):
                latest[relative] = event

        outcomes: list[EventOutcome] = []
        regenerate_for: list[EventOutcome] = []

        with self._process_lock:
            for relative, event in latest.items():
                outcome = EventOutcome(relative_path=relative, kind=event.kind)
                outcomes.append(outcome)
                try:
                    changed, regenerate = self._apply(relative, event.kind)
                except Exception as e:
                    outcome.error = e
                    self._reporter.on_error(relative, e)
                    continue

                outcome.manifest_changed = changed
                if changed:
                    self._reporter.on_manifest_updated(relative, event.kind)
                if regenerate:
                    regenerate_for.append(outcome)

            if regenerate_for:
                self._regenerate(regenerate_for)

        return outcomes

    def _apply(self, relative: str, kind: ChangeKind) -> tuple[bool, bool]:
        """Returns (manifest changed, regeneration needed)."""
        if kind is ChangeKind.REMOVED:
            return self._manifest.remove_asset(relative), True

        if is_declared(self._manifest.declared_assets(), relative):
            return False, kind is ChangeKind.ADDED or self.regenerate_on_modify

        return self._manifest.add_asset(relative), True

    def _regenerate(self, outcomes: list[EventOutcome]) -> None:
        try:
            output = self._generator.generate()
        except Exception as e:
            for outcome in outcomes:
                outcome.error = e
            self._reporter.on_error(to_posix(self._generator.config.output), e)
            return

        for outcome in outcomes:
            outcome.regenerated = True
        self._reporter.on_generated(output)

    def stop(self) -> None:
        """
        Stop watching. Pending events are discarded.

        No timer is scheduled once this has begun; a settle that is already
        running may still finish afterwards. Calling stop() when not watching
        does nothing.
        """
        with self._state_lock:
            if self._state is not WatchState.WATCHING:
                return
            self._state = WatchState.STOPPING
            debouncer, subscription = self._debouncer, self._subscription
            self._pending.clear()

        try:
            if debouncer is not None:
                debouncer.dispose()
            if subscription is not None:
                subscription.cancel()
        finally:
            with self._state_lock:
                self._debouncer = None
                self._subscription = None
                self._state = WatchState.IDLE
        self._reporter.on_stop()

    def _relative(self, path: Path) -> str | None:
        try:
            return relative_posix(path, self.project_root)
        except ValueError:
            return None
