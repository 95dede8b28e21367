"""
Reporting protocol for the watch loop.

The orchestrator never prints. It reports what happened through a
WatchReporter so the same loop can drive the Rich console in the CLI, stay
silent in tests, or record calls for assertions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
import threading
from typing import Any, Protocol

from rich import print as pr
from rich.markup import escape

from core.models import FileChangeEvent
from models import ChangeKind
from utils import debug

_KIND_SYMBOLS = {
    ChangeKind.ADDED: "[green]+[/green]",
    ChangeKind.MODIFIED: "[yellow]~[/yellow]",
    ChangeKind.REMOVED: "[red]-[/red]",
}


class WatchReporter(Protocol):
    """
    Observer for the watch loop.

    Calls may arrive from the debounce timer thread or the filesystem
    observer thread, never concurrently for the same settle.
    """

    def on_start(self, directory: Path) -> None:
        """Watching began on `directory`."""

    def on_event(self, relative_path: str, kind: ChangeKind) -> None:
        """A relevant event was accepted and queued for the next settle."""

    def on_dropped(self, event: FileChangeEvent) -> None:
        """An event was filtered out (not an asset, ignored, or outside the project)."""

    def on_manifest_updated(self, relative_path: str, kind: ChangeKind) -> None:
        """The manifest was rewritten to add or remove `relative_path`."""

    def on_generated(self, output_path: Path) -> None:
        """The generated file was rewritten."""

    def on_error(self, relative_path: str, error: Exception) -> None:
        """Processing of `relative_path` failed; the loop continues."""

    def on_watch_error(self, error: Exception) -> None:
        """The filesystem watch itself reported an error."""

    def on_stop(self) -> None:
        """Watching ended."""


class RichWatchReporter:
    """Console output for `assetsync watch`."""

    def __init__(self, project_root: Path, verbose: bool = False):
        self.project_root = project_root
        self.verbose = verbose

    def _stamp(self) -> str:
        return f"[dim]\\[{datetime.now():%H:%M:%S}][/dim]"

    def on_start(self, directory: Path) -> None:
        pr(f"[bold magenta]Watching[/bold magenta] [green]{escape(str(directory))}[/green]")
        pr("[dim]Press Ctrl+C to stop.[/dim]\n")

    def on_event(self, relative_path: str, kind: ChangeKind) -> None:
        pr(f"{self._stamp()} {_KIND_SYMBOLS[kind]} {escape(relative_path)}")

    def on_dropped(self, event: FileChangeEvent) -> None:
        if self.verbose:
            debug(f"ignored {event.kind} {escape(str(event.path))}")

    def on_manifest_updated(self, relative_path: str, kind: ChangeKind) -> None:
        action = "Removed from" if kind is ChangeKind.REMOVED else "Added to"
        pr(f"  ✅ [green]{action} pubspec.yaml:[/green] {escape(relative_path)}")

    def on_generated(self, output_path: Path) -> None:
        try:
            shown: Any = output_path.relative_to(self.project_root)
        except ValueError:
            shown = output_path
        pr(f"  ✅ [green]Regenerated[/green] {escape(str(shown))}")

    def on_error(self, relative_path: str, error: Exception) -> None:
        message = getattr(error, "message", None) or str(error)
        pr(f"  ❌ [red]Failed to process {escape(relative_path)}:[/red] {escape(str(message))}")

    def on_watch_error(self, error: Exception) -> None:
        pr(f"❌ [bold red]Watch error:[/bold red] {escape(str(error))}")

    def on_stop(self) -> None:
        pr("\n[yellow]Stopped watching.[/yellow]")


class NoOpWatchReporter:
    """Reporter that discards everything."""

    def on_start(self, directory: Path) -> None:
        pass

    def on_event(self, relative_path: str, kind: ChangeKind) -> None:
        pass

    def on_dropped(self, event: FileChangeEvent) -> None:
        pass

    def on_manifest_updated(self, relative_path: str, kind: ChangeKind) -> None:
        pass

    def on_generated(self, output_path: Path) -> None:
        pass

    def on_error(self, relative_path: str, error: Exception) -> None:
        pass

    def on_watch_error(self, error: Exception) -> None:
        pass

    def on_stop(self) -> None:
        pass


@dataclass
class RecordingWatchReporter:
    """
    Reporter that keeps every call, for assertions in tests.

    Attributes:
        calls: (method name, args) tuples in call order.
    """

    calls: list[tuple[str, tuple]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _record(self, name: str, *args: Any) -> None:
        with self._lock:
            self.calls.append((name, args))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def of(self, name: str) -> list[tuple]:
        return [args for n, args in self.calls if n == name]

    def on_start(self, directory: Path) -> None:
        self._record("on_start", directory)

    def on_event(self, relative_path: str, kind: ChangeKind) -> None:
        self._record("on_event", relative_path, kind)

    def on_dropped(self, event: FileChangeEvent) -> None:
        self._record("on_dropped", event)

    def on_manifest_updated(self, relative_path: str, kind: ChangeKind) -> None:
        self._record("on_manifest_updated", relative_path, kind)

    def on_generated(self, output_path: Path) -> None:
        self._record("on_generated", output_path)

    def on_error(self, relative_path: str, error: Exception) -> None:
        self._record("on_error", relative_path, error)

    def on_watch_error(self, error: Exception) -> None:
        self._record("on_watch_error", error)

    def on_stop(self) -> None:
        self._record("on_stop")
