"""
Spinner display for one-shot commands using Rich.

`gen`, `unused` and `clean` run a single step that takes anywhere from a few
milliseconds to a few seconds. They report it through the ProgressDisplay
protocol so the command code does not depend on Rich and tests can pass
NoOpProgressDisplay.
"""

from enum import StrEnum
from types import TracebackType
from typing import Optional, Protocol

from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn


class ProgressState(StrEnum):
    """
    Enumeration of task states with associated color codes.

    Attributes:
        IN_PROGRESS: Magenta color for the step currently running.
        COMPLETE: Green color for a step that finished successfully.
        WARNING: Yellow color for a step that finished with findings.
        ERROR: Red color for a step that failed.
    """

    IN_PROGRESS = "magenta"
    COMPLETE = "green"
    WARNING = "yellow"
    ERROR = "red"


def create_progress() -> Progress:
    """
    Creates a Rich Progress with a spinner and a description column.

    There is no bar: the steps it reports have no meaningful total.
    """
    return Progress(
        SpinnerColumn(finished_text="•"),
        TextColumn("[progress.description]{task.description}"),
    )


def styled(description: str, state: ProgressState) -> str:
    return f"[{state}]{description}[/{state}]"


class ProgressDisplay(Protocol):
    """
    Protocol for reporting a single long-running step.

    The lifecycle is:
    1. Context manager entry (__enter__)
    2. on_start() - once, when the step begins
    3. on_complete() or on_fail() - once, when it ends
    4. Context manager exit (__exit__)
    """

    def __enter__(self) -> "ProgressDisplay":
        """Enter the progress context."""

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Exit the progress context."""

    def on_start(self, description: str) -> None:
        """Show `description` with a running spinner."""

    def on_complete(self, description: str, state: ProgressState = ProgressState.COMPLETE) -> None:
        """Stop the spinner and show the final description."""

    def on_fail(self, description: str) -> None:
        """Stop the spinner and show `description` as an error."""


class RichProgressDisplay:
    """Rich implementation of ProgressDisplay."""

    def __init__(self) -> None:
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def __enter__(self) -> "RichProgressDisplay":
        self._progress = create_progress()
        self._progress.__enter__()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if self._progress:
            self._progress.__exit__(exc_type, exc_val, exc_tb)

    def _require_progress(self) -> Progress:
        if not self._progress:
            raise RuntimeError(
                "RichProgressDisplay must be used as a context manager. "
                "Use: with RichProgressDisplay() as progress:"
            )
        return self._progress

    def on_start(self, description: str) -> None:
        """
        Add the task with an indeterminate total so the spinner keeps turning.

        Raises:
            RuntimeError: If not used as a context manager.
        """
        progress = self._require_progress()
        self._task = progress.add_task(
            styled(description, ProgressState.IN_PROGRESS), total=None
        )

    def on_complete(self, description: str, state: ProgressState = ProgressState.COMPLETE) -> None:
        """
        Raises:
            RuntimeError: If on_start() was not called first.
        """
        self._finish(description, state)

    def on_fail(self, description: str) -> None:
        self._finish(description, ProgressState.ERROR)

    def _finish(self, description: str, state: ProgressState) -> None:
        progress = self._require_progress()
        if self._task is None:
            raise RuntimeError("on_start() must be called before finishing the task")
        # A finished task needs a total, otherwise the spinner keeps spinning.
        progress.update(
            self._task, total=1, completed=1, description=styled(description, state)
        )


class NoOpProgressDisplay:
    """
    No-op implementation of ProgressDisplay for testing.

    Keeps the last description so tests can check what would have been shown.
    """

    def __init__(self) -> None:
        self.last_description: str | None = None
        self.last_state: ProgressState | None = None

    def __enter__(self) -> "NoOpProgressDisplay":
        return self

    def __exit__(self, *args) -> None:
        pass

    def on_start(self, description: str) -> None:
        self.last_description = description
        self.last_state = ProgressState.IN_PROGRESS

    def on_complete(self, description: str, state: ProgressState = ProgressState.COMPLETE) -> None:
        self.last_description = description
        self.last_state = state

    def on_fail(self, description: str) -> None:
        self.last_description = description
        self.last_state = ProgressState.ERROR
