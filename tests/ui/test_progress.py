"""
Tests for the progress module using pytest.

Tests cover:
- ProgressState: enum values and string representation
- create_progress: Rich Progress instance creation with correct columns
- RichProgressDisplay: context manager, on_start, on_complete, on_fail, error cases
- NoOpProgressDisplay: records the last description and state

Note: RichProgressDisplay tests use mocks to avoid creating actual Rich UI components.
"""

from unittest.mock import MagicMock

import pytest
from rich.progress import Progress, SpinnerColumn, TextColumn

from ui.progress import (
    NoOpProgressDisplay,
    ProgressState,
    RichProgressDisplay,
    create_progress,
    styled,
)


# ============================================================================
# Tests for ProgressState
# ============================================================================


@pytest.mark.unit
def test_progress_state_values():
    """ProgressState should have correct enum values."""
    assert ProgressState.IN_PROGRESS == "magenta"
    assert ProgressState.COMPLETE == "green"
    assert ProgressState.WARNING == "yellow"
    assert ProgressState.ERROR == "red"


@pytest.mark.unit
def test_styled_wraps_in_markup():
    """styled should wrap the description in the state's color markup."""
    assert styled("Done", ProgressState.COMPLETE) == "[green]Done[/green]"


# ============================================================================
# Tests for create_progress
# ============================================================================


@pytest.mark.unit
def test_create_progress_has_spinner_and_text_only():
    """create_progress should create a spinner and a description, no bar."""
    progress = create_progress()

    assert isinstance(progress, Progress)
    columns = progress.columns
    assert len(columns) == 2
    assert isinstance(columns[0], SpinnerColumn)
    assert isinstance(columns[1], TextColumn)


# ============================================================================
# Tests for RichProgressDisplay
# ============================================================================


@pytest.mark.unit
@pytest.mark.mock
def test_rich_progress_display_enter_and_exit(mocker):
    """The display should enter and exit the underlying Progress."""
    mock_progress = MagicMock()
    mocker.patch("ui.progress.create_progress", return_value=mock_progress)

    display = RichProgressDisplay()
    with display as rpd:
        assert rpd is display
        mock_progress.__enter__.assert_called_once()

    mock_progress.__exit__.assert_called_once_with(None, None, None)


@pytest.mark.unit
@pytest.mark.mock
def test_rich_progress_display_start_then_complete(mocker):
    """on_start adds an indeterminate task; on_complete finishes it."""
    mock_progress = MagicMock()
    mock_progress.add_task.return_value = 7
    mocker.patch("ui.progress.create_progress", return_value=mock_progress)

    with RichProgressDisplay() as display:
        display.on_start("Generating")
        display.on_complete("Generated lib/gen/assets.dart")

    mock_progress.add_task.assert_called_once_with("[magenta]Generating[/magenta]", total=None)
    mock_progress.update.assert_called_once_with(
        7,
        total=1,
        completed=1,
        description="[green]Generated lib/gen/assets.dart[/green]",
    )


@pytest.mark.unit
@pytest.mark.mock
def test_rich_progress_display_fail_uses_error_state(mocker):
    """on_fail should show the description in the error color."""
    mock_progress = MagicMock()
    mock_progress.add_task.return_value = 1
    mocker.patch("ui.progress.create_progress", return_value=mock_progress)

    with RichProgressDisplay() as display:
        display.on_start("Scanning")
        display.on_fail("Scan failed")

    _, kwargs = mock_progress.update.call_args
    assert kwargs["description"] == "[red]Scan failed[/red]"


@pytest.mark.unit
def test_rich_progress_display_requires_context_manager():
    """Using the display outside a with-block should raise RuntimeError."""
    with pytest.raises(RuntimeError, match="context manager"):
        RichProgressDisplay().on_start("Scanning")


@pytest.mark.unit
@pytest.mark.mock
def test_rich_progress_display_complete_before_start(mocker):
    """Finishing before on_start should raise RuntimeError."""
    mocker.patch("ui.progress.create_progress", return_value=MagicMock())

    with RichProgressDisplay() as display:
        with pytest.raises(RuntimeError, match="on_start"):
            display.on_complete("Done")


# ============================================================================
# Tests for NoOpProgressDisplay
# ============================================================================


@pytest.mark.unit
def test_noop_progress_display_records_last_state():
    """The no-op display should remember the last description and state."""
    with NoOpProgressDisplay() as display:
        display.on_start("Scanning")
        assert display.last_state is ProgressState.IN_PROGRESS

        display.on_complete("Found 2 unused assets", ProgressState.WARNING)
        assert display.last_description == "Found 2 unused assets"
        assert display.last_state is ProgressState.WARNING

        display.on_fail("Boom")
        assert display.last_state is ProgressState.ERROR
