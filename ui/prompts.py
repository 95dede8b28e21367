"""
Interactive user prompts for the assetsync CLI.

The `clean` command deletes files, so it asks before doing so unless run
with `--force`. Prompts use `inquirer` with the GreenPassion theme and
`rich` for the surrounding output.
"""

import inquirer  # type: ignore
from inquirer.themes import GreenPassion  # type: ignore
from rich import print as pr
import typer


def confirm_deletion(paths: list[str], total_size: str) -> bool:
    """
    Ask the user to confirm deleting `paths`.

    Args:
        paths: Project-relative asset paths about to be deleted.
        total_size: Human-readable combined size, shown in the question.

    Returns:
        bool: True if the user agreed.

    Raises:
        typer.Exit: If the prompt was aborted (Ctrl+C).
    """
    noun = "asset" if len(paths) == 1 else "assets"
    pr(f"\n[bold yellow]About to delete {len(paths)} unused {noun} ({total_size}).[/bold yellow]")

    questions = [
        inquirer.Confirm(
            "confirm",
            message=f"Delete {len(paths)} {noun} and remove them from pubspec.yaml?",
            default=False,
        ),
    ]

    answers = inquirer.prompt(questions, theme=GreenPassion())
    if not answers:
        raise typer.Exit()

    return bool(answers["confirm"])
