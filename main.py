"""
assetsync CLI Entry Point.

assetsync keeps a Flutter project's asset declarations and a generated,
type-safe Dart reference file in sync with the files under `assets/`.

Commands:

1.  **watch**: Watches `assets/` and, after each burst of changes settles,
    adds new files to (or removes deleted files from) `flutter.assets` in
    pubspec.yaml and regenerates the Dart file. Runs until Ctrl+C.
2.  **gen**: Regenerates the Dart file once.
3.  **check**: CI-friendly validation: declared assets that are missing on
    disk, files over the size limit, and a stale generated file. Exits 1 on
    failure.
4.  **unused**: Lists declared assets that no Dart file references.
5.  **clean**: Deletes unused assets and removes them from pubspec.yaml.
6.  **doctor**: Diagnoses common setup problems.

Usage:
    $ assetsync watch --path /path/to/flutter_app
    $ python main.py check

Dependencies:
    - Typer: CLI argument parsing and app structure.
    - Rich: Terminal UI, colors, and progress visualization.
    - Inquirer: Interactive confirmation before deleting files.
    - watchdog: Native filesystem notifications for `watch`.
    - PyYAML: Reading pubspec.yaml and assetsync.yaml.
"""

from pathlib import Path
import signal
import threading
from typing import Annotated

from rich import print as pr
import typer

from adapters.fs_watch import WatchdogSource
from core.analysis import (
    DiagnosticLevel,
    GeneratedStatus,
    analyze_unused,
    delete_assets,
    diagnose_project,
    run_checks,
)
from core.config import SyncConfig, load_config
from core.exceptions import (
    AssetDirectoryNotFoundError,
    ConfigError,
    FileIOError,
    MalformedDocumentError,
    ManifestNotFoundError,
    ProjectRootNotFoundError,
)
from core.generator import CodeGenerator
from core.manifest import ManifestFile
from core.project import ProjectPaths, find_project_root
from core.watcher import WatchOrchestrator
from ui.progress import ProgressState, RichProgressDisplay
from ui.prompts import confirm_deletion
from ui.watch_reporter import RichWatchReporter
from utils import format_bytes

app = typer.Typer(
    help="Keep Flutter assets, pubspec.yaml and generated Dart references in sync.",
    no_args_is_help=True,
)

PathOption = Annotated[
    Path,
    typer.Option(
        "--path",
        "-p",
        exists=True,  # Typer throws error if path doesn't exist
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Path inside the Flutter project. pubspec.yaml is searched upward from here.",
    ),
]


@app.command()
def watch(
    path: PathOption = Path("."),
    debounce_ms: Annotated[
        int | None,
        typer.Option(
            "--debounce-ms",
            min=0,
            help="Quiet period before changes are applied. Overrides assetsync.yaml.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Also show ignored filesystem events."),
    ] = False,
):
    """
    Watch assets/ and keep pubspec.yaml and the generated file up to date.
    """
    root, config = _open_project(path)
    delay_ms = config.watch.debounce_ms if debounce_ms is None else debounce_ms

    try:
        orchestrator = WatchOrchestrator(
            project_root=root,
            manifest=ManifestFile(ProjectPaths(root).manifest),
            generator=CodeGenerator(root, config.generate),
            source=WatchdogSource(),
            reporter=RichWatchReporter(root, verbose=verbose),
            debounce_seconds=delay_ms / 1000,
            regenerate_on_modify=config.watch.regenerate_on_modify,
        )
        orchestrator.start()
    except (AssetDirectoryNotFoundError, ConfigError, OSError) as e:
        exit_with_error(e)

    stop_requested = threading.Event()

    def _request_stop(signum, frame) -> None:
        stop_requested.set()

    previous = {
        sig: signal.signal(sig, _request_stop) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        # Short waits keep the main thread responsive to signals on every platform.
        while not stop_requested.wait(timeout=0.5):
            pass
    finally:
        orchestrator.stop()
        for sig, handler in previous.items():
            signal.signal(sig, handler)


@app.command()
def gen(path: PathOption = Path(".")):
    """
    Generate the type-safe Dart asset file.
    """
    root, config = _open_project(path)

    with RichProgressDisplay() as progress:
        progress.on_start("Generating asset code")
        try:
            generator = CodeGenerator(root, config.generate)
            artifact = generator.build()
            generator.write(artifact)
        except (ConfigError, FileIOError, OSError) as e:
            progress.on_fail("Generation failed")
            error = e
        else:
            progress.on_complete(
                f"Generated {config.generate.output} ({artifact.summary()})"
            )
            error = None

    if error is not None:
        exit_with_error(error)


@app.command()
def check(path: PathOption = Path(".")):
    """
    Validate the asset setup. Exits with code 1 when a check fails.
    """
    root, config = _open_project(path)

    try:
        report = run_checks(
            root,
            config,
            ManifestFile(ProjectPaths(root).manifest),
            CodeGenerator(root, config.generate),
        )
    except Exception as e:  # noqa: BLE001
        exit_with_error(e)

    pr("[bold magenta]Checking asset configuration...[/bold magenta]\n")

    if report.missing:
        pr(f"❌ [red]{len(report.missing)} assets in pubspec.yaml not found on disk:[/red]")
        for asset in report.missing:
            pr(f"     - {asset}")
    else:
        pr("✅ [green]All declared assets exist on disk[/green]")

    if report.violations:
        pr(
            f"❌ [red]{len(report.violations)} assets exceed "
            f"{report.max_file_size_kb}KB limit:[/red]"
        )
        for violation in report.violations:
            pr(f"     - {violation.path} ({violation.human_readable_size})")
    else:
        pr("✅ [green]All assets within size limits[/green]")

    match report.generated:
        case GeneratedStatus.UP_TO_DATE:
            pr("✅ [green]Generated code is up-to-date[/green]")
        case GeneratedStatus.STALE:
            pr("❌ [red]Generated code is out of date. Run `assetsync gen`[/red]")
        case GeneratedStatus.MISSING:
            pr("[yellow]No generated code found (run `assetsync gen` first)[/yellow]")

    if not report.passed:
        pr("\n[bold red]Asset check failed.[/bold red]")
        raise typer.Exit(code=1)
    pr("\n[bold green]Asset check passed.[/bold green]")


@app.command()
def unused(path: PathOption = Path(".")):
    """
    List declared assets that are not referenced in any Dart file.
    """
    root, config = _open_project(path)
    manifest = ManifestFile(ProjectPaths(root).manifest)

    with RichProgressDisplay() as progress:
        progress.on_start("Scanning for unused assets")
        try:
            declared = manifest.declared_assets()
            found = analyze_unused(root, manifest, config) if declared else []
        except Exception as e:  # noqa: BLE001
            progress.on_fail("Scan failed")
            error: Exception | None = e
        else:
            error = None
            if not declared:
                progress.on_complete("No assets declared in pubspec.yaml.", ProgressState.WARNING)
            elif not found:
                progress.on_complete(f"All {len(declared)} assets are in use")
            else:
                progress.on_complete(f"Found {len(found)} unused assets", ProgressState.WARNING)

    if error is not None:
        exit_with_error(error)
    if not found:
        return

    pr("")
    for asset in found:
        pr(f"  [yellow]{asset.path}[/yellow] ({asset.human_readable_size})")
    total = format_bytes(sum(asset.size for asset in found))
    pr(f"\nFound {len(found)} unused assets ({total})")
    pr("\n💡 Run [bold]assetsync clean[/bold] to remove them.")


@app.command()
def clean(
    path: PathOption = Path("."),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete without asking for confirmation."),
    ] = False,
):
    """
    Delete unused assets and remove them from pubspec.yaml.
    """
    root, config = _open_project(path)
    manifest = ManifestFile(ProjectPaths(root).manifest)

    with RichProgressDisplay() as progress:
        progress.on_start("Scanning for unused assets")
        try:
            found = analyze_unused(root, manifest, config)
        except Exception as e:  # noqa: BLE001
            progress.on_fail("Scan failed")
            error: Exception | None = e
        else:
            error = None
            if found:
                progress.on_complete(f"Found {len(found)} unused assets", ProgressState.WARNING)
            else:
                progress.on_complete("No unused assets found")

    if error is not None:
        exit_with_error(error)
    if not found:
        return

    pr("")
    for asset in found:
        pr(f"  [yellow]{asset.path}[/yellow] ({asset.human_readable_size})")

    paths = [asset.path for asset in found]
    total = format_bytes(sum(asset.size for asset in found))
    if not force and not confirm_deletion(paths, total):
        pr("[yellow]Cancelled.[/yellow]")
        return

    try:
        deleted = delete_assets(root, manifest, paths)
    except Exception as e:  # noqa: BLE001
        exit_with_error(e)

    pr(f"\n[green]Removed {deleted} files and updated pubspec.yaml[/green]")


@app.command()
def doctor(path: PathOption = Path(".")):
    """
    Diagnose common asset configuration issues.
    """
    root = _find_root(path)
    pr("[bold magenta]🩺 assetsync doctor[/bold magenta]\n")

    diagnostics = diagnose_project(root)
    icons = {
        DiagnosticLevel.OK: "✅",
        DiagnosticLevel.INFO: "ℹ️ ",
        DiagnosticLevel.WARNING: "⚠️ ",
        DiagnosticLevel.ERROR: "❌",
    }
    colors = {
        DiagnosticLevel.OK: "green",
        DiagnosticLevel.INFO: "default",
        DiagnosticLevel.WARNING: "yellow",
        DiagnosticLevel.ERROR: "red",
    }
    for diagnostic in diagnostics:
        color = colors[diagnostic.level]
        pr(f"{icons[diagnostic.level]} [{color}]{diagnostic.message}[/{color}]")
        if diagnostic.hint:
            pr(f"     [dim]{diagnostic.hint}[/dim]")

    issues = sum(1 for d in diagnostics if d.is_issue)
    pr("")
    if issues == 0:
        pr("[bold green]No issues found![/bold green]")
    else:
        suffix = "s" if issues > 1 else ""
        pr(f"[yellow]Found {issues} issue{suffix}. See above for details.[/yellow]")


def _find_root(path: Path) -> Path:
    try:
        return find_project_root(path)
    except ProjectRootNotFoundError as e:
        exit_with_error(e)


def _open_project(path: Path) -> tuple[Path, SyncConfig]:
    root = _find_root(path)
    try:
        return root, load_config(root)
    except ConfigError as e:
        exit_with_error(e)


def exit_with_error(e: Exception) -> None:
    """
    Print the message matching the error type and exit with code 1.

    Raises:
        typer.Exit: Always.
    """
    if isinstance(e, ProjectRootNotFoundError):
        pr(f"[red]Error:[/red] {e.message}")
        pr("[yellow]Quick Fix:[/yellow] Run inside a Flutter project or pass --path.")
    elif isinstance(e, ManifestNotFoundError):
        pr(f"[red]Error:[/red] {e.message}")
    elif isinstance(e, MalformedDocumentError):
        print_manifest_err(e)
    elif isinstance(e, AssetDirectoryNotFoundError):
        pr(f"❌ [bold red]{e.message}[/bold red]")
        pr("[yellow]Quick Fix:[/yellow] Create it with: mkdir assets")
    elif isinstance(e, ConfigError):
        pr(f"❌ [bold red]Configuration Error[/bold red]\n{e.message}")
    elif isinstance(e, FileIOError):
        print_file_io_err(e)
    else:
        print_unexpected_err(e)
    raise typer.Exit(code=1) from e


def print_manifest_err(e: MalformedDocumentError) -> None:
    """
    Displays why pubspec.yaml could not be read or edited.

    The file on disk is never modified when this error is raised.
    """
    pr("❌ [bold red]pubspec.yaml Error[/bold red]")
    pr(e.message)
    if e.key_path:
        pr(f"Section: [yellow]{'.'.join(e.key_path)}[/yellow]")
    pr("\n[yellow]Quick Fix:[/yellow] `flutter.assets` must be a list of paths.")


def print_file_io_err(e: FileIOError) -> None:
    """
    Displays a user-friendly error message for file I/O operation failures.

    Args:
        e (FileIOError): The exception that was raised, containing error details
            and file path information.
    """
    pr("❌ [bold red]File I/O Error[/bold red]")
    pr(f"The app encountered an error while working with files: {e.message}")
    if e.file_path:
        pr(f"File path: [yellow]{e.file_path}[/yellow]")

    pr("\n[yellow]Quick Fix:[/yellow] Check file permissions and available disk space.")
    if e.original_exception:
        pr(f"\nTechnical details: {e.original_exception}")


def print_unexpected_err(e: Exception) -> None:
    """
    Displays a user-friendly error message for unexpected errors.

    This catch-all handler ensures that any unhandled exceptions are presented
    to the user in a friendly way, rather than showing a raw Python stack trace.
    """
    pr("❌ [bold red]Unexpected Error[/bold red]")
    pr("An unexpected error occurred while processing your request.")
    pr(f"\n[yellow]Error Type:[/yellow] {type(e).__name__}")
    pr(f"[yellow]Error Message:[/yellow] {str(e)}")

    pr("\n[yellow]What to do:[/yellow]")
    pr("1. Check that the project directory is valid and accessible")
    pr("2. Ensure you have sufficient disk space and permissions")
    pr("3. Try running the command again")

    if e.__cause__:
        pr(f"\nCaused by: {e.__cause__}")


if __name__ == "__main__":
    app()
