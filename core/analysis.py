"""
Project analysis behind the `check`, `unused`, `clean` and `doctor` commands.

Everything here is read-only except `delete_assets`, which removes files
and their manifest entries for `clean`.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from fnmatch import fnmatch
import os
from pathlib import Path, PurePosixPath
from typing import Sequence

from constants import ASSETS_SECTION_PATH, CONFIG_FILE_NAME, MANIFEST_FILE_NAME
from core.config import AnalyzeConfig, SyncConfig, config_path, load_config
from core.exceptions import ConfigError, FileReadError, MalformedDocumentError
from core.file_io import FileReader, FilesystemFileReader
from core.generator import CodeGenerator
from core.manifest import ManifestFile
from core.models import AssetPath
from core.project import ProjectPaths
from core.yaml_document import Found, parse_document, resolve
from utils import format_bytes, relative_posix


def find_missing_assets(project_root: Path, declared: Sequence[AssetPath]) -> list[str]:
    """
    Declared entries that do not exist on disk.

    A directory entry is missing when the directory does not exist; a file
    entry when the file does not exist.
    """
    missing: list[str] = []
    for entry in declared:
        target = project_root / entry.path
        exists = target.is_dir() if entry.is_directory else target.is_file()
        if not exists:
            missing.append(entry.path)
    return missing


@dataclass(frozen=True)
class SizeViolation:
    path: str
    actual_size: int
    max_size: int

    @property
    def human_readable_size(self) -> str:
        return format_bytes(self.actual_size)

    @property
    def human_readable_max(self) -> str:
        return format_bytes(self.max_size)


def find_size_violations(project_root: Path, max_file_size_kb: int) -> list[SizeViolation]:
    """
    Every file under the assets directory larger than `max_file_size_kb`.

    All regular files count, not only known asset types. Sorted by path.
    """
    assets_dir = ProjectPaths(project_root).assets_dir
    if not assets_dir.is_dir():
        return []

    max_size = max_file_size_kb * 1024
    violations: list[SizeViolation] = []
    for dirpath, _, filenames in os.walk(assets_dir):
        for filename in filenames:
            file_path = Path(dirpath) / filename
            if not file_path.is_file():
                continue
            size = file_path.stat().st_size
            if size > max_size:
                violations.append(
                    SizeViolation(relative_posix(file_path, project_root), size, max_size)
                )
    violations.sort(key=lambda v: v.path)
    return violations


def collect_dart_sources(
    project_root: Path,
    generated_output: str,
    config: AnalyzeConfig | None = None,
    reader: FileReader | None = None,
) -> str:
    """
    Concatenate every `lib/**/*.dart` file that may reference assets.

    Files inside the generated file's directory are skipped, as are files
    matching an `analyze.exclude` glob (matched against the project-relative
    path).

    Raises:
        FileReadError: If a source file cannot be read.
    """
    source_dir = ProjectPaths(project_root).source_dir
    if not source_dir.is_dir():
        return ""

    file_reader = reader if reader is not None else FilesystemFileReader()
    exclude = config.exclude if config is not None else ()
    generated_dir = PurePosixPath(generated_output).parent

    chunks: list[str] = []
    for file_path in sorted(source_dir.rglob("*.dart")):
        if not file_path.is_file():
            continue
        relative = relative_posix(file_path, project_root)
        if generated_dir != PurePosixPath(".") and PurePosixPath(relative).is_relative_to(
            generated_dir
        ):
            continue
        if any(fnmatch(relative, pattern) for pattern in exclude):
            continue
        chunks.append(file_reader.read_file(file_path))
    return "\n".join(chunks)


def find_unused_assets(declared: Sequence[AssetPath], source: str) -> list[str]:
    """
    Declared file entries that the Dart source never mentions.

    An asset counts as used when its full path or its base name without the
    extension appears anywhere in `source`. Directory entries are never
    reported.
    """
    unused: list[str] = []
    for entry in declared:
        if entry.is_directory:
            continue
        if entry.path in source:
            continue
        if PurePosixPath(entry.path).stem in source:
            continue
        unused.append(entry.path)
    return unused


@dataclass(frozen=True)
class UnusedAsset:
    path: str
    size: int

    @property
    def human_readable_size(self) -> str:
        return format_bytes(self.size)


def analyze_unused(
    project_root: Path,
    manifest: ManifestFile,
    config: SyncConfig,
    reader: FileReader | None = None,
) -> list[UnusedAsset]:
    """
    Unused declared assets with their on-disk size (0 if the file is gone).
    """
    declared = manifest.declared_assets()
    source = collect_dart_sources(
        project_root, config.generate.output, config.analyze, reader
    )
    unused: list[UnusedAsset] = []
    for path in find_unused_assets(declared, source):
        file_path = project_root / path
        size = file_path.stat().st_size if file_path.is_file() else 0
        unused.append(UnusedAsset(path, size))
    return unused


def delete_assets(project_root: Path, manifest: ManifestFile, paths: Sequence[str]) -> int:
    """
    Delete asset files and drop their manifest entries.

    Entries whose file no longer exists are still removed from the manifest.

    Returns:
        int: Number of files actually deleted.

    Raises:
        OSError: If a file cannot be deleted.
        MalformedDocumentError: If the manifest cannot be edited.
        FileWriteError: If the manifest cannot be written.
    """
    deleted = 0
    for path in paths:
        file_path = project_root / path
        if file_path.is_file():
            file_path.unlink()
            deleted += 1
        manifest.remove_asset(path)
    return deleted


class GeneratedStatus(StrEnum):
    UP_TO_DATE = "up-to-date"
    STALE = "stale"
    MISSING = "missing"


@dataclass
class CheckReport:
    """
    Result of `assetsync check`.

    A missing generated file is reported but does not fail the check.
    """

    missing: list[str] = field(default_factory=list)
    violations: list[SizeViolation] = field(default_factory=list)
    generated: GeneratedStatus = GeneratedStatus.MISSING
    max_file_size_kb: int = 0

    @property
    def passed(self) -> bool:
        return (
            not self.missing
            and not self.violations
            and self.generated is not GeneratedStatus.STALE
        )


def run_checks(
    project_root: Path,
    config: SyncConfig,
    manifest: ManifestFile,
    generator: CodeGenerator,
) -> CheckReport:
    """
    Missing declarations, oversize files and generated-file freshness.

    Raises:
        ManifestNotFoundError: If pubspec.yaml does not exist.
        InvalidManifestError: If the asset section has the wrong shape.
    """
    report = CheckReport(max_file_size_kb=config.check.max_file_size_kb)
    report.missing = find_missing_assets(project_root, manifest.declared_assets())
    report.violations = find_size_violations(project_root, config.check.max_file_size_kb)

    if not generator.output_path.is_file():
        report.generated = GeneratedStatus.MISSING
    elif generator.is_up_to_date():
        report.generated = GeneratedStatus.UP_TO_DATE
    else:
        report.generated = GeneratedStatus.STALE
    return report


class DiagnosticLevel(StrEnum):
    OK = "ok"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    level: DiagnosticLevel
    message: str
    hint: str | None = None

    @property
    def is_issue(self) -> bool:
        return self.level in (DiagnosticLevel.WARNING, DiagnosticLevel.ERROR)


def diagnose_project(project_root: Path, reader: FileReader | None = None) -> list[Diagnostic]:
    """
    Inspect a project for common setup problems, one diagnostic per finding.

    Never raises for problems it is meant to report: an unreadable or
    malformed pubspec.yaml and an invalid config become diagnostics.
    """
    file_reader = reader if reader is not None else FilesystemFileReader()
    paths = ProjectPaths(project_root)
    results: list[Diagnostic] = []

    if paths.manifest.is_file():
        results.append(Diagnostic(DiagnosticLevel.OK, f"{MANIFEST_FILE_NAME} found"))
        results.extend(_diagnose_manifest(paths.manifest, file_reader))
    else:
        results.append(Diagnostic(DiagnosticLevel.ERROR, f"{MANIFEST_FILE_NAME} not found"))

    if paths.assets_dir.is_dir():
        count = sum(1 for p in paths.assets_dir.rglob("*") if p.is_file())
        results.append(
            Diagnostic(DiagnosticLevel.OK, f"assets/ directory found ({count} files)")
        )
    else:
        results.append(
            Diagnostic(
                DiagnosticLevel.WARNING,
                "assets/ directory not found",
                "Create it with: mkdir assets",
            )
        )

    config = SyncConfig()
    if config_path(project_root).is_file():
        results.append(Diagnostic(DiagnosticLevel.OK, f"{CONFIG_FILE_NAME} found"))
        try:
            config = load_config(project_root, file_reader)
            results.append(Diagnostic(DiagnosticLevel.OK, "Config is valid"))
        except ConfigError as e:
            results.append(Diagnostic(DiagnosticLevel.ERROR, f"Config has errors: {e.message}"))
    else:
        results.append(
            Diagnostic(DiagnosticLevel.INFO, f"{CONFIG_FILE_NAME} not found (using defaults)")
        )

    if paths.output(config.generate.output).is_file():
        results.append(
            Diagnostic(DiagnosticLevel.OK, f"Generated code exists at {config.generate.output}")
        )
    else:
        results.append(
            Diagnostic(
                DiagnosticLevel.INFO,
                "No generated code found",
                "Run 'assetsync gen' to generate",
            )
        )
    return results


def _diagnose_manifest(manifest_path: Path, reader: FileReader) -> list[Diagnostic]:
    try:
        root = parse_document(reader.read_file(manifest_path))
        flutter = resolve(root, ASSETS_SECTION_PATH[:1])
        assets = resolve(root, ASSETS_SECTION_PATH)
    except FileReadError as e:
        return [Diagnostic(DiagnosticLevel.ERROR, f"Could not read {MANIFEST_FILE_NAME}: {e.message}")]
    except MalformedDocumentError as e:
        return [Diagnostic(DiagnosticLevel.ERROR, f"{MANIFEST_FILE_NAME} is malformed: {e.message}")]

    if not isinstance(flutter, Found):
        return [Diagnostic(DiagnosticLevel.WARNING, f"No flutter section in {MANIFEST_FILE_NAME}")]

    results = [Diagnostic(DiagnosticLevel.OK, f"flutter section exists in {MANIFEST_FILE_NAME}")]
    if isinstance(assets, Found):
        results.append(Diagnostic(DiagnosticLevel.OK, "assets section found in flutter config"))
    else:
        results.append(
            Diagnostic(
                DiagnosticLevel.WARNING,
                "No assets section in flutter config",
                "Run 'assetsync watch' and add a file to auto-configure",
            )
        )
    return results
