"""
Core data models for the synchronization pipeline.

This module defines the records that flow between the scanner, the manifest
store, the code generator and the watch orchestrator.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from models import AssetCategory, ChangeKind


@dataclass(frozen=True)
class AssetPath:
    """
    A project-root-relative asset declaration.

    A path ending in "/" declares a whole directory tree; any other path names
    exactly one file.
    """

    path: str

    @property
    def is_directory(self) -> bool:
        return self.path.endswith("/")

    def covers(self, relative_path: str) -> bool:
        """Return True if this entry declares `relative_path`."""
        if self.is_directory:
            return relative_path.startswith(self.path)
        return relative_path == self.path

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class ScannedAsset:
    """
    Metadata for one asset file found on disk.

    Attributes:
        relative_path: Path relative to the project root, always with "/" separators.
        name: File name without its final extension (e.g. "logo" for "logo.png",
            "logo.dark" for "logo.dark.png").
        extension: Lowercase extension without the dot (e.g. "png").
        size: File size in bytes.
        category: Asset family derived from the extension.
    """

    relative_path: str
    name: str
    extension: str
    size: int
    category: AssetCategory


@dataclass(frozen=True)
class FileChangeEvent:
    """A single notification from the filesystem watch subsystem."""

    kind: ChangeKind
    path: Path
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class EventOutcome:
    """
    Result of processing one settled path in the watch loop.

    Attributes:
        relative_path: The affected path relative to the project root.
        kind: Kind of the most recent event seen for the path in the window.
        manifest_changed: True if pubspec.yaml was rewritten for this path.
        regenerated: True if the generated code was rewritten after this path.
        error: The exception that stopped processing of this path, if any.
    """

    relative_path: str
    kind: ChangeKind
    manifest_changed: bool = False
    regenerated: bool = False
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
