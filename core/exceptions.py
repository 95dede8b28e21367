"""
Custom exception classes for the assetsync CLI.

This module defines application-specific exceptions raised while reading and
editing the project manifest, scanning and generating assets, loading
configuration, and running the watch loop. The exceptions carry structured
information (message, file path, originating exception) so the CLI layer can
render a helpful message and so the watch loop can report per-event failures
without stopping.
"""

from typing import Optional, Sequence


class FileIOError(Exception):
    """
    Base exception for file I/O errors.

    Attributes:
        message: A human-readable error message describing what went wrong.
        file_path: The path of the file involved, if known.
        original_exception: The underlying exception that caused this error, if any.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.message = message or "A file I/O error occurred"
        super().__init__(self.message)
        self.file_path = file_path
        self.original_exception = original_exception


class InvalidFilePathError(FileIOError):
    """Raised when a file path cannot be used (unset, or parent directory unusable)."""


class FileReadError(FileIOError):
    """Raised when a file exists but cannot be read."""


class FileWriteError(FileIOError):
    """Raised when writing a file fails. The original file is left untouched."""


class MalformedDocumentError(Exception):
    """
    Raised when a structured document has an unexpected shape.

    This covers a root that is not a mapping, a node along the key path that is
    neither a mapping nor empty, and a target node that is not a list. It is
    also raised when an edit cannot be applied without changing parts of the
    document other than the targeted list.

    Attributes:
        message: A human-readable error message.
        key_path: The key path that was being resolved, if any.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        key_path: Optional[Sequence[str]] = None,
    ):
        self.message = message or "The document has an unexpected structure"
        super().__init__(self.message)
        self.key_path = tuple(key_path) if key_path is not None else None


class InvalidManifestError(MalformedDocumentError):
    """
    Raised by the read side of the manifest when pubspec.yaml is malformed.

    It subclasses MalformedDocumentError so callers can treat reader and
    editor failures as one class of error.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        key_path: Optional[Sequence[str]] = None,
    ):
        super().__init__(
            message=message or "pubspec.yaml is not a valid manifest",
            key_path=key_path,
        )


class ManifestNotFoundError(Exception):
    """Raised when the project has no pubspec.yaml."""

    def __init__(self, path: str):
        self.path = path
        self.message = f"Manifest not found: {path}"
        super().__init__(self.message)


class ProjectRootNotFoundError(Exception):
    """Raised when no directory at or above the start path contains pubspec.yaml."""

    def __init__(self, start: str):
        self.start = start
        self.message = f"No pubspec.yaml found in {start} or parent directories"
        super().__init__(self.message)


class AssetDirectoryNotFoundError(Exception):
    """Raised when the conventional assets directory does not exist."""

    def __init__(self, path: str):
        self.path = path
        self.message = f"Asset directory not found: {path}"
        super().__init__(self.message)


class ConfigError(Exception):
    """
    Raised when assetsync.yaml cannot be read or has values of the wrong type.

    Attributes:
        message: A human-readable error message.
        key: Dotted config key that failed validation, if any.
    """

    def __init__(self, message: Optional[str] = None, key: Optional[str] = None):
        self.message = message or "Invalid assetsync.yaml"
        super().__init__(self.message)
        self.key = key


class InvalidStateError(Exception):
    """Raised when the watch orchestrator is driven out of order."""
