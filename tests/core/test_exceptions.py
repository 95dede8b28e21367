"""
Tests for the exceptions module.

Tests cover:
- FileIOError and its subclasses: default messages, stored path and cause
- MalformedDocumentError / InvalidManifestError: key paths and hierarchy
- Project-level errors: manifest, project root, asset directory, config
"""

import pytest

from core.exceptions import (
    AssetDirectoryNotFoundError,
    ConfigError,
    FileIOError,
    FileReadError,
    FileWriteError,
    InvalidFilePathError,
    InvalidManifestError,
    MalformedDocumentError,
    ManifestNotFoundError,
    ProjectRootNotFoundError,
)


# ============================================================================
# Tests for FileIOError
# ============================================================================


@pytest.mark.unit
def test_file_io_error_default_message():
    """FileIOError should have a default message when none provided."""
    error = FileIOError()
    assert str(error) == "A file I/O error occurred"
    assert error.file_path is None
    assert error.original_exception is None


@pytest.mark.unit
def test_file_io_error_stores_details():
    """FileIOError should keep the path and the underlying exception."""
    original = PermissionError("denied")
    error = FileIOError("Failed", file_path="/tmp/x", original_exception=original)

    assert error.message == "Failed"
    assert error.file_path == "/tmp/x"
    assert error.original_exception is original


@pytest.mark.unit
@pytest.mark.parametrize(
    "exception_class", [InvalidFilePathError, FileReadError, FileWriteError]
)
def test_file_io_subclasses(exception_class):
    """All file errors can be caught as FileIOError."""
    with pytest.raises(FileIOError):
        raise exception_class("boom")


# ============================================================================
# Tests for document errors
# ============================================================================


@pytest.mark.unit
def test_malformed_document_error_key_path_is_tuple():
    """The key path should be stored as a tuple."""
    error = MalformedDocumentError("bad", ["flutter", "assets"])

    assert error.message == "bad"
    assert error.key_path == ("flutter", "assets")


@pytest.mark.unit
def test_malformed_document_error_defaults():
    """MalformedDocumentError should have a default message."""
    error = MalformedDocumentError()

    assert str(error) == "The document has an unexpected structure"
    assert error.key_path is None


@pytest.mark.unit
def test_invalid_manifest_error_is_malformed_document_error():
    """Reader and editor failures share one base class."""
    error = InvalidManifestError(key_path=("flutter",))

    assert isinstance(error, MalformedDocumentError)
    assert error.message == "pubspec.yaml is not a valid manifest"
    assert error.key_path == ("flutter",)


# ============================================================================
# Tests for project errors
# ============================================================================


@pytest.mark.unit
def test_manifest_not_found_error():
    """ManifestNotFoundError should include the path in its message."""
    error = ManifestNotFoundError("/app/pubspec.yaml")

    assert error.path == "/app/pubspec.yaml"
    assert str(error) == "Manifest not found: /app/pubspec.yaml"


@pytest.mark.unit
def test_project_root_not_found_error():
    """ProjectRootNotFoundError should keep the start directory."""
    error = ProjectRootNotFoundError("/somewhere")

    assert error.start == "/somewhere"
    assert "/somewhere" in error.message


@pytest.mark.unit
def test_asset_directory_not_found_error():
    """AssetDirectoryNotFoundError should include the path in its message."""
    error = AssetDirectoryNotFoundError("/app/assets")

    assert str(error) == "Asset directory not found: /app/assets"


@pytest.mark.unit
def test_config_error_key():
    """ConfigError should keep the dotted key and have a default message."""
    error = ConfigError("must be int", "watch.debounce_ms")

    assert error.message == "must be int"
    assert error.key == "watch.debounce_ms"
    assert ConfigError().message == "Invalid assetsync.yaml"
