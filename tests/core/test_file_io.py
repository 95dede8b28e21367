"""
Tests for the file_io module.

Tests cover:
- FilesystemFileReader: reading text, preserving line endings, I/O errors
- FilesystemFileWriter: atomic replace, parent creation, failure cleanup
- MockFileReader / MockFileWriter: call tracking and configured failures
"""

import os
from pathlib import Path
import stat

import pytest

from core.exceptions import FileReadError, FileWriteError, InvalidFilePathError
from core.file_io import (
    FilesystemFileReader,
    FilesystemFileWriter,
    MockFileReader,
    MockFileWriter,
)
from core.manifest import ManifestFile


# ============================================================================
# Tests for FilesystemFileReader.read_file
# ============================================================================


@pytest.mark.unit
def test_read_file_success(tmp_path):
    """Should successfully read a text file."""
    file_path = tmp_path / "pubspec.yaml"
    file_path.write_text("name: demo\n", encoding="utf-8")

    assert FilesystemFileReader().read_file(file_path) == "name: demo\n"


@pytest.mark.unit
def test_read_file_preserves_crlf(tmp_path):
    """Line endings are returned untouched."""
    file_path = tmp_path / "pubspec.yaml"
    file_path.write_bytes(b"a: 1\r\nb: 2\r\n")

    assert FilesystemFileReader().read_file(file_path) == "a: 1\r\nb: 2\r\n"


@pytest.mark.unit
def test_read_file_nonexistent(tmp_path):
    """A missing file raises FileReadError wrapping FileNotFoundError."""
    with pytest.raises(FileReadError) as exc_info:
        FilesystemFileReader().read_file(tmp_path / "missing.yaml")

    assert isinstance(exc_info.value.original_exception, FileNotFoundError)


@pytest.mark.unit
def test_read_file_invalid_utf8(tmp_path):
    """Should raise FileReadError for content that is not UTF-8."""
    file_path = tmp_path / "bad.yaml"
    file_path.write_bytes(b"\xff\xfe\x00bad")

    with pytest.raises(FileReadError, match="not valid UTF-8"):
        FilesystemFileReader().read_file(file_path)


# ============================================================================
# Tests for FilesystemFileWriter.write_file
# ============================================================================


@pytest.mark.unit
def test_write_file_replaces_content(tmp_path):
    """Should replace the previous content."""
    file_path = tmp_path / "out.dart"
    file_path.write_text("old", encoding="utf-8")

    FilesystemFileWriter().write_file(file_path, "new\n")

    assert file_path.read_bytes() == b"new\n"


@pytest.mark.unit
def test_write_file_does_not_translate_newlines(tmp_path):
    """Should write CRLF line endings verbatim."""
    file_path = tmp_path / "pubspec.yaml"

    FilesystemFileWriter().write_file(file_path, "a: 1\r\n")

    assert file_path.read_bytes() == b"a: 1\r\n"


@pytest.mark.unit
def test_write_file_creates_parents(tmp_path):
    """Should create missing parent directories."""
    file_path = tmp_path / "lib" / "gen" / "assets.dart"

    FilesystemFileWriter().write_file(file_path, "x")

    assert file_path.read_text(encoding="utf-8") == "x"


@pytest.mark.unit
def test_write_file_without_parent_creation(tmp_path):
    """Should raise InvalidFilePathError when parents may not be created."""
    writer = FilesystemFileWriter(create_parents=False)

    with pytest.raises(InvalidFilePathError):
        writer.write_file(tmp_path / "missing" / "x.dart", "x")


@pytest.mark.integration
@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_manifest_edit_keeps_file_mode(project_root):
    """Editing pubspec.yaml should keep its permission bits."""
    pubspec = project_root / "pubspec.yaml"
    pubspec.chmod(0o644)

    ManifestFile(pubspec).add_asset("assets/a.png")

    assert stat.S_IMODE(pubspec.stat().st_mode) == 0o644
    assert "assets/a.png" in pubspec.read_text(encoding="utf-8")


@pytest.mark.integration
@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_write_new_file_uses_umask_default(tmp_path):
    """A new file should get 0666 minus the umask, not mkstemp's 0600."""
    file_path = tmp_path / "lib" / "gen" / "assets.dart"
    previous = os.umask(0o022)
    try:
        FilesystemFileWriter().write_file(file_path, "x")
    finally:
        os.umask(previous)

    assert stat.S_IMODE(file_path.stat().st_mode) == 0o644


@pytest.mark.integration
@pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
def test_manifest_edit_through_symlink(project_root):
    """A symlinked pubspec.yaml should stay a link and its target should get the edit."""
    real = project_root / "real.yaml"
    pubspec = project_root / "pubspec.yaml"
    real.write_text(pubspec.read_text(encoding="utf-8"), encoding="utf-8")
    pubspec.unlink()
    pubspec.symlink_to(real)

    ManifestFile(pubspec).add_asset("assets/a.png")

    assert pubspec.is_symlink()
    assert "assets/a.png" in real.read_text(encoding="utf-8")


@pytest.mark.unit
@pytest.mark.mock
def test_write_file_failure_keeps_original_and_cleans_up(tmp_path, mocker):
    """A failed replace leaves the old content and no temp file behind."""
    file_path = tmp_path / "pubspec.yaml"
    file_path.write_text("original\n", encoding="utf-8")
    mocker.patch("core.file_io.os.replace", side_effect=OSError("disk full"))

    with pytest.raises(FileWriteError) as exc_info:
        FilesystemFileWriter().write_file(file_path, "edited\n")

    assert exc_info.value.file_path == str(file_path)
    assert file_path.read_text(encoding="utf-8") == "original\n"
    assert sorted(os.listdir(tmp_path)) == ["pubspec.yaml"]


# ============================================================================
# Tests for MockFileReader / MockFileWriter
# ============================================================================


@pytest.mark.unit
def test_mock_file_reader_return_value_takes_precedence():
    """return_value should win over read_file_fn."""
    reader = MockFileReader(return_value="fixed", read_file_fn=lambda p: "fn")

    assert reader.read_file(Path("a")) == "fixed"
    assert reader.read_file_calls == [Path("a")]


@pytest.mark.unit
def test_mock_file_reader_read_file_fn_and_default():
    """Should use read_file_fn, or return an empty string."""
    assert MockFileReader(read_file_fn=lambda p: p.name).read_file(Path("x/y")) == "y"
    assert MockFileReader().read_file(Path("x")) == ""


@pytest.mark.unit
def test_mock_file_reader_fail_with():
    """Should record the call, then raise the configured error."""
    reader = MockFileReader(fail_with=FileReadError("nope"))

    with pytest.raises(FileReadError):
        reader.read_file(Path("a"))
    assert reader.read_file_calls == [Path("a")]


@pytest.mark.unit
def test_mock_file_writer_tracks_calls():
    """Should record every write and keep the last data per path."""
    writer = MockFileWriter()

    writer.write_file(Path("a"), "1")
    writer.write_file(Path("a"), "2")

    assert writer.write_file_calls == [(Path("a"), "1"), (Path("a"), "2")]
    assert writer.files == {Path("a"): "2"}


@pytest.mark.unit
def test_mock_file_writer_fail_with():
    """Should record the call, raise, and store nothing."""
    writer = MockFileWriter(fail_with=FileWriteError("disk full"))

    with pytest.raises(FileWriteError):
        writer.write_file(Path("a"), "1")
    assert writer.write_file_calls == [(Path("a"), "1")]
    assert writer.files == {}
