import os
from pathlib import Path
import shutil
import tempfile
from typing import Callable, Protocol

from core.exceptions import (
    FileReadError,
    FileWriteError,
    InvalidFilePathError,
)


def _current_umask() -> int:
    # The umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask


class FileReader(Protocol):
    """
    Protocol defining the interface for file reading operations.

    This protocol specifies methods for reading files, allowing different
    implementations for production (filesystem) and testing (mocks).
    """

    def read_file(self, file_path: Path) -> str:
        """
        Read the text content of a file as UTF-8.

        Args:
            file_path: The path to the file to read.

        Returns:
            The file content as a string.
        """


class FileWriter(Protocol):
    """
    Protocol defining the interface for file writing operations.

    This protocol specifies methods for writing data to files, allowing different
    implementations for production (filesystem) and testing (mocks).
    """

    def write_file(self, file_path: Path, data: str) -> None:
        """
        Replace the content of a file with `data`.

        Args:
            file_path: The file to write.
            data: String data to write.
        """


class FilesystemFileReader:

    def read_file(self, file_path: Path) -> str:
        """
        Read the text content of a file as UTF-8.

        Line endings are returned untouched so that edits can reproduce them.

        Args:
            file_path: The path to the file to read.

        Returns:
            The file content as a string.

        Raises:
            FileReadError: If the file does not exist or an I/O error occurs.
        """
        try:
            with file_path.open("r", encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise FileReadError(
                message=f"Failed to read file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e
        except UnicodeDecodeError as e:
            raise FileReadError(
                message=f"File is not valid UTF-8: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e


class FilesystemFileWriter:
    """
    Writes files atomically.

    Data goes to a temporary file in the target's directory which then replaces
    the target, so readers never observe a torn write and a failed write
    leaves the previous content in place.
    """

    def __init__(self, create_parents: bool = True):
        self.create_parents = create_parents

    def write_file(self, file_path: Path, data: str) -> None:
        """
        Replace the content of `file_path` with `data`.

        Args:
            file_path: The file to write. Missing parent directories are created
                when the writer was built with `create_parents=True`.
            data: String data to write. Written verbatim (no newline translation).

        Raises:
            InvalidFilePathError: If the parent directory does not exist and may
                not be created.
            FileWriteError: If writing or replacing the file fails.
        """
        # Edit the real file behind a symlink rather than replacing the link.
        if file_path.exists():
            file_path = file_path.resolve()

        parent = file_path.parent
        if not parent.exists():
            if not self.create_parents:
                raise InvalidFilePathError(
                    message=f"Parent directory does not exist: {parent}",
                    file_path=str(file_path),
                )
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileWriteError(
                    message=f"Failed to create directory: {parent}",
                    file_path=str(file_path),
                    original_exception=e,
                ) from e

        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{file_path.name}.", suffix=".tmp", dir=parent
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(data)
            # mkstemp creates 0600; keep the target's mode or fall back to the umask default.
            if file_path.exists():
                shutil.copymode(file_path, tmp_name)
            else:
                os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, file_path)
            tmp_name = None
        except OSError as e:
            raise FileWriteError(
                message=f"Failed to write to file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)


class MockFileReader:
    """
    Mock implementation of FileReader for testing.

    Returns configurable file contents, allowing tests to control file reading
    behavior without requiring filesystem operations or actual file I/O.
    """

    def __init__(
        self,
        return_value: str | None = None,
        read_file_fn: Callable[[Path], str] | None = None,
        fail_with: Exception | None = None,
    ):
        """
        Initialize MockFileReader with configurable reading behavior.

        Args:
            return_value: If provided, always returns this value regardless of input.
                Takes precedence over read_file_fn if both are provided.
            read_file_fn: Optional callable that takes a file path and returns file content.
            fail_with: If set, every read_file() call raises this exception
                after being recorded.

        Attributes (for test inspection):
            read_file_calls: List of file paths passed to read_file()
        """
        self.return_value = return_value
        self.read_file_fn = read_file_fn
        self.fail_with = fail_with
        self.read_file_calls: list[Path] = []

    def read_file(self, file_path: Path) -> str:
        self.read_file_calls.append(file_path)
        if self.fail_with is not None:
            raise self.fail_with
        if self.return_value is not None:
            return self.return_value
        if self.read_file_fn is not None:
            return self.read_file_fn(file_path)
        return ""


class MockFileWriter:
    """
    Mock implementation of FileWriter for testing.

    Records every write and can be told to fail, so tests can check that a
    failed write is reported without touching the filesystem.
    """

    def __init__(self, fail_with: Exception | None = None):
        """
        Args:
            fail_with: If set, every write_file() call raises this exception
                after being recorded.

        Attributes (for test inspection):
            write_file_calls: List of (file_path, data) tuples passed to write_file()
            files: Last data written per path.
        """
        self.fail_with = fail_with
        self.write_file_calls: list[tuple[Path, str]] = []
        self.files: dict[Path, str] = {}

    def write_file(self, file_path: Path, data: str) -> None:
        self.write_file_calls.append((file_path, data))
        if self.fail_with is not None:
            raise self.fail_with
        self.files[file_path] = data
