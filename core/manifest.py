"""
Declared asset manifest (pubspec.yaml).

The module-level functions are the read side of the manifest: they resolve
the asset section with the same rules as `core.document_editor`, so a
document the editor accepts is one the reader accepts and vice versa.

`ManifestFile` binds those functions and the editor to a file on disk. Every
mutation reads the file, computes the edit in memory and only then writes,
all inside one lock, so concurrent callers in the same process never
interleave their read-modify-write sequences and a failed edit leaves the
file untouched.
"""

from pathlib import Path
import threading
from typing import Sequence

from constants import ASSETS_SECTION_PATH
from core.document_editor import add_list_item, remove_list_item
from core.exceptions import (
    FileReadError,
    InvalidManifestError,
    MalformedDocumentError,
    ManifestNotFoundError,
)
from core.file_io import FileReader, FileWriter, FilesystemFileReader, FilesystemFileWriter
from core.models import AssetPath
from core.yaml_document import list_values, parse_document, resolve


def get_declared_assets(
    document: str, section_path: Sequence[str] = ASSETS_SECTION_PATH
) -> list[AssetPath]:
    """
    Return the asset paths declared in a manifest document, in document order.

    Args:
        document: The manifest text.
        section_path: Keys leading to the asset list.

    Returns:
        The declared entries. Empty when any key along the path is absent or
        the list is null.

    Raises:
        InvalidManifestError: If the root is not a mapping, a key along the path
            holds a non-mapping, or the section is present but not a list.
    """
    try:
        resolution = resolve(parse_document(document), section_path)
        return [AssetPath(v) for v in list_values(resolution, section_path)]
    except MalformedDocumentError as e:
        raise InvalidManifestError(e.message, section_path) from e


def has_asset(
    document: str, path: str, section_path: Sequence[str] = ASSETS_SECTION_PATH
) -> bool:
    """Return True if `path` is declared verbatim in the manifest."""
    return AssetPath(path) in get_declared_assets(document, section_path)


def is_declared(declared: Sequence[AssetPath], relative_path: str) -> bool:
    """
    Return True if `relative_path` is declared directly or through a directory entry.

    Args:
        declared: Entries returned by get_declared_assets.
        relative_path: A project-relative file path with "/" separators.
    """
    return any(entry.covers(relative_path) for entry in declared)


class ManifestFile:
    """
    pubspec.yaml on disk.

    Attributes:
        file_path: Location of the manifest.
        section_path: Keys leading to the asset list.
    """

    def __init__(
        self,
        file_path: Path,
        section_path: Sequence[str] = ASSETS_SECTION_PATH,
        reader: FileReader | None = None,
        writer: FileWriter | None = None,
    ):
        self.file_path = file_path
        self.section_path = tuple(section_path)
        self._reader = reader if reader is not None else FilesystemFileReader()
        self._writer = writer if writer is not None else FilesystemFileWriter()
        self._lock = threading.RLock()

    def read(self) -> str:
        """
        Read the manifest text.

        Raises:
            ManifestNotFoundError: If the file does not exist.
            FileReadError: If the file cannot be read.
        """
        try:
            return self._reader.read_file(self.file_path)
        except FileReadError as e:
            if isinstance(e.original_exception, FileNotFoundError):
                raise ManifestNotFoundError(str(self.file_path)) from e
            raise

    def declared_assets(self) -> list[AssetPath]:
        """Entries currently declared on disk. See get_declared_assets."""
        with self._lock:
            return get_declared_assets(self.read(), self.section_path)

    def has_asset(self, path: str) -> bool:
        with self._lock:
            return has_asset(self.read(), path, self.section_path)

    def add_asset(self, path: str) -> bool:
        """
        Declare `path` in the manifest.

        Returns:
            bool: True if the file was rewritten, False if `path` was already declared.

        Raises:
            MalformedDocumentError: If the manifest cannot be edited; nothing is written.
            FileWriteError: If the edited manifest cannot be written.
        """
        with self._lock:
            original = self.read()
            edited = add_list_item(original, self.section_path, path)
            return self._write_if_changed(original, edited)

    def remove_asset(self, path: str) -> bool:
        """
        Remove `path` from the manifest.

        Returns:
            bool: True if the file was rewritten, False if `path` was not declared.

        Raises:
            MalformedDocumentError: If the manifest cannot be edited; nothing is written.
            FileWriteError: If the edited manifest cannot be written.
        """
        with self._lock:
            original = self.read()
            edited = remove_list_item(original, self.section_path, path)
            return self._write_if_changed(original, edited)

    def _write_if_changed(self, original: str, edited: str) -> bool:
        if edited == original:
            return False
        self._writer.write_file(self.file_path, edited)
        return True
