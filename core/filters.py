"""
Path classification for the watch loop and the scanner.

Two independent checks decide whether a filesystem path matters:

- `is_relevant_asset`: the extension belongs to a known asset category.
- `should_ignore`: the path is a hidden file, an editor swap or temp file,
  an OS metadata file, or lives inside a tooling directory.

An event is processed only when the path is relevant and not ignored.
"""

from pathlib import PurePath, PurePosixPath

from constants import (
    ASSET_EXTENSIONS,
    IGNORED_DIRECTORIES,
    IGNORED_FILE_NAMES,
    IGNORED_SUFFIXES,
)
from models import AssetCategory
from utils import to_posix


def _parts(path: PurePath | str) -> tuple[str, ...]:
    return PurePosixPath(to_posix(path)).parts


def categorize(path: PurePath | str) -> AssetCategory | None:
    """
    Return the asset category of `path` from its extension, or None.

    Examples:
        >>> categorize("assets/images/logo.PNG")
        <AssetCategory.IMAGE: 'Images'>
        >>> categorize("lib/main.dart") is None
        True
    """
    suffix = PurePosixPath(to_posix(path)).suffix.lower()
    if not suffix:
        return None
    for category, table in ASSET_EXTENSIONS.items():
        if suffix in table["extensions"]:
            return category
    return None


def is_relevant_asset(path: PurePath | str) -> bool:
    return categorize(path) is not None


def should_ignore(path: PurePath | str) -> bool:
    """
    Return True if `path` matches any ignore rule.

    Rules:
        - any path segment starting with "." (hidden files and folders)
        - editor swap, backup and temp-file suffixes ("~", ".swp", ".tmp", ...)
        - Emacs lock files ("#name#", ".#name")
        - OS metadata files (".DS_Store", "Thumbs.db", "desktop.ini")
        - tooling directories (".git", ".idea", ".vscode", "node_modules", ...)
    """
    parts = [p for p in _parts(path) if p not in ("/", ".", "..")]
    if not parts:
        return False

    name = parts[-1]
    lowered = name.lower()

    if any(part.startswith(".") for part in parts):
        return True
    if any(part.lower() in IGNORED_DIRECTORIES for part in parts[:-1]):
        return True
    if lowered in IGNORED_FILE_NAMES:
        return True
    if lowered.endswith(IGNORED_SUFFIXES):
        return True
    if name.startswith("#") and name.endswith("#"):
        return True
    return False


def is_watched_asset(path: PurePath | str) -> bool:
    """Both checks combined: relevant and not ignored."""
    return is_relevant_asset(path) and not should_ignore(path)
