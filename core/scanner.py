"""
On-disk asset enumeration.

Walks the project's `assets/` directory and returns one ScannedAsset per
regular file whose extension is a known asset type, sorted by relative path
so that everything derived from a scan (generated code, reports) is stable.
"""

import os
from pathlib import Path

from constants import ASSETS_DIR_NAME
from core.filters import categorize
from core.models import ScannedAsset
from utils import relative_posix


def scan_assets(project_root: Path) -> list[ScannedAsset]:
    """
    Recursively scan `<project_root>/assets`.

    Args:
        project_root: The Flutter project root.

    Returns:
        Assets sorted ascending by relative path. Empty if the assets directory
        does not exist.

    Raises:
        OSError: If a directory or file cannot be read (permission denied, ...).
    """
    assets_dir = project_root / ASSETS_DIR_NAME
    if not assets_dir.is_dir():
        return []

    assets: list[ScannedAsset] = []

    def _raise(error: OSError) -> None:
        raise error

    for dirpath, _, filenames in os.walk(assets_dir, onerror=_raise):
        for filename in filenames:
            file_path = Path(dirpath) / filename
            category = categorize(filename)
            if category is None or not file_path.is_file():
                continue

            assets.append(
                ScannedAsset(
                    relative_path=relative_posix(file_path, project_root),
                    name=file_path.stem,
                    extension=file_path.suffix.lower().lstrip("."),
                    size=file_path.stat().st_size,
                    category=category,
                )
            )

    assets.sort(key=lambda a: a.relative_path)
    return assets
