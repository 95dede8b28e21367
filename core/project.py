"""
Project root discovery and conventional locations inside a Flutter project.
"""

from dataclasses import dataclass
from pathlib import Path

from constants import ASSETS_DIR_NAME, MANIFEST_FILE_NAME, SOURCE_DIR_NAME
from core.exceptions import ProjectRootNotFoundError


@dataclass(frozen=True)
class ProjectPaths:
    """Absolute locations of the files assetsync works with."""

    root: Path

    @property
    def manifest(self) -> Path:
        return self.root / MANIFEST_FILE_NAME

    @property
    def assets_dir(self) -> Path:
        return self.root / ASSETS_DIR_NAME

    @property
    def source_dir(self) -> Path:
        return self.root / SOURCE_DIR_NAME

    def output(self, relative_output: str) -> Path:
        return self.root / relative_output


def find_project_root(start: Path) -> Path:
    """
    Walk up from `start` to the first directory containing pubspec.yaml.

    Args:
        start: A directory inside (or at the root of) a Flutter project.

    Returns:
        Path: The absolute project root.

    Raises:
        ProjectRootNotFoundError: If no such directory exists up to the filesystem root.
    """
    current = start.resolve()
    for directory in (current, *current.parents):
        if (directory / MANIFEST_FILE_NAME).is_file():
            return directory
    raise ProjectRootNotFoundError(str(start))
