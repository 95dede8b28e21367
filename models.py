"""
Type definitions and data models used across the assetsync CLI application.

This module contains shared type definitions including enums and TypedDict
structures that are used throughout the codebase for type safety and consistency.
"""

from enum import StrEnum
from typing import TypedDict


class AssetCategory(StrEnum):
    """
    Enumeration of the asset families assetsync tracks.

    The enum values double as the section titles used in the generated code
    and as keys in the ASSET_EXTENSIONS mapping, which lists the file
    extensions that belong to each family.
    """

    IMAGE = "Images"
    FONT = "Fonts"
    VIDEO = "Videos"
    DATA = "Data"


class ChangeKind(StrEnum):
    """Kind of change reported by the filesystem watch subsystem."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


class CategoryExtensions(TypedDict):
    """
    Type definition for the per-category extension table.

    Attributes:
        extensions: A frozen set of lowercase file extensions, dot included
            (e.g. ".png"), that identify files of the category.
        label: Singular, human-readable label used in console output.
    """

    extensions: frozenset[str]
    label: str
