"""
Application-wide constants and configuration mappings.

This module defines the asset heuristics and conventional locations used
throughout the assetsync CLI: which extensions count as assets, which paths
the watcher must never react to, where the manifest and the assets directory
live inside a Flutter project, and the defaults applied when the project has
no `assetsync.yaml`.
"""

from typing import Final, Mapping
from models import AssetCategory, CategoryExtensions


# Extension table for every asset family. A file is an asset when its
# lowercase suffix appears in exactly one of these sets. The iteration order of
# this mapping is also the order in which categories are emitted in the
# generated code.
ASSET_EXTENSIONS: Final[Mapping[AssetCategory, CategoryExtensions]] = {
    AssetCategory.IMAGE: {
        "extensions": frozenset(
            {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".bmp", ".ico"}
        ),
        "label": "image",
    },
    AssetCategory.FONT: {
        "extensions": frozenset({".ttf", ".otf", ".woff", ".woff2"}),
        "label": "font",
    },
    AssetCategory.VIDEO: {
        "extensions": frozenset({".mp4", ".mov", ".avi", ".mkv", ".webm"}),
        "label": "video",
    },
    AssetCategory.DATA: {
        "extensions": frozenset({".json", ".xml", ".yaml", ".yml", ".csv"}),
        "label": "data file",
    },
}

# Editor swap files, partial downloads and other transient files.
IGNORED_SUFFIXES: Final[tuple[str, ...]] = (
    "~",
    ".tmp",
    ".temp",
    ".swp",
    ".swo",
    ".swx",
    ".part",
    ".crdownload",
    ".bak",
)

# OS metadata files, matched against the file name (case-insensitive).
IGNORED_FILE_NAMES: Final[frozenset[str]] = frozenset(
    {".ds_store", "thumbs.db", "ehthumbs.db", "desktop.ini", "icon\r"}
)

# Tooling directories, matched against any path segment.
IGNORED_DIRECTORIES: Final[frozenset[str]] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".idea",
        ".vscode",
        ".dart_tool",
        "node_modules",
        "__macosx",
    }
)

MANIFEST_FILE_NAME: Final[str] = "pubspec.yaml"
ASSETS_DIR_NAME: Final[str] = "assets"
CONFIG_FILE_NAME: Final[str] = "assetsync.yaml"
SOURCE_DIR_NAME: Final[str] = "lib"

# Key path of the asset list inside pubspec.yaml.
ASSETS_SECTION_PATH: Final[tuple[str, ...]] = ("flutter", "assets")

DEFAULT_DEBOUNCE_MS: Final[int] = 500
DEFAULT_OUTPUT_PATH: Final[str] = "lib/gen/assets.dart"
DEFAULT_CLASS_NAME: Final[str] = "Assets"
DEFAULT_MAX_FILE_SIZE_KB: Final[int] = 500

# Name of the aggregate list emitted in the generated class.
GENERATED_VALUES_NAME: Final[str] = "values"

GENERATED_HEADER: Final[str] = (
    "// GENERATED CODE - DO NOT MODIFY BY HAND\n"
    "// Generated by assetsync. Run `assetsync gen` to regenerate.\n"
    "\n"
    "// ignore_for_file: constant_identifier_names, lines_longer_than_80_chars\n"
)

# Identifiers that cannot be used as Dart member names.
DART_RESERVED_WORDS: Final[frozenset[str]] = frozenset(
    """
    abstract as assert async await break case catch
    class const continue covariant default deferred do
    dynamic else enum export extends extension external
    factory false final finally for function get hide
    if implements import in interface is late library
    mixin new null on operator part required rethrow
    return set show static super switch sync this
    throw true try typedef var void while with yield
    """.split()
)
