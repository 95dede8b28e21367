"""
Loading of the optional `assetsync.yaml` project configuration.

The file mirrors the sections of the CLI:

    watch:
      debounce_ms: 500
      regenerate_on_modify: false
    generate:
      output: lib/gen/assets.dart
      class_name: Assets
    check:
      max_file_size_kb: 500
    analyze:
      exclude:
        - lib/legacy/**

Every key is optional. A missing file yields the defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CLASS_NAME,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_MAX_FILE_SIZE_KB,
    DEFAULT_OUTPUT_PATH,
)
from core.exceptions import ConfigError, FileReadError
from core.file_io import FileReader, FilesystemFileReader


@dataclass(frozen=True)
class WatchConfig:
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    regenerate_on_modify: bool = False

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


@dataclass(frozen=True)
class GenerateConfig:
    output: str = DEFAULT_OUTPUT_PATH
    class_name: str = DEFAULT_CLASS_NAME


@dataclass(frozen=True)
class CheckConfig:
    max_file_size_kb: int = DEFAULT_MAX_FILE_SIZE_KB


@dataclass(frozen=True)
class AnalyzeConfig:
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True)
class SyncConfig:
    watch: WatchConfig = field(default_factory=WatchConfig)
    generate: GenerateConfig = field(default_factory=GenerateConfig)
    check: CheckConfig = field(default_factory=CheckConfig)
    analyze: AnalyzeConfig = field(default_factory=AnalyzeConfig)


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_FILE_NAME


def load_config(project_root: Path, reader: FileReader | None = None) -> SyncConfig:
    """
    Load `assetsync.yaml` from the project root.

    Args:
        project_root: The Flutter project root.
        reader: File reader to use. Defaults to FilesystemFileReader.

    Returns:
        SyncConfig: The parsed configuration, or the defaults if the file is absent.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or holds
            values of the wrong type.
    """
    path = config_path(project_root)
    if not path.exists():
        return SyncConfig()

    file_reader = reader if reader is not None else FilesystemFileReader()
    try:
        content = file_reader.read_file(path)
    except FileReadError as e:
        raise ConfigError(f"Could not read {path.name}: {e.message}") from e

    return parse_config(content)


def parse_config(content: str) -> SyncConfig:
    """
    Build a SyncConfig from YAML text.

    Raises:
        ConfigError: If the text is not valid YAML or holds values of the wrong type.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"{CONFIG_FILE_NAME} is not valid YAML: {e}") from e

    if data is None:
        return SyncConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping")

    watch = _section(data, "watch")
    generate = _section(data, "generate")
    check = _section(data, "check")
    analyze = _section(data, "analyze")

    debounce_ms = _typed(watch, "watch", "debounce_ms", int, DEFAULT_DEBOUNCE_MS)
    if debounce_ms < 0:
        raise ConfigError("watch.debounce_ms must not be negative", "watch.debounce_ms")

    max_kb = _typed(check, "check", "max_file_size_kb", int, DEFAULT_MAX_FILE_SIZE_KB)
    if max_kb <= 0:
        raise ConfigError(
            "check.max_file_size_kb must be positive", "check.max_file_size_kb"
        )

    exclude = _typed(analyze, "analyze", "exclude", list, [])
    if not all(isinstance(pattern, str) for pattern in exclude):
        raise ConfigError("analyze.exclude must be a list of strings", "analyze.exclude")

    return SyncConfig(
        watch=WatchConfig(
            debounce_ms=debounce_ms,
            regenerate_on_modify=_typed(
                watch, "watch", "regenerate_on_modify", bool, False
            ),
        ),
        generate=GenerateConfig(
            output=_typed(generate, "generate", "output", str, DEFAULT_OUTPUT_PATH),
            class_name=_typed(
                generate, "generate", "class_name", str, DEFAULT_CLASS_NAME
            ),
        ),
        check=CheckConfig(max_file_size_kb=max_kb),
        analyze=AnalyzeConfig(exclude=tuple(exclude)),
    )


def _section(data: dict, name: str) -> dict:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping", name)
    return section


def _typed(section: dict, name: str, key: str, expected: type, default: Any) -> Any:
    value = section.get(key)
    if value is None:
        return default
    # bool is a subclass of int; `debounce_ms: true` is still a type error.
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigError(
            f"'{name}.{key}' must be of type {expected.__name__}", f"{name}.{key}"
        )
    return value
