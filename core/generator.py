"""
Generation of the type-safe Dart asset reference file.

The generated file is a pure function of the asset files on disk: it is
rebuilt from a fresh scan on every call and overwritten as a whole. The
output contains no timestamps and is ordered by scan order within fixed
category groups, so two generations over the same files are byte-identical
and freshness can be checked by regenerating in memory and comparing.

Output shape (default class name):

    class Assets {
      Assets._();

      // Images
      static const String logo = 'assets/images/logo.png';

      static const List<String> values = [
        logo,
      ];
    }
"""

from dataclasses import dataclass, field
from itertools import groupby
from pathlib import Path
import re
from typing import Callable

from constants import (
    ASSET_EXTENSIONS,
    DART_RESERVED_WORDS,
    GENERATED_HEADER,
    GENERATED_VALUES_NAME,
)
from core.config import GenerateConfig
from core.exceptions import ConfigError
from core.file_io import FileReader, FileWriter, FilesystemFileReader, FilesystemFileWriter
from core.models import ScannedAsset
from core.naming import to_unique_identifier
from core.scanner import scan_assets
from models import AssetCategory

_DART_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

Scanner = Callable[[Path], list[ScannedAsset]]


@dataclass(frozen=True)
class Binding:
    identifier: str
    path: str
    category: AssetCategory


@dataclass
class GeneratedArtifact:
    """
    The logical content of the generated file.

    Attributes:
        class_name: Name of the generated class.
        bindings: One constant per asset, in emission order (grouped by
            category, scan order within a group).
    """

    class_name: str
    bindings: list[Binding] = field(default_factory=list)

    @property
    def identifiers(self) -> list[str]:
        return [b.identifier for b in self.bindings]

    def as_mapping(self) -> dict[str, str]:
        return {b.identifier: b.path for b in self.bindings}

    def summary(self) -> str:
        """Human-readable counts per category, e.g. "2 images, 1 font"."""
        if not self.bindings:
            return "no assets"
        parts = []
        for category, group in _groups(self.bindings):
            label = ASSET_EXTENSIONS[category]["label"]
            count = len(group)
            parts.append(f"{count} {label}{'' if count == 1 else 's'}")
        return ", ".join(parts)


def build_artifact(assets: list[ScannedAsset], class_name: str) -> GeneratedArtifact:
    """
    Assign identifiers to scanned assets and group them by category.

    Identifiers are assigned in scan order, so on a collision the asset with
    the smaller path keeps the bare name. The aggregate list name and Dart
    reserved words are never handed out, nor is the class's own name.
    """
    used: set[str] = {GENERATED_VALUES_NAME, class_name, *DART_RESERVED_WORDS}
    named: list[Binding] = []
    for asset in assets:
        identifier = to_unique_identifier(asset.name, used)
        used.add(identifier)
        named.append(Binding(identifier, asset.relative_path, asset.category))

    order = {category: i for i, category in enumerate(ASSET_EXTENSIONS)}
    # sorted() is stable, so scan order is kept inside each category.
    grouped = sorted(named, key=lambda b: order[b.category])
    return GeneratedArtifact(class_name=class_name, bindings=grouped)


def render_artifact(artifact: GeneratedArtifact) -> str:
    """Render an artifact as Dart source."""
    name = artifact.class_name
    lines = [GENERATED_HEADER, f"class {name} {{", f"  {name}._();", ""]

    for category, group in _groups(artifact.bindings):
        lines.append(f"  // {category.value}")
        lines.extend(
            f"  static const String {b.identifier} = {_dart_string(b.path)};"
            for b in group
        )
        lines.append("")

    if artifact.bindings:
        lines.append(f"  static const List<String> {GENERATED_VALUES_NAME} = [")
        lines.extend(f"    {identifier}," for identifier in artifact.identifiers)
        lines.append("  ];")
    else:
        lines.append(f"  static const List<String> {GENERATED_VALUES_NAME} = [];")

    lines.append("}")
    return "\n".join(lines) + "\n"


def _groups(bindings: list[Binding]) -> list[tuple[AssetCategory, list[Binding]]]:
    return [
        (category, list(group))
        for category, group in groupby(bindings, key=lambda b: b.category)
    ]


def _dart_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("$", "\\$")
    return f"'{escaped}'"


class CodeGenerator:
    """
    Writes and checks the generated asset file for one project.

    Attributes:
        project_root: The Flutter project root.
        config: Output path and class name.
    """

    def __init__(
        self,
        project_root: Path,
        config: GenerateConfig | None = None,
        scanner: Scanner | None = None,
        reader: FileReader | None = None,
        writer: FileWriter | None = None,
    ):
        self.project_root = project_root
        self.config = config if config is not None else GenerateConfig()
        if not _DART_IDENTIFIER.match(self.config.class_name):
            raise ConfigError(
                f"generate.class_name is not a valid identifier: {self.config.class_name!r}",
                "generate.class_name",
            )
        self._scan = scanner if scanner is not None else scan_assets
        self._reader = reader if reader is not None else FilesystemFileReader()
        self._writer = writer if writer is not None else FilesystemFileWriter()

    @property
    def output_path(self) -> Path:
        return self.project_root / self.config.output

    def build(self) -> GeneratedArtifact:
        """Scan the project and build the artifact in memory."""
        return build_artifact(self._scan(self.project_root), self.config.class_name)

    def render(self) -> str:
        """Scan the project and render the generated file in memory."""
        return render_artifact(self.build())

    def write(self, artifact: GeneratedArtifact) -> Path:
        """
        Render `artifact` and overwrite the output file with it.

        Raises:
            FileWriteError: If the output cannot be written.
        """
        self._writer.write_file(self.output_path, render_artifact(artifact))
        return self.output_path

    def generate(self) -> Path:
        """
        Regenerate the output file from a fresh scan.

        Returns:
            Path: The written file.

        Raises:
            OSError: If scanning fails.
            FileWriteError: If the output cannot be written.
        """
        return self.write(self.build())

    def is_up_to_date(self) -> bool:
        """
        Return True if the file on disk equals a fresh in-memory generation.

        Returns False when the output file does not exist yet.

        Raises:
            FileReadError: If the output exists but cannot be read.
        """
        if not self.output_path.is_file():
            return False
        return self._reader.read_file(self.output_path) == self.render()
