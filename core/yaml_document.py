"""
Position-aware, read-only view of a YAML document.

PyYAML's composer produces a node graph where every node remembers where it
starts and ends in the source text. This module converts that graph into a
small tagged union (DocNull | DocScalar | DocSequence | DocMapping) and
resolves key paths against it, so that callers can reason about the document
with pattern matching instead of scattered isinstance checks, and so that the
editor can splice text at exact offsets.
"""

from dataclasses import dataclass
from typing import Sequence

import yaml

from core.exceptions import MalformedDocumentError

NULL_TAG = "tag:yaml.org,2002:null"


@dataclass(frozen=True)
class DocNull:
    """An empty or explicit null value (`key:`, `key: ~`, `key: null`)."""

    start: int
    end: int
    explicit: bool


@dataclass(frozen=True)
class DocScalar:
    value: str
    start: int
    end: int
    # None for plain scalars, otherwise one of ', ", | or >
    style: str | None


@dataclass(frozen=True)
class DocSequence:
    items: tuple["DocNode", ...]
    start: int
    end: int
    flow: bool


@dataclass(frozen=True)
class DocEntry:
    key: "DocNode"
    value: "DocNode"


@dataclass(frozen=True)
class DocMapping:
    entries: tuple[DocEntry, ...]
    start: int
    end: int
    flow: bool

    def get(self, key: str) -> DocEntry | None:
        """Return the first entry whose scalar key equals `key`."""
        for entry in self.entries:
            if isinstance(entry.key, DocScalar) and entry.key.value == key:
                return entry
        return None


DocNode = DocNull | DocScalar | DocSequence | DocMapping


@dataclass(frozen=True)
class Found:
    """
    The key path exists.

    Attributes:
        node: The value at the end of the key path.
        entry: The mapping entry holding `node`.
        parent: The mapping that contains `entry`.
    """

    node: DocNode
    entry: DocEntry
    parent: DocMapping


@dataclass(frozen=True)
class Missing:
    """
    The key path stops early.

    Exactly one of `parent` and `null_entry` is set: either `parent` is the
    deepest existing mapping, which lacks `remaining[0]`, or `null_entry` is an
    entry whose value is null where a mapping was expected. `null_parent` is the
    mapping containing `null_entry`.
    """

    remaining: tuple[str, ...]
    parent: DocMapping | None = None
    null_entry: DocEntry | None = None
    null_parent: DocMapping | None = None


Resolution = Found | Missing


def parse_document(text: str) -> DocNode:
    """
    Parse YAML text into a position-aware node tree.

    Args:
        text: The full document text.

    Returns:
        The root node. An empty document yields a DocNull.

    Raises:
        MalformedDocumentError: If the text is not valid YAML or holds more
            than one document.
    """
    try:
        node = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise MalformedDocumentError(f"Document is not valid YAML: {e}") from e

    if node is None:
        return DocNull(0, 0, explicit=False)
    return _convert(node)


def _convert(node: yaml.Node) -> DocNode:
    start = node.start_mark.index
    end = node.end_mark.index

    if isinstance(node, yaml.ScalarNode):
        if node.tag == NULL_TAG and node.style is None:
            return DocNull(start, end, explicit=node.value != "")
        return DocScalar(node.value, start, end, node.style)

    if isinstance(node, yaml.SequenceNode):
        return DocSequence(
            tuple(_convert(item) for item in node.value),
            start,
            end,
            flow=bool(node.flow_style),
        )

    if isinstance(node, yaml.MappingNode):
        return DocMapping(
            tuple(DocEntry(_convert(k), _convert(v)) for k, v in node.value),
            start,
            end,
            flow=bool(node.flow_style),
        )

    raise MalformedDocumentError(f"Unsupported YAML node: {type(node).__name__}")


def resolve(root: DocNode, key_path: Sequence[str]) -> Resolution:
    """
    Walk `key_path` through nested mappings.

    Absent keys and null values along the way are not errors: they produce a
    Missing result that tells the caller where structure has to be created.

    Args:
        root: The document root.
        key_path: Non-empty sequence of mapping keys.

    Returns:
        Found when every key exists, Missing otherwise.

    Raises:
        MalformedDocumentError: If the root is not a mapping, or a value along
            the path is a scalar or a list where a mapping is required.
    """
    if not key_path:
        raise ValueError("key_path must contain at least one key")

    if not isinstance(root, DocMapping):
        raise MalformedDocumentError("Document root is not a mapping", key_path)

    current: DocMapping = root
    for depth, key in enumerate(key_path):
        entry = current.get(key)
        if entry is None:
            return Missing(remaining=tuple(key_path[depth:]), parent=current)

        if depth == len(key_path) - 1:
            return Found(node=entry.value, entry=entry, parent=current)

        match entry.value:
            case DocMapping() as child:
                current = child
            case DocNull():
                return Missing(
                    remaining=tuple(key_path[depth + 1 :]),
                    null_entry=entry,
                    null_parent=current,
                )
            case _:
                dotted = ".".join(key_path[: depth + 1])
                raise MalformedDocumentError(f"'{dotted}' is not a mapping", key_path)

    raise AssertionError("unreachable")


def item_value(item: DocNode) -> str | None:
    """
    The string a list item declares.

    Scalars declare their own value; mapping items (`- path: x`) declare the
    value of their `path` key. Anything else declares nothing.
    """
    match item:
        case DocScalar(value=value):
            return value
        case DocMapping() as mapping:
            entry = mapping.get("path")
            if entry is not None and isinstance(entry.value, DocScalar):
                return entry.value.value
    return None


def list_values(resolution: Resolution, key_path: Sequence[str]) -> list[str]:
    """
    Values declared by the list a resolution points at.

    Returns an empty list when the path is missing or its value is null.

    Raises:
        MalformedDocumentError: If the value at the path is not a list.
    """
    match resolution:
        case Missing():
            return []
        case Found(node=DocNull()):
            return []
        case Found(node=DocSequence(items=items)):
            return [v for v in (item_value(i) for i in items) if v is not None]
        case _:
            dotted = ".".join(key_path)
            raise MalformedDocumentError(f"'{dotted}' is not a list", key_path)


def item_index(sequence: DocSequence, value: str) -> int | None:
    """Index of the first item declaring `value`, or None."""
    for index, item in enumerate(sequence.items):
        if item_value(item) == value:
            return index
    return None
