"""
Format-preserving edits of list fields in YAML documents.

The editor never re-serializes a document. It locates the target list with
`core.yaml_document`, splices the smallest possible span of text, and then
re-parses the result to prove that the targeted list changed exactly as
requested and nothing else changed. Comments, blank lines, key order,
indentation and quoting outside the spliced span are byte-identical.

Both operations are pure text-to-text transforms; writing the result is the
caller's job, so a failed edit can never leave a half-written file behind.
"""

import json
from typing import Any, Sequence

import yaml

from core.exceptions import MalformedDocumentError
from core.yaml_document import (
    DocEntry,
    DocMapping,
    DocNode,
    DocNull,
    DocScalar,
    DocSequence,
    Found,
    Missing,
    item_index,
    list_values,
    parse_document,
    resolve,
)

DEFAULT_INDENT = 2


def add_list_item(text: str, section_path: Sequence[str], value: str) -> str:
    """
    Append `value` to the list at `section_path`.

    If the value is already declared, the text is returned unchanged. Missing
    mappings along the path are created, an absent or null list becomes a
    one-element list, and an existing list gets the value as its last element.

    Args:
        text: The document text.
        section_path: Keys leading to the list, e.g. ("flutter", "assets").
        value: The string to append.

    Returns:
        The edited document text.

    Raises:
        MalformedDocumentError: If the root is not a mapping, the path runs
            through a non-mapping, the target is not a list, or the edit
            could not be applied cleanly.
    """
    root = parse_document(text)
    resolution = resolve(root, section_path)
    current = list_values(resolution, section_path)
    if value in current:
        return text

    newline = _newline(text)
    unit = _indent_unit(text, root)

    match resolution:
        case Found(node=DocSequence(flow=True) as seq):
            edited = _append_flow(text, seq, value)
        case Found(node=DocSequence() as seq):
            edited = _append_block(text, seq, value, newline)
        case Found(node=DocNull() as null, entry=entry, parent=parent):
            edited = _fill_null(text, entry, null, parent, (), value, newline, unit)
        case Missing(null_entry=DocEntry() as entry, null_parent=parent, remaining=rest):
            assert isinstance(entry.value, DocNull) and parent is not None
            edited = _fill_null(
                text, entry, entry.value, parent, rest, value, newline, unit
            )
        case Missing(parent=DocMapping() as parent, remaining=rest):
            edited = _insert_keys(text, parent, rest, value, newline, unit)
        case _:
            raise MalformedDocumentError(
                f"Cannot add to '{'.'.join(section_path)}'", section_path
            )

    _verify(text, edited, section_path, current + [value])
    return edited


def remove_list_item(text: str, section_path: Sequence[str], value: str) -> str:
    """
    Remove the first list element declaring `value`.

    If the value is not declared, the text is returned unchanged. Removing the
    last element leaves an empty list (`[]`) rather than deleting the key.

    Args:
        text: The document text.
        section_path: Keys leading to the list.
        value: The string to remove.

    Returns:
        The edited document text.

    Raises:
        MalformedDocumentError: Same conditions as add_list_item.
    """
    root = parse_document(text)
    resolution = resolve(root, section_path)
    current = list_values(resolution, section_path)
    if value not in current:
        return text

    assert isinstance(resolution, Found) and isinstance(resolution.node, DocSequence)
    seq = resolution.node
    index = item_index(seq, value)
    assert index is not None

    if seq.flow:
        edited = _remove_flow(text, seq, index)
    else:
        edited = _remove_block(text, seq, index, resolution.entry)

    expected = list(current)
    expected.remove(value)
    _verify(text, edited, section_path, expected)
    return edited


# ---------------------------------------------------------------------------
# Appending
# ---------------------------------------------------------------------------


def _append_block(text: str, seq: DocSequence, value: str, newline: str) -> str:
    last = seq.items[-1]
    dash_col = _column(text, seq.start)
    dash = _dash_index(text, last.start)
    gap = text[dash + 1 : last.start] if dash is not None else " "
    if not gap or gap.strip():
        gap = " "

    rendered = _render_scalar(value, _style_of(last), flow=False)
    line = " " * dash_col + "-" + gap + rendered
    return _insert_lines(text, _after_line(text, _content_end(last)), [line], newline)


def _append_flow(text: str, seq: DocSequence, value: str) -> str:
    close = seq.end - 1
    if text[close] != "]":
        raise MalformedDocumentError("Unterminated flow sequence")

    if not seq.items:
        rendered = _render_scalar(value, None, flow=True)
        return text[:close] + rendered + text[close:]

    last = seq.items[-1]
    rendered = _render_scalar(value, _style_of(last), flow=True)
    pos = _content_end(last)
    return text[:pos] + ", " + rendered + text[pos:]


def _fill_null(
    text: str,
    entry: DocEntry,
    null: DocNull,
    parent: DocMapping,
    remaining: Sequence[str],
    value: str,
    newline: str,
    unit: int,
) -> str:
    """Replace a null value with `remaining` nested keys ending in [value]."""
    if parent.flow:
        snippet = _flow_snippet(remaining, value)
        if null.explicit:
            return text[: null.start] + snippet + text[null.end :]
        return text[: null.start] + " " + snippet + text[null.start :]

    key_col = _column(text, entry.key.start)
    lines = _block_lines(remaining, value, key_col + unit, unit)
    anchor = null.end if null.explicit else entry.key.end
    edited = _insert_lines(text, _after_line(text, anchor), lines, newline)

    if null.explicit:
        start = null.start
        while start > 0 and edited[start - 1] in " \t":
            start -= 1
        edited = edited[:start] + edited[null.end :]
    return edited


def _insert_keys(
    text: str,
    parent: DocMapping,
    remaining: Sequence[str],
    value: str,
    newline: str,
    unit: int,
) -> str:
    """Add the missing keys `remaining` to an existing mapping."""
    if parent.flow:
        close = parent.end - 1
        if text[close] != "}":
            raise MalformedDocumentError("Unterminated flow mapping")
        snippet = f"{remaining[0]}: {_flow_snippet(remaining[1:], value)}"
        if not parent.entries:
            return text[:close] + snippet + text[close:]
        pos = _content_end(parent.entries[-1].value)
        return text[:pos] + ", " + snippet + text[pos:]

    indent = _column(text, parent.start)
    lines = _block_lines(remaining, value, indent, unit)
    last = parent.entries[-1].value
    return _insert_lines(text, _after_line(text, _content_end(last)), lines, newline)


def _block_lines(
    keys: Sequence[str], value: str, indent: int, unit: int
) -> list[str]:
    lines = [" " * (indent + i * unit) + f"{key}:" for i, key in enumerate(keys)]
    rendered = _render_scalar(value, None, flow=False)
    lines.append(" " * (indent + len(keys) * unit) + "- " + rendered)
    return lines


def _flow_snippet(keys: Sequence[str], value: str) -> str:
    snippet = f"[{_render_scalar(value, None, flow=True)}]"
    for key in reversed(keys):
        snippet = f"{{{key}: {snippet}}}"
    return snippet


# ---------------------------------------------------------------------------
# Removing
# ---------------------------------------------------------------------------


def _remove_block(text: str, seq: DocSequence, index: int, entry: DocEntry) -> str:
    item = seq.items[index]
    dash = _dash_index(text, item.start)
    if dash is None:
        raise MalformedDocumentError("Could not locate list item marker")

    start = _line_start(text, dash)
    if text[start:dash].strip():
        raise MalformedDocumentError("List item shares a line with other content")

    end = _after_line(text, _content_end(item))
    if end == len(text) and not text.endswith("\n") and start > 0:
        # Drop the preceding line break so the file keeps its missing final newline.
        start -= 2 if text[start - 2 : start] == "\r\n" else 1

    edited = text[:start] + text[end:]
    if len(seq.items) > 1:
        return edited

    colon = text.find(":", entry.key.end)
    if colon == -1 or colon >= start:
        raise MalformedDocumentError("Could not locate list key")
    return edited[: colon + 1] + " []" + edited[colon + 1 :]


def _remove_flow(text: str, seq: DocSequence, index: int) -> str:
    items = seq.items
    item = items[index]
    if len(items) == 1:
        return text[: seq.start + 1] + text[seq.end - 1 :]
    if index < len(items) - 1:
        return text[: item.start] + text[items[index + 1].start :]
    previous_end = _content_end(items[index - 1])
    return text[:previous_end] + text[_content_end(item) :]


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def _newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def _line_start(text: str, index: int) -> int:
    return text.rfind("\n", 0, index) + 1


def _column(text: str, index: int) -> int:
    return index - _line_start(text, index)


def _after_line(text: str, index: int) -> int:
    """Offset just past the line break ending the line that contains `index`."""
    if index > 0 and text[index - 1] == "\n":
        return index
    newline = text.find("\n", index)
    return len(text) if newline == -1 else newline + 1


def _insert_lines(text: str, pos: int, lines: list[str], newline: str) -> str:
    block = "".join(line + newline for line in lines)
    if pos == len(text) and text and not text.endswith("\n"):
        # No final newline: keep it that way.
        block = newline + block[: -len(newline)]
    return text[:pos] + block + text[pos:]


def _dash_index(text: str, item_start: int) -> int | None:
    """Offset of the "-" introducing a block sequence item."""
    i = item_start - 1
    while i >= 0 and text[i] in " \t":
        i -= 1
    if i >= 0 and text[i] == "-":
        return i
    return None


def _content_end(node: DocNode) -> int:
    """
    Offset just past the last character that belongs to `node`.

    Block collections report their end at the next token, which can lie past
    trailing comments, so they are measured by their last child instead.
    """
    match node:
        case DocSequence(flow=False, items=items) if items:
            return _content_end(items[-1])
        case DocMapping(flow=False, entries=entries) if entries:
            return _content_end(entries[-1].value)
    return node.end


def _style_of(node: DocNode) -> str | None:
    if isinstance(node, DocScalar) and node.style in ("'", '"'):
        return node.style
    return None


def _render_scalar(value: str, style: str | None, flow: bool) -> str:
    """
    Render `value` as a YAML scalar that reads back as exactly `value`.

    The preferred quote style is tried first, then plain, single-quoted and
    double-quoted forms.
    """
    single = "'" + value.replace("'", "''") + "'"
    double = json.dumps(value, ensure_ascii=False)
    by_style = {None: value, "'": single, '"': double}

    candidates = [by_style[style], value, single, double]
    for candidate in candidates:
        if _reads_back(candidate, value, flow):
            return candidate
    return double


def _reads_back(candidate: str, value: str, flow: bool) -> bool:
    probe = f"[{candidate}]" if flow else f"- {candidate}"
    try:
        return yaml.safe_load(probe) == [value]
    except yaml.YAMLError:
        return False


def _indent_unit(text: str, root: DocNode) -> int:
    """Indentation step used by the document's nested block mappings."""
    stack = [root]
    while stack:
        node = stack.pop()
        if not isinstance(node, DocMapping):
            continue
        for entry in node.entries:
            child = entry.value
            if isinstance(child, DocMapping) and not child.flow and child.entries:
                step = _column(text, child.start) - _column(text, entry.key.start)
                if step > 0:
                    return step
            stack.append(child)
    return DEFAULT_INDENT


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


def _verify(
    original: str, edited: str, section_path: Sequence[str], expected: list[str]
) -> None:
    """Re-parse the edit and prove only the targeted list changed."""
    try:
        actual = list_values(resolve(parse_document(edited), section_path), section_path)
    except MalformedDocumentError as e:
        raise MalformedDocumentError(
            f"Edit of '{'.'.join(section_path)}' produced an invalid document",
            section_path,
        ) from e

    if actual != expected:
        raise MalformedDocumentError(
            f"Edit of '{'.'.join(section_path)}' did not produce the expected list",
            section_path,
        )

    try:
        before = yaml.safe_load(original)
    except yaml.YAMLError:
        # Custom tags the safe constructor rejects; the list check above stands.
        return
    try:
        after = yaml.safe_load(edited)
    except yaml.YAMLError as e:
        raise MalformedDocumentError(
            f"Edit of '{'.'.join(section_path)}' produced an invalid document",
            section_path,
        ) from e
    if _without_section(before, section_path) != _without_section(after, section_path):
        raise MalformedDocumentError(
            f"Edit of '{'.'.join(section_path)}' changed unrelated content",
            section_path,
        )


def _without_section(data: Any, path: Sequence[str]) -> Any:
    """Copy of `data` without the list at `path` or mappings left empty by it."""
    if not isinstance(data, dict) or path[0] not in data:
        return data
    rest = dict(data)
    if len(path) == 1:
        rest.pop(path[0])
        return rest
    child = _without_section(rest[path[0]], path[1:])
    if child is None or child == {}:
        rest.pop(path[0])
    else:
        rest[path[0]] = child
    return rest
