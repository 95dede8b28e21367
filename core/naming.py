"""
Identifier derivation for generated code.

Turns asset file names into Dart member names: `my-icon@2x` becomes
`myIcon2x`, `8bit` becomes `_8bit`.
"""

import re
from typing import AbstractSet

_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_]")
_DELIMITERS = re.compile(r"[-_\s]+")

FALLBACK_IDENTIFIER = "asset"


def to_camel_case(text: str) -> str:
    """lowerCamelCase on hyphen, underscore and whitespace boundaries."""
    parts = [p for p in _DELIMITERS.split(text) if p]
    if not parts:
        return ""
    first, rest = parts[0], parts[1:]
    return first.lower() + "".join(p[0].upper() + p[1:].lower() for p in rest)


def to_pascal_case(text: str) -> str:
    camel = to_camel_case(text)
    return camel[:1].upper() + camel[1:]


def to_valid_identifier(name: str) -> str:
    """
    Derive an identifier from a file name without its extension.

    Characters outside letters, digits and underscore become underscores, the
    result is camel-cased on delimiter boundaries, and a leading digit gets an
    underscore prefix. Names with no usable characters fall back to "asset".
    """
    identifier = to_camel_case(_INVALID_CHARS.sub("_", name))
    if not identifier:
        return FALLBACK_IDENTIFIER
    if identifier[0].isdigit():
        identifier = f"_{identifier}"
    return identifier


def to_unique_identifier(name: str, used: AbstractSet[str]) -> str:
    """
    Derive an identifier that is not in `used`.

    On collision the smallest integer >= 2 that yields an unused name is
    appended: "icon", "icon2", "icon3", ...
    """
    base = to_valid_identifier(name)
    if base not in used:
        return base
    counter = 2
    while f"{base}{counter}" in used:
        counter += 1
    return f"{base}{counter}"
