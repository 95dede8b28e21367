"""
Tests for the format-preserving list editor.

Tests cover:
- add_list_item: block and flow lists, null and missing sections, quoting
- remove_list_item: middle/last/only element, flow lists, map-form items
- formatting preservation: comments, CRLF, missing final newline
- malformed input: scalar sections, non-mapping roots
"""

import pytest
import yaml

from core.document_editor import add_list_item, remove_list_item
from core.exceptions import MalformedDocumentError

SECTION = ("flutter", "assets")


def assets_of(text: str) -> list:
    return yaml.safe_load(text)["flutter"]["assets"]


# ============================================================================
# Tests for add_list_item
# ============================================================================


@pytest.mark.unit
def test_add_appends_to_block_list():
    """Should append the value as a new last item with the same indentation."""
    text = "flutter:\n  assets:\n    - assets/a.png\n"

    result = add_list_item(text, SECTION, "assets/b.png")

    assert result == "flutter:\n  assets:\n    - assets/a.png\n    - assets/b.png\n"


@pytest.mark.unit
def test_add_appends_to_indentless_block_list():
    """Should keep the dash in the same column for indentless lists."""
    text = "flutter:\n  assets:\n  - assets/a.png\nname: app\n"

    result = add_list_item(text, SECTION, "assets/b.png")

    assert result == "flutter:\n  assets:\n  - assets/a.png\n  - assets/b.png\nname: app\n"


@pytest.mark.unit
def test_add_fills_empty_flow_list():
    """Should insert into an empty flow list."""
    text = "flutter:\n  assets: []\n"

    result = add_list_item(text, SECTION, "assets/images/logo.png")

    assert result == "flutter:\n  assets: [assets/images/logo.png]\n"


@pytest.mark.unit
def test_add_appends_to_flow_list():
    """Should append after the last flow item."""
    text = "flutter:\n  assets: [assets/a.png]\n"

    result = add_list_item(text, SECTION, "assets/b.png")

    assert result == "flutter:\n  assets: [assets/a.png, assets/b.png]\n"


@pytest.mark.unit
def test_add_is_noop_when_value_present():
    """Adding an existing value should return the text unchanged."""
    text = "flutter:\n  assets:\n    - assets/a.png\n"

    assert add_list_item(text, SECTION, "assets/a.png") is text


@pytest.mark.unit
def test_add_twice_equals_add_once():
    """Adding the same value twice should equal adding it once."""
    text = "flutter:\n  assets:\n    - assets/a.png\n"

    once = add_list_item(text, SECTION, "assets/b.png")
    twice = add_list_item(once, SECTION, "assets/b.png")

    assert twice == once


@pytest.mark.unit
def test_add_replaces_null_list():
    """A key with no value should become a one-element block list."""
    text = "flutter:\n  assets:\n  uses-material-design: true\n"

    result = add_list_item(text, SECTION, "assets/a.png")

    assert assets_of(result) == ["assets/a.png"]
    assert "  uses-material-design: true\n" in result


@pytest.mark.unit
def test_add_replaces_explicit_null():
    """`assets: ~` should be replaced, not appended to."""
    text = "flutter:\n  assets: ~\n"

    result = add_list_item(text, SECTION, "assets/a.png")

    assert "~" not in result
    assert assets_of(result) == ["assets/a.png"]


@pytest.mark.unit
def test_add_creates_missing_list_key():
    """Should add the list key under an existing parent mapping."""
    text = "name: app\nflutter:\n  uses-material-design: true\n"

    result = add_list_item(text, SECTION, "assets/a.png")

    assert result == (
        "name: app\n"
        "flutter:\n"
        "  uses-material-design: true\n"
        "  assets:\n"
        "    - assets/a.png\n"
    )


@pytest.mark.unit
def test_add_creates_missing_parent_section():
    """Should create the whole section when the parent key is absent."""
    text = "name: app\nversion: 1.0.0\n"

    result = add_list_item(text, SECTION, "assets/a.png")

    assert result == "name: app\nversion: 1.0.0\nflutter:\n  assets:\n    - assets/a.png\n"


@pytest.mark.unit
def test_add_fills_null_parent_section():
    """`flutter:` with no value should get the nested list."""
    text = "name: app\nflutter:\n"

    result = add_list_item(text, SECTION, "assets/a.png")

    assert result == "name: app\nflutter:\n  assets:\n    - assets/a.png\n"


@pytest.mark.unit
def test_add_uses_document_indentation():
    """New nested keys should follow the document's indentation step."""
    text = "environment:\n    sdk: '>=3.0.0'\n"

    result = add_list_item(text, SECTION, "assets/a.png")

    assert result.endswith("flutter:\n    assets:\n        - assets/a.png\n")


@pytest.mark.unit
def test_add_copies_quote_style_of_last_item():
    """A new item should be quoted like the item before it."""
    text = "flutter:\n  assets:\n    - \"assets/a.png\"\n"

    result = add_list_item(text, SECTION, "assets/b.png")

    assert result.endswith('    - "assets/b.png"\n')


@pytest.mark.unit
def test_add_quotes_values_that_need_it():
    """Values that would not read back as plain strings should be quoted."""
    text = "flutter:\n  assets: []\n"

    result = add_list_item(text, SECTION, "assets/#1: odd.png")

    assert assets_of(result) == ["assets/#1: odd.png"]


@pytest.mark.unit
def test_add_preserves_comments_and_blank_lines():
    """Comments around the list should be byte-identical after the edit."""
    text = (
        "name: app  # the name\n"
        "\n"
        "flutter:\n"
        "  # Declared assets\n"
        "  assets:\n"
        "    - assets/a.png  # first\n"
        "\n"
        "# trailing comment\n"
    )

    result = add_list_item(text, SECTION, "assets/b.png")

    assert result == (
        "name: app  # the name\n"
        "\n"
        "flutter:\n"
        "  # Declared assets\n"
        "  assets:\n"
        "    - assets/a.png  # first\n"
        "    - assets/b.png\n"
        "\n"
        "# trailing comment\n"
    )


@pytest.mark.unit
def test_add_preserves_crlf_line_endings():
    """Inserted lines should use the document's CRLF line endings."""
    text = "flutter:\r\n  assets:\r\n    - assets/a.png\r\n"

    result = add_list_item(text, SECTION, "assets/b.png")

    assert result == "flutter:\r\n  assets:\r\n    - assets/a.png\r\n    - assets/b.png\r\n"


@pytest.mark.unit
def test_add_keeps_missing_final_newline():
    """A document without a final newline should not gain one."""
    text = "flutter:\n  assets:\n    - assets/a.png"

    result = add_list_item(text, SECTION, "assets/b.png")

    assert result == "flutter:\n  assets:\n    - assets/a.png\n    - assets/b.png"


@pytest.mark.unit
def test_add_to_list_with_map_items():
    """Map-form items (`- path: ...`) should count as declared values."""
    text = "flutter:\n  assets:\n    - path: assets/a.png\n      flavors:\n        - dev\n"

    assert add_list_item(text, SECTION, "assets/a.png") is text

    result = add_list_item(text, SECTION, "assets/b.png")
    assert result.endswith("        - dev\n    - assets/b.png\n")


# ============================================================================
# Tests for remove_list_item
# ============================================================================


@pytest.mark.unit
def test_remove_middle_item():
    """Should remove exactly one line and keep the order of the others."""
    text = "flutter:\n  assets:\n    - a.png\n    - b.png\n    - c.png\n"

    result = remove_list_item(text, SECTION, "b.png")

    assert result == "flutter:\n  assets:\n    - a.png\n    - c.png\n"


@pytest.mark.unit
def test_remove_only_item_leaves_empty_list():
    """Removing the last element should leave `[]`, not delete the key."""
    text = "flutter:\n  # keep me\n  assets:\n    - assets/a.png\nname: app\n"

    result = remove_list_item(text, SECTION, "assets/a.png")

    assert result == "flutter:\n  # keep me\n  assets: []\nname: app\n"


@pytest.mark.unit
def test_remove_from_flow_list():
    """Should remove an item from a flow-style list."""
    text = "flutter:\n  assets: [a.png, b.png, c.png]\n"

    assert remove_list_item(text, SECTION, "a.png") == "flutter:\n  assets: [b.png, c.png]\n"
    assert remove_list_item(text, SECTION, "c.png") == "flutter:\n  assets: [a.png, b.png]\n"


@pytest.mark.unit
def test_remove_only_flow_item():
    """The end-to-end removal case: the flow list goes back to `[]`."""
    text = "flutter:\n  assets: [assets/images/logo.png]\n"

    result = remove_list_item(text, SECTION, "assets/images/logo.png")

    assert result == "flutter:\n  assets: []\n"


@pytest.mark.unit
def test_remove_absent_value_is_noop():
    """Removing a value that is not listed should return the text unchanged."""
    text = "flutter:\n  assets:\n    - a.png\n"

    assert remove_list_item(text, SECTION, "missing.png") is text


@pytest.mark.unit
def test_remove_from_missing_section_is_noop():
    """Removing from a missing section should return the text unchanged."""
    text = "name: app\n"

    assert remove_list_item(text, SECTION, "a.png") is text


@pytest.mark.unit
def test_remove_map_form_item():
    """A map-form item should be removed with all of its lines."""
    text = (
        "flutter:\n"
        "  assets:\n"
        "    - path: assets/a.png\n"
        "      flavors:\n"
        "        - dev\n"
        "    - assets/b.png\n"
    )

    result = remove_list_item(text, SECTION, "assets/a.png")

    assert result == "flutter:\n  assets:\n    - assets/b.png\n"


@pytest.mark.unit
def test_remove_last_item_without_final_newline():
    """Should remove the last item when the file has no trailing newline."""
    text = "flutter:\n  assets:\n    - a.png\n    - b.png"

    result = remove_list_item(text, SECTION, "b.png")

    assert result == "flutter:\n  assets:\n    - a.png"


@pytest.mark.unit
def test_add_then_remove_round_trips_list():
    """remove(add(doc, p), p) should declare the same list as doc."""
    text = "flutter:\n  assets:\n    - a.png\n    - b.png\n"

    result = remove_list_item(add_list_item(text, SECTION, "c.png"), SECTION, "c.png")

    assert result == text


# ============================================================================
# Tests for malformed documents
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("operation", [add_list_item, remove_list_item])
def test_scalar_section_is_malformed(operation):
    """A section holding a scalar should raise MalformedDocumentError."""
    text = "flutter:\n  assets: assets/a.png\n"

    with pytest.raises(MalformedDocumentError) as exc_info:
        operation(text, SECTION, "assets/a.png")

    assert exc_info.value.key_path == SECTION


@pytest.mark.unit
@pytest.mark.parametrize("text", ["- a\n- b\n", "just a string\n", ""])
def test_non_mapping_root_is_malformed(text):
    """A document whose root is not a mapping should be rejected."""
    with pytest.raises(MalformedDocumentError):
        add_list_item(text, SECTION, "a.png")


@pytest.mark.unit
def test_scalar_parent_is_malformed():
    """A scalar where a mapping is expected should be rejected."""
    with pytest.raises(MalformedDocumentError):
        add_list_item("flutter: yes\n", SECTION, "a.png")


@pytest.mark.unit
def test_invalid_yaml_is_malformed():
    """Unparseable YAML should raise MalformedDocumentError."""
    with pytest.raises(MalformedDocumentError):
        add_list_item("flutter: [unclosed\n", SECTION, "a.png")
