"""Tests for the text outline parser."""

from __future__ import annotations

import pytest

from reportsmith.outline.parser import extract_name, infer_indent_unit, line_level, parse_text_outline
from reportsmith.outline.tree import collect_ids, duplicate_ids


def _shape(sections) -> list:
    return [(s.name, _shape(s.sub_sections)) for s in sections]


def test_parse_numbered_outline() -> None:
    """It should keep embedded numbering and nest by indentation."""

    text = "1. Introduction\n  1.1 Background\n  1.2 Problem Statement\n2. Methodology\n"

    sections = parse_text_outline(text)

    assert _shape(sections) == [
        ("1. Introduction", [("1.1 Background", []), ("1.2 Problem Statement", [])]),
        ("2. Methodology", []),
    ]
    assert "subSections" not in sections[1].to_payload()
    assert "subSections" not in sections[0].to_payload()["subSections"][0]


@pytest.mark.parametrize("text", ["", "   ", "\n\n\t\n"])
def test_parse_empty_input_returns_empty_list(text: str) -> None:
    """It should return an empty forest for empty input instead of raising."""

    assert parse_text_outline(text) == []


def test_parse_tab_indentation() -> None:
    """It should use one tab per level when any line is tab-indented."""

    text = "Design\n\tArchitecture\n\t\tDatabase\n\tAPI\nTesting"

    assert _shape(parse_text_outline(text)) == [
        ("Design", [("Architecture", [("Database", [])]), ("API", [])]),
        ("Testing", []),
    ]


def test_parse_four_space_indentation() -> None:
    """It should infer a 4-space unit from the first indented line."""

    text = "A\n    B\n        C\n    D"

    assert _shape(parse_text_outline(text)) == [("A", [("B", [("C", [])]), ("D", [])])]


def test_parse_strips_bullet_markers() -> None:
    """It should strip one leading bullet or `N)` marker per line."""

    text = "- Intro\n  * Background\n  + Scope\n1) Methods\n  2) Survey"

    assert _shape(parse_text_outline(text)) == [
        ("Intro", [("Background", []), ("Scope", [])]),
        ("Methods", [("Survey", [])]),
    ]


def test_parse_strips_paren_numbers_but_keeps_dotted_numbers() -> None:
    """It should treat `1)` as a list marker and `1.` as part of the name."""

    assert _shape(parse_text_outline("1) Foo\n1. Foo\n2.3 Bar")) == [
        ("Foo", []),
        ("1. Foo", []),
        ("2.3 Bar", []),
    ]


def test_parse_skips_marker_only_and_blank_lines() -> None:
    """It should treat blank and marker-only lines as noise."""

    text = "-\n- A\n\n  *\n  - B\n\n1.\n- C"

    assert _shape(parse_text_outline(text)) == [("A", [("B", [])]), ("C", [])]


def test_parse_handles_level_jumps_and_dedents() -> None:
    """It should attach deeper jumps to the nearest shallower item."""

    text = "A\n      B\n  C\nD\n  E"

    assert _shape(parse_text_outline(text)) == [
        ("A", [("B", []), ("C", [])]),
        ("D", [("E", [])]),
    ]


def test_parse_assigns_unique_ids_and_prompts() -> None:
    """It should give each parsed line its own id and a prompt naming its parent."""

    sections = parse_text_outline("Results\n  Accuracy\n  Accuracy")

    assert duplicate_ids(sections) == []
    assert len(collect_ids(sections)) == 3
    child = sections[0].sub_sections[0]
    assert child.prompt == 'Generate content for "Accuracy" as part of "Results".'
    assert sections[0].prompt == 'Generate content for "Results".'


@pytest.mark.parametrize(
    ("lines", "expected"),
    [
        (["A", "B"], 2),
        (["A", "  B"], 2),
        (["A", "    B"], 4),
        (["A", "      B"], 2),
        (["A", "   B"], 3),
        (["A", "  B", "\tC"], "tab"),
    ],
)
def test_infer_indent_unit(lines: list[str], expected: object) -> None:
    """It should prefer tabs, then multiples of 4, then 2, then the exact run."""

    assert infer_indent_unit(lines) == expected


def test_line_level_and_extract_name() -> None:
    """It should compute levels and strip markers."""

    assert line_level("      x", 2) == 3
    assert line_level("\t\tx", "tab") == 2
    assert extract_name("  - Conclusion  ") == "Conclusion"
    assert extract_name("3) Results") == "Results"
    assert extract_name("2.1 Dataset") == "2.1 Dataset"
    assert extract_name("-") == ""
    assert extract_name("1.2") == ""
    assert extract_name("2024") == "2024"
