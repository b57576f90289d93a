"""Text outline parser.

Turns free-form indented text (one item per line, optional bullet markers) into a section
forest. Blank lines carry no structure. Indentation decides nesting:

- any tab in the leading whitespace switches the whole text to tab mode (one tab = one level);
- otherwise the first indented line sets the unit: 4 when its run is a multiple of 4, else 2
  when even, else the exact run length; with no indented line the unit is 2 spaces.

A single leading `-`, `*`, `+` or `1)` marker is stripped. Dotted numbers such as `1.` or
`1.2` are embedded numbering and stay part of the name.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from reportsmith.logging import get_logger
from reportsmith.models.section import Section, default_prompt

logger = get_logger(__name__)

IndentUnit = int | Literal["tab"]

DEFAULT_INDENT = 2

_MARKER_RE = re.compile(r"^(?:[-*+]|\d+\))(?:\s+|$)")
_BARE_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)*\.$|^\d+(?:\.\d+)+$")


@dataclass
class _Item:
    level: int
    name: str
    children: list["_Item"] = field(default_factory=list)


def _leading(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def infer_indent_unit(lines: Sequence[str]) -> IndentUnit:
    """Infer the indentation unit of non-blank lines."""

    if any("\t" in _leading(line) for line in lines):
        return "tab"
    for line in lines:
        run = len(_leading(line))
        if run == 0:
            continue
        if run % 4 == 0:
            return 4
        if run % 2 == 0:
            return 2
        return run
    return DEFAULT_INDENT


def line_level(line: str, unit: IndentUnit) -> int:
    """Nesting level of a line under the given unit."""

    leading = _leading(line)
    if unit == "tab":
        return leading.count("\t")
    return len(leading) // unit


def extract_name(line: str) -> str:
    """Strip one list marker and surrounding whitespace; "" when nothing is left."""

    text = line.strip()
    text = _MARKER_RE.sub("", text, count=1).strip()
    if _BARE_NUMBER_RE.match(text):
        return ""
    return text


def parse_text_outline(text: str) -> list[Section]:
    """Parse an indented text outline into a section forest.

    Empty or unparseable text yields an empty list; this function does not raise for
    data reasons.
    """

    if not text or not text.strip():
        return []

    lines = [line.rstrip() for line in text.splitlines() if line.strip()]
    unit = infer_indent_unit(lines)

    roots: list[_Item] = []
    stack: list[_Item] = []
    for line in lines:
        name = extract_name(line)
        if not name:
            logger.debug("parse_text_outline: skipping marker-only line %r", line)
            continue
        item = _Item(level=line_level(line, unit), name=name)
        while stack and stack[-1].level >= item.level:
            stack.pop()
        if stack:
            stack[-1].children.append(item)
        else:
            roots.append(item)
        stack.append(item)

    sections = [_to_section(item, None) for item in roots]
    logger.debug("parse_text_outline: %d top-level sections (indent unit %s)", len(sections), unit)
    return sections


def _to_section(item: _Item, parent_name: str | None) -> Section:
    children = [_to_section(child, item.name) for child in item.children]
    return Section(
        name=item.name,
        prompt=default_prompt(item.name, parent_name),
        sub_sections=children,
    )
