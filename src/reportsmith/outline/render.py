"""Plain-text and markdown renderings of a section forest."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from reportsmith.models.section import Section
from reportsmith.outline.tree import walk

EMPTY_SECTION_PLACEHOLDER = "[Empty Section]"


@dataclass(frozen=True)
class TocEntry:
    numbering: str
    depth: int
    name: str
    section_id: str


def table_of_contents(sections: Sequence[Section]) -> list[TocEntry]:
    """Numbered entries for every section, depth-first."""

    return [
        TocEntry(
            numbering=entry.numbering,
            depth=entry.depth,
            name=entry.section.name,
            section_id=entry.section.id,
        )
        for entry in walk(sections)
    ]


def render_text_outline(sections: Sequence[Section], indent: str = "  ") -> str:
    """Render names as an indented outline.

    `parse_text_outline` reads the result back into the same shape, except for names the
    parser treats as markers: a leading `-`, `*`, `+` or `N)` is stripped and a name that
    is only a dotted number (`1.2`) is dropped. Names are not escaped.
    """

    if not indent or indent.strip():
        raise ValueError("indent must be non-empty whitespace")
    return "\n".join(f"{indent * entry.depth}{entry.section.name}" for entry in walk(sections))


def render_markdown(sections: Sequence[Section]) -> str:
    """Render headings and content, one `---` separated block per section.

    Top-level sections are `##` headings; each nesting level adds one `#`.
    """

    blocks = [
        f"{'#' * (entry.depth + 2)} {entry.section.name}\n\n"
        f"{entry.section.content or EMPTY_SECTION_PLACEHOLDER}\n"
        for entry in walk(sections)
    ]
    return "\n---\n\n".join(blocks)
