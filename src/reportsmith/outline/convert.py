"""Candidate outline normalization and conversion to sections.

The flow for generator output is: `normalize_candidate` (decode + validate, never raises for
bad data) and then `sections_from_outline` (assign ids and prompts).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from reportsmith.logging import get_logger
from reportsmith.models.outline import GeneratedOutline, OutlineSection
from reportsmith.models.section import (
    Section,
    default_prompt,
    is_specialized_name,
    strip_type_prefix,
)
from reportsmith.outline.validator import validate_outline
from reportsmith.utils.payload import extract_json

logger = get_logger(__name__)

FALLBACK_SECTION_NAMES = (
    "1. Introduction",
    "2. Methodology",
    "3. Implementation",
    "4. Results",
    "5. Conclusion",
    "References",
)


@dataclass(frozen=True)
class CandidateResult:
    """Outcome of normalizing generator output.

    On failure `outline` is None and `reason` is a readable message the caller may show,
    for instance through `error_section`.
    """

    outline: GeneratedOutline | None
    reason: str | None = None
    empty: bool = False

    @property
    def ok(self) -> bool:
        return self.outline is not None


def normalize_candidate(payload: Any, max_depth: int | None = None) -> CandidateResult:
    """Decode and validate a candidate forest.

    Args:
        payload: A JSON string (optionally fenced), a `{"sections": [...]}` mapping, a bare
            list of sections, or a `GeneratedOutline`.
        max_depth: Optional nesting ceiling passed to the validator.
    """

    data = payload
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        if not payload.strip():
            return CandidateResult(outline=GeneratedOutline(), empty=True)
        data = extract_json(payload)
        if data is None:
            snippet = payload.strip()[:100]
            return CandidateResult(outline=None, reason=f"Outline output was not valid JSON. Output: {snippet}")

    result = validate_outline(data, max_depth)
    if not result.ok:
        return CandidateResult(outline=None, reason=result.reason)
    if result.empty:
        return CandidateResult(outline=GeneratedOutline(), empty=True)

    if isinstance(data, GeneratedOutline):
        return CandidateResult(outline=data)
    nodes = data["sections"] if isinstance(data, Mapping) else data
    outline = GeneratedOutline(sections=[_as_outline_section(node) for node in nodes])
    return CandidateResult(outline=outline)


def _as_outline_section(node: Any) -> OutlineSection:
    if isinstance(node, OutlineSection):
        return node
    if isinstance(node, BaseModel):
        node = node.model_dump(by_alias=True)
    return OutlineSection.model_validate(node)


def error_section(reason: str) -> Section:
    """Build the inline placeholder section used to display a failure."""

    name = reason if reason.lower().startswith("error:") else f"Error: {reason}"
    return Section(name=name)


def fallback_outline() -> GeneratedOutline:
    """A generic report outline for when generation fails."""

    return GeneratedOutline(sections=[OutlineSection(name=name) for name in FALLBACK_SECTION_NAMES])


def ensure_default_sub_section(section: Section, numbering: str, suffix: str = "Overview") -> Section:
    """Give a plain content section without children a single "<n>.1 Overview" child.

    Specialized sections (diagrams, figures, tables) and sections that already have
    children are returned unchanged.
    """

    if is_specialized_name(section.name) or section.sub_sections:
        return section
    child_name = f"{numbering}.1 {suffix}"
    child = Section(
        name=child_name,
        prompt=(
            f'Generate an overview or main content for the "{section.name}" section, '
            f'specifically focusing on what would be covered in "{child_name}".'
        ),
    )
    return section.model_copy(update={"sub_sections": [child]})


def section_prompt(
    name: str,
    *,
    parent_name: str | None = None,
    project_title: str = "",
    project_context: str = "",
) -> str:
    """Prompt for a section created from a generated outline."""

    if is_specialized_name(name):
        return f"Generate Mermaid code for: {strip_type_prefix(name)}"
    if parent_name is None and project_title:
        context = project_context or "[No context provided by user]"
        return f'Generate the {name} section for the project titled "{project_title}". Context: {context}.'
    return default_prompt(name, parent_name)


def sections_from_outline(
    outline: GeneratedOutline | Sequence[OutlineSection],
    *,
    project_title: str = "",
    project_context: str = "",
    ensure_overview: bool = True,
    max_depth: int | None = None,
    overview_suffix: str = "Overview",
) -> list[Section]:
    """Convert an accepted candidate forest into sections with fresh ids.

    When `ensure_overview` is set and the ceiling allows children, top-level leaves get a
    default overview child (see `ensure_default_sub_section`).
    """

    nodes = outline.sections if isinstance(outline, GeneratedOutline) else list(outline)
    add_overview = ensure_overview and (max_depth is None or max_depth > 0)

    sections: list[Section] = []
    for index, node in enumerate(nodes):
        section = _convert(node, None, project_title, project_context)
        if add_overview:
            section = ensure_default_sub_section(section, str(index + 1), overview_suffix)
        sections.append(section)
    logger.debug("sections_from_outline: converted %d top-level sections", len(sections))
    return sections


def _convert(
    node: OutlineSection,
    parent_name: str | None,
    project_title: str,
    project_context: str,
) -> Section:
    name = node.name.strip()
    children = [_convert(child, name, project_title, project_context) for child in node.sub_sections or []]
    return Section(
        name=name,
        prompt=section_prompt(
            name,
            parent_name=parent_name,
            project_title=project_title,
            project_context=project_context,
        ),
        sub_sections=children,
    )
