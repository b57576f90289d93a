"""Outline tree operations: mutation engine, text parser, validator and conversions."""

from __future__ import annotations

from reportsmith.outline.convert import (
    CandidateResult,
    ensure_default_sub_section,
    error_section,
    fallback_outline,
    normalize_candidate,
    sections_from_outline,
)
from reportsmith.outline.parser import parse_text_outline
from reportsmith.outline.render import render_markdown, render_text_outline, table_of_contents
from reportsmith.outline.tree import (
    SectionEntry,
    TreeEditResult,
    append_section,
    compute_numbering,
    delete_by_id,
    find_by_id,
    insert_child,
    move_by_id,
    update_by_id,
    walk,
)
from reportsmith.outline.validator import OutlineViolation, ValidationResult, validate_outline

__all__ = [
    "CandidateResult",
    "OutlineViolation",
    "SectionEntry",
    "TreeEditResult",
    "ValidationResult",
    "append_section",
    "compute_numbering",
    "delete_by_id",
    "ensure_default_sub_section",
    "error_section",
    "fallback_outline",
    "find_by_id",
    "insert_child",
    "move_by_id",
    "normalize_candidate",
    "parse_text_outline",
    "render_markdown",
    "render_text_outline",
    "sections_from_outline",
    "table_of_contents",
    "update_by_id",
    "validate_outline",
    "walk",
]
