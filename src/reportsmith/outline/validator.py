"""Validation of candidate outline forests.

Candidate forests come from an external generator, usually as decoded JSON, so this module
accepts raw data (lists of mappings) as well as `Section` / `OutlineSection` models.
Validation is all-or-nothing: nothing is coerced or dropped, and the first violation found
in depth-first order is reported.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel

from reportsmith.logging import get_logger
from reportsmith.models.outline import GeneratedOutline

logger = get_logger(__name__)

ViolationRule = Literal[
    "root_not_sequence",
    "node_not_mapping",
    "missing_name",
    "sub_sections_not_sequence",
    "depth_exceeded",
]

_RULE_TEXT: dict[str, str] = {
    "root_not_sequence": "the outline must be a list of sections",
    "node_not_mapping": "each section must be an object",
    "missing_name": "section name must be a non-empty string",
    "sub_sections_not_sequence": "subSections must be a list",
    "depth_exceeded": "sections at the maximum depth cannot have sub-sections",
}

_MISSING = object()


@dataclass(frozen=True)
class OutlineViolation:
    """The first rule a candidate forest breaks."""

    rule: ViolationRule
    depth: int
    path: str
    name: str | None = None

    @property
    def message(self) -> str:
        where = f'section "{self.name}"' if self.name else "unnamed section"
        if self.rule == "root_not_sequence":
            return f"Outline rejected: {_RULE_TEXT[self.rule]}."
        return f"Outline rejected at {where} (item {self.path}, depth {self.depth}): {_RULE_TEXT[self.rule]}."


@dataclass(frozen=True)
class ValidationResult:
    """Accept/reject decision for a candidate forest.

    `empty` marks an accepted forest with no sections at all, which callers usually treat
    differently from a real outline.
    """

    ok: bool
    empty: bool = False
    violation: OutlineViolation | None = None

    @property
    def reason(self) -> str | None:
        return self.violation.message if self.violation else None


def validate_outline(forest: Any, max_depth: int | None = None) -> ValidationResult:
    """Validate a candidate forest.

    Args:
        forest: A list of sections (mappings or models), a `{"sections": [...]}` mapping,
            a `GeneratedOutline`, or None for "no content".
        max_depth: Optional nesting ceiling; 0 allows only top-level sections.

    Returns:
        ValidationResult describing acceptance or the first violation.

    Raises:
        ValueError: If `max_depth` is negative.
    """

    if max_depth is not None and max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")

    if forest is None:
        return ValidationResult(ok=True, empty=True)
    if isinstance(forest, GeneratedOutline):
        forest = forest.sections
    elif isinstance(forest, Mapping) and "sections" in forest:
        forest = forest["sections"]

    if not _is_sequence(forest):
        return _reject(OutlineViolation(rule="root_not_sequence", depth=0, path=""))
    if not forest:
        return ValidationResult(ok=True, empty=True)

    violation = _check_nodes(forest, 0, "", max_depth)
    if violation is not None:
        return _reject(violation)
    return ValidationResult(ok=True)


def _reject(violation: OutlineViolation) -> ValidationResult:
    logger.warning("%s", violation.message)
    return ValidationResult(ok=False, violation=violation)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _read_node(node: Any) -> tuple[Any, Any] | None:
    """Return `(name, sub_sections)`; sub_sections is `_MISSING` when undeclared."""

    if isinstance(node, BaseModel):
        name = getattr(node, "name", _MISSING)
        children = getattr(node, "sub_sections", None)
        return name, _MISSING if children is None else children
    if isinstance(node, Mapping):
        if "subSections" in node:
            children = node["subSections"]
        else:
            children = node.get("sub_sections", _MISSING)
        return node.get("name", _MISSING), children
    return None


def _check_nodes(
    nodes: Sequence[Any],
    depth: int,
    prefix: str,
    max_depth: int | None,
) -> OutlineViolation | None:
    for index, node in enumerate(nodes):
        path = f"{prefix}.{index + 1}" if prefix else str(index + 1)
        fields = _read_node(node)
        if fields is None:
            return OutlineViolation(rule="node_not_mapping", depth=depth, path=path)

        name, children = fields
        if not isinstance(name, str) or not name.strip():
            return OutlineViolation(rule="missing_name", depth=depth, path=path)

        if children is _MISSING:
            continue
        if not _is_sequence(children):
            return OutlineViolation(rule="sub_sections_not_sequence", depth=depth, path=path, name=name)
        if not children:
            continue
        if max_depth is not None and depth >= max_depth:
            return OutlineViolation(rule="depth_exceeded", depth=depth, path=path, name=name)

        violation = _check_nodes(children, depth + 1, path, max_depth)
        if violation is not None:
            return violation
    return None
