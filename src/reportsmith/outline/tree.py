"""Tree mutation engine for section forests.

Every operation takes a forest (the ordered list of top-level sections) and returns a new
forest. Subtrees that are not touched are shared by reference; every node on the path from
the root to a changed node is a fresh copy, so callers can detect changes by identity. When
an operation changes nothing, the input list itself is returned.

Missing ids are reported as values (`None`, `""`, the unchanged list or
`TreeEditResult.error`). Only programmer misuse raises.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from reportsmith.errors import ImmutableFieldError
from reportsmith.logging import get_logger
from reportsmith.models.section import Section, SectionDraft, SectionUpdate, default_prompt
from reportsmith.utils.clock import utcnow

logger = get_logger(__name__)

TreeEditError = Literal[
    "not_found",
    "parent_not_found",
    "max_depth_exceeded",
    "invalid_target",
]

IndexPath = tuple[int, ...]

_IMMUTABLE_FIELDS = ("id", "sub_sections", "subSections")


@dataclass
class TreeEditResult:
    """Result from structural edits."""

    sections: list[Section]
    section: Section | None = None
    error: TreeEditError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SectionEntry:
    """A section seen during a depth-first walk."""

    numbering: str
    depth: int
    section: Section
    parent_id: str | None = None


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def find_path(sections: Sequence[Section], section_id: str) -> IndexPath | None:
    """Return the sibling-index path to a section, or None.

    The search is depth-first, parents before children, in index order.
    """

    for index, section in enumerate(sections):
        if section.id == section_id:
            return (index,)
        sub_path = find_path(section.sub_sections, section_id)
        if sub_path is not None:
            return (index, *sub_path)
    return None


def _node_at(sections: Sequence[Section], path: IndexPath) -> Section:
    node = sections[path[0]]
    for index in path[1:]:
        node = node.sub_sections[index]
    return node


def find_by_id(sections: Sequence[Section], section_id: str) -> Section | None:
    """Find a section anywhere in the forest."""

    path = find_path(sections, section_id)
    if path is None:
        return None
    return _node_at(sections, path)


def find_parent(sections: Sequence[Section], section_id: str) -> Section | None:
    """Return the parent of a section; None for top-level or missing sections."""

    path = find_path(sections, section_id)
    if path is None or len(path) == 1:
        return None
    return _node_at(sections, path[:-1])


def depth_of(sections: Sequence[Section], section_id: str) -> int | None:
    """Depth of a section (0 for top level), or None when missing."""

    path = find_path(sections, section_id)
    if path is None:
        return None
    return len(path) - 1


def compute_numbering(sections: Sequence[Section], section_id: str) -> str:
    """Dotted 1-based numbering of a section, e.g. "2.1.3"; "" when missing."""

    path = find_path(sections, section_id)
    if path is None:
        return ""
    return ".".join(str(index + 1) for index in path)


def walk(sections: Sequence[Section]) -> Iterator[SectionEntry]:
    """Yield every section depth-first with its numbering and depth."""

    yield from _walk(sections, "", 0, None)


def _walk(
    sections: Sequence[Section],
    prefix: str,
    depth: int,
    parent_id: str | None,
) -> Iterator[SectionEntry]:
    for index, section in enumerate(sections):
        numbering = f"{prefix}.{index + 1}" if prefix else str(index + 1)
        yield SectionEntry(numbering=numbering, depth=depth, section=section, parent_id=parent_id)
        yield from _walk(section.sub_sections, numbering, depth + 1, section.id)


def collect_ids(sections: Sequence[Section]) -> list[str]:
    """All ids in walk order."""

    return [entry.section.id for entry in walk(sections)]


def duplicate_ids(sections: Sequence[Section]) -> list[str]:
    """Ids that occur more than once (empty for a valid forest)."""

    seen: set[str] = set()
    duplicates: list[str] = []
    for section_id in collect_ids(sections):
        if section_id in seen and section_id not in duplicates:
            duplicates.append(section_id)
        seen.add(section_id)
    return duplicates


def count_sections(sections: Sequence[Section]) -> int:
    return sum(1 for _ in walk(sections))


def tree_height(section: Section) -> int:
    """Number of levels below a section (0 for a leaf)."""

    if not section.sub_sections:
        return 0
    return 1 + max(tree_height(child) for child in section.sub_sections)


# ---------------------------------------------------------------------------
# Path copying
# ---------------------------------------------------------------------------


def _replace_at(
    sections: Sequence[Section],
    path: IndexPath,
    replace: Callable[[Section], Section],
) -> list[Section]:
    index, rest = path[0], path[1:]
    out = list(sections)
    node = sections[index]
    if rest:
        out[index] = node.model_copy(
            update={"sub_sections": _replace_at(node.sub_sections, rest, replace)}
        )
    else:
        out[index] = replace(node)
    return out


def _edit_children(
    sections: Sequence[Section],
    parent_path: IndexPath,
    edit: Callable[[list[Section]], list[Section]],
) -> list[Section]:
    """Apply `edit` to the child list under `parent_path` (empty path = top level)."""

    if not parent_path:
        return edit(list(sections))
    return _replace_at(
        sections,
        parent_path,
        lambda node: node.model_copy(update={"sub_sections": edit(list(node.sub_sections))}),
    )


def _build_section(draft: SectionDraft, parent_name: str | None) -> Section:
    return Section(
        name=draft.name,
        prompt=draft.prompt or default_prompt(draft.name, parent_name),
        content=draft.content,
        last_generated=draft.last_generated,
    )


def _as_draft(draft: SectionDraft | Mapping[str, Any]) -> SectionDraft:
    if isinstance(draft, SectionDraft):
        return draft
    return SectionDraft.model_validate(draft)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def update_by_id(
    sections: Sequence[Section],
    section_id: str,
    updates: Mapping[str, Any] | None = None,
    **fields: Any,
) -> list[Section]:
    """Merge fields into a section and stamp its `updated_at`.

    Args:
        sections: Forest to update.
        section_id: Target section id.
        updates: Fields to merge (`name`, `prompt`, `content`, `last_generated`).
        **fields: Same as `updates`, as keyword arguments.

    Returns:
        The updated forest, or `sections` itself when the id is missing.

    Raises:
        ImmutableFieldError: If `id` or `sub_sections` is part of the update.
        pydantic.ValidationError: For unknown fields or invalid values.
    """

    requested = {**(updates or {}), **fields}
    blocked = [key for key in requested if key in _IMMUTABLE_FIELDS]
    if blocked:
        raise ImmutableFieldError(blocked)
    changes = SectionUpdate.model_validate(requested).changes()

    path = find_path(sections, section_id)
    if path is None:
        logger.debug("update_by_id: section %s not found", section_id)
        return sections  # type: ignore[return-value]

    changes["updated_at"] = utcnow()
    return _replace_at(sections, path, lambda node: node.model_copy(update=changes))


def insert_child(
    sections: Sequence[Section],
    parent_id: str,
    draft: SectionDraft | Mapping[str, Any],
    *,
    max_depth: int | None = None,
) -> TreeEditResult:
    """Append a new section as the last child of `parent_id`.

    When `max_depth` is given, a parent already at that depth cannot receive children.
    """

    draft = _as_draft(draft)
    path = find_path(sections, parent_id)
    if path is None:
        logger.warning("insert_child: parent %s not found", parent_id)
        return TreeEditResult(sections=list(sections), error="parent_not_found")
    if max_depth is not None and len(path) - 1 >= max_depth:
        logger.warning(
            "insert_child: parent %s is at depth %d, ceiling is %d", parent_id, len(path) - 1, max_depth
        )
        return TreeEditResult(sections=list(sections), error="max_depth_exceeded")

    parent = _node_at(sections, path)
    child = _build_section(draft, parent.name)
    updated = _replace_at(
        sections,
        path,
        lambda node: node.model_copy(update={"sub_sections": [*node.sub_sections, child]}),
    )
    logger.debug("insert_child: added %s under %s", child.id, parent_id)
    return TreeEditResult(sections=updated, section=child)


def append_section(
    sections: Sequence[Section],
    draft: SectionDraft | Mapping[str, Any],
) -> TreeEditResult:
    """Append a new top-level section."""

    section = _build_section(_as_draft(draft), None)
    return TreeEditResult(sections=[*sections, section], section=section)


def delete_by_id(sections: Sequence[Section], section_id: str) -> list[Section]:
    """Remove a section and its whole subtree; a missing id is a no-op."""

    path = find_path(sections, section_id)
    if path is None:
        logger.debug("delete_by_id: section %s not found", section_id)
        return sections  # type: ignore[return-value]

    position = path[-1]
    return _edit_children(sections, path[:-1], lambda children: children[:position] + children[position + 1 :])


def move_by_id(
    sections: Sequence[Section],
    section_id: str,
    *,
    parent_id: str | None = None,
    index: int | None = None,
    max_depth: int | None = None,
) -> TreeEditResult:
    """Move a section (with its subtree and id) under a new parent.

    Args:
        sections: Forest to edit.
        section_id: Section to move.
        parent_id: New parent; None moves it to the top level.
        index: Position among the new siblings, clamped to the valid range; None appends.
        max_depth: Optional nesting ceiling the moved subtree must fit under.
    """

    path = find_path(sections, section_id)
    if path is None:
        return TreeEditResult(sections=list(sections), error="not_found")
    node = _node_at(sections, path)

    new_depth = 0
    if parent_id is not None:
        if parent_id == section_id or find_by_id(node.sub_sections, parent_id) is not None:
            return TreeEditResult(sections=list(sections), error="invalid_target")
        parent_path = find_path(sections, parent_id)
        if parent_path is None:
            return TreeEditResult(sections=list(sections), error="parent_not_found")
        new_depth = len(parent_path)

    if max_depth is not None and new_depth + tree_height(node) > max_depth:
        return TreeEditResult(sections=list(sections), error="max_depth_exceeded")

    detached = delete_by_id(sections, section_id)
    target_path: IndexPath = () if parent_id is None else find_path(detached, parent_id) or ()

    def place(children: list[Section]) -> list[Section]:
        position = len(children) if index is None else max(0, min(index, len(children)))
        children.insert(position, node)
        return children

    moved = _edit_children(detached, target_path, place)
    logger.debug("move_by_id: moved %s under %s", section_id, parent_id or "<root>")
    return TreeEditResult(sections=moved, section=node)
