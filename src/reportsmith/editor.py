"""Project editing session.

`ProjectEditor` applies user actions to a `Project` through the tree engine and keeps an
undo history. It never notifies anyone itself: every action returns an `EditOutcome` the
caller can turn into a message, a disabled control or a log line.

The nesting ceiling (`Project.max_sub_sections_per_section`) is passed to every structural
edit, so a section at the ceiling can never receive children through the editor. Lowering
the ceiling below the depth of the current tree is refused.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from reportsmith.config import Settings
from reportsmith.history import HistoryManager
from reportsmith.logging import get_logger, project_context
from reportsmith.models.project import Project
from reportsmith.models.section import Section, SectionDraft
from reportsmith.outline.convert import (
    ensure_default_sub_section,
    normalize_candidate,
    sections_from_outline,
)
from reportsmith.outline.tree import (
    append_section,
    compute_numbering,
    delete_by_id,
    find_by_id,
    find_parent,
    find_path,
    insert_child,
    move_by_id,
    update_by_id,
)
from reportsmith.outline.validator import validate_outline
from reportsmith.utils.clock import utcnow

logger = get_logger(__name__)

DETAIL_FIELDS = frozenset(
    {
        "title",
        "project_type",
        "project_context",
        "team_details",
        "institute_name",
        "college_info",
        "guide_name",
        "hod_name",
        "subject",
        "semester",
        "branch",
        "min_sections",
        "max_sub_sections_per_section",
    }
)
_TUNABLE_FIELDS = ("min_sections", "max_sub_sections_per_section")

_BLANK_NAME_MESSAGE = "Section name cannot be empty."

_TREE_ERROR_MESSAGES = {
    "not_found": "Section not found.",
    "parent_not_found": "Parent section not found.",
    "max_depth_exceeded": "Maximum sub-section depth reached.",
    "invalid_target": "A section cannot be moved into its own sub-sections.",
}


@dataclass(frozen=True)
class EditOutcome:
    """Result of an editing action.

    Attributes:
        ok: Whether the action changed the project.
        message: Human-readable summary suitable for a notification or a log line.
        section_id: The section created or affected, when there is one.
    """

    ok: bool
    message: str
    section_id: str | None = None


class ProjectEditor:
    """Edits one project and keeps its undo history."""

    def __init__(
        self,
        project: Project,
        *,
        history: HistoryManager | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._project = project
        self._history = history or HistoryManager(self._settings.max_history_length)
        self._pending = False
        if self._history.current is None:
            self._history.record(project)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def project(self) -> Project:
        return self._project

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def below_min_sections(self) -> bool:
        """True while the project has fewer top-level sections than its soft floor."""

        return len(self._project.sections) < self._project.min_sections

    def numbering(self, section_id: str) -> str:
        return compute_numbering(self._project.sections, section_id)

    def find(self, section_id: str) -> Section | None:
        return find_by_id(self._project.sections, section_id)

    def _set_sections(self, sections: list[Section], *, significant: bool) -> bool:
        if sections is self._project.sections:
            return False
        self._project = self._project.model_copy(update={"sections": sections, "updated_at": utcnow()})
        self._record(significant)
        return True

    def _record(self, significant: bool) -> None:
        self._history.record(self._project, significant)
        self._pending = not significant

    def _context(self, action: str) -> Any:
        return project_context(project_id=self._project.id, action=action)

    # -------------------------------------------------------------------------
    # Structural edits (significant)
    # -------------------------------------------------------------------------

    def add_section(self, name: str | None = None, prompt: str | None = None) -> EditOutcome:
        """Append a top-level section, with a default overview child when depth allows."""

        with self._context("add_section"):
            if name is not None and not name.strip():
                return EditOutcome(False, _BLANK_NAME_MESSAGE)
            number = len(self._project.sections) + 1
            draft = SectionDraft(
                name=name.strip() if name is not None else f"New Section {number}",
                prompt=prompt or "Generate content for this new section.",
            )
            result = append_section(self._project.sections, draft)
            section = result.section
            assert section is not None
            if self._project.max_sub_sections_per_section > 0:
                section = ensure_default_sub_section(section, str(number), self._settings.overview_suffix)
                result.sections[-1] = section
            self._set_sections(result.sections, significant=True)
            logger.info("Section added: %s", section.name)
            return EditOutcome(True, f'"{section.name}" added.', section.id)

    def add_sub_section(self, parent_id: str, name: str | None = None, prompt: str | None = None) -> EditOutcome:
        """Append a child to `parent_id`, respecting the project's nesting ceiling."""

        with self._context("add_sub_section"):
            parent = self.find(parent_id)
            if parent is None:
                return EditOutcome(False, _TREE_ERROR_MESSAGES["parent_not_found"], parent_id)
            if name is not None and not name.strip():
                return EditOutcome(False, _BLANK_NAME_MESSAGE, parent_id)
            if name is None:
                name = f"{self.numbering(parent_id)}.{len(parent.sub_sections) + 1} New Sub-section"
            result = insert_child(
                self._project.sections,
                parent_id,
                SectionDraft(name=name.strip(), prompt=prompt),
                max_depth=self._project.max_sub_sections_per_section,
            )
            if not result.ok:
                assert result.error is not None
                return EditOutcome(False, _TREE_ERROR_MESSAGES[result.error], parent_id)
            assert result.section is not None
            self._set_sections(result.sections, significant=True)
            logger.info("Sub-section added under %s: %s", parent.name, result.section.name)
            return EditOutcome(True, f'"{result.section.name}" added.', result.section.id)

    def rename_section(self, section_id: str, name: str) -> EditOutcome:
        with self._context("rename_section"):
            if not name.strip():
                return EditOutcome(False, _BLANK_NAME_MESSAGE, section_id)
            sections = update_by_id(self._project.sections, section_id, name=name.strip())
            if not self._set_sections(sections, significant=True):
                return EditOutcome(False, _TREE_ERROR_MESSAGES["not_found"], section_id)
            return EditOutcome(True, f'Section "{name.strip()}" renamed.', section_id)

    def delete_section(self, section_id: str) -> EditOutcome:
        """Delete a section and everything below it."""

        with self._context("delete_section"):
            sections = delete_by_id(self._project.sections, section_id)
            if not self._set_sections(sections, significant=True):
                return EditOutcome(False, _TREE_ERROR_MESSAGES["not_found"], section_id)
            logger.info("Section deleted: %s", section_id)
            return EditOutcome(True, "Section deleted.", section_id)

    def move_section(self, section_id: str, direction: Literal["up", "down"]) -> EditOutcome:
        """Swap a section with its previous or next sibling."""

        with self._context("move_section"):
            if direction not in ("up", "down"):
                raise ValueError(f"Unsupported move direction {direction!r}")
            path = find_path(self._project.sections, section_id)
            if path is None:
                return EditOutcome(False, _TREE_ERROR_MESSAGES["not_found"], section_id)

            parent = find_parent(self._project.sections, section_id)
            siblings = parent.sub_sections if parent is not None else self._project.sections
            position = path[-1] + (-1 if direction == "up" else 1)
            if position < 0 or position >= len(siblings):
                return EditOutcome(False, f"Cannot move {direction} (at boundary).", section_id)

            result = move_by_id(
                self._project.sections,
                section_id,
                parent_id=parent.id if parent is not None else None,
                index=position,
            )
            if not result.ok:
                assert result.error is not None
                return EditOutcome(False, _TREE_ERROR_MESSAGES[result.error], section_id)
            self._set_sections(result.sections, significant=True)
            return EditOutcome(True, f"Moved section {direction}.", section_id)

    def mark_generated(self, section_id: str, content: str) -> EditOutcome:
        """Store generated content and stamp `last_generated`."""

        with self._context("mark_generated"):
            sections = update_by_id(
                self._project.sections, section_id, content=content, last_generated=utcnow()
            )
            if not self._set_sections(sections, significant=True):
                return EditOutcome(False, _TREE_ERROR_MESSAGES["not_found"], section_id)
            return EditOutcome(True, "Content saved.", section_id)

    def apply_outline(self, candidate: Any) -> EditOutcome:
        """Replace all sections with a generated outline.

        The candidate is validated against the project's nesting ceiling first; a rejected
        candidate leaves the project untouched.
        """

        with self._context("apply_outline"):
            result = normalize_candidate(candidate, max_depth=self._project.max_sub_sections_per_section)
            if not result.ok:
                assert result.reason is not None
                return EditOutcome(False, result.reason)
            assert result.outline is not None
            if result.empty:
                return EditOutcome(False, "The outline has no sections.")

            sections = sections_from_outline(
                result.outline,
                project_title=self._project.title,
                project_context=self._project.project_context,
                max_depth=self._project.max_sub_sections_per_section,
                overview_suffix=self._settings.overview_suffix,
            )
            if len(sections) < self._project.min_sections:
                logger.warning(
                    "Outline has %d top-level sections, fewer than the minimum of %d",
                    len(sections),
                    self._project.min_sections,
                )
            self._set_sections(sections, significant=True)
            return EditOutcome(True, f"Applied outline with {len(sections)} sections.")

    # -------------------------------------------------------------------------
    # Transient edits (coalesced into the current history entry)
    # -------------------------------------------------------------------------

    def set_content(self, section_id: str, content: str) -> EditOutcome:
        sections = update_by_id(self._project.sections, section_id, content=content)
        if not self._set_sections(sections, significant=False):
            return EditOutcome(False, _TREE_ERROR_MESSAGES["not_found"], section_id)
        return EditOutcome(True, "Content updated.", section_id)

    def set_prompt(self, section_id: str, prompt: str) -> EditOutcome:
        sections = update_by_id(self._project.sections, section_id, prompt=prompt)
        if not self._set_sections(sections, significant=False):
            return EditOutcome(False, _TREE_ERROR_MESSAGES["not_found"], section_id)
        return EditOutcome(True, "Prompt updated.", section_id)

    def update_details(self, **fields: Any) -> EditOutcome:
        """Change project metadata or tunables; negative tunables are clamped to 0.

        Raises:
            ValueError: For fields that are not project details.
        """

        unknown = sorted(set(fields) - DETAIL_FIELDS)
        if unknown:
            raise ValueError(f"Not a project detail field: {', '.join(unknown)}")
        if "title" in fields and not str(fields["title"]).strip():
            return EditOutcome(False, "Project title cannot be empty.")
        for key in _TUNABLE_FIELDS:
            if key in fields:
                value = fields[key]
                fields[key] = 0 if value == "" else max(0, int(value))

        ceiling = fields.get("max_sub_sections_per_section")
        if ceiling is not None and ceiling < self._project.max_sub_sections_per_section:
            check = validate_outline(self._project.sections, ceiling)
            if not check.ok:
                return EditOutcome(False, f"Cannot lower the nesting ceiling to {ceiling}. {check.reason}")

        merged = {**self._project.model_dump(exclude={"sections"}), **fields}
        updated = Project.model_validate(merged).model_copy(update={"sections": self._project.sections})
        if updated == self._project:
            return EditOutcome(False, "No changes.")
        self._project = updated.model_copy(update={"updated_at": utcnow()})
        self._record(significant=False)
        return EditOutcome(True, "Project details updated.")

    def commit(self) -> bool:
        """Close pending transient edits as their own undo step (e.g. when a field loses focus).

        Returns False and leaves history untouched when nothing is pending.
        """

        if not self._pending:
            return False
        self._project = self._project.model_copy(update={"updated_at": utcnow()})
        self._record(significant=True)
        return True

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def undo(self) -> EditOutcome:
        restored = self._history.undo()
        if restored is None:
            return EditOutcome(False, "Nothing to undo")
        self._project = restored
        self._pending = False
        return EditOutcome(True, "Undo successful")

    def redo(self) -> EditOutcome:
        restored = self._history.redo()
        if restored is None:
            return EditOutcome(False, "Nothing to redo")
        self._project = restored
        self._pending = False
        return EditOutcome(True, "Redo successful")
