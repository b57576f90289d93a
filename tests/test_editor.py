"""Tests for the project editing session."""

from __future__ import annotations

import pytest

from reportsmith.editor import ProjectEditor
from reportsmith.models.project import Project


def test_add_section_gets_default_overview() -> None:
    """It should append a numbered section with an overview child."""

    editor = ProjectEditor(Project.new("Demo"))
    outcome = editor.add_section()

    assert outcome.ok
    section = editor.find(outcome.section_id or "")
    assert section is not None
    assert section.name == "New Section 1"
    assert [s.name for s in section.sub_sections] == ["1.1 Overview"]
    assert len(editor.history) == 2
    assert editor.can_undo


def test_add_sub_section_respects_ceiling() -> None:
    """It should refuse sub-sections below the project's nesting ceiling."""

    project = Project.new("Demo").model_copy(update={"max_sub_sections_per_section": 1})
    editor = ProjectEditor(project)
    top = editor.add_section()
    overview = editor.project.sections[0].sub_sections[0]

    added = editor.add_sub_section(top.section_id or "")
    assert added.ok
    assert editor.find(added.section_id or "").name == "1.2 New Sub-section"  # type: ignore[union-attr]

    history_size = len(editor.history)
    rejected = editor.add_sub_section(overview.id, name="Too deep")
    assert not rejected.ok
    assert rejected.message == "Maximum sub-section depth reached."
    assert len(editor.history) == history_size

    missing = editor.add_sub_section("missing")
    assert not missing.ok


def test_rename_and_undo(project: Project) -> None:
    """It should rename as a significant edit that undo reverts."""

    editor = ProjectEditor(project)
    b_id = project.sections[1].id

    assert editor.rename_section(b_id, "  Conclusion ").ok
    assert editor.find(b_id).name == "Conclusion"  # type: ignore[union-attr]
    assert not editor.rename_section(b_id, "   ").ok
    assert not editor.rename_section("missing", "X").ok

    assert editor.undo().ok
    assert editor.find(b_id).name == "B"  # type: ignore[union-attr]
    assert editor.redo().ok
    assert editor.find(b_id).name == "Conclusion"  # type: ignore[union-attr]


def test_delete_then_undo_restores_subtree(project: Project) -> None:
    """It should delete a subtree and bring it back on undo."""

    editor = ProjectEditor(project)
    a = project.sections[0]
    leaf_id = a.sub_sections[1].sub_sections[0].id

    assert editor.delete_section(a.id).ok
    assert editor.find(leaf_id) is None
    assert not editor.delete_section(a.id).ok

    editor.undo()
    assert editor.find(leaf_id) is not None
    assert editor.numbering(leaf_id) == "1.2.1"


def test_move_section_up_and_down(project: Project) -> None:
    """It should swap siblings and stop at the boundaries."""

    editor = ProjectEditor(project)
    a, b = project.sections
    a1 = a.sub_sections[0]

    assert editor.move_section(b.id, "up").ok
    assert [s.name for s in editor.project.sections] == ["B", "A"]
    boundary = editor.move_section(b.id, "up")
    assert not boundary.ok
    assert "boundary" in boundary.message

    assert editor.move_section(a1.id, "down").ok
    assert editor.numbering(a1.id) == "2.2"
    assert not editor.move_section("missing", "down").ok
    with pytest.raises(ValueError):
        editor.move_section(a1.id, "sideways")  # type: ignore[arg-type]


def test_transient_edits_coalesce_into_one_step(project: Project) -> None:
    """It should fold keystroke-level edits into the current history entry."""

    editor = ProjectEditor(project)
    b_id = project.sections[1].id
    editor.rename_section(b_id, "Conclusion")
    size = len(editor.history)

    for text in ("W", "Wr", "Wri"):
        assert editor.set_content(b_id, text).ok
    assert editor.set_prompt(b_id, "Summarise").ok

    assert len(editor.history) == size
    assert editor.find(b_id).content == "Wri"  # type: ignore[union-attr]
    assert not editor.set_content("missing", "x").ok

    editor.undo()
    restored = editor.find(b_id)
    assert restored is not None
    assert restored.name == "B"
    assert restored.content == ""


def test_mark_generated_stamps_time(project: Project) -> None:
    """It should store content with a generation timestamp as its own step."""

    editor = ProjectEditor(project)
    leaf = project.sections[1]
    size = len(editor.history)

    assert editor.mark_generated(leaf.id, "graph TD; A-->B").ok
    updated = editor.find(leaf.id)
    assert updated is not None
    assert updated.last_generated is not None
    assert len(editor.history) == size + 1


def test_apply_outline_validates_before_replacing(project: Project) -> None:
    """It should leave the project untouched when the candidate is rejected."""

    editor = ProjectEditor(project)
    before = editor.project.sections
    too_deep = [{"name": "A", "subSections": [{"name": "B", "subSections": [{"name": "C", "subSections": [{"name": "D"}]}]}]}]

    outcome = editor.apply_outline(too_deep)

    assert not outcome.ok
    assert outcome.message.startswith("Outline rejected")
    assert editor.project.sections is before
    assert not editor.apply_outline([]).ok


def test_apply_outline_replaces_and_is_undoable(project: Project) -> None:
    """It should convert an accepted outline and record it as one step."""

    editor = ProjectEditor(project)
    outcome = editor.apply_outline('{"sections": [{"name": "1. Introduction"}, {"name": "2. Design"}]}')

    assert outcome.ok
    assert [s.name for s in editor.project.sections] == ["1. Introduction", "2. Design"]
    assert [s.name for s in editor.project.sections[0].sub_sections] == ["1.1 Overview"]
    assert editor.below_min_sections

    editor.undo()
    assert [s.name for s in editor.project.sections] == ["A", "B"]


def test_update_details(project: Project) -> None:
    """It should update metadata, clamp tunables and reject unknown fields."""

    editor = ProjectEditor(project)
    size = len(editor.history)

    assert editor.update_details(guide_name="Dr. Rao", min_sections=-3).ok
    assert editor.project.guide_name == "Dr. Rao"
    assert editor.project.min_sections == 0
    assert editor.update_details(max_sub_sections_per_section="5").ok
    assert editor.project.max_sub_sections_per_section == 5
    assert len(editor.history) == size

    assert not editor.update_details(guide_name="Dr. Rao").ok
    assert not editor.update_details(title="  ").ok
    with pytest.raises(ValueError):
        editor.update_details(sections=[])


def test_nothing_to_undo_or_redo(project: Project) -> None:
    """It should report empty undo/redo as data."""

    editor = ProjectEditor(project)
    assert editor.undo().message == "Nothing to undo"
    assert editor.redo().message == "Nothing to redo"
    assert not editor.can_redo


def test_commit_closes_transient_edits_as_a_step(project: Project) -> None:
    """It should turn pending keystroke edits into their own undo step."""

    editor = ProjectEditor(project)
    b_id = project.sections[1].id
    editor.rename_section(b_id, "Conclusion")
    size = len(editor.history)

    assert not editor.commit()
    assert len(editor.history) == size

    editor.set_content(b_id, "Draft")
    assert editor.commit()
    assert len(editor.history) == size + 1
    assert not editor.commit()

    editor.set_content(b_id, "Draft, revised")
    editor.undo()
    assert editor.find(b_id).content == "Draft"  # type: ignore[union-attr]


def test_commit_after_undo_keeps_redo(project: Project) -> None:
    """It should not discard the redo branch when nothing is pending."""

    editor = ProjectEditor(project)
    b_id = project.sections[1].id
    editor.rename_section(b_id, "Conclusion")
    editor.undo()
    assert editor.can_redo

    assert not editor.commit()
    assert editor.can_redo
    assert editor.redo().ok
    assert editor.find(b_id).name == "Conclusion"  # type: ignore[union-attr]


def test_lowering_ceiling_below_tree_depth_is_refused(project: Project) -> None:
    """It should keep the nesting ceiling consistent with the existing sections."""

    editor = ProjectEditor(project)
    before = editor.project

    for ceiling in (0, 1, ""):
        outcome = editor.update_details(max_sub_sections_per_section=ceiling)
        assert not outcome.ok
        assert outcome.message.startswith("Cannot lower the nesting ceiling")
        assert editor.project is before

    flat = ProjectEditor(Project(title="Flat", sections=[project.sections[1]]))
    assert flat.update_details(max_sub_sections_per_section=0).ok
    assert flat.project.max_sub_sections_per_section == 0


def test_blank_names_are_reported_not_raised(project: Project) -> None:
    """It should refuse blank section names with an outcome."""

    editor = ProjectEditor(project)
    size = len(editor.history)

    for outcome in (
        editor.add_section(name="   "),
        editor.add_sub_section(project.sections[0].id, name=""),
        editor.rename_section(project.sections[0].id, " "),
    ):
        assert not outcome.ok
        assert outcome.message == "Section name cannot be empty."
    assert len(editor.history) == size

    added = editor.add_section(name="  Appendix ")
    assert editor.find(added.section_id or "").name == "Appendix"  # type: ignore[union-attr]
