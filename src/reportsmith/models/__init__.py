"""Pydantic models used across the project."""

from __future__ import annotations

from reportsmith.models.outline import GeneratedOutline, OutlineSection
from reportsmith.models.project import Project, ProjectType
from reportsmith.models.section import (
    Section,
    SectionDraft,
    SectionUpdate,
    default_prompt,
    is_specialized_name,
    strip_type_prefix,
)

__all__ = [
    "GeneratedOutline",
    "OutlineSection",
    "Project",
    "ProjectType",
    "Section",
    "SectionDraft",
    "SectionUpdate",
    "default_prompt",
    "is_specialized_name",
    "strip_type_prefix",
]
