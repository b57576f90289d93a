"""Candidate outline models.

These mirror what an outline generator returns: names and nesting only. They are built
from data that already passed `reportsmith.outline.validator.validate_outline`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OutlineSection(BaseModel):
    """A proposed section: a name and optional nested proposals."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    sub_sections: list["OutlineSection"] | None = Field(default=None, alias="subSections")


class GeneratedOutline(BaseModel):
    """A candidate forest."""

    sections: list[OutlineSection] = Field(default_factory=list)
