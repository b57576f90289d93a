"""Project model (aggregate root of an outline)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from reportsmith.config import Settings
from reportsmith.models.section import Section
from reportsmith.utils.clock import utcnow
from reportsmith.utils.ids import new_project_id

ProjectType = Literal["mini-project", "internship"]


class Project(BaseModel):
    """A report project: metadata, tunables and the top-level section forest.

    `min_sections` is a soft floor on the number of top-level sections.
    `max_sub_sections_per_section` is the nesting ceiling: 0 allows only top-level sections,
    and a section at that depth may not have children.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_project_id)
    title: str = Field(min_length=1)
    project_type: ProjectType = Field(default="mini-project", alias="projectType")
    project_context: str = Field(default="", alias="projectContext")

    team_details: str = Field(default="", alias="teamDetails")
    institute_name: str = Field(default="", alias="instituteName")
    college_info: str = Field(default="", alias="collegeInfo")
    guide_name: str = Field(default="", alias="guideName")
    hod_name: str = Field(default="", alias="hodName")
    subject: str = ""
    semester: str = ""
    branch: str = ""

    sections: list[Section] = Field(default_factory=list)

    min_sections: int = Field(default=5, ge=0, alias="minSections")
    max_sub_sections_per_section: int = Field(default=2, ge=0, alias="maxSubSectionsPerSection")

    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    @classmethod
    def new(
        cls,
        title: str,
        *,
        project_context: str = "",
        settings: Settings | None = None,
    ) -> Project:
        """Create an empty project using configured defaults for the tunables."""

        settings = settings or Settings()
        now = utcnow()
        return cls(
            title=title.strip(),
            project_context=project_context.strip(),
            min_sections=settings.default_min_sections,
            max_sub_sections_per_section=settings.default_max_sub_sections,
            created_at=now,
            updated_at=now,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible dict using the camelCase wire names."""

        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> Project:
        return cls.model_validate(data)
