"""Section models.

A `Section` is one node of a report outline. Children live in `sub_sections`, whose order is
the display and numbering order. Internally an absent child list is always `[]`; the
serialized form omits `subSections` when it is empty.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

from reportsmith.utils.ids import new_section_id

_SPECIALIZED_PREFIXES = ("diagram:", "figure ", "figure:", "table:", "table ", "flowchart ")
_TYPE_PREFIX_RE = re.compile(r"^\s*(?:diagram:|(?:figure|table)\s*\d*\s*:)\s*", re.IGNORECASE)


def is_specialized_name(name: str) -> bool:
    """Return True for names carrying a `Diagram:`/`Figure N:`/`Table N:` style prefix."""

    return name.strip().lower().startswith(_SPECIALIZED_PREFIXES)


def strip_type_prefix(name: str) -> str:
    """Remove a leading `Diagram:`, `Figure N:` or `Table N:` prefix."""

    return _TYPE_PREFIX_RE.sub("", name).strip()


def default_prompt(name: str, parent_name: str | None = None) -> str:
    """Default generation prompt for a section."""

    if parent_name:
        return f'Generate content for "{name}" as part of "{parent_name}".'
    return f'Generate content for "{name}".'


def _require_name(value: str) -> str:
    if not value.strip():
        raise ValueError("Section name cannot be empty.")
    return value


class Section(BaseModel):
    """A node in the report outline tree."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_section_id)
    name: str
    prompt: str = ""
    content: str = ""
    last_generated: datetime | None = Field(default=None, alias="lastGenerated")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    sub_sections: list["Section"] = Field(default_factory=list, alias="subSections")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _require_name(value)

    @field_validator("sub_sections", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_serializer(mode="wrap")
    def _omit_empty_sub_sections(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        for key in ("subSections", "sub_sections"):
            if key in data and not data[key]:
                del data[key]
        return data

    @property
    def has_children(self) -> bool:
        return bool(self.sub_sections)

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible dict using the camelCase wire names."""

        return self.model_dump(mode="json", by_alias=True)


class SectionDraft(BaseModel):
    """Caller-supplied fields for a section that does not exist yet."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str
    prompt: str | None = None
    content: str = ""
    last_generated: datetime | None = Field(default=None, alias="lastGenerated")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _require_name(value)


class SectionUpdate(BaseModel):
    """Partial update for an existing section.

    Only explicitly provided fields are applied; see `changes()`.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = ""
    prompt: str = ""
    content: str = ""
    last_generated: datetime | None = Field(default=None, alias="lastGenerated")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _require_name(value)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
