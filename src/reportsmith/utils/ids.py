"""ID utilities."""

from __future__ import annotations

import uuid


def new_section_id() -> str:
    """Return a fresh section id.

    Ids are random uuid4 strings, so they are never reused within or across trees.
    """

    return str(uuid.uuid4())


def new_project_id() -> str:
    """Return a fresh project id."""

    return str(uuid.uuid4())
