"""Shared fixtures for the reportsmith test suite."""

from __future__ import annotations

import pytest

from reportsmith.models.project import Project
from reportsmith.models.section import Section


@pytest.fixture
def forest() -> list[Section]:
    """A, with children A1 and A2 (A2 has child A2a), followed by B."""

    a2a = Section(name="A2a")
    a2 = Section(name="A2", sub_sections=[a2a])
    a1 = Section(name="A1")
    a = Section(name="A", sub_sections=[a1, a2])
    b = Section(name="B")
    return [a, b]


@pytest.fixture
def project(forest: list[Section]) -> Project:
    return Project(title="Smart Irrigation", project_context="IoT soil sensors", sections=forest)
