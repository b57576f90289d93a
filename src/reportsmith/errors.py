"""Exception types raised for programmer errors.

Data conditions (missing ids, invalid candidate outlines, empty text) are
returned as values, never raised.
"""

from __future__ import annotations


class ReportsmithError(Exception):
    """Base class for reportsmith errors."""


class ImmutableFieldError(ReportsmithError, ValueError):
    """Raised when an update tries to change `id` or `sub_sections`."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Fields cannot be changed through an update: {', '.join(fields)}")
