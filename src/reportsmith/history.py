"""Undo/redo history over whole-project snapshots.

History is a bounded list of deep snapshots plus a cursor; `entries[cursor]` is the
current state. Significant edits (structural changes, committed renames) append a new
entry and discard the redo branch. Transient edits such as keystrokes in a content field
replace the current entry instead, so undo steps back over whole edits, not characters.
"""

from __future__ import annotations

from reportsmith.config import Settings
from reportsmith.logging import get_logger
from reportsmith.models.project import Project

logger = get_logger(__name__)


class HistoryManager:
    """Linear undo/redo stack of `Project` snapshots."""

    def __init__(self, max_length: int | None = None, *, initial: Project | None = None) -> None:
        """Initialize history.

        Args:
            max_length: Maximum number of retained snapshots; defaults to
                `Settings.max_history_length`.
            initial: Optional first snapshot.
        """
        if max_length is None:
            max_length = Settings().max_history_length
        if max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {max_length}")

        self._max_length = max_length
        self._entries: list[Project] = []
        self._cursor = -1
        if initial is not None:
            self.record(initial)

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> tuple[Project, ...]:
        return tuple(self._entries)

    @property
    def current(self) -> Project | None:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor].model_copy(deep=True)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, state: Project, significant: bool = True) -> bool:
        """Record a project state.

        Args:
            state: New project state; a deep copy is stored.
            significant: Append a new entry (True) or replace the current one (False).

        Returns:
            True if a snapshot was stored, False if the state equals the current entry.
        """

        snapshot = state.model_copy(deep=True)

        if not significant:
            if not self._entries:
                self._entries.append(snapshot)
                self._cursor = 0
                return True
            if self._entries[self._cursor] == snapshot:
                return False
            self._entries[self._cursor] = snapshot
            return True

        # A new significant edit invalidates the redo branch
        del self._entries[self._cursor + 1 :]
        if self._entries and self._entries[-1] == snapshot:
            logger.debug("History record skipped: state unchanged")
            return False

        self._entries.append(snapshot)
        overflow = len(self._entries) - self._max_length
        if overflow > 0:
            del self._entries[:overflow]
        self._cursor = len(self._entries) - 1
        logger.debug("History recorded entry %d/%d", self._cursor + 1, len(self._entries))
        return True

    def undo(self) -> Project | None:
        """Step back; returns the restored state or None when there is nothing to undo."""

        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._entries[self._cursor].model_copy(deep=True)

    def redo(self) -> Project | None:
        """Step forward; returns the restored state or None when there is nothing to redo."""

        if not self.can_redo:
            return None
        self._cursor += 1
        return self._entries[self._cursor].model_copy(deep=True)

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = -1
