"""Tests for logging and configuration helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.logging import RichHandler

from reportsmith.config import load_settings
from reportsmith.logging import configure_logging, project_context


@pytest.fixture
def rich_handler() -> Iterator[RichHandler]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    configure_logging("DEBUG")
    yield next(h for h in root.handlers if isinstance(h, RichHandler))
    root.handlers[:] = handlers
    root.setLevel(level)


def _stamped(handler: logging.Handler) -> logging.LogRecord:
    record = logging.LogRecord("reportsmith.editor", logging.INFO, __file__, 1, "edited", None, None)
    assert handler.filter(record)
    return record


def test_project_context_is_stamped_on_records(rich_handler: RichHandler) -> None:
    """It should bind project context into records and restore it afterwards."""

    with project_context(project_id="p1", action="delete_section"):
        record = _stamped(rich_handler)
        assert (record.project_id, record.action) == ("p1", "delete_section")  # type: ignore[attr-defined]
        with project_context(project_id="p2"):
            record = _stamped(rich_handler)
            assert (record.project_id, record.action) == ("p2", "delete_section")  # type: ignore[attr-defined]

    record = _stamped(rich_handler)
    assert (record.project_id, record.action) == ("-", "-")  # type: ignore[attr-defined]
    assert rich_handler.format(record) == "[project=- action=-] reportsmith.editor: edited"


def test_configure_logging_is_idempotent(rich_handler: RichHandler) -> None:
    """It should keep a single rich handler with a single context filter."""

    configure_logging("DEBUG")
    root = logging.getLogger()
    assert [h for h in root.handlers if isinstance(h, RichHandler)] == [rich_handler]
    assert len(rich_handler.filters) == 1
    assert root.level == logging.DEBUG


def test_load_settings_from_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """It should read settings from REPORTSMITH_ENV_FILE."""

    env_file = tmp_path / "custom.env"
    env_file.write_text("REPORTSMITH_MAX_HISTORY_LENGTH=25\nREPORTSMITH_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    monkeypatch.setenv("REPORTSMITH_ENV_FILE", str(env_file))

    settings = load_settings()
    assert settings.max_history_length == 25
    assert settings.log_level == "DEBUG"
