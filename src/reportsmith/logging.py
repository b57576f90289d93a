"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


_project_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("reportsmith_project_id", default="-")
_action_var: contextvars.ContextVar[str] = contextvars.ContextVar("reportsmith_action", default="-")


class _ContextFilter(logging.Filter):
    """Inject project context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.project_id = _project_id_var.get()  # type: ignore[attr-defined]
        record.action = _action_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def project_context(*, project_id: str, action: str | None = None) -> Any:
    """Temporarily bind project context for structured logging.

    Args:
        project_id: Project identifier.
        action: Optional editing action name.
    """

    token_project = _project_id_var.set(project_id)
    token_action = _action_var.set(action or _action_var.get())
    try:
        yield
    finally:
        _project_id_var.reset(token_project)
        _action_var.reset(token_action)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Records go to stderr so command output on stdout stays machine-readable. RichHandler
    renders time and level itself; the message carries the bound project context.
    Calling this again reconfigures the existing handler instead of adding another.

    Args:
        level: Logging level name.
    """

    formatter = logging.Formatter(fmt="[project=%(project_id)s action=%(action)s] %(name)s: %(message)s")

    root = logging.getLogger()
    root.setLevel(level)
    handler = next((h for h in root.handlers if isinstance(h, RichHandler)), None)
    if handler is None:
        handler = RichHandler(
            console=Console(stderr=True), rich_tracebacks=True, show_time=True, show_level=True
        )
        root.addHandler(handler)
    if not any(isinstance(f, _ContextFilter) for f in handler.filters):
        handler.addFilter(_ContextFilter())
    handler.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)
