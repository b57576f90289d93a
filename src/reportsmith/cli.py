"""CLI entrypoints for reportsmith.

Local tooling for inspecting outlines: parse indented text, validate generator output and
render a section forest.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import TypeAdapter

from reportsmith.config import load_settings
from reportsmith.logging import configure_logging, get_logger
from reportsmith.models.section import Section
from reportsmith.outline.convert import normalize_candidate
from reportsmith.outline.parser import parse_text_outline
from reportsmith.outline.render import render_markdown, render_text_outline, table_of_contents

app = typer.Typer(add_completion=False, help="reportsmith outline tools")
logger = get_logger(__name__)

_SECTIONS = TypeAdapter(list[Section])


@app.callback()
def main() -> None:
    """Configure logging for every command."""

    configure_logging(load_settings().log_level)


def _read(path: Path) -> str:
    if not path.exists():
        raise typer.BadParameter(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


def _load_sections(path: Path) -> list[Section]:
    data: Any = json.loads(_read(path))
    if isinstance(data, dict):
        data = data.get("sections", [])
    return _SECTIONS.validate_python(data)


@app.command()
def parse(
    source: Path = typer.Argument(..., help="UTF-8 text file with an indented outline"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout"),
) -> None:
    """Parse an indented text outline into JSON sections."""

    sections = parse_text_outline(_read(source))
    payload = json.dumps({"sections": [s.to_payload() for s in sections]}, ensure_ascii=False, indent=2)
    logger.info("Parsed %d top-level sections from %s", len(sections), source)
    if output is None:
        typer.echo(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    typer.echo(str(output))


@app.command()
def validate(
    source: Path = typer.Argument(..., help="JSON candidate outline"),
    max_depth: int | None = typer.Option(None, "--max-depth", min=0, help="Nesting ceiling"),
) -> None:
    """Validate a generated outline; exits with code 1 when it is rejected."""

    result = normalize_candidate(_read(source), max_depth=max_depth)
    if not result.ok:
        typer.echo(result.reason, err=True)
        raise typer.Exit(code=1)
    assert result.outline is not None
    typer.echo(f"OK: {len(result.outline.sections)} top-level sections")


@app.command()
def render(
    source: Path = typer.Argument(..., help="JSON sections (list or {'sections': [...]})"),
    markdown: bool = typer.Option(False, "--markdown", help="Render headings and content"),
    toc: bool = typer.Option(False, "--toc", help="Render a numbered table of contents"),
) -> None:
    """Render a section forest as indented text, markdown or a table of contents."""

    sections = _load_sections(source)
    if markdown:
        typer.echo(render_markdown(sections))
    elif toc:
        for entry in table_of_contents(sections):
            typer.echo(f"{'  ' * entry.depth}{entry.numbering} {entry.name}")
    else:
        typer.echo(render_text_outline(sections))


if __name__ == "__main__":
    app()
