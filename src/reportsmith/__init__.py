"""reportsmith: outline tree, parser, validator and undo history for report authoring."""

from __future__ import annotations

__version__ = "0.1.0"
