"""Shared Markdown fixtures for the extract_helps test suite."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

FIXTURES_DIR = Path(__file__).resolve().parent
REFERENCE_PATH = FIXTURES_DIR / "reference.md"

SCENARIO_MARKDOWN = """\
# Reference

## Commands

### `add`

Adds a file.

#### `add` examples

```
chezmoi add ~/.bashrc
```

## See also
"""


def markdown(text: str) -> str:
    """Dedent an inline Markdown sample so tests can indent it freely."""

    return dedent(text).lstrip("\n")


def read_reference() -> str:
    return REFERENCE_PATH.read_text(encoding="utf-8")


__all__ = [
    "FIXTURES_DIR",
    "REFERENCE_PATH",
    "SCENARIO_MARKDOWN",
    "markdown",
    "read_reference",
]
