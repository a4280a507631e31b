"""Extract per-command help text from a Markdown reference document."""

from __future__ import annotations

from .config import (
    ConfigOverrides,
    ExtractHelpsConfig,
    ExtractHelpsConfigError,
    LoadResult,
    load_config,
)
from .document import Document, Node, NodeType, parse_document
from .errors import (
    CommandHeadingError,
    DuplicateCommandError,
    ExtractHelpsError,
    FormatterError,
    InputDecodeError,
    SectionEndNotFoundError,
    SectionNotFoundError,
    UnsupportedNodeTypeError,
)
from .extract import (
    HelpEntry,
    HelpTable,
    Section,
    extract_helps,
    locate_section,
)
from .output import (
    Formatter,
    Help,
    HelpOutput,
    assemble,
    emit,
    render_debug,
    render_source,
)
from .render import Generator, flatten_text

__all__ = [
    "ConfigOverrides",
    "ExtractHelpsConfig",
    "ExtractHelpsConfigError",
    "LoadResult",
    "load_config",
    "Document",
    "Node",
    "NodeType",
    "parse_document",
    "CommandHeadingError",
    "DuplicateCommandError",
    "ExtractHelpsError",
    "FormatterError",
    "InputDecodeError",
    "SectionEndNotFoundError",
    "SectionNotFoundError",
    "UnsupportedNodeTypeError",
    "HelpEntry",
    "HelpTable",
    "Section",
    "extract_helps",
    "locate_section",
    "Formatter",
    "Help",
    "HelpOutput",
    "assemble",
    "emit",
    "render_debug",
    "render_source",
    "Generator",
    "flatten_text",
]
