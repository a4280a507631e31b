"""Plain-text renderers for the block nodes allowed in command help."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Optional

from .document import Document, Node, NodeType
from .errors import UnsupportedNodeTypeError

__all__ = [
    "DEFAULT_WIDTH",
    "INDENT",
    "Generator",
    "flatten_text",
    "format_grid",
    "indent_block",
    "wrap_paragraph",
]

DEFAULT_WIDTH = 80
INDENT = "  "

_TABLE_GROUPS = (NodeType.TABLE_HEAD, NodeType.TABLE_BODY)


def flatten_text(document: Document, node: Node) -> str:
    """Concatenate the literal text below ``node`` on a single line.

    Code spans are wrapped in double quotes. Newlines become spaces. Node
    kinds other than text and code contribute only their descendants.
    """

    parts: list[str] = []
    _collect_text(document, node, parts)
    return "".join(parts)


def _collect_text(document: Document, node: Node, parts: list[str]) -> None:
    if node.type is NodeType.CODE:
        parts.append('"' + node.literal.replace("\n", " ") + '"')
    elif node.type is NodeType.TEXT:
        parts.append(node.literal.replace("\n", " "))
    for child in document.children(node.index):
        _collect_text(document, child, parts)


def wrap_paragraph(text: str, width: int) -> str:
    """Wrap ``text`` on word boundaries without breaking long words.

    Lines are filled greedily, so a multi-line paragraph can break
    differently from a minimum-raggedness wrapper given the same width.
    """

    return "\n".join(
        textwrap.wrap(
            " ".join(text.split()),
            width=width,
            break_long_words=False,
            break_on_hyphens=False,
        )
    )


def indent_block(text: str) -> str:
    """Prefix every line of ``text``, including a trailing empty one."""

    return INDENT + ("\n" + INDENT).join(text.split("\n"))


def format_grid(rows: list[list[str]], *, padding: int = 1) -> str:
    """Left-align cells into columns separated by at least ``padding`` spaces."""

    widths: list[int] = []
    for row in rows:
        for column, cell in enumerate(row):
            if column == len(widths):
                widths.append(0)
            widths[column] = max(widths[column], len(cell))
    lines = []
    for row in rows:
        cells = [
            cell.ljust(widths[column] + padding)
            for column, cell in enumerate(row)
        ]
        lines.append("".join(cells) + "\n")
    return "".join(lines)


@dataclass(frozen=True)
class Generator:
    """Rendering configuration threaded through one extraction run."""

    width: int = DEFAULT_WIDTH

    def __post_init__(self) -> None:
        if self.width < 1:
            raise ValueError("width must be a positive integer")

    def render_long(
        self, document: Document, start: Optional[int], end: Optional[int]
    ) -> str:
        return self.render_range(document, start, end)

    def render_example(
        self, document: Document, start: Optional[int], end: Optional[int]
    ) -> str:
        rendered = self.render_range(document, start, end)
        # Examples usually end in a code block whose last line is a bare indent.
        if rendered.endswith("\n" + INDENT):
            return rendered[: -len(INDENT)]
        return rendered

    def render_range(
        self, document: Document, start: Optional[int], end: Optional[int]
    ) -> str:
        """Render the siblings in ``[start, end)`` separated by blank lines."""

        return "\n".join(
            self.render_node(document, node)
            for node in document.siblings(start, end)
        )

    def render_node(self, document: Document, node: Node) -> str:
        if node.type is NodeType.HEADING:
            return self.render_heading(document, node)
        if node.type is NodeType.PARAGRAPH:
            return self.render_paragraph(document, node)
        if node.type is NodeType.CODE_BLOCK:
            return self.render_code_block(node)
        if node.type is NodeType.TABLE:
            return self.render_table(document, node)
        raise UnsupportedNodeTypeError(node.markup, line=node.line)

    def render_heading(self, document: Document, node: Node) -> str:
        return flatten_text(document, node) + "\n"

    def render_paragraph(self, document: Document, node: Node) -> str:
        return wrap_paragraph(flatten_text(document, node), self.width) + "\n"

    def render_code_block(self, node: Node) -> str:
        return indent_block(node.literal)

    def render_table(self, document: Document, node: Node) -> str:
        rows: list[list[str]] = []
        for group in document.children(node.index):
            if group.type not in _TABLE_GROUPS:
                raise UnsupportedNodeTypeError(group.markup, line=group.line)
            for row in document.children(group.index):
                if row.type is not NodeType.TABLE_ROW:
                    raise UnsupportedNodeTypeError(row.markup, line=row.line)
                cells = []
                for cell in document.children(row.index):
                    if cell.type is not NodeType.TABLE_CELL:
                        raise UnsupportedNodeTypeError(
                            cell.markup, line=cell.line
                        )
                    cells.append(flatten_text(document, cell))
                rows.append(cells)
        return indent_block(format_grid(rows))
