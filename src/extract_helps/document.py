"""Parsed Markdown documents stored as a flat, index-addressed node arena.

``markdown-it-py`` produces the syntax tree; :func:`parse_document` copies it
into immutable :class:`Node` records whose links (parent, first child, next
sibling) are plain indexes into :attr:`Document.nodes`. Inline containers
are spliced into their block parent so a heading's first child is its first
inline node, mirroring how the reference documents are written.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

__all__ = [
    "Document",
    "Node",
    "NodeType",
    "build_markdown_it",
    "parse_document",
]


class NodeType(Enum):
    """Node kinds the extractor distinguishes."""

    DOCUMENT = "document"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE_BLOCK = "code_block"
    TABLE = "table"
    TABLE_HEAD = "table_head"
    TABLE_BODY = "table_body"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    TEXT = "text"
    CODE = "code"
    OTHER = "other"


_NODE_TYPES: dict[str, NodeType] = {
    "root": NodeType.DOCUMENT,
    "heading": NodeType.HEADING,
    "paragraph": NodeType.PARAGRAPH,
    "fence": NodeType.CODE_BLOCK,
    "code_block": NodeType.CODE_BLOCK,
    "table": NodeType.TABLE,
    "thead": NodeType.TABLE_HEAD,
    "tbody": NodeType.TABLE_BODY,
    "tr": NodeType.TABLE_ROW,
    "th": NodeType.TABLE_CELL,
    "td": NodeType.TABLE_CELL,
    "text": NodeType.TEXT,
    "code_inline": NodeType.CODE,
    "softbreak": NodeType.TEXT,
    "hardbreak": NodeType.TEXT,
}

_LINE_BREAKS = frozenset({"softbreak", "hardbreak"})
_LITERAL_TYPES = frozenset({"text", "code_inline", "fence", "code_block"})


@dataclass(frozen=True)
class Node:
    """One syntactic unit of a parsed document."""

    index: int
    type: NodeType
    markup: str
    literal: str = ""
    level: int = 0
    line: Optional[int] = None
    parent: Optional[int] = None
    first_child: Optional[int] = None
    next_sibling: Optional[int] = None


@dataclass(frozen=True)
class Document:
    """Immutable node arena; index ``0`` is the document root."""

    nodes: tuple[Node, ...]

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def node(self, index: int) -> Node:
        return self.nodes[index]

    def children(self, index: int) -> Iterator[Node]:
        """Yield the direct children of the node at ``index`` in order."""

        yield from self.siblings(self.nodes[index].first_child)

    def siblings(
        self, start: Optional[int], end: Optional[int] = None
    ) -> Iterator[Node]:
        """Yield ``start`` and its following siblings up to ``end`` (exclusive)."""

        current = start
        while current is not None and current != end:
            node = self.nodes[current]
            yield node
            current = node.next_sibling

    def top_level(self) -> Iterator[Node]:
        return self.children(0)


def build_markdown_it() -> MarkdownIt:
    """Return the CommonMark parser with GFM tables enabled."""

    return MarkdownIt("commonmark").enable("table")


def parse_document(text: str, md: Optional[MarkdownIt] = None) -> Document:
    """Parse Markdown ``text`` into a :class:`Document`."""

    parser = md or build_markdown_it()
    tree = SyntaxTreeNode(parser.parse(text))
    return _ArenaBuilder().build(tree)


class _ArenaBuilder:
    def __init__(self) -> None:
        self._records: list[dict[str, object]] = []
        self._children: list[list[int]] = []

    def build(self, tree: SyntaxTreeNode) -> Document:
        self._add(tree, parent=None)
        next_sibling: dict[int, int] = {}
        for siblings in self._children:
            for current, following in zip(siblings, siblings[1:]):
                next_sibling[current] = following
        nodes = tuple(
            Node(
                index=index,
                first_child=self._children[index][0]
                if self._children[index]
                else None,
                next_sibling=next_sibling.get(index),
                **record,  # type: ignore[arg-type]
            )
            for index, record in enumerate(self._records)
        )
        return Document(nodes=nodes)

    def _add(self, source: SyntaxTreeNode, *, parent: Optional[int]) -> int:
        index = len(self._records)
        self._records.append(
            {
                "type": _NODE_TYPES.get(source.type, NodeType.OTHER),
                "markup": source.type,
                "literal": _literal_for(source),
                "level": _level_for(source),
                "line": _line_for(source),
                "parent": parent,
            }
        )
        self._children.append([])
        if parent is not None:
            self._children[parent].append(index)
        self._add_children(source, parent=index)
        return index

    def _add_children(self, source: SyntaxTreeNode, *, parent: int) -> None:
        for child in source.children:
            if child.type == "inline":
                self._add_children(child, parent=parent)
            else:
                self._add(child, parent=parent)


def _literal_for(source: SyntaxTreeNode) -> str:
    if source.type in _LINE_BREAKS:
        return "\n"
    if source.type in _LITERAL_TYPES:
        return source.content
    return ""


def _level_for(source: SyntaxTreeNode) -> int:
    if source.type == "heading" and source.tag.startswith("h"):
        return int(source.tag[1:])
    return 0


def _line_for(source: SyntaxTreeNode) -> Optional[int]:
    # The root wraps no token, so it has no source map.
    if source.is_root or not source.map:
        return None
    return source.map[0] + 1
