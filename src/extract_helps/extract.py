"""Locate the commands section and split it into per-command help."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .document import Document, Node, NodeType
from .errors import (
    CommandHeadingError,
    DuplicateCommandError,
    SectionEndNotFoundError,
    SectionNotFoundError,
)
from .render import Generator, flatten_text

__all__ = [
    "DEFAULT_SECTION",
    "ExtractState",
    "HelpEntry",
    "HelpTable",
    "Section",
    "extract_helps",
    "locate_section",
]

DEFAULT_SECTION = "Commands"
EXAMPLES_SUFFIX = " examples"

_LOGGER = logging.getLogger(__name__)


@dataclass
class HelpEntry:
    """Rendered long description and examples for one command."""

    long: str = ""
    example: str = ""


HelpTable = dict[str, HelpEntry]


class ExtractState(Enum):
    IDLE = 0
    COLLECTING_LONG = 1
    COLLECTING_EXAMPLE = 2


@dataclass(frozen=True)
class Section:
    """Heading that opens the section and the heading that closes it."""

    start: Node
    end: Node


def locate_section(
    document: Document, title: str = DEFAULT_SECTION
) -> Section:
    """Find the level-2 ``title`` heading and the next heading at level <= 2."""

    start = None
    for node in document.top_level():
        if (
            node.type is NodeType.HEADING
            and node.level == 2
            and flatten_text(document, node) == title
        ):
            start = node
            break
    if start is None:
        raise SectionNotFoundError(title)

    for node in document.siblings(start.next_sibling):
        if node.type is NodeType.HEADING and node.level <= 2:
            return Section(start=start, end=node)
    raise SectionEndNotFoundError(title)


def extract_helps(
    document: Document,
    generator: Optional[Generator] = None,
    *,
    section: str = DEFAULT_SECTION,
    strict_duplicates: bool = False,
    logger: Optional[logging.Logger] = None,
) -> HelpTable:
    """Walk the commands section and render each command's help segments."""

    return _Extractor(
        document,
        generator or Generator(),
        strict_duplicates=strict_duplicates,
        logger=logger or _LOGGER,
    ).run(locate_section(document, section))


class _Extractor:
    def __init__(
        self,
        document: Document,
        generator: Generator,
        *,
        strict_duplicates: bool,
        logger: logging.Logger,
    ) -> None:
        self.document = document
        self.generator = generator
        self.strict_duplicates = strict_duplicates
        self.logger = logger
        self.helps: HelpTable = {}
        self.state = ExtractState.IDLE
        self.command: Optional[str] = None
        self.start: Optional[int] = None
        self._written: set[tuple[str, str]] = set()

    def run(self, section: Section) -> HelpTable:
        self.logger.debug(
            "Located commands section",
            extra={
                "start_line": section.start.line,
                "end_line": section.end.line,
            },
        )
        for node in self.document.siblings(
            section.start.next_sibling, section.end.index
        ):
            if node.type is not NodeType.HEADING or node.level < 3:
                continue
            if node.level == 3:
                name = self._command_name(node)
                self._begin(node, name, ExtractState.COLLECTING_LONG)
            elif node.level == 4:
                name = self._examples_name(node)
                if name is not None:
                    self._begin(node, name, ExtractState.COLLECTING_EXAMPLE)
        self._flush(section.end.index)
        self.logger.debug(
            "Extracted command help", extra={"command_count": len(self.helps)}
        )
        return self.helps

    def _begin(self, node: Node, command: str, state: ExtractState) -> None:
        self._flush(node.index)
        self.logger.debug(
            "Found command heading",
            extra={"command": command, "line": node.line, "state": state.name},
        )
        self.helps.setdefault(command, HelpEntry())
        self.command = command
        self.start = node.next_sibling
        self.state = state

    def _flush(self, end: int) -> None:
        if self.state is ExtractState.IDLE or self.command is None:
            return
        entry = self.helps[self.command]
        if self.state is ExtractState.COLLECTING_LONG:
            self._check_duplicate("long")
            entry.long = self.generator.render_long(
                self.document, self.start, end
            )
        else:
            self._check_duplicate("example")
            entry.example = self.generator.render_example(
                self.document, self.start, end
            )

    def _check_duplicate(self, field: str) -> None:
        key = (self.command or "", field)
        if key in self._written:
            if self.strict_duplicates:
                raise DuplicateCommandError(key[0], field)
            self.logger.warning(
                "Overwriting duplicate command help",
                extra={"command": key[0], "field": field},
            )
        self._written.add(key)

    def _command_name(self, heading: Node) -> str:
        children = list(self.document.children(heading.index))
        code = _leading_code(children)
        if code is None:
            offender = children[0] if children else heading
            raise CommandHeadingError(offender.markup, line=heading.line)
        return code.literal

    def _examples_name(self, heading: Node) -> Optional[str]:
        children = list(self.document.children(heading.index))
        code = _leading_code(children)
        if code is None:
            return None
        rest = children[children.index(code) + 1 :]
        if (
            len(rest) == 1
            and rest[0].type is NodeType.TEXT
            and rest[0].literal == EXAMPLES_SUFFIX
        ):
            return code.literal
        return None


def _leading_code(children: list[Node]) -> Optional[Node]:
    if children and children[0].type is NodeType.CODE:
        return children[0]
    if (
        len(children) > 1
        and children[0].type is NodeType.TEXT
        and children[1].type is NodeType.CODE
    ):
        return children[1]
    return None
