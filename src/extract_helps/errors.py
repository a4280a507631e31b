"""Error taxonomy for help extraction runs."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ExtractHelpsError",
    "SectionNotFoundError",
    "SectionEndNotFoundError",
    "UnsupportedNodeTypeError",
    "CommandHeadingError",
    "DuplicateCommandError",
    "FormatterError",
    "InputDecodeError",
]


class ExtractHelpsError(RuntimeError):
    """Base class for fatal extraction failures."""


class SectionNotFoundError(ExtractHelpsError):
    """Raised when the document has no level-2 heading for the section."""

    def __init__(self, title: str) -> None:
        super().__init__(f'cannot find "{title}" section')
        self.title = title


class SectionEndNotFoundError(ExtractHelpsError):
    """Raised when the section runs to the end of the document."""

    def __init__(self, title: str) -> None:
        super().__init__(f'cannot find end of "{title}" section')
        self.title = title


class UnsupportedNodeTypeError(ExtractHelpsError):
    """Raised when a node has no renderer."""

    prefix = "unsupported node type"

    def __init__(self, node_type: str, *, line: Optional[int] = None) -> None:
        message = f"{self.prefix}: {node_type}"
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.node_type = node_type
        self.line = line


class CommandHeadingError(UnsupportedNodeTypeError):
    """Raised when a level-3 heading does not introduce a command."""

    prefix = "command heading must start with a code span, found"


class DuplicateCommandError(ExtractHelpsError):
    """Raised in strict mode when a command field is defined twice."""

    def __init__(self, command: str, field: str) -> None:
        super().__init__(f'duplicate {field} help for command "{command}"')
        self.command = command
        self.field = field


class FormatterError(ExtractHelpsError):
    """Raised when the formatting pass over generated source fails."""


class InputDecodeError(ExtractHelpsError):
    """Raised when the input document is not valid UTF-8."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: input is not valid UTF-8 ({reason})")
        self.source = source
