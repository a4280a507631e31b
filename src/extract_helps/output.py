"""Assemble extracted help and render it as Python source or a debug dump."""

from __future__ import annotations

import json
import shlex
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from jinja2 import Environment, StrictUndefined, Template

from .extract import HelpEntry

__all__ = [
    "Formatter",
    "Help",
    "HelpOutput",
    "assemble",
    "emit",
    "multiline_string",
    "python_string",
    "render_debug",
    "render_source",
]

Formatter = Callable[[str], str]

_VALUE_INDENT = " " * 12

_SOURCE_TEMPLATE = '''\
# Code generated by extract-helps from {{ input_file or "<stdin>" }}. DO NOT EDIT.
{%- if input_file and output_file %}
# Regenerate with: extract-helps -i {{ input_file | shell_quote }} -o {{ output_file | shell_quote }}
{%- endif %}

from typing import NamedTuple


class Help(NamedTuple):
    long: str
    example: str = ""


HELPS = {
{%- for help in helps %}
    {{ help.command | python_string }}: Help(
        long={{ help.long | multiline_string }},
{%- if help.example %}
        example={{ help.example | multiline_string }},
{%- endif %}
    ),
{%- endfor %}
}
'''

_DEBUG_TEMPLATE = """\
InputFile: {{ input_file }}
OutputFile: {{ output_file }}
{% for help in helps %}
# {{ help.command }}
{{ help.long }}

Examples:
{{ help.example }}
{% endfor %}"""


@dataclass(frozen=True)
class Help:
    """Finished help for one command."""

    command: str
    long: str
    example: str


@dataclass(frozen=True)
class HelpOutput:
    """Everything the emitters need, with help sorted by command name."""

    helps: tuple[Help, ...]
    input_file: str = ""
    output_file: str = ""

    @property
    def commands(self) -> tuple[str, ...]:
        return tuple(help.command for help in self.helps)


def assemble(
    helps: Mapping[str, HelpEntry],
    *,
    input_file: str = "",
    output_file: str = "",
) -> HelpOutput:
    """Freeze ``helps`` into a deterministic, sorted :class:`HelpOutput`."""

    return HelpOutput(
        helps=tuple(
            Help(
                command=command,
                long=helps[command].long or "",
                example=helps[command].example or "",
            )
            for command in sorted(helps)
        ),
        input_file=input_file,
        output_file=output_file,
    )


def python_string(value: str) -> str:
    """Return ``value`` as a double-quoted Python string literal."""

    return json.dumps(value, ensure_ascii=False)


def multiline_string(value: str, indent: str = _VALUE_INDENT) -> str:
    """Render ``value`` as parenthesised literals, one per source line."""

    if not value:
        return '""'
    lines = value.split("\n")
    pieces = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        pieces.append(lines[-1])
    body = "".join(f"{indent}{python_string(piece)}\n" for piece in pieces)
    return f"(\n{body}{indent[:-4]})"


def _environment() -> Environment:
    env = Environment(
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["python_string"] = python_string
    env.filters["multiline_string"] = multiline_string
    env.filters["shell_quote"] = shlex.quote
    return env


_ENV = _environment()


def source_template() -> Template:
    return _ENV.from_string(_SOURCE_TEMPLATE)


def debug_template() -> Template:
    return _ENV.from_string(_DEBUG_TEMPLATE)


def render_source(output: HelpOutput) -> str:
    return source_template().render(
        helps=output.helps,
        input_file=output.input_file,
        output_file=output.output_file,
    )


def render_debug(output: HelpOutput) -> str:
    return debug_template().render(
        helps=output.helps,
        input_file=output.input_file,
        output_file=output.output_file,
    )


def emit(
    output: HelpOutput,
    *,
    debug: bool = False,
    formatter: Optional[Formatter] = None,
) -> str:
    """Render ``output``; ``formatter`` post-processes generated source only."""

    if debug:
        return render_debug(output)
    source = render_source(output)
    if formatter is not None:
        return formatter(source)
    return source
