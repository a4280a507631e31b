from __future__ import annotations

import pytest

from extract_helps.document import parse_document
from extract_helps.errors import UnsupportedNodeTypeError
from extract_helps.render import (
    INDENT,
    Generator,
    flatten_text,
    format_grid,
    indent_block,
    wrap_paragraph,
)

from fixtures import markdown


def _first(text: str):
    document = parse_document(text)
    return document, next(document.top_level())


def test_flatten_text_quotes_code_and_collapses_newlines() -> None:
    document, paragraph = _first("Run `chezmoi\napply` now\nplease.\n")

    assert flatten_text(document, paragraph) == 'Run "chezmoi apply" now please.'


def test_flatten_text_descends_into_unknown_inline_nodes() -> None:
    document, paragraph = _first("Use *emphasis* and [a `link`](http://x).\n")

    assert flatten_text(document, paragraph) == 'Use emphasis and a "link".'


def test_wrap_paragraph_joins_words_and_respects_width() -> None:
    words = ["alpha", "beta", "gamma", "delta", "epsilon"] * 8
    text = "  ".join(words)

    wrapped = wrap_paragraph(text, 20)

    lines = wrapped.split("\n")
    assert all(len(line) <= 20 for line in lines)
    assert " ".join(lines) == " ".join(words)


def test_wrap_paragraph_never_breaks_long_words() -> None:
    wrapped = wrap_paragraph("short averyveryverylongword end", 8)

    assert wrapped.split("\n") == ["short", "averyveryverylongword", "end"]


def test_indent_block_prefixes_every_line() -> None:
    assert indent_block("a\nb\n") == "  a\n  b\n  "
    assert indent_block("") == INDENT


def test_code_block_round_trips_without_indent() -> None:
    literal = "chezmoi add ~/.bashrc\n\tkeep\ttabs  \n\n*not* `markup`\n"
    document, block = _first("```\n" + literal + "```\n")

    rendered = Generator().render_node(document, block)

    stripped = "\n".join(line[len(INDENT):] for line in rendered.split("\n"))
    assert stripped == literal


def test_format_grid_pads_columns_with_one_space_gutter() -> None:
    grid = format_grid([["Type", "Description"], ["a", "b"]])

    assert grid == "Type Description \na    b           \n"


def test_render_table_aligns_head_and_body_rows() -> None:
    document, table = _first(
        markdown(
            """
            | Type      | Description   |
            | --------- | ------------- |
            | `dirs`    | Directories   |
            | `files`   | Regular files |
            | `scripts` | Scripts       |
            """
        )
    )

    rendered = Generator().render_table(document, table)

    assert rendered == (
        "  Type      Description   \n"
        '  "dirs"    Directories   \n'
        '  "files"   Regular files \n'
        '  "scripts" Scripts       \n'
        "  "
    )
    lines = rendered.split("\n")[:-1]
    assert len(lines) == 4
    assert [line.split()[0] for line in lines] == [
        "Type",
        '"dirs"',
        '"files"',
        '"scripts"',
    ]


def test_render_paragraph_wraps_at_generator_width() -> None:
    document, paragraph = _first("one two three four five six\n")

    rendered = Generator(width=9).render_paragraph(document, paragraph)

    assert rendered == "one two\nthree\nfour five\nsix\n"


def test_render_heading_flattens_text() -> None:
    document, heading = _first("#### `--include` *types*\n")

    assert Generator().render_node(document, heading) == '"--include" types\n'


def test_render_range_separates_blocks_with_blank_line() -> None:
    document = parse_document(
        markdown(
            """
            First paragraph.

                code

            Second paragraph.
            """
        )
    )

    rendered = Generator().render_range(document, document.root.first_child, None)

    assert rendered == "First paragraph.\n\n  code\n  \nSecond paragraph.\n"


def test_render_example_strips_dangling_indent() -> None:
    document = parse_document("Run:\n\n```\nchezmoi apply\n```\n")

    generator = Generator()
    start = document.root.first_child

    assert generator.render_long(document, start, None) == (
        "Run:\n\n  chezmoi apply\n  "
    )
    assert generator.render_example(document, start, None) == (
        "Run:\n\n  chezmoi apply\n"
    )


def test_render_node_rejects_unsupported_block() -> None:
    document, node = _first("> quoted\n")

    with pytest.raises(UnsupportedNodeTypeError) as excinfo:
        Generator().render_node(document, node)

    assert excinfo.value.node_type == "blockquote"
    assert excinfo.value.line == 1
    assert "unsupported node type: blockquote" in str(excinfo.value)


def test_generator_rejects_non_positive_width() -> None:
    with pytest.raises(ValueError):
        Generator(width=0)


def test_wrap_paragraph_fills_lines_greedily() -> None:
    assert wrap_paragraph("aaa bb cc ddddd", 6) == "aaa bb\ncc\nddddd"
