from __future__ import annotations

from extract_helps.document import NodeType, parse_document

from fixtures import markdown


def test_parse_document_builds_linked_arena(scenario_text: str) -> None:
    document = parse_document(scenario_text)

    assert document.root.type is NodeType.DOCUMENT
    top = list(document.top_level())
    assert [node.type for node in top] == [
        NodeType.HEADING,
        NodeType.HEADING,
        NodeType.HEADING,
        NodeType.PARAGRAPH,
        NodeType.HEADING,
        NodeType.CODE_BLOCK,
        NodeType.HEADING,
    ]
    assert [node.level for node in top if node.type is NodeType.HEADING] == [
        1,
        2,
        3,
        4,
        2,
    ]
    for current, following in zip(top, top[1:]):
        assert current.next_sibling == following.index
        assert current.parent == 0
    assert top[-1].next_sibling is None
    assert all(document.node(node.index) is node for node in document.nodes)


def test_inline_children_are_spliced_into_headings(scenario_text: str) -> None:
    document = parse_document(scenario_text)
    examples = [
        node
        for node in document.top_level()
        if node.type is NodeType.HEADING and node.level == 4
    ][0]

    children = list(document.children(examples.index))

    assert [(child.type, child.literal) for child in children] == [
        (NodeType.CODE, "add"),
        (NodeType.TEXT, " examples"),
    ]
    assert all(child.parent == examples.index for child in children)
    assert examples.line == 9


def test_code_blocks_keep_their_literal_and_markup() -> None:
    document = parse_document(
        markdown(
            """
            ```sh
            echo hi
            ```

                indented
            """
        )
    )

    fence, indented = list(document.top_level())

    assert fence.type is NodeType.CODE_BLOCK
    assert fence.markup == "fence"
    assert fence.literal == "echo hi\n"
    assert indented.type is NodeType.CODE_BLOCK
    assert indented.markup == "code_block"
    assert indented.literal == "indented\n"


def test_line_breaks_become_newline_text_nodes() -> None:
    document = parse_document("first line\nsecond line\n")
    paragraph = next(document.top_level())

    literals = [child.literal for child in document.children(paragraph.index)]

    assert literals == ["first line", "\n", "second line"]


def test_tables_map_to_row_groups_rows_and_cells() -> None:
    document = parse_document(
        markdown(
            """
            | A | B |
            | - | - |
            | 1 | 2 |
            """
        )
    )
    table = next(document.top_level())
    head, body = list(document.children(table.index))
    row = next(document.children(body.index))

    assert table.type is NodeType.TABLE
    assert head.type is NodeType.TABLE_HEAD
    assert body.type is NodeType.TABLE_BODY
    assert row.type is NodeType.TABLE_ROW
    assert [cell.type for cell in document.children(row.index)] == [
        NodeType.TABLE_CELL,
        NodeType.TABLE_CELL,
    ]


def test_unknown_nodes_keep_parser_name() -> None:
    document = parse_document("- item\n")

    node = next(document.top_level())

    assert node.type is NodeType.OTHER
    assert node.markup == "bullet_list"


def test_siblings_stop_at_end_index(scenario_text: str) -> None:
    document = parse_document(scenario_text)
    top = list(document.top_level())

    between = list(document.siblings(top[1].index, top[4].index))

    assert [node.index for node in between] == [
        node.index for node in top[1:4]
    ]


def test_parse_document_accepts_a_single_heading() -> None:
    document = parse_document("## Commands\n")

    assert document.root.line is None
    assert document.root.markup == "root"
    heading = next(document.top_level())
    assert heading.type is NodeType.HEADING
    assert heading.level == 2
    assert heading.line == 1
    assert [child.literal for child in document.children(heading.index)] == [
        "Commands"
    ]
