from __future__ import annotations

import pytest

from size_compare.report import collapsible, markdown_table, pretty_bytes, signed_percent


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "0 B"),
        (100, "100 B"),
        (1000, "1 kB"),
        (1234, "1.23 kB"),
        (1_500_000, "1.5 MB"),
        (-2048, "-2.05 kB"),
    ],
)
def test_pretty_bytes(value: int, expected: str) -> None:
    assert pretty_bytes(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.0, "="),
        (25.0, "+25.00%"),
        (-12.345, "-12.35%"),
        (0.004, "+0.00%"),
    ],
)
def test_signed_percent(value: float, expected: str) -> None:
    assert signed_percent(value) == expected


def test_markdown_table_pads_columns_and_escapes_pipes() -> None:
    table = markdown_table([["File", "Size"], ["a|b.js", "1 kB"]])

    assert table.splitlines() == [
        "| File    | Size |",
        "| ------- | ---- |",
        "| a\\|b.js | 1 kB |",
    ]


def test_markdown_table_minimum_delimiter_width() -> None:
    assert markdown_table([["A"], ["b"]]).splitlines()[1] == "| --- |"


def test_markdown_table_of_nothing_is_empty() -> None:
    assert markdown_table([]) == ""


def test_collapsible_block() -> None:
    assert collapsible("Title", "body") == (
        "<details>\n<summary>Title</summary>\n\nbody\n\n</details>"
    )
