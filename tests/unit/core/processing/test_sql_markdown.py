from __future__ import annotations

"""
Unit tests for the SQL reflow and the Markdown normalizer.
"""

from codeshaper.core.processing.markdown import beautify_markdown
from codeshaper.core.processing.sql import beautify_sql

# -----------------------------------------------------------------------------
# SQL
# -----------------------------------------------------------------------------

SIMPLE_QUERY_LAYOUT = "SELECT a,\n  b\nFROM t\nWHERE x=1\n  AND y=2"


def test_sql_clause_layout() -> None:
    """Clauses start lines; top-level lists and AND/OR continue indented."""
    assert beautify_sql("select a,b from t where x=1 and y=2") == SIMPLE_QUERY_LAYOUT


def test_sql_reflow_is_idempotent() -> None:
    assert beautify_sql(SIMPLE_QUERY_LAYOUT) == SIMPLE_QUERY_LAYOUT


def test_sql_joins_are_indented_and_compound() -> None:
    src = "select * from a left join b on a.id=b.id inner join c on 1=1"
    expected = (
        "SELECT *\n"
        "FROM a\n"
        "  LEFT JOIN b on a.id=b.id\n"
        "  INNER JOIN c on 1=1"
    )
    assert beautify_sql(src) == expected


def test_sql_group_and_order_by() -> None:
    expected = "SELECT a\nFROM t\nGROUP BY a\nORDER BY a"
    assert beautify_sql("select a from t group by a order by a") == expected


def test_sql_commas_inside_parentheses_stay_inline() -> None:
    assert beautify_sql("select f(a,b) from t") == "SELECT f(a,b)\nFROM t"


def test_sql_literals_and_comments_untouched() -> None:
    assert beautify_sql("select 'a,b from' from t") == "SELECT 'a,b from'\nFROM t"
    assert beautify_sql("select a -- note\nfrom t") == "SELECT a -- note\nFROM t"


def test_sql_statement_terminator_breaks_line() -> None:
    assert beautify_sql("delete from t;select 1") == "DELETE\nFROM t;\nSELECT 1"

# -----------------------------------------------------------------------------
# MARKDOWN
# -----------------------------------------------------------------------------

def test_markdown_markers_normalized() -> None:
    src = (
        "#Title\n\n\n\n"
        "- one\n+ two\n1) first\n2.   second\n"
        "some ** bold ** and ~~ gone ~~ and * it *"
    )
    expected = (
        "# Title\n\n"
        "* one\n* two\n1. first\n2. second\n"
        "some **bold** and ~~gone~~ and *it*"
    )
    assert beautify_markdown(src) == expected


def test_markdown_fenced_code_is_verbatim() -> None:
    src = "```\n-  raw\n\n\n\n```\n- x"
    assert beautify_markdown(src) == "```\n-  raw\n\n\n\n```\n* x"


def test_markdown_bold_list_item() -> None:
    assert beautify_markdown("* **x**") == "* **x**"


def test_markdown_is_idempotent() -> None:
    once = beautify_markdown("#A\n\n\n-  b\n* c *\n")
    assert beautify_markdown(once) == once
