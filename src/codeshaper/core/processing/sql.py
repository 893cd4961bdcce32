from __future__ import annotations

"""
SQL Keyword Reflow.

A layout heuristic, not a grammar formatter: clause keywords start new lines
(upper-cased), top-level comma lists and AND/OR continuations move onto
indented lines, and JOIN clauses are indented one level. String literals
and comments pass through verbatim.
"""

import logging
import re
from typing import List, Optional

from codeshaper.core.processing.scanner import SQL_STYLE, LexicalScanner, SegmentKind
from codeshaper.domain.constants import (
    DEFAULT_INDENT,
    SQL_CLAUSE_KEYWORDS,
    SQL_COMPOUND_PAIRS,
    SQL_CONTINUATION_KEYWORDS,
)

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"\s+|[A-Za-z_][\w$]*|.", re.DOTALL)
_CLAUSES = frozenset(SQL_CLAUSE_KEYWORDS)
_JOIN_PREFIXES = frozenset({"JOIN", "LEFT", "RIGHT", "INNER", "OUTER"})
_UPPERCASE_WORDS = _CLAUSES | SQL_CONTINUATION_KEYWORDS | {"BY"}
_NO_SPACE_BEFORE = frozenset(",;)")


class _SqlLayout:
    def __init__(self) -> None:
        self.lines: List[str] = []
        self.current: List[str] = []
        self.indent = 0
        self.pending_space = False
        self.depth = 0
        self.last_word: Optional[str] = None

    def write(self, text: str) -> None:
        if self.current and self.pending_space and text[0] not in _NO_SPACE_BEFORE:
            self.current.append(" ")
        self.current.append(text)
        self.pending_space = False

    def newline(self, indent: int) -> None:
        if self.current:
            self.lines.append(DEFAULT_INDENT * self.indent + "".join(self.current).rstrip())
        self.current = []
        self.indent = indent
        self.pending_space = False

    def word(self, text: str) -> None:
        upper = text.upper()
        previous = self.last_word
        self.last_word = upper

        if upper in _CLAUSES:
            if previous is not None and (previous, upper) in SQL_COMPOUND_PAIRS:
                self.write(upper)
                return
            extra = 1 if upper in _JOIN_PREFIXES else 0
            self.newline(self.depth + extra)
            self.write(upper)
        elif upper in SQL_CONTINUATION_KEYWORDS and self.depth == 0:
            self.newline(1)
            self.write(upper)
        else:
            self.write(upper if upper in _UPPERCASE_WORDS else text)

    def punct(self, ch: str) -> None:
        self.last_word = None
        if ch == "(":
            self.depth += 1
            self.write(ch)
        elif ch == ")":
            self.depth = max(0, self.depth - 1)
            self.write(ch)
        elif ch == "," and self.depth == 0:
            self.write(ch)
            self.newline(1)
        elif ch == ";" and self.depth == 0:
            self.write(ch)
            self.newline(0)
        else:
            self.write(ch)

    def render(self) -> str:
        self.newline(0)
        return "\n".join(self.lines)


def beautify_sql(content: str) -> str:
    """
    Reflow SQL text onto keyword-led lines.

    Example:
        'select a,b from t where x=1 and y=2' ->
        SELECT a,
          b
        FROM t
        WHERE x=1
          AND y=2
    """
    layout = _SqlLayout()

    for seg in LexicalScanner(content, SQL_STYLE).segments():
        if seg.kind is SegmentKind.LINE_COMMENT:
            layout.write(seg.text.rstrip())
            layout.newline(layout.indent)
            continue
        if seg.kind is not SegmentKind.CODE:
            layout.last_word = None
            layout.write(seg.text)
            continue

        for match in _TOKEN_PATTERN.finditer(seg.text):
            token = match.group(0)
            if token.isspace():
                layout.pending_space = True
            elif token[0].isalpha() or token[0] == "_":
                layout.word(token)
            else:
                layout.punct(token)

    result = layout.render()
    logger.debug(f"SQL reflow produced {len(layout.lines)} lines.")
    return result
