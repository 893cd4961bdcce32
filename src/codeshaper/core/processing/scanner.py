from __future__ import annotations

"""
Lexical Scanner Primitives.

Provides the character-level state machine shared by the minification and
beautification engines. The scanner splits a source text into typed segments
(code, string literal, line comment, block comment, preprocessor directive)
so that callers can rewrite code freely while passing literals and comments
through untouched. Comment and quote syntax is supplied per language group
through a LexicalSyntax descriptor.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# STATE MODELS
# -----------------------------------------------------------------------------

class ScanMode(Enum):
    NORMAL = "normal"
    IN_STRING = "in_string"
    IN_LINE_COMMENT = "in_line_comment"
    IN_BLOCK_COMMENT = "in_block_comment"
    IN_DIRECTIVE = "in_directive"
    IN_TAG = "in_tag"


class SegmentKind(Enum):
    CODE = "code"
    STRING = "string"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    DIRECTIVE = "directive"


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    text: str

    @property
    def is_comment(self) -> bool:
        return self.kind in (SegmentKind.LINE_COMMENT, SegmentKind.BLOCK_COMMENT)


@dataclass
class ScanState:
    """
    Mutable per-invocation scanner state.

    Created at the start of a scan and discarded at its end; never shared
    between requests.

    Attributes:
        mode: Current lexical mode.
        quote_char: Delimiter of the open string literal, if any.
        indent_level: Current block depth used by layout strategies.
        bracket_stack: Open '(' / '[' depth, one entry per enclosing block.
        self_closing_active: True while the current markup tag ends in '/>'.
    """
    mode: ScanMode = ScanMode.NORMAL
    quote_char: str = ""
    indent_level: int = 0
    bracket_stack: List[int] = field(default_factory=lambda: [0])
    self_closing_active: bool = False

    @property
    def bracket_depth(self) -> int:
        return self.bracket_stack[-1]

    def open_bracket(self) -> None:
        self.bracket_stack[-1] += 1

    def close_bracket(self) -> None:
        self.bracket_stack[-1] = max(0, self.bracket_stack[-1] - 1)

    def open_block(self) -> None:
        """Enter a brace block: indent and start a fresh bracket counter."""
        self.indent_level += 1
        self.bracket_stack.append(0)

    def close_block(self) -> None:
        """Leave a brace block. Unbalanced closers floor at depth zero."""
        self.indent_level = max(0, self.indent_level - 1)
        if len(self.bracket_stack) > 1:
            self.bracket_stack.pop()


@dataclass(frozen=True)
class LexicalSyntax:
    """
    Comment and literal delimiters of a language group.

    Attributes:
        line_comments: Markers that open a comment running to end of line.
        block_comment: (open, close) markers of a block comment.
        quotes: Characters that delimit string literals.
        directive_marker: Character opening a preprocessor line when it is
            the first non-blank character of a line.
    """
    line_comments: Tuple[str, ...] = ()
    block_comment: Optional[Tuple[str, str]] = None
    quotes: FrozenSet[str] = frozenset({'"', "'"})
    directive_marker: Optional[str] = None


C_STYLE = LexicalSyntax(
    line_comments=("//",),
    block_comment=("/*", "*/"),
    quotes=frozenset({'"', "'", "`"}),
)
JAVA_FAMILY_STYLE = LexicalSyntax(
    line_comments=("//",),
    block_comment=("/*", "*/"),
    quotes=frozenset({'"', "'", "`"}),
    directive_marker="#",
)
CSS_STYLE = LexicalSyntax(block_comment=("/*", "*/"))
SQL_STYLE = LexicalSyntax(line_comments=("--",), block_comment=("/*", "*/"))
HASH_STYLE = LexicalSyntax(line_comments=("#",))

# -----------------------------------------------------------------------------
# SCANNER
# -----------------------------------------------------------------------------

class LexicalScanner:
    """
    Single-pass segmenting scanner.

    Iterating `segments()` walks the text once, driving `state.mode` through
    the transitions NORMAL -> IN_STRING / IN_LINE_COMMENT / IN_BLOCK_COMMENT /
    IN_DIRECTIVE and back. Concatenating the yielded segment texts always
    reproduces the input exactly.
    """

    def __init__(self, text: str, syntax: LexicalSyntax):
        self.text = text or ""
        self.syntax = syntax
        self.state = ScanState()

    def segments(self) -> Iterator[Segment]:
        text = self.text
        syntax = self.syntax
        state = self.state
        n = len(text)
        i = 0
        start = 0
        at_line_start = True

        while i < n:
            mode = state.mode

            if mode is ScanMode.NORMAL:
                ch = text[i]
                opener = self._match_opener(i, at_line_start)
                if opener is None:
                    if ch == "\n":
                        at_line_start = True
                    elif not ch.isspace():
                        at_line_start = False
                    i += 1
                    continue

                if i > start:
                    yield Segment(SegmentKind.CODE, text[start:i])
                start = i
                new_mode, width = opener
                state.mode = new_mode
                if new_mode is ScanMode.IN_STRING:
                    state.quote_char = ch
                at_line_start = False
                i += width

            elif mode is ScanMode.IN_STRING:
                ch = text[i]
                if ch == "\\":
                    i += 2
                    continue
                i += 1
                if ch == state.quote_char:
                    yield Segment(SegmentKind.STRING, text[start:i])
                    start = i
                    state.mode = ScanMode.NORMAL
                    state.quote_char = ""

            elif mode in (ScanMode.IN_LINE_COMMENT, ScanMode.IN_DIRECTIVE):
                end = self._line_end(i, continued=mode is ScanMode.IN_DIRECTIVE)
                kind = SegmentKind.LINE_COMMENT if mode is ScanMode.IN_LINE_COMMENT else SegmentKind.DIRECTIVE
                yield Segment(kind, text[start:end])
                start = i = end
                state.mode = ScanMode.NORMAL

            elif mode is ScanMode.IN_BLOCK_COMMENT:
                close = syntax.block_comment[1] if syntax.block_comment else ""
                found = text.find(close, i)
                end = n if found < 0 else found + len(close)
                yield Segment(SegmentKind.BLOCK_COMMENT, text[start:end])
                start = i = end
                state.mode = ScanMode.NORMAL

            else:
                raise RuntimeError(f"Scanner reached unsupported mode {mode}.")

        # Unterminated literals and comments run to the end of input
        if start < n:
            yield Segment(_TRAILING_KIND[state.mode], text[start:])
        state.mode = ScanMode.NORMAL

    def _match_opener(self, i: int, at_line_start: bool) -> Optional[Tuple[ScanMode, int]]:
        text = self.text
        syntax = self.syntax
        ch = text[i]

        if ch in syntax.quotes:
            return ScanMode.IN_STRING, 1
        for marker in syntax.line_comments:
            if text.startswith(marker, i):
                return ScanMode.IN_LINE_COMMENT, len(marker)
        if syntax.block_comment and text.startswith(syntax.block_comment[0], i):
            return ScanMode.IN_BLOCK_COMMENT, len(syntax.block_comment[0])
        if syntax.directive_marker and at_line_start and ch == syntax.directive_marker:
            return ScanMode.IN_DIRECTIVE, 1
        return None

    def _line_end(self, i: int, continued: bool) -> int:
        """Index of the newline ending the current line (backslash-continued for directives)."""
        text = self.text
        while True:
            found = text.find("\n", i)
            if found < 0:
                return len(text)
            last = found - 1
            if last >= 0 and text[last] == "\r":
                last -= 1
            if continued and last >= 0 and text[last] == "\\":
                i = found + 1
                continue
            return found


_TRAILING_KIND = {
    ScanMode.NORMAL: SegmentKind.CODE,
    ScanMode.IN_STRING: SegmentKind.STRING,
    ScanMode.IN_LINE_COMMENT: SegmentKind.LINE_COMMENT,
    ScanMode.IN_BLOCK_COMMENT: SegmentKind.BLOCK_COMMENT,
    ScanMode.IN_DIRECTIVE: SegmentKind.DIRECTIVE,
}

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def scan(text: str, syntax: LexicalSyntax) -> List[Segment]:
    """Split a text into typed segments for the given syntax."""
    return list(LexicalScanner(text, syntax).segments())


def strip_comments(segments: List[Segment], block_replacement: str = " ") -> List[Segment]:
    """
    Drop comment segments and merge the surrounding code.

    Block comments are replaced by `block_replacement` so that removing
    `a/*x*/b` never glues two identifiers together.

    Returns:
        List[Segment]: Alternating code/string/directive segments.
    """
    out: List[Segment] = []
    for seg in segments:
        if seg.is_comment:
            replacement = block_replacement if seg.kind is SegmentKind.BLOCK_COMMENT else ""
            if not replacement:
                continue
            seg = Segment(SegmentKind.CODE, replacement)
        if seg.kind is SegmentKind.CODE and out and out[-1].kind is SegmentKind.CODE:
            out[-1] = Segment(SegmentKind.CODE, out[-1].text + seg.text)
        else:
            out.append(seg)
    return out
