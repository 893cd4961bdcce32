from __future__ import annotations

"""
Beautification Engine.

Re-expands compacted or dense text into an indented, readable layout.
Two strategy families are implemented:

1. Brace-depth layout (JavaScript family, PHP, Java family, CSS): a single
   pass over the segments of the shared lexical scanner. String literals and
   comments are copied verbatim; braces, semicolons and brackets in code
   drive the indentation held in ScanState.
2. Indentation inference (Python, Ruby): line-oriented, driven by block
   keywords and by the indentation of the original source.

Markup, SQL and Markdown strategies live in their own modules and are
dispatched from here.
"""

import json
import logging
import re
from typing import Callable, Dict, List, Optional

from codeshaper.core.processing.markdown import beautify_markdown
from codeshaper.core.processing.markup import beautify_markup
from codeshaper.core.processing.minifier import parse_json
from codeshaper.core.processing.scanner import (
    C_STYLE,
    CSS_STYLE,
    JAVA_FAMILY_STYLE,
    LexicalScanner,
    LexicalSyntax,
    ScanState,
    Segment,
    SegmentKind,
)
from codeshaper.core.processing.sql import beautify_sql
from codeshaper.domain.constants import (
    BRACE_ATTACHED_KEYWORDS,
    DEFAULT_INDENT,
    PYTHON_INDENT,
    RUBY_BLOCK_OPENERS,
    RUBY_INDENT,
    RUBY_MID_BLOCK,
)
from codeshaper.domain.languages import LanguageId

logger = logging.getLogger(__name__)

_WORD_PATTERN = re.compile(r"[A-Za-z_$][\w$]*")
_RUBY_FIRST_WORD_PATTERN = re.compile(r"^([A-Za-z_]\w*)\b")
_RUBY_DO_PATTERN = re.compile(r"\bdo\b")
_RUBY_TRAILING_END_PATTERN = re.compile(r"\bend\b[\s;]*$")

# Characters that may follow a closing brace on the same line: "});" "}," "}."
_CLOSE_BRACE_FOLLOWERS = frozenset(";,)].")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def beautify(content: str, language: LanguageId) -> str:
    """
    Beautify a full string of source text in-memory.

    Args:
        content: Raw (possibly minified) source text.
        language: Language family resolved by the classifier.

    Returns:
        str: Indented text. Unknown languages are returned unchanged.

    Raises:
        UnparseableJsonError: If JSON input cannot be parsed.
        RejectedMarkupError: If HTML/XML input carries DOCTYPE/ENTITY.
    """
    if not content:
        return content or ""

    handler = _HANDLERS.get(language)
    if handler is None:
        return content

    result = handler(content)
    logger.debug(f"Beautified {language.value}: {len(content)} -> {len(result)} chars")
    return result

# -----------------------------------------------------------------------------
# BRACE-DEPTH STRATEGIES
# -----------------------------------------------------------------------------

class _LineBuilder:
    """
    Accumulates output lines for the brace-depth strategies.

    The indentation of a line is fixed by the indent level in effect when
    its first non-blank fragment is written.
    """

    def __init__(self, state: ScanState, indent_unit: str = DEFAULT_INDENT):
        self.state = state
        self.indent_unit = indent_unit
        self.lines: List[str] = []
        self.current: List[str] = []
        self.line_level = 0

    @property
    def has_content(self) -> bool:
        return bool(self.current)

    def last_char(self) -> str:
        return self.current[-1][-1] if self.current else ""

    def write(self, text: str) -> None:
        if not self.current:
            if not text.strip():
                return
            self.line_level = self.state.indent_level
        self.current.append(text)

    def space(self) -> None:
        if self.current and not self.last_char().isspace():
            self.current.append(" ")

    def break_line(self) -> None:
        if self.current:
            body = "".join(self.current).rstrip()
            self.lines.append(self.indent_unit * self.line_level + body)
            self.current = []

    def blank_line(self) -> None:
        self.break_line()
        if self.lines and self.lines[-1]:
            self.lines.append("")

    def render(self) -> str:
        self.break_line()
        while self.lines and not self.lines[-1]:
            self.lines.pop()
        return "\n".join(self.lines)


class BraceLayout:
    """
    Brace-depth beautifier for JavaScript-like languages.

    Transitions on code characters:
        '{'  -> ' {', newline, indent + 1
        '}'  -> break, indent - 1 (floor 0), '}'
        ';'  -> ';', newline (only outside parentheses/brackets)
        ' '  -> collapsed to a single space
        '\\n' -> line break; runs of blank lines collapse to one
    """

    def __init__(self, content: str, syntax: LexicalSyntax = C_STYLE):
        self.scanner = LexicalScanner(content, syntax)
        self.state = self.scanner.state
        self.out = _LineBuilder(self.state)
        self.source_breaks = 0
        self.after_close = False

    def render(self) -> str:
        for seg in self.scanner.segments():
            if seg.kind is SegmentKind.CODE:
                self._code(seg.text)
            elif seg.kind is SegmentKind.DIRECTIVE:
                self.out.break_line()
                self.out.write(seg.text.strip())
                self.out.break_line()
                self._structural_break_done()
            else:
                self._literal(seg)
        return self.out.render()

    def _literal(self, seg: Segment) -> None:
        out = self.out
        if self.after_close and not seg.is_comment:
            out.break_line()
        if seg.is_comment:
            out.space()
        out.write(seg.text)
        self.after_close = False
        self.source_breaks = 0

    def _code(self, text: str) -> None:
        out = self.out
        state = self.state
        i = 0
        n = len(text)

        while i < n:
            ch = text[i]

            if ch == "\n":
                self._newline()
                i += 1
                continue
            if ch.isspace():
                out.space()
                i += 1
                continue

            if self.after_close:
                self.after_close = False
                word = _WORD_PATTERN.match(text, i)
                if word and word.group(0) in BRACE_ATTACHED_KEYWORDS:
                    out.space()
                elif ch not in _CLOSE_BRACE_FOLLOWERS:
                    out.break_line()
                    self.source_breaks = 0

            self.source_breaks = 0
            if ch == "{":
                out.space()
                out.write("{")
                state.open_block()
                out.break_line()
            elif ch == "}":
                out.break_line()
                state.close_block()
                out.write("}")
                self.after_close = True
            elif ch == ";":
                out.write(";")
                if state.bracket_depth == 0:
                    out.break_line()
            elif ch in "([":
                out.write(ch)
                state.open_bracket()
            elif ch in ")]":
                state.close_bracket()
                out.write(ch)
            else:
                out.write(ch)
            i += 1

    def _newline(self) -> None:
        self.after_close = False
        if self.out.has_content:
            self.out.break_line()
            self.source_breaks = 1
            return
        self.source_breaks += 1
        if self.source_breaks >= 2:
            self.out.blank_line()

    def _structural_break_done(self) -> None:
        self.after_close = False
        self.source_breaks = 0


class CssLayout:
    """
    Brace-depth beautifier for stylesheets.

    Whitespace (newlines included) is reflowed; every declaration lands on
    its own line and the last declaration of a block gains its ';'.
    """

    def __init__(self, content: str):
        self.scanner = LexicalScanner(content, CSS_STYLE)
        self.state = self.scanner.state
        self.out = _LineBuilder(self.state)

    def render(self) -> str:
        out = self.out
        state = self.state
        for seg in self.scanner.segments():
            if seg.kind is not SegmentKind.CODE:
                if seg.is_comment:
                    out.space()
                out.write(seg.text)
                continue

            for ch in seg.text:
                if ch.isspace():
                    out.space()
                elif ch == "{":
                    out.space()
                    out.write("{")
                    state.open_block()
                    out.break_line()
                elif ch == "}":
                    if out.has_content and state.indent_level > 0 and out.last_char() not in ";}":
                        out.write(";")
                    out.break_line()
                    state.close_block()
                    out.write("}")
                    out.break_line()
                elif ch == ";":
                    out.write(";")
                    if state.bracket_depth == 0:
                        out.break_line()
                elif ch == "(":
                    out.write(ch)
                    state.open_bracket()
                elif ch == ")":
                    state.close_bracket()
                    out.write(ch)
                else:
                    out.write(ch)
        return out.render()


def beautify_javascript(content: str) -> str:
    return BraceLayout(content, C_STYLE).render()


def beautify_java_family(content: str) -> str:
    return BraceLayout(content, JAVA_FAMILY_STYLE).render()


def beautify_css(content: str) -> str:
    return CssLayout(content).render()

# -----------------------------------------------------------------------------
# INDENTATION-INFERENCE STRATEGIES
# -----------------------------------------------------------------------------

def beautify_python(content: str) -> str:
    """
    Re-indent Python with 4 spaces.

    A line ending in ':' opens a block for the following lines. After a line
    is emitted, blocks are closed back to the source indentation of the next
    non-blank line whenever that line is indented less than the current one.
    """
    source = content.split("\n")
    out: List[str] = []
    # Source indentation width of every open block opener
    open_blocks: List[int] = []

    for idx, raw in enumerate(source):
        line = raw.strip()
        if not line:
            out.append("")
            continue

        out.append(PYTHON_INDENT * len(open_blocks) + line)
        width = _leading_width(raw)

        if line.endswith(":") and not line.startswith("#"):
            open_blocks.append(width)
            continue

        nxt = _next_non_blank(source, idx)
        if nxt is None:
            continue
        next_width = _leading_width(source[nxt])
        if next_width < width:
            while open_blocks and open_blocks[-1] >= next_width:
                open_blocks.pop()

    return "\n".join(out)


def beautify_ruby(content: str) -> str:
    """
    Re-indent Ruby with 2 spaces using block keywords.

    'end' dedents before its line is emitted; block openers indent the lines
    after them; else/elsif/when/rescue/ensure sit one level out.
    """
    out: List[str] = []
    level = 0

    for raw in content.split("\n"):
        line = raw.strip()
        if not line:
            out.append("")
            continue

        match = _RUBY_FIRST_WORD_PATTERN.match(line)
        first = match.group(1) if match else ""

        if first == "end":
            level = max(0, level - 1)
            out.append(RUBY_INDENT * level + line)
            continue
        if first in RUBY_MID_BLOCK:
            out.append(RUBY_INDENT * max(0, level - 1) + line)
            continue

        out.append(RUBY_INDENT * level + line)
        if line.startswith("#"):
            continue
        opens = first in RUBY_BLOCK_OPENERS or bool(_RUBY_DO_PATTERN.search(line))
        if opens and not _RUBY_TRAILING_END_PATTERN.search(line):
            level += 1

    return "\n".join(out)


def beautify_json(content: str) -> str:
    return json.dumps(parse_json(content), ensure_ascii=False, indent=2)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _leading_width(line: str) -> int:
    expanded = line.expandtabs(8)
    return len(expanded) - len(expanded.lstrip())


def _next_non_blank(lines: List[str], idx: int) -> Optional[int]:
    for j in range(idx + 1, len(lines)):
        if lines[j].strip():
            return j
    return None


_EMBEDDED_FORMATTERS: Dict[str, Callable[[str], str]] = {
    "script": beautify_javascript,
    "style": beautify_css,
}

_HANDLERS: Dict[LanguageId, Callable[[str], str]] = {
    LanguageId.JAVASCRIPT: beautify_javascript,
    LanguageId.PHP: beautify_javascript,
    LanguageId.JAVA_FAMILY: beautify_java_family,
    LanguageId.CSS: beautify_css,
    LanguageId.HTML: lambda text: beautify_markup(text, LanguageId.HTML, _EMBEDDED_FORMATTERS),
    LanguageId.XML: lambda text: beautify_markup(text, LanguageId.XML),
    LanguageId.JSON: beautify_json,
    LanguageId.PYTHON: beautify_python,
    LanguageId.RUBY: beautify_ruby,
    LanguageId.SQL: beautify_sql,
    LanguageId.MARKDOWN: beautify_markdown,
}
