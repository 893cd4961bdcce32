from __future__ import annotations

"""
Minification Engine.

Produces the shortest equivalent text for each language family by removing
comments and collapsing insignificant whitespace. C-like languages, CSS and
SQL are processed on the segments of the shared lexical scanner, so comment
markers and whitespace inside string literals are never touched.
"""

import json
import logging
import re
from typing import Callable, Dict, FrozenSet, List

from codeshaper.core.processing.markup import minify_markup
from codeshaper.core.processing.scanner import (
    C_STYLE,
    CSS_STYLE,
    HASH_STYLE,
    JAVA_FAMILY_STYLE,
    SQL_STYLE,
    LexicalSyntax,
    SegmentKind,
    scan,
    strip_comments,
)
from codeshaper.domain.constants import C_FAMILY_PUNCTUATION, CSS_PUNCTUATION, PROTECTED_PAIRS
from codeshaper.domain.errors import UnparseableJsonError
from codeshaper.domain.languages import LanguageId

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# MINIFICATION PATTERNS
# -----------------------------------------------------------------------------

_WHITESPACE_PATTERN = re.compile(r"\s+")
_UNESCAPED_HASH_PATTERN = re.compile(r"(?<!\\)#")
_RUBY_BLOCK_COMMENT_PATTERN = re.compile(r"^=begin\b.*?^=end\b[^\n]*", re.DOTALL | re.MULTILINE)
_CSS_TRAILING_SEMICOLON_PATTERN = re.compile(r";+}")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def minify(content: str, language: LanguageId) -> str:
    """
    Minify a full string of source text in-memory.

    Args:
        content: Raw source text.
        language: Language family resolved by the classifier.

    Returns:
        str: Minified text. Unknown languages are returned unchanged.

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
    logger.debug(f"Minified {language.value}: {len(content)} -> {len(result)} chars")
    return result

# -----------------------------------------------------------------------------
# LANGUAGE HANDLERS
# -----------------------------------------------------------------------------

def minify_c_family(content: str, syntax: LexicalSyntax = C_STYLE) -> str:
    """
    Compact JavaScript-like code.

    Comments are dropped, whitespace collapsed and removed next to
    punctuation. Preprocessor directives keep their own line.
    """
    parts: List[str] = []
    after_directive = False

    for seg in strip_comments(scan(content, syntax)):
        if seg.kind is SegmentKind.CODE:
            text = compact_code(seg.text, C_FAMILY_PUNCTUATION)
            if after_directive or not parts:
                text = text.lstrip(" ")
            parts.append(text)
            after_directive = False
        elif seg.kind is SegmentKind.DIRECTIVE:
            if parts:
                parts[-1] = parts[-1].rstrip(" ")
                if parts[-1] and not parts[-1].endswith("\n"):
                    parts.append("\n")
            parts.append(_WHITESPACE_PATTERN.sub(" ", seg.text.strip()) + "\n")
            after_directive = True
        else:
            parts.append(seg.text)
            after_directive = False

    return "".join(parts).strip()


def minify_css(content: str) -> str:
    parts: List[str] = []
    for seg in strip_comments(scan(content, CSS_STYLE)):
        if seg.kind is SegmentKind.CODE:
            text = compact_code(seg.text, CSS_PUNCTUATION)
            parts.append(_CSS_TRAILING_SEMICOLON_PATTERN.sub("}", text))
        else:
            parts.append(seg.text)
    return "".join(parts).strip()


def minify_json(content: str) -> str:
    value = parse_json(content)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def minify_python(content: str) -> str:
    """Line-oriented: cut at the first unescaped '#', right-trim, drop empty lines."""
    out: List[str] = []
    for line in content.split("\n"):
        match = _UNESCAPED_HASH_PATTERN.search(line)
        if match:
            line = line[:match.start()]
        line = line.rstrip()
        if line:
            out.append(line)
    return "\n".join(out)


def minify_ruby(content: str) -> str:
    text = _RUBY_BLOCK_COMMENT_PATTERN.sub("", content)
    text = "".join(seg.text for seg in strip_comments(scan(text, HASH_STYLE)))
    return "\n".join(line.rstrip() for line in text.split("\n") if line.strip())


def minify_sql(content: str) -> str:
    parts: List[str] = []
    for seg in strip_comments(scan(content, SQL_STYLE)):
        if seg.kind is SegmentKind.CODE:
            parts.append(_WHITESPACE_PATTERN.sub(" ", seg.text))
        else:
            parts.append(seg.text)
    return "".join(parts).strip()


def minify_markdown(content: str) -> str:
    """Trim every line and keep at most one blank line between blocks."""
    out: List[str] = []
    for line in content.split("\n"):
        line = line.strip()
        if line or (out and out[-1]):
            out.append(line)
    while out and not out[-1]:
        out.pop()
    return "\n".join(out)

# -----------------------------------------------------------------------------
# SHARED HELPERS
# -----------------------------------------------------------------------------

def compact_code(chunk: str, punctuation: FrozenSet[str]) -> str:
    """
    Collapse whitespace and drop spaces adjacent to punctuation.

    A space is kept when removing it would fuse two characters into a new
    token ('a - -b' must not become 'a--b').
    """
    collapsed = _WHITESPACE_PATTERN.sub(" ", chunk)
    out: List[str] = []
    last = len(collapsed) - 1
    for idx, ch in enumerate(collapsed):
        if ch == " ":
            prev = collapsed[idx - 1] if idx > 0 else ""
            nxt = collapsed[idx + 1] if idx < last else ""
            if (prev in punctuation or nxt in punctuation) and (prev + nxt) not in PROTECTED_PAIRS:
                continue
        out.append(ch)
    return "".join(out)


def parse_json(content: str) -> object:
    """
    Parse strict JSON.

    Raises:
        UnparseableJsonError: On any syntax error, including NaN/Infinity.
    """
    try:
        return json.loads(content, parse_constant=_reject_constant)
    except ValueError as e:
        raise UnparseableJsonError(str(e)) from e


def _reject_constant(name: str) -> object:
    raise ValueError(f"Unexpected token '{name}'")


_HANDLERS: Dict[LanguageId, Callable[[str], str]] = {
    LanguageId.JAVASCRIPT: minify_c_family,
    LanguageId.PHP: minify_c_family,
    LanguageId.JAVA_FAMILY: lambda text: minify_c_family(text, JAVA_FAMILY_STYLE),
    LanguageId.CSS: minify_css,
    LanguageId.HTML: lambda text: minify_markup(text, LanguageId.HTML),
    LanguageId.XML: lambda text: minify_markup(text, LanguageId.XML),
    LanguageId.JSON: minify_json,
    LanguageId.PYTHON: minify_python,
    LanguageId.RUBY: minify_ruby,
    LanguageId.SQL: minify_sql,
    LanguageId.MARKDOWN: minify_markdown,
}
