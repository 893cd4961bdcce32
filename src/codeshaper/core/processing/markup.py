from __future__ import annotations

"""
Markup (HTML/XML) Processing.

Implements the security guard shared by both modes, the comment-stripping
minifier and the tag-depth beautifier. The beautifier runs on an explicit
markup tokenizer whose IN_TAG state tracks quoted attribute values, so a '>'
inside an attribute never ends a tag and self-closing tags are recognized
before any layout decision is made.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional

from codeshaper.core.processing.scanner import ScanMode, ScanState
from codeshaper.domain.constants import (
    DEFAULT_INDENT,
    FORBIDDEN_MARKUP_DECLARATIONS,
    HTML_RAW_TEXT_ELEMENTS,
    HTML_VOID_ELEMENTS,
)
from codeshaper.domain.errors import RejectedMarkupError
from codeshaper.domain.languages import LanguageId

logger = logging.getLogger(__name__)

_COMMENT_PATTERN = re.compile(r"<!--[\s\S]*?-->")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_INTER_TAG_PATTERN = re.compile(r">\s+<")
_FORBIDDEN_PATTERN = re.compile(
    "|".join(r"<!\s*" + re.escape(d[2:]) + r"\b" for d in FORBIDDEN_MARKUP_DECLARATIONS),
    re.IGNORECASE,
)
_TAG_NAME_PATTERN = re.compile(r"</?\s*([^\s/>]+)")

# -----------------------------------------------------------------------------
# TOKEN MODELS
# -----------------------------------------------------------------------------

class MarkupTokenKind(Enum):
    TEXT = "text"
    OPEN_TAG = "open_tag"
    CLOSE_TAG = "close_tag"
    SELF_CLOSING = "self_closing"
    COMMENT = "comment"
    DECLARATION = "declaration"
    CDATA = "cdata"
    RAW_TEXT = "raw_text"


@dataclass(frozen=True)
class MarkupToken:
    kind: MarkupTokenKind
    text: str
    name: str = ""

# -----------------------------------------------------------------------------
# SECURITY GUARD
# -----------------------------------------------------------------------------

def ensure_safe_markup(content: str, language: LanguageId, verb: str = "processed") -> None:
    """
    Reject markup carrying DOCTYPE or ENTITY declarations.

    Blocks entity-expansion payloads before any transform touches the input.

    Raises:
        RejectedMarkupError: If a forbidden declaration is present.
    """
    if content and _FORBIDDEN_PATTERN.search(content):
        label = "HTML" if language is LanguageId.HTML else "XML"
        logger.warning(f"Rejected {label} input carrying DOCTYPE/ENTITY declarations.")
        raise RejectedMarkupError(
            f"{label} with DOCTYPE or ENTITY declarations cannot be {verb} due to security concerns"
        )

# -----------------------------------------------------------------------------
# MINIFICATION
# -----------------------------------------------------------------------------

def strip_markup_comments(content: str) -> str:
    """Remove <!-- --> comments repeatedly until none remain."""
    previous = None
    while previous != content:
        previous = content
        content = _COMMENT_PATTERN.sub("", content)
    return content


def minify_markup(content: str, language: LanguageId) -> str:
    """Strip comments, collapse whitespace and remove whitespace between tags."""
    ensure_safe_markup(content, language, "minified")
    text = strip_markup_comments(content)
    text = _WHITESPACE_PATTERN.sub(" ", text)
    text = _INTER_TAG_PATTERN.sub("><", text)
    return text.strip()

# -----------------------------------------------------------------------------
# TOKENIZER
# -----------------------------------------------------------------------------

class MarkupScanner:
    """
    Tokenizer for HTML and XML.

    Uses ScanState with the IN_TAG / IN_STRING modes while reading a tag and
    raises `self_closing_active` for tags closed by '/>'. For HTML the bodies
    of script, style, pre and textarea are emitted as single RAW_TEXT tokens.
    """

    def __init__(self, text: str, language: LanguageId):
        self.text = text or ""
        self.language = language
        self.state = ScanState()

    def tokens(self) -> Iterator[MarkupToken]:
        text = self.text
        n = len(text)
        i = 0

        while i < n:
            if text.startswith("<!--", i):
                end = _find_end(text, "-->", i + 4)
                yield MarkupToken(MarkupTokenKind.COMMENT, text[i:end])
                i = end
            elif text.startswith("<![CDATA[", i):
                end = _find_end(text, "]]>", i + 9)
                yield MarkupToken(MarkupTokenKind.CDATA, text[i:end])
                i = end
            elif self._is_tag_start(i):
                end = self._read_tag(i)
                token = self._classify_tag(text[i:end])
                yield token
                i = end
                if token.kind is MarkupTokenKind.OPEN_TAG and self._is_raw_element(token.name):
                    body_end = self._raw_body_end(i, token.name)
                    if body_end > i:
                        yield MarkupToken(MarkupTokenKind.RAW_TEXT, text[i:body_end], token.name)
                    i = body_end
            else:
                end = i + 1
                while end < n and not self._is_tag_start(end):
                    end += 1
                yield MarkupToken(MarkupTokenKind.TEXT, text[i:end])
                i = end

    def _is_tag_start(self, i: int) -> bool:
        text = self.text
        return (
            text[i] == "<"
            and i + 1 < len(text)
            and (text[i + 1].isalpha() or text[i + 1] in "/!?_:")
        )

    def _read_tag(self, i: int) -> int:
        """Return the index just past the '>' closing the tag starting at i."""
        text = self.text
        state = self.state
        state.mode = ScanMode.IN_TAG
        j = i + 1
        while j < len(text):
            ch = text[j]
            if state.mode is ScanMode.IN_STRING:
                if ch == state.quote_char:
                    state.mode = ScanMode.IN_TAG
                    state.quote_char = ""
            elif ch in "\"'" and text[i:j].rstrip().endswith("="):
                state.mode = ScanMode.IN_STRING
                state.quote_char = ch
            elif ch == ">":
                break
            j += 1
        state.mode = ScanMode.NORMAL
        state.quote_char = ""
        return min(j + 1, len(text))

    def _classify_tag(self, raw: str) -> MarkupToken:
        state = self.state
        state.self_closing_active = raw.endswith("/>")
        if raw.startswith("</"):
            kind = MarkupTokenKind.CLOSE_TAG
        elif raw.startswith("<!") or raw.startswith("<?"):
            kind = MarkupTokenKind.DECLARATION
        elif state.self_closing_active:
            kind = MarkupTokenKind.SELF_CLOSING
        else:
            kind = MarkupTokenKind.OPEN_TAG
        match = _TAG_NAME_PATTERN.match(raw)
        name = match.group(1).lower() if match and kind is not MarkupTokenKind.DECLARATION else ""
        return MarkupToken(kind, raw, name)

    def _is_raw_element(self, name: str) -> bool:
        return self.language is LanguageId.HTML and name in HTML_RAW_TEXT_ELEMENTS

    def _raw_body_end(self, i: int, name: str) -> int:
        match = re.compile(rf"</\s*{re.escape(name)}\s*>", re.IGNORECASE).search(self.text, i)
        return match.start() if match else len(self.text)


def _find_end(text: str, terminator: str, start: int) -> int:
    found = text.find(terminator, start)
    return len(text) if found < 0 else found + len(terminator)

# -----------------------------------------------------------------------------
# BEAUTIFICATION
# -----------------------------------------------------------------------------

def beautify_markup(
        content: str,
        language: LanguageId,
        embedded_formatters: Optional[dict] = None,
) -> str:
    """
    Lay out markup one tag or text run per line with depth-based indentation.

    Args:
        content: Raw HTML or XML.
        language: LanguageId.HTML or LanguageId.XML.
        embedded_formatters: Optional mapping of raw element name ('script',
            'style') to a formatter applied to that element's body.

    Returns:
        str: The indented markup.
    """
    ensure_safe_markup(content, language, "formatted")
    formatters = embedded_formatters or {}
    lines: List[str] = []
    level = 0
    glue_close = False

    def emit(text: str) -> None:
        lines.append(DEFAULT_INDENT * level + text if text else "")

    for token in MarkupScanner(content, language).tokens():
        kind = token.kind

        if kind is MarkupTokenKind.TEXT:
            text = _WHITESPACE_PATTERN.sub(" ", token.text).strip()
            if text:
                emit(text)

        elif kind is MarkupTokenKind.CLOSE_TAG:
            level = max(0, level - 1)
            if glue_close and lines:
                lines[-1] += token.text
                glue_close = False
            else:
                emit(token.text)

        elif kind is MarkupTokenKind.OPEN_TAG:
            emit(token.text)
            if not (language is LanguageId.HTML and token.name in HTML_VOID_ELEMENTS):
                level += 1

        elif kind is MarkupTokenKind.RAW_TEXT:
            formatter: Optional[Callable[[str], str]] = formatters.get(token.name)
            if formatter is None:
                # pre/textarea bodies are whitespace-significant: keep them on the tag line
                if lines:
                    lines[-1] += token.text
                    glue_close = True
                continue
            body = token.text.strip()
            if body:
                for line in formatter(body).split("\n"):
                    emit(line.rstrip())

        else:
            emit(token.text.strip())

    logger.debug(f"Markup layout produced {len(lines)} lines.")
    return "\n".join(lines)
