from __future__ import annotations

"""
Markdown Normalizer.

Line-oriented cleanup used by the beautification engine. Fenced code blocks
are copied verbatim; everything else gets consistent heading, list and
emphasis markers.
"""

import re
from typing import List

_FENCE_PATTERN = re.compile(r"^[ \t]*(```|~~~)")
_HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]*(?=\S)")
_BULLET_PATTERN = re.compile(r"^([ \t]*)[-*+][ \t]+")
_ORDERED_PATTERN = re.compile(r"^([ \t]*)(\d+)[.)][ \t]+")
_BOLD_PATTERN = re.compile(r"\*\*[ \t]*(\S(?:.*?\S)?)[ \t]*\*\*")
_STRIKE_PATTERN = re.compile(r"~~[ \t]*(\S(?:.*?\S)?)[ \t]*~~")
_ITALIC_PATTERN = re.compile(r"(?<![*\w])\*[ \t]*([^*\s](?:[^*]*[^*\s])?)[ \t]*\*(?![*\w])")


def beautify_markdown(content: str) -> str:
    """
    Normalize Markdown layout.

    - Runs of blank lines become a single blank line.
    - '#Title' becomes '# Title'.
    - Bullets '-', '*', '+' become '* '; ordered markers become 'N. '.
    - Spaces just inside '**', '*' and '~~' pairs are removed.
    """
    out: List[str] = []
    in_fence = False
    fence_marker = ""

    for line in content.split("\n"):
        fence = _FENCE_PATTERN.match(line)
        if in_fence:
            out.append(line)
            if fence and fence.group(1) == fence_marker:
                in_fence = False
            continue
        if fence:
            in_fence = True
            fence_marker = fence.group(1)
            out.append(line)
            continue

        if not line.strip():
            if out and out[-1].strip():
                out.append("")
            continue

        out.append(_normalize_line(line))

    return "\n".join(out).strip()


def _normalize_line(line: str) -> str:
    heading = _HEADING_PATTERN.match(line)
    if heading:
        return heading.group(1) + " " + _normalize_inline(line[heading.end():])

    for pattern, replacement in (
            (_BULLET_PATTERN, lambda m: f"{m.group(1)}* "),
            (_ORDERED_PATTERN, lambda m: f"{m.group(1)}{m.group(2)}. "),
    ):
        marker = pattern.match(line)
        if marker:
            return replacement(marker) + _normalize_inline(line[marker.end():])

    return _normalize_inline(line)


def _normalize_inline(text: str) -> str:
    text = _BOLD_PATTERN.sub(r"**\1**", text)
    text = _STRIKE_PATTERN.sub(r"~~\1~~", text)
    return _ITALIC_PATTERN.sub(r"*\1*", text)
