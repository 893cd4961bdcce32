from __future__ import annotations

"""
Language and Mode Domain Enumerations.

Defines the closed set of language families understood by the transformation
engines and the two processing modes. Values are plain strings so they can
travel unchanged through JSON messages and configuration files.
"""

from enum import Enum


class LanguageId(str, Enum):
    """
    Canonical language family identifier produced by the classifier.

    The Java family groups Java, C#, C++ and Go, which share one formatting
    lineage. TypeScript belongs to the JavaScript family.
    """
    JAVASCRIPT = "javascript"
    CSS = "css"
    HTML = "html"
    JSON = "json"
    XML = "xml"
    PYTHON = "python"
    RUBY = "ruby"
    PHP = "php"
    SQL = "sql"
    MARKDOWN = "markdown"
    JAVA_FAMILY = "java"
    UNKNOWN = "unknown"

    @property
    def is_known(self) -> bool:
        return self is not LanguageId.UNKNOWN


class Mode(str, Enum):
    """Processing direction of a transform request."""
    MINIFY = "minify"
    BEAUTIFY = "beautify"

    @classmethod
    def parse(cls, value: object) -> "Mode":
        """
        Resolve a mode from its string form.

        Accepts the enum values plus the legacy aliases used by the
        formatting worker ('format', 'unminify').

        Raises:
            ValueError: If the value names no known mode.
        """
        if isinstance(value, Mode):
            return value
        key = str(value or "").strip().lower()
        if key in ("format", "unminify", "prettify"):
            return cls.BEAUTIFY
        return cls(key)
