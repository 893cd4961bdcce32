from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to application-wide constants: the extension and
alias tables used for language classification, indentation units, SQL and
Ruby keyword sets, and system versioning.
"""

from typing import Dict, FrozenSet, List, Tuple

from codeshaper.domain.languages import LanguageId

CURRENT_CONFIG_VERSION = "1.0.0"
APP_NAME = "CodeShaper"

MINIFIED_SUFFIX = ".min"
FORMATTED_SUFFIX = ".formatted"

# -----------------------------------------------------------------------------
# LANGUAGE CLASSIFICATION TABLES
# -----------------------------------------------------------------------------

EXTENSION_MAP: Dict[str, LanguageId] = {
    "js": LanguageId.JAVASCRIPT,
    "jsx": LanguageId.JAVASCRIPT,
    "mjs": LanguageId.JAVASCRIPT,
    "ts": LanguageId.JAVASCRIPT,
    "tsx": LanguageId.JAVASCRIPT,
    "css": LanguageId.CSS,
    "scss": LanguageId.CSS,
    "less": LanguageId.CSS,
    "html": LanguageId.HTML,
    "htm": LanguageId.HTML,
    "xhtml": LanguageId.HTML,
    "json": LanguageId.JSON,
    "xml": LanguageId.XML,
    "svg": LanguageId.XML,
    "py": LanguageId.PYTHON,
    "pyw": LanguageId.PYTHON,
    "rb": LanguageId.RUBY,
    "rake": LanguageId.RUBY,
    "php": LanguageId.PHP,
    "phtml": LanguageId.PHP,
    "php5": LanguageId.PHP,
    "sql": LanguageId.SQL,
    "md": LanguageId.MARKDOWN,
    "markdown": LanguageId.MARKDOWN,
    "java": LanguageId.JAVA_FAMILY,
    "cs": LanguageId.JAVA_FAMILY,
    "cpp": LanguageId.JAVA_FAMILY,
    "cc": LanguageId.JAVA_FAMILY,
    "cxx": LanguageId.JAVA_FAMILY,
    "h": LanguageId.JAVA_FAMILY,
    "hpp": LanguageId.JAVA_FAMILY,
    "go": LanguageId.JAVA_FAMILY,
}

# Declared type names accepted from requests (fileType) besides enum values
LANGUAGE_ALIASES: Dict[str, LanguageId] = {
    "javascript": LanguageId.JAVASCRIPT,
    "typescript": LanguageId.JAVASCRIPT,
    "css": LanguageId.CSS,
    "html": LanguageId.HTML,
    "json": LanguageId.JSON,
    "xml": LanguageId.XML,
    "python": LanguageId.PYTHON,
    "ruby": LanguageId.RUBY,
    "php": LanguageId.PHP,
    "sql": LanguageId.SQL,
    "markdown": LanguageId.MARKDOWN,
    "java": LanguageId.JAVA_FAMILY,
    "csharp": LanguageId.JAVA_FAMILY,
    "cpp": LanguageId.JAVA_FAMILY,
    "go": LanguageId.JAVA_FAMILY,
}

# -----------------------------------------------------------------------------
# LAYOUT CONSTANTS
# -----------------------------------------------------------------------------

DEFAULT_INDENT = "  "
PYTHON_INDENT = "    "
RUBY_INDENT = "  "

# Punctuation around which whitespace is insignificant in C-like languages
C_FAMILY_PUNCTUATION: FrozenSet[str] = frozenset("{}:;,=+-*/&|!<>()")
CSS_PUNCTUATION: FrozenSet[str] = frozenset(":;{}")

# Character pairs that must stay separated to avoid forging new tokens
PROTECTED_PAIRS: FrozenSet[str] = frozenset({"++", "--", "//", "/*", "*/"})

# -----------------------------------------------------------------------------
# KEYWORD SETS
# -----------------------------------------------------------------------------

SQL_CLAUSE_KEYWORDS: List[str] = [
    "SELECT", "FROM", "WHERE", "JOIN", "LEFT", "RIGHT", "INNER", "OUTER",
    "GROUP", "ORDER", "HAVING", "LIMIT", "INSERT", "UPDATE", "DELETE",
    "CREATE", "ALTER", "DROP", "TABLE", "VIEW", "FUNCTION", "PROCEDURE",
]

# Keyword pairs where the second word completes the first on the same line
SQL_COMPOUND_PAIRS: FrozenSet[Tuple[str, str]] = frozenset({
    ("LEFT", "JOIN"), ("RIGHT", "JOIN"), ("INNER", "JOIN"), ("OUTER", "JOIN"),
    ("LEFT", "OUTER"), ("RIGHT", "OUTER"),
    ("CREATE", "TABLE"), ("CREATE", "VIEW"), ("CREATE", "FUNCTION"), ("CREATE", "PROCEDURE"),
    ("ALTER", "TABLE"), ("ALTER", "VIEW"), ("ALTER", "FUNCTION"), ("ALTER", "PROCEDURE"),
    ("DROP", "TABLE"), ("DROP", "VIEW"), ("DROP", "FUNCTION"), ("DROP", "PROCEDURE"),
})

SQL_CONTINUATION_KEYWORDS: FrozenSet[str] = frozenset({"AND", "OR"})

RUBY_BLOCK_OPENERS: FrozenSet[str] = frozenset({
    "class", "def", "module", "if", "unless", "case",
    "while", "until", "for", "begin",
})
RUBY_MID_BLOCK: FrozenSet[str] = frozenset({"else", "elsif", "when", "rescue", "ensure"})

# Keywords that stay on the closing-brace line: "} else {"
BRACE_ATTACHED_KEYWORDS: FrozenSet[str] = frozenset({"else", "catch", "finally", "while"})

# -----------------------------------------------------------------------------
# MARKUP CONSTANTS
# -----------------------------------------------------------------------------

HTML_VOID_ELEMENTS: FrozenSet[str] = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})
HTML_RAW_TEXT_ELEMENTS: FrozenSet[str] = frozenset({"script", "style", "pre", "textarea"})

FORBIDDEN_MARKUP_DECLARATIONS: Tuple[str, ...] = ("<!ENTITY", "<!DOCTYPE")
