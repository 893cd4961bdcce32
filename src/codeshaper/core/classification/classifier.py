from __future__ import annotations

"""
Language Classification Service.

Resolves a declared type name or a file-extension hint into exactly one
canonical LanguageId. A known declared type always wins over the extension.
"""

import logging
import os
from typing import Optional

from codeshaper.domain.constants import EXTENSION_MAP, LANGUAGE_ALIASES
from codeshaper.domain.languages import LanguageId

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def classify(declared: Optional[str] = None, extension_hint: Optional[str] = None) -> LanguageId:
    """
    Map a declared type and/or an extension hint to a language family.

    Args:
        declared: Explicit type name ('typescript', 'csharp', 'java', ...).
        extension_hint: Extension with or without dot, or a full file name.

    Returns:
        LanguageId: The resolved family, or LanguageId.UNKNOWN.
    """
    language = _from_declared(declared)
    if language.is_known:
        return language

    language = _from_extension(extension_hint)
    if not language.is_known and (declared or extension_hint):
        logger.debug(f"Unclassified input (type={declared!r}, ext={extension_hint!r}).")
    return language


def normalize_extension(hint: Optional[str]) -> str:
    """
    Reduce an extension hint to its bare lowercase form.

    '.JS' -> 'js', 'bundle.min.js' -> 'js', 'css' -> 'css'.
    """
    value = (hint or "").strip().lower()
    if not value:
        return ""
    base = os.path.basename(value.replace("\\", "/"))
    if "." in base:
        return base.rsplit(".", 1)[1]
    return base

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _from_declared(declared: Optional[str]) -> LanguageId:
    key = (declared or "").strip().lower()
    if not key:
        return LanguageId.UNKNOWN
    if key in LANGUAGE_ALIASES:
        return LANGUAGE_ALIASES[key]
    try:
        return LanguageId(key)
    except ValueError:
        return LanguageId.UNKNOWN


def _from_extension(hint: Optional[str]) -> LanguageId:
    return EXTENSION_MAP.get(normalize_extension(hint), LanguageId.UNKNOWN)
